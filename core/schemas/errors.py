"""
Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for the proof verification pipeline.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pipeline."""

    # Artifact Errors
    PARSE_ERROR = "PARSE_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Session Errors
    SIGNATURE_INVALID = "SIGNATURE_INVALID"
    IDENTITY_INVALID = "IDENTITY_INVALID"

    # Transcript Errors
    SUBSTRING_MISMATCH = "SUBSTRING_MISMATCH"
    INVALID_RANGES = "INVALID_RANGES"

    # Best-effort conversions (never raised)
    DECODE_ERROR = "DECODE_ERROR"

    # Trusted key input
    KEY_INVALID = "KEY_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class ViewerError(BaseModel):
    """
    Base error model for structured error communication across the pipeline.

    Pipeline outcomes carry this model instead of a live exception so that
    a failed verification can be reported and serialized after the fact.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.PARSE_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


class DecodeError(ViewerError):
    """
    Non-fatal record of a lossy byte-to-text conversion.

    Never raised; attached to whatever was decoded so a caller can tell
    that replacement characters were substituted.
    """

    code: str = Field(default=ErrorCodes.DECODE_ERROR)
    offset: int = Field(
        default=0,
        description="Byte offset of the first invalid sequence",
        ge=0,
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ProofViewerException(Exception):
    """
    Base exception for all proof viewer errors.

    This exception carries structured error information and can be
    converted to/from ViewerError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "PROOFVIEW_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> ViewerError:
        """Convert this exception to a ViewerError model."""
        return ViewerError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class VerificationException(ProofViewerException):
    """Base class for failures caused by the artifact under verification."""


class ArtifactParseException(VerificationException):
    """Raised when the proof artifact cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PARSE_ERROR,
            details=details,
        )


class CanonicalizationException(ProofViewerException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class SignatureInvalidException(VerificationException):
    """Raised when the notary signature over the session header does not verify."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.SIGNATURE_INVALID,
            details=details,
        )


class IdentityInvalidException(VerificationException):
    """Raised when the server identity or its certificate chain is not trusted."""

    def __init__(
        self,
        message: str,
        server_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if server_name:
            full_details["server_name"] = server_name
        super().__init__(
            message=message,
            code=ErrorCodes.IDENTITY_INVALID,
            details=full_details,
        )


class SubstringMismatchException(VerificationException):
    """Raised when the substrings commitment does not open against the session header."""

    def __init__(
        self,
        message: str,
        opening_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if opening_index is not None:
            full_details["opening_index"] = opening_index
        super().__init__(
            message=message,
            code=ErrorCodes.SUBSTRING_MISMATCH,
            details=full_details,
        )


class InvalidRangesException(ProofViewerException):
    """
    Raised when a withheld range set violates the sorted/disjoint/in-bounds invariant.

    This signals a defect in the code that produced the ranges, not a bad
    proof, and is deliberately not a VerificationException.
    """

    def __init__(
        self,
        message: str,
        range_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if range_index is not None:
            full_details["range_index"] = range_index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_RANGES,
            details=full_details,
        )


class KeyInvalidException(ProofViewerException):
    """Raised when an operator-supplied notary public key cannot be used."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.KEY_INVALID,
            details=details,
        )
