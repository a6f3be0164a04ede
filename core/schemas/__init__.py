"""
Schemas & Canonicalization

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
)

# Error models and exceptions
from .errors import (
    ArtifactParseException,
    CanonicalizationException,
    DecodeError,
    ErrorCodes,
    IdentityInvalidException,
    InvalidRangesException,
    KeyInvalidException,
    ProofViewerException,
    SignatureInvalidException,
    SubstringMismatchException,
    VerificationException,
    ViewerError,
)

# Transcript schemas
from .transcript import (
    ByteRange,
    Direction,
    DirectionalTranscript,
    check_ranges,
    complement_ranges,
)

# Proof document schemas
from .proof import (
    InclusionProof,
    NotarySignature,
    SessionHeader,
    SessionInfo,
    SessionProof,
    SubstringOpening,
    SubstringsProof,
    TlsProof,
)

# Render schemas
from .render import (
    ClassifiedContent,
    ContentKind,
    DisclosedSegment,
    HtmlContent,
    OpaqueContent,
    RedactedSegment,
    RenderSegment,
    SegmentKind,
    StructuredContent,
)


__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "assert_supported_schema_version",
    "UnsupportedSchemaVersionError",
    # Canonical serialization
    "dumps_canonical",
    "canonicalize_value",
    "ensure_utc",
    "format_datetime_canonical",
    "CANONICAL_JSON_SEPARATORS",
    # Errors
    "ViewerError",
    "DecodeError",
    "ProofViewerException",
    "VerificationException",
    "ArtifactParseException",
    "CanonicalizationException",
    "SignatureInvalidException",
    "IdentityInvalidException",
    "SubstringMismatchException",
    "InvalidRangesException",
    "KeyInvalidException",
    "ErrorCodes",
    # Transcript
    "ByteRange",
    "Direction",
    "DirectionalTranscript",
    "check_ranges",
    "complement_ranges",
    # Proof
    "TlsProof",
    "SessionProof",
    "SessionHeader",
    "SessionInfo",
    "NotarySignature",
    "SubstringsProof",
    "SubstringOpening",
    "InclusionProof",
    # Render
    "RenderSegment",
    "DisclosedSegment",
    "RedactedSegment",
    "SegmentKind",
    "ClassifiedContent",
    "ContentKind",
    "HtmlContent",
    "StructuredContent",
    "OpaqueContent",
]
