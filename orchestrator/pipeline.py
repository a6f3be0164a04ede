"""
Verification Pipeline

Composes parsing, session verification, substring verification,
segmentation and classification into one single-pass run per artifact:

    START -> PARSED -> SESSION_VERIFIED -> SUBSTRINGS_VERIFIED -> RENDERED

with the failure exits PARSE_FAILED, SESSION_INVALID and
SUBSTRINGS_INVALID. A failed run carries the originating error and never
a view. RenderedView can only be built by this module, so nothing can
render an unverified proof.

Runs share no mutable state other than the trusted key store, of which
each run captures one snapshot up front.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from core.config.keys import TrustedKey, TrustedKeyStore, get_trusted_key_store
from core.config.runtime import DEFAULT_REDACTED_CHAR, RuntimeConfig
from core.crypto.certificates import CertificateVerifier, WebPkiVerifier
from core.schemas.canonical import format_datetime_canonical
from core.schemas.errors import (
    ArtifactParseException,
    IdentityInvalidException,
    InvalidRangesException,
    SignatureInvalidException,
    SubstringMismatchException,
    VerificationException,
    ViewerError,
)
from core.schemas.render import (
    ClassifiedContent,
    DisclosedSegment,
    OpaqueContent,
    RenderSegment,
)
from core.schemas.transcript import Direction, DirectionalTranscript

from rendering.classifier import classify
from rendering.segmenter import disclosed_bytes, segment_transcript
from rendering.text import render_text
from verifiers.artifact_parser import parse_artifact
from verifiers.session_verifier import SessionVerifier, VerifiedSession
from verifiers.substring_verifier import SubstringVerifier, TranscriptPair

from orchestrator.files import LoadedFile


logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Proof successfully verified"

_SEAL = object()


# =============================================================================
# Stages
# =============================================================================

class PipelineStage(str, Enum):
    """Pipeline states; the last four are terminal."""
    START = "start"
    PARSED = "parsed"
    SESSION_VERIFIED = "session_verified"
    SUBSTRINGS_VERIFIED = "substrings_verified"
    RENDERED = "rendered"
    PARSE_FAILED = "parse_failed"
    SESSION_INVALID = "session_invalid"
    SUBSTRINGS_INVALID = "substrings_invalid"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STAGES

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_STAGES


_FAILURE_STAGES = frozenset({
    PipelineStage.PARSE_FAILED,
    PipelineStage.SESSION_INVALID,
    PipelineStage.SUBSTRINGS_INVALID,
})
_TERMINAL_STAGES = _FAILURE_STAGES | {PipelineStage.RENDERED}


# =============================================================================
# Views
# =============================================================================

@dataclass(frozen=True)
class DirectionView:
    """Segments of one direction, ready for a rendering surface."""
    direction: Direction
    segments: tuple[RenderSegment, ...]

    @property
    def length(self) -> int:
        return sum(len(s) for s in self.segments)

    @property
    def disclosed_len(self) -> int:
        return sum(len(s) for s in self.segments if isinstance(s, DisclosedSegment))

    @property
    def redacted_len(self) -> int:
        return self.length - self.disclosed_len

    def text(self, redacted_char: str = DEFAULT_REDACTED_CHAR) -> str:
        return render_text(self.segments, redacted_char)

    def to_dict(self, redacted_char: str = DEFAULT_REDACTED_CHAR) -> dict[str, Any]:
        return {
            "direction": self.direction.value,
            "length": self.length,
            "disclosed": self.disclosed_len,
            "redacted": self.redacted_len,
            "segments": [{"kind": s.kind.value, "length": len(s)} for s in self.segments],
            "text": self.text(redacted_char),
        }


@dataclass(frozen=True)
class RenderedView:
    """
    Everything a verified proof exposes.

    Only VerificationPipeline constructs these.
    """
    server_name: str
    notarized_at: datetime
    key_fingerprint: str
    sent: DirectionView
    received: DirectionView
    content: ClassifiedContent
    _seal: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._seal is not _SEAL:
            raise TypeError("RenderedView can only be produced by VerificationPipeline")

    @property
    def notarized_at_display(self) -> str:
        return self.notarized_at.strftime("%Y-%m-%d %H:%M:%S UTC")


def _content_to_dict(content: ClassifiedContent) -> dict[str, Any]:
    if isinstance(content, OpaqueContent):
        return {"kind": content.kind.value, "length": len(content.data)}
    result: dict[str, Any] = {"kind": content.kind.value, "text": content.text}
    if hasattr(content, "pretty"):
        result["pretty"] = content.pretty
    if content.decode_error is not None:
        result["decode_error"] = content.decode_error.model_dump()
    return result


# =============================================================================
# Outcome
# =============================================================================

@dataclass
class PipelineOutcome:
    """Terminal result of one pipeline run."""
    name: str
    stage: PipelineStage = PipelineStage.START
    view: Optional[RenderedView] = None
    error: Optional[ViewerError] = None
    faulted: bool = False
    stages: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.START])

    @property
    def ok(self) -> bool:
        return self.stage == PipelineStage.RENDERED and self.view is not None

    @property
    def message(self) -> str:
        if self.ok:
            return SUCCESS_MESSAGE
        if self.error is not None:
            return self.error.message
        return f"Verification stopped at {self.stage.value}"

    def advance(self, stage: PipelineStage) -> None:
        logger.debug(f"{self.name}: {self.stage.value} -> {stage.value}")
        self.stage = stage
        self.stages.append(stage)

    def to_dict(self, redacted_char: str = DEFAULT_REDACTED_CHAR) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "ok": self.ok,
            "stage": self.stage.value,
            "message": self.message,
            "error": self.error.model_dump() if self.error else None,
            "faulted": self.faulted,
        }
        if self.view is not None:
            result.update({
                "server_name": self.view.server_name,
                "notarized_at": format_datetime_canonical(self.view.notarized_at),
                "key_fingerprint": self.view.key_fingerprint,
                "sent": self.view.sent.to_dict(redacted_char),
                "received": self.view.received.to_dict(redacted_char),
                "content": _content_to_dict(self.view.content),
            })
        return result


# =============================================================================
# Pipeline
# =============================================================================

class VerificationPipeline:
    """
    Runs proof artifacts through verification and rendering.

    Verification failures become failed outcomes. InvalidRangesException
    is an internal fault: it is logged at CRITICAL, re-raised by run() and
    recorded as a faulted outcome by run_many().
    """

    def __init__(
        self,
        *,
        key_store: Optional[TrustedKeyStore] = None,
        cert_verifier: Optional[CertificateVerifier] = None,
    ):
        """
        Args:
            key_store: Source of the trusted notary key (process-wide store by default)
            cert_verifier: Trust store for server certificates
        """
        self.key_store = key_store or get_trusted_key_store()
        self.session_verifier = SessionVerifier(cert_verifier)
        self.substring_verifier = SubstringVerifier()

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        key_store: Optional[TrustedKeyStore] = None,
    ) -> "VerificationPipeline":
        """
        Build a pipeline from runtime configuration.

        The configured notary key becomes the store's active key. Without
        key_store that is the process-wide store, so every pipeline sharing
        it sees the replacement; pass a TrustedKeyStore to keep it private.

        Raises:
            KeyInvalidException: If the configured key is unusable
        """
        store = key_store or get_trusted_key_store()
        if store.current().pem != config.trust.notary_pem.strip():
            store.replace(config.trust.notary_pem)
        return cls(
            key_store=store,
            cert_verifier=WebPkiVerifier(ca_bundle=config.trust.ca_bundle),
        )

    def run(self, artifact: bytes, name: str = "<memory>") -> PipelineOutcome:
        """
        Verify and render one artifact.

        Raises:
            InvalidRangesException: On an internal range invariant violation
        """
        return self._execute(artifact, name, contain_faults=False)

    def _execute(self, artifact: bytes, name: str, contain_faults: bool) -> PipelineOutcome:
        key = self.key_store.current()
        outcome = PipelineOutcome(name=name)

        try:
            self._run(artifact, key, outcome)
        except InvalidRangesException as e:
            logger.critical(
                f"{name}: internal consistency fault at {outcome.stage.value}: {e.message}",
                exc_info=True,
            )
            if not contain_faults:
                raise
            # Stage stays where the run stopped; it is not a terminal state
            outcome.error = e.to_error_model()
            outcome.faulted = True
            return outcome

        if outcome.ok:
            logger.info(
                f"{name}: {SUCCESS_MESSAGE} "
                f"(server={outcome.view.server_name}, at={outcome.view.notarized_at_display})"
            )
        else:
            logger.warning(f"{name}: {outcome.stage.value}: {outcome.message}")
        return outcome

    def _run(self, artifact: bytes, key: TrustedKey, outcome: PipelineOutcome) -> None:
        try:
            proof = parse_artifact(artifact)
        except ArtifactParseException as e:
            self._fail(outcome, PipelineStage.PARSE_FAILED, e)
            return
        outcome.advance(PipelineStage.PARSED)

        try:
            session = self.session_verifier.verify(proof.session, key)
        except (SignatureInvalidException, IdentityInvalidException) as e:
            self._fail(outcome, PipelineStage.SESSION_INVALID, e)
            return
        outcome.advance(PipelineStage.SESSION_VERIFIED)

        try:
            transcripts = self.substring_verifier.verify(proof.substrings, session)
        except SubstringMismatchException as e:
            self._fail(outcome, PipelineStage.SUBSTRINGS_INVALID, e)
            return
        outcome.advance(PipelineStage.SUBSTRINGS_VERIFIED)

        outcome.view = self._render(session, transcripts)
        outcome.advance(PipelineStage.RENDERED)

    @staticmethod
    def _fail(outcome: PipelineOutcome, stage: PipelineStage, error: VerificationException) -> None:
        outcome.error = error.to_error_model()
        outcome.advance(stage)

    @staticmethod
    def _render(session: VerifiedSession, transcripts: TranscriptPair) -> RenderedView:
        sent = _direction_view(transcripts.sent)
        received = _direction_view(transcripts.received)
        # Classify what was disclosed, never the filler at withheld positions
        content = classify(disclosed_bytes(received.segments))
        return RenderedView(
            server_name=session.server_name,
            notarized_at=session.notarized_at,
            key_fingerprint=session.key_fingerprint,
            sent=sent,
            received=received,
            content=content,
            _seal=_SEAL,
        )

    def run_file(self, file: LoadedFile, contain_faults: bool = False) -> PipelineOutcome:
        """
        Run one loaded file; the declared MIME type is only a hint.

        Args:
            file: Loaded file
            contain_faults: Return an internal fault as a faulted outcome
                instead of raising it

        Raises:
            InvalidRangesException: Unless contain_faults is set
        """
        if not file.declares_proof:
            logger.info(f"{file.name}: declared type {file.mime_type!r} is not a proof type, parsing anyway")
        return self._execute(file.data, file.name, contain_faults)

    def run_many(self, files: Iterable[LoadedFile], max_workers: int = 1) -> list[PipelineOutcome]:
        """
        Run files independently, outcomes in input order.

        An internal fault in one file becomes that file's faulted outcome;
        the other files still run and report.

        Args:
            files: Files in load order
            max_workers: Runs in parallel when greater than 1
        """
        files = list(files)

        def run_contained(file: LoadedFile) -> PipelineOutcome:
            return self.run_file(file, contain_faults=True)

        if max_workers <= 1 or len(files) <= 1:
            return [run_contained(f) for f in files]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(run_contained, files))


def _direction_view(transcript: DirectionalTranscript) -> DirectionView:
    return DirectionView(direction=transcript.direction, segments=segment_transcript(transcript))


# =============================================================================
# Factory Functions
# =============================================================================

def create_pipeline(
    *,
    notary_pem: Optional[str] = None,
    ca_bundle: Optional[str] = None,
    cert_verifier: Optional[CertificateVerifier] = None,
) -> VerificationPipeline:
    """
    Convenience function to create a pipeline with its own key store.

    Args:
        notary_pem: Trusted notary key (default notary key if omitted)
        ca_bundle: PEM bundle of trusted roots (certifi if omitted)
        cert_verifier: Certificate verifier; overrides ca_bundle

    Returns:
        Configured VerificationPipeline
    """
    return VerificationPipeline(
        key_store=TrustedKeyStore(notary_pem),
        cert_verifier=cert_verifier or WebPkiVerifier(ca_bundle=ca_bundle),
    )


__all__ = [
    "SUCCESS_MESSAGE",
    "PipelineStage",
    "DirectionView",
    "RenderedView",
    "PipelineOutcome",
    "VerificationPipeline",
    "create_pipeline",
]
