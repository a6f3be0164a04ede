"""
Verification Pipeline (In-Process Runtime Wiring)

Composes the verifiers and renderers into a single-pass pipeline per
proof artifact.

Public API:
- VerificationPipeline: Main pipeline runner class
- PipelineStage: Pipeline states (terminal and intermediate)
- PipelineOutcome: Terminal result of a run
- RenderedView / DirectionView: What a verified proof exposes
- LoadedFile: A proof file handed over by a file source
"""

from orchestrator.files import LoadedFile
from orchestrator.pipeline import (
    SUCCESS_MESSAGE,
    DirectionView,
    PipelineOutcome,
    PipelineStage,
    RenderedView,
    VerificationPipeline,
    create_pipeline,
)


__all__ = [
    "SUCCESS_MESSAGE",
    "DirectionView",
    "LoadedFile",
    "PipelineOutcome",
    "PipelineStage",
    "RenderedView",
    "VerificationPipeline",
    "create_pipeline",
]
