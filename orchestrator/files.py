"""
Loaded proof files.

A file source hands over (name, declared MIME type, bytes). The declared
type is only a hint: parsing decides what the bytes are.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path


PROOF_MIME_TYPE = "application/json"


@dataclass(frozen=True)
class LoadedFile:
    name: str
    data: bytes = field(repr=False)
    mime_type: str = PROOF_MIME_TYPE

    @property
    def declares_proof(self) -> bool:
        return self.mime_type.split(";")[0].strip().lower() == PROOF_MIME_TYPE

    @classmethod
    def from_path(cls, path: str | Path) -> "LoadedFile":
        """Read a file from disk, guessing its MIME type from the extension."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            data=path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )
