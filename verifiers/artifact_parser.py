"""
Artifact Parser

Decodes an untrusted proof artifact into a typed TlsProof.

All-or-nothing: either the whole document validates or an
ArtifactParseException describes the first problem found. Truncated,
empty, non-UTF-8 and adversarially nested input all end up here as a
typed error.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import ValidationError

from core.schemas.errors import ArtifactParseException
from core.schemas.proof import TlsProof


logger = logging.getLogger(__name__)


def _first_error(exc: ValidationError) -> dict[str, Any]:
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    if not errors:
        return {"loc": "", "msg": str(exc)}
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return {"loc": loc, "msg": first.get("msg", ""), "type": first.get("type", "")}


def parse_artifact(data: Union[bytes, str]) -> TlsProof:
    """
    Parse a proof artifact.

    Args:
        data: Raw artifact bytes (JSON text)

    Returns:
        The parsed proof; nothing in it has been verified yet

    Raises:
        ArtifactParseException: If the artifact is not a well-formed proof
    """
    if not data or not data.strip():
        raise ArtifactParseException("Proof artifact is empty")

    try:
        proof = TlsProof.model_validate_json(data)
    except ValidationError as e:
        first = _first_error(e)
        where = f" at {first['loc']}" if first["loc"] else ""
        raise ArtifactParseException(
            f"Malformed proof artifact{where}: {first['msg']}",
            details={"error_count": e.error_count(), **first},
        ) from e
    except (ValueError, RecursionError) as e:
        raise ArtifactParseException(f"Malformed proof artifact: {e}") from e

    logger.debug(
        f"Parsed proof artifact: server={proof.session.session_info.server_name} "
        f"openings={len(proof.substrings.openings)}"
    )
    return proof


__all__ = ["parse_artifact"]
