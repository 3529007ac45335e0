"""Error Response Builder — renders failures into the uniform {"errors": [...]} envelope.

Invariants:
    - One entry per FieldError source; exactly one entry when there are none
    - Every entry gets a fresh uuid4 instance id
    - An empty title raises ValueError (programming error, never a runtime condition)
    - "source" key omitted entirely when an entry has no field

Design Decisions:
    - Plain dicts out, not Pydantic models: handlers hand them straight to JSONResponse
"""

from dataclasses import dataclass
from typing import Iterable
from uuid import uuid4

from ledger.core.domain_types import ErrorCode


@dataclass(frozen=True)
class FieldError:
    """A single failing request field."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ErrorDescription:
    """Shared attributes of every entry in one error response."""
    code: ErrorCode
    status: int
    title: str
    detail: str


def build_error_response(
    description: ErrorDescription, sources: Iterable[FieldError] = (),
) -> dict:
    """Build the wire error body, one entry per field source."""
    if not description.title:
        raise ValueError("error title cannot be empty")

    sources = list(sources)
    if not sources:
        return {"errors": [_build_entry(description, None)]}
    return {"errors": [_build_entry(description, s) for s in sources]}


def _build_entry(
    description: ErrorDescription, source: FieldError | None,
) -> dict:
    entry = {
        "id": str(uuid4()),
        "code": description.code.value,
        "status": description.status,
        "title": description.title,
        "detail": description.detail,
    }
    if source is not None:
        entry["source"] = source.to_dict()
    return entry
