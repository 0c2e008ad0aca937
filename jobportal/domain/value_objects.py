"""Domain value objects used across aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from jobportal.domain.exceptions import MalformedIdError


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string, the stored timestamp format."""
    return datetime.now(timezone.utc).isoformat()


def new_record_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid4())


def is_valid_record_id(value: Any) -> bool:
    """Check whether a value is a well-formed record identifier."""
    if isinstance(value, UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def parse_record_id(value: Any, *, kind: str) -> str:
    """Normalize a record identifier or raise MalformedIdError."""
    if not is_valid_record_id(value):
        raise MalformedIdError(kind, str(value))
    return str(UUID(str(value)))


@dataclass(frozen=True)
class Actor:
    """Principal performing a mutation, recorded in audit stamps."""

    id: str
    email: str

    def stamp(self) -> Dict[str, str]:
        return {"id": self.id, "email": self.email}


@dataclass(frozen=True)
class CompanySnapshot:
    """Denormalized company reference embedded in recruiter users."""

    id: str
    name: str

    def to_document(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}
