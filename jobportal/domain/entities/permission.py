"""Permission entity: one allowed (apiPath, method) capability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

# Fields exposed when permissions are expanded for role display
DISPLAY_FIELDS = ("id", "apiPath", "name", "method", "module")


@dataclass(frozen=True)
class Permission:
    id: str
    api_path: str
    method: str
    module: str
    name: str

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Permission":
        return cls(
            id=str(document["id"]),
            api_path=document.get("apiPath", ""),
            method=str(document.get("method", "")).upper(),
            module=document.get("module", ""),
            name=document.get("name", ""),
        )

    def to_display(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "apiPath": self.api_path,
            "name": self.name,
            "method": self.method,
            "module": self.module,
        }
