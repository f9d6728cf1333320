from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class RemoteRecord:
    """One row of a remote table: ``{id, createdTime, fields}``."""

    record_id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    created_time: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "RemoteRecord":
        return cls(
            record_id=str(payload.get("id", "")),
            fields=dict(payload.get("fields") or {}),
            created_time=payload.get("createdTime"),
        )

    def first_of(self, *names: str, default: Any = None) -> Any:
        """Value of the first present, truthy field among ``names``."""
        for name in names:
            value = self.fields.get(name)
            if value:
                return value
        return default
