"""Domain objects passed between the workflow and the remote service."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class StudentRecord:
    """The student linked to the signed-in user."""

    id: Any
    name: str
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "StudentRecord":
        try:
            student_id = payload["id"]
        except KeyError as exc:
            raise ValueError("Student entry missing field: id") from exc
        extra = {key: value for key, value in payload.items() if key not in ("id", "name")}
        return cls(
            id=student_id,
            name=str(payload.get("name") or ""),
            extra=MappingProxyType(extra),
        )


@dataclass(frozen=True)
class SessionReference:
    """A classroom session resolved from a class code."""

    id: Any

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SessionReference":
        try:
            return cls(id=payload["id"])
        except KeyError as exc:
            raise ValueError("Session entry missing field: id") from exc
