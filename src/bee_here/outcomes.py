"""Typed outcomes for the code entry workflow and the rules that classify
remote responses into them.

Every response is inspected in the same order: a ``detail`` key always means
the credential was rejected, then the HTTP status, then (for attendance
submissions) the ``non_field_errors`` payload. A structured ``code`` field is
preferred when the service sends one; substring matching on the stringified
errors is the fallback.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

ERROR_TITLE = "Error"
SUCCESS_TITLE = "Success"

NO_STUDENT_MESSAGE = "No student found"
SESSION_NOT_FOUND_MESSAGE = "No classroom session with that code was found."
DUPLICATE_MESSAGE = "You have already marked yourself present."
NOT_ON_ROSTER_MESSAGE = "You are not on the roster for this class."
PRESENT_MESSAGE = "You have been marked present in this class."
MALFORMED_ENTRY_MESSAGE = "The attendance service returned an entry without an id"

AUTH_STATUSES = frozenset({401, 403})

_DUPLICATE_CODES = frozenset({"unique", "duplicate"})
_ROSTER_CODES = frozenset({"not_on_roster", "roster"})


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    AUTH_ERROR = "auth_error"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    NOT_ON_ROSTER = "not_on_roster"
    VALIDATION_ERROR = "validation_error"


@dataclass(frozen=True)
class Outcome:
    """Result of one workflow step, ready to be shown to the user."""

    kind: OutcomeKind
    title: str
    message: str
    sign_out: bool = False
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, message: str = PRESENT_MESSAGE, payload: Any = None) -> "Outcome":
        return cls(OutcomeKind.SUCCESS, SUCCESS_TITLE, message, payload=payload)

    @classmethod
    def failure(
        cls,
        kind: OutcomeKind,
        message: str,
        *,
        sign_out: bool = False,
        payload: Any = None,
    ) -> "Outcome":
        return cls(kind, ERROR_TITLE, message, sign_out=sign_out, payload=payload)


def stringify(value: Any) -> str:
    """Render an error payload the way it arrived on the wire."""
    return json.dumps(value, ensure_ascii=False)


def _has_key(payload: Any, key: str) -> bool:
    return isinstance(payload, dict) and key in payload


def _auth_failure(status: int, payload: Any, *, sign_out: bool, quote: bool) -> Optional[Outcome]:
    if _has_key(payload, "detail"):
        detail = payload["detail"]
        message = stringify(detail) if quote else str(detail)
        return Outcome.failure(OutcomeKind.AUTH_ERROR, message, sign_out=sign_out, payload=payload)
    if status in AUTH_STATUSES:
        return Outcome.failure(
            OutcomeKind.AUTH_ERROR,
            f"Request was not authorised (HTTP {status})",
            sign_out=sign_out,
            payload=payload,
        )
    return None


def _first_entry(status: int, payload: Any, not_found_message: str, *, sign_out: bool) -> Outcome:
    if isinstance(payload, list) and payload:
        entry = payload[0]
        if not isinstance(entry, dict) or "id" not in entry:
            return Outcome.failure(
                OutcomeKind.VALIDATION_ERROR,
                f"{MALFORMED_ENTRY_MESSAGE}: {stringify(entry)}",
                sign_out=sign_out,
                payload=payload,
            )
        return Outcome.success(message="", payload=entry)
    if isinstance(payload, list) or 200 <= status < 300:
        return Outcome.failure(OutcomeKind.NOT_FOUND, not_found_message, sign_out=sign_out, payload=payload)
    return Outcome.failure(
        OutcomeKind.VALIDATION_ERROR, stringify(payload), sign_out=sign_out, payload=payload
    )


def classify_student_lookup(status: int, payload: Any) -> Outcome:
    """Classify ``GET student?is_user=True``. Every failure signs the user out."""
    auth = _auth_failure(status, payload, sign_out=True, quote=False)
    if auth is not None:
        return auth
    return _first_entry(status, payload, NO_STUDENT_MESSAGE, sign_out=True)


def classify_session_lookup(status: int, payload: Any) -> Outcome:
    """Classify ``GET session?class_code=...``; the first match wins."""
    auth = _auth_failure(status, payload, sign_out=False, quote=False)
    if auth is not None:
        return auth
    return _first_entry(status, payload, SESSION_NOT_FOUND_MESSAGE, sign_out=False)


def _validation_kind(payload: dict, message: str) -> OutcomeKind:
    code = payload.get("code")
    if isinstance(code, str):
        if code.lower() in _DUPLICATE_CODES:
            return OutcomeKind.DUPLICATE
        if code.lower() in _ROSTER_CODES:
            return OutcomeKind.NOT_ON_ROSTER
    if "unique" in message:
        return OutcomeKind.DUPLICATE
    if "roster" in message:
        return OutcomeKind.NOT_ON_ROSTER
    return OutcomeKind.VALIDATION_ERROR


_KIND_MESSAGES = {
    OutcomeKind.DUPLICATE: DUPLICATE_MESSAGE,
    OutcomeKind.NOT_ON_ROSTER: NOT_ON_ROSTER_MESSAGE,
}


def classify_submission(status: int, payload: Any) -> Outcome:
    """Classify ``POST attendance``."""
    auth = _auth_failure(status, payload, sign_out=False, quote=True)
    if auth is not None:
        return auth

    if _has_key(payload, "non_field_errors"):
        message = stringify(payload["non_field_errors"])
        kind = _validation_kind(payload, message)
        return Outcome.failure(kind, _KIND_MESSAGES.get(kind, message), payload=payload)

    if not 200 <= status < 300:
        return Outcome.failure(OutcomeKind.VALIDATION_ERROR, stringify(payload), payload=payload)

    return Outcome.success(payload=payload)
