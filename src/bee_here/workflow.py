"""Workflow orchestration for the code entry screen."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, Tuple

from .api import ApiResponse
from .outcomes import (
    Outcome,
    classify_session_lookup,
    classify_student_lookup,
    classify_submission,
)
from .records import SessionReference, StudentRecord


class AttendanceApi(Protocol):
    """Remote calls the workflow depends on."""

    async def fetch_current_student(self) -> ApiResponse:
        """Return the students linked to the current user."""

    async def find_sessions(self, class_code: str) -> ApiResponse:
        """Return the sessions matching a class code."""

    async def post_attendance(self, session_id: Any, student_id: Any) -> ApiResponse:
        """Record that the student attended the session."""


class AttendanceWorkflow:
    """Chain the student, session and attendance calls for one screen visit.

    The workflow starts in the awaiting-student state. :meth:`activate` moves
    it to ready by fetching the student once; concurrent callers share the
    same in-flight request. Failures are returned as :class:`Outcome` values
    and never acted on here: signing out is left to the caller.
    """

    def __init__(self, api: AttendanceApi, logger: logging.Logger | None = None) -> None:
        self._api = api
        self._logger = logger or logging.getLogger(f"bee_here.{self.__class__.__name__}")
        self._student: Optional[StudentRecord] = None
        self._activation: Optional[asyncio.Task[Outcome]] = None

    @property
    def student(self) -> Optional[StudentRecord]:
        return self._student

    @property
    def ready(self) -> bool:
        return self._student is not None

    async def resolve_current_student(self) -> Outcome:
        response = await self._api.fetch_current_student()
        outcome = classify_student_lookup(response.status, response.payload)
        if not outcome.ok:
            self._logger.warning("Student lookup failed: %s", outcome.message)
            return outcome
        if self._student is None:
            self._student = StudentRecord.from_payload(outcome.payload)
            self._logger.info("Signed in as student %s (%s)", self._student.id, self._student.name)
        return outcome

    async def activate(self) -> Outcome:
        """Fetch the student record exactly once for this activation."""
        if self._activation is None:
            self._activation = asyncio.ensure_future(self.resolve_current_student())
        activation = self._activation
        try:
            outcome = await asyncio.shield(activation)
        except BaseException:
            # Only a finished fetch is forgotten; a cancelled waiter leaves it running.
            if activation.done() and self._activation is activation:
                self._activation = None
            raise
        if not outcome.ok and self._activation is activation:
            # A failed activation ends the visit; the next activation starts afresh.
            self._activation = None
        return outcome

    def deactivate(self) -> None:
        """Cancel any pending student fetch and forget the student record."""
        if self._activation is not None and not self._activation.done():
            self._activation.cancel()
        self._activation = None
        self._student = None

    async def resolve_session_by_code(self, code: str) -> Tuple[Optional[SessionReference], Outcome]:
        """Return the first session for ``code``, or ``None`` with the reason."""
        response = await self._api.find_sessions(code)
        outcome = classify_session_lookup(response.status, response.payload)
        if not outcome.ok:
            self._logger.info("No session resolved for code %r: %s", code, outcome.message)
            return None, outcome
        session = SessionReference.from_payload(outcome.payload)
        self._logger.debug("Code %r resolved to session %s", code, session.id)
        return session, outcome

    async def submit_attendance(self, session_id: Any, student_id: Any) -> Outcome:
        response = await self._api.post_attendance(session_id, student_id)
        outcome = classify_submission(response.status, response.payload)
        if outcome.ok:
            self._logger.info("Attendance recorded for student %s in session %s", student_id, session_id)
        else:
            self._logger.warning("Attendance rejected (%s): %s", outcome.kind.value, outcome.message)
        return outcome

    async def mark_present(self, code: str) -> Outcome:
        """Resolve ``code`` and submit attendance; no POST when it does not resolve."""
        if self._student is None:
            activation = await self.activate()
            if not activation.ok:
                return activation
        student = self._student

        session, outcome = await self.resolve_session_by_code(code)
        if session is None:
            return outcome
        return await self.submit_attendance(session.id, student.id)
