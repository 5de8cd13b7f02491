"""The code entry screen: greeting, code input and the mark-present action."""

from __future__ import annotations

from typing import Optional

from .coordinator import SessionCoordinator
from .outcomes import Outcome
from .workflow import AttendanceWorkflow

HEADER_TEXT = "Bee Here"


class CodeEntryScreen:
    """One visit to the code entry screen.

    ``mount`` is the only place the student is fetched; ``unmount`` cancels it
    if still pending and drops the student record.
    """

    def __init__(self, workflow: AttendanceWorkflow, coordinator: SessionCoordinator) -> None:
        self.workflow = workflow
        self.coordinator = coordinator
        self.code = ""
        self.mounted = False

    @property
    def greeting(self) -> str:
        student = self.workflow.student
        return "Hello." if student is None else f"Hello, {student.name}"

    async def mount(self) -> Outcome:
        self.mounted = True
        outcome = await self.workflow.activate()
        return self.coordinator.handle(outcome)

    def set_code(self, value: str) -> None:
        self.code = value

    async def press_present(self, code: Optional[str] = None) -> Outcome:
        if code is not None:
            self.set_code(code)
        outcome = await self.workflow.mark_present(self.code)
        return self.coordinator.handle(outcome)

    def logout(self) -> None:
        self.coordinator.logout()
        self.unmount()

    def unmount(self) -> None:
        self.workflow.deactivate()
        self.mounted = False
