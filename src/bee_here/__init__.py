"""Bee Here: mark a student present in a classroom session by class code."""

from .api import ApiError, ApiResponse, AttendanceApiClient
from .coordinator import InMemoryTokenStore, SessionCoordinator, ViewNavigator
from .outcomes import Outcome, OutcomeKind
from .records import SessionReference, StudentRecord
from .screen import CodeEntryScreen
from .workflow import AttendanceWorkflow

__all__ = [
    "ApiError",
    "ApiResponse",
    "AttendanceApiClient",
    "AttendanceWorkflow",
    "CodeEntryScreen",
    "InMemoryTokenStore",
    "Outcome",
    "OutcomeKind",
    "SessionCoordinator",
    "SessionReference",
    "StudentRecord",
    "ViewNavigator",
]
