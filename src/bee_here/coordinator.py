"""Top-level handling of workflow outcomes and credential state."""

from __future__ import annotations

from typing import Optional, Protocol

from .outcomes import Outcome
from .utils.logger import get_logger, step

LOGIN = "LOGIN"
CODE_ENTRY = "CODE_ENTRY"

LOGGER = get_logger("coordinator")


class TokenStore(Protocol):
    token: str

    def clear_token(self) -> None:
        """Forget the current bearer credential."""


class NavigationDispatcher(Protocol):
    def set_view(self, view: str) -> None:
        """Switch the application to ``view``."""


class AlertPresenter(Protocol):
    def alert(self, title: str, message: str) -> None:
        """Show a blocking message to the user."""


class InMemoryTokenStore:
    """Hold the bearer token for the lifetime of the process."""

    def __init__(self, token: str = "") -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = ""

    def __bool__(self) -> bool:
        return bool(self.token)


class ViewNavigator:
    """Track which view the application is showing."""

    def __init__(self, initial: str = CODE_ENTRY) -> None:
        self.current = initial

    def set_view(self, view: str) -> None:
        if view != self.current:
            step(f"Switching view {self.current} -> {view}")
        self.current = view


class SessionCoordinator:
    """Present outcomes and perform the sign-out side effect when asked to."""

    def __init__(
        self,
        token_store: TokenStore,
        navigator: NavigationDispatcher,
        presenter: Optional[AlertPresenter] = None,
    ) -> None:
        self.token_store = token_store
        self.navigator = navigator
        self.presenter = presenter

    def handle(self, outcome: Outcome) -> Outcome:
        if outcome.message and self.presenter is not None:
            self.presenter.alert(outcome.title, outcome.message)
        if outcome.sign_out:
            LOGGER.warning("Signing out: %s", outcome.message)
            self.logout()
        return outcome

    def logout(self) -> None:
        self.navigator.set_view(LOGIN)
        self.token_store.clear_token()
