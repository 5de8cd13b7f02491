"""
src/bee_here/console.py
Console rendering for the Bee Here code entry screen.
"""

from __future__ import annotations

import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

__all__ = ["RichAlertPresenter", "ACCENT"]

ACCENT = "#ffcc33"

_TITLE_STYLES = {
    "Success": "green",
    "Error": "red",
}


class RichAlertPresenter:
    """Render alerts, the greeting and the code prompt with Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(no_color=bool(os.getenv("NO_COLOR")), highlight=False)

    def alert(self, title: str, message: str) -> None:
        style = _TITLE_STYLES.get(title, "yellow")
        self.console.print(
            Panel(
                Text(message),
                title=Text(title, style=f"bold {style}"),
                border_style=style,
                expand=False,
                padding=(0, 2),
            )
        )

    def header(self, text: str) -> None:
        self.console.rule(Text(text, style=f"bold {ACCENT}"), style=ACCENT)

    def greeting(self, text: str) -> None:
        self.console.print(Text(text, style=f"bold {ACCENT}"), justify="center")

    def ask_code(self) -> str:
        return Prompt.ask("Class code", console=self.console)
