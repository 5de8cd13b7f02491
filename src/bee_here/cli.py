"""Command line entry point for the code entry screen."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .api import ApiError, AttendanceApiClient
from .config import ConfigError, ensure_env_file, load_config
from .console import RichAlertPresenter
from .coordinator import InMemoryTokenStore, SessionCoordinator, ViewNavigator
from .screen import HEADER_TEXT, CodeEntryScreen
from .utils.logger import logger, set_log_profile, spinner, step
from .workflow import AttendanceWorkflow

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_SIGNED_OUT = 2
EXIT_TRANSPORT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bee-here",
        description="Mark yourself present in a class using its class code",
    )
    parser.add_argument("--code", help="Class code to submit (prompted for when omitted)")
    parser.add_argument("--api-url", help="Base URL of the attendance service (overrides API_URL)")
    parser.add_argument("--token", help="JWT bearer token (overrides BEE_HERE_TOKEN)")
    parser.add_argument("--env-file", help="Path to the .env file (default: ENV_FILE or .env)")
    parser.add_argument("--init-env", action="store_true", help="Write a template .env file and exit")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    return parser


async def run_code_entry(
    screen: CodeEntryScreen,
    presenter: RichAlertPresenter,
    code: Optional[str] = None,
) -> int:
    """Drive one visit of the screen and return the process exit status."""
    presenter.header(HEADER_TEXT)
    try:
        async with spinner("Loading your student profile") as status:
            outcome = await screen.mount()
            if not outcome.ok:
                status.fail()
        if outcome.sign_out:
            return EXIT_SIGNED_OUT

        presenter.greeting(screen.greeting)
        screen.set_code(code if code is not None else presenter.ask_code())

        async with spinner(f"Marking present with code {screen.code}") as status:
            outcome = await screen.press_present()
            if not outcome.ok:
                status.fail()
    finally:
        screen.unmount()

    if outcome.sign_out:
        return EXIT_SIGNED_OUT
    return EXIT_OK if outcome.ok else EXIT_FAILED


async def _run(args: argparse.Namespace) -> int:
    config = load_config(args.env_file, api_url=args.api_url, token=args.token)
    presenter = RichAlertPresenter()
    tokens = InMemoryTokenStore(config.BEE_HERE_TOKEN)
    coordinator = SessionCoordinator(
        token_store=tokens,
        navigator=ViewNavigator(),
        presenter=presenter,
    )
    async with AttendanceApiClient(
        config.API_URL,
        tokens,
        timeout=config.REQUEST_TIMEOUT,
    ) as client:
        screen = CodeEntryScreen(AttendanceWorkflow(client), coordinator)
        return await run_code_entry(screen, presenter, code=args.code)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        set_log_profile("debug")

    if args.init_env:
        ensure_env_file(Path(args.env_file or ".env"))
        return EXIT_OK

    step("Starting code entry")
    try:
        return asyncio.run(_run(args))
    except ConfigError as exc:
        logger.error(str(exc))
        return EXIT_FAILED
    except ApiError as exc:
        logger.error(f"Could not reach the attendance service: {exc}")
        return EXIT_TRANSPORT
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
