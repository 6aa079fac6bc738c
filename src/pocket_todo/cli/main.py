# src/pocket_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads persisted tasks, then runs the
console front-end until /exit, EOF or Ctrl+C. Pending snapshot writes are
flushed before the process exits.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def run(state: AppState) -> None:
    await state.store.load()
    try:
        await run_console_loop(state)
    finally:
        await state.store.aclose()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
