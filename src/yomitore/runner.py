"""
yomitore CLI Runner

Reading comprehension trainer: read a generated passage, summarise it, and
have an LLM grade the summary.

Usage:
    yomitore                      # start a training session
    yomitore stats                # print the report and exit
    yomitore --offline            # canned passage and verdict, no network
    python -m yomitore --data-dir ./data
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import sys

from dotenv import load_dotenv
from rich.console import Console

from yomitore import __version__
from yomitore.app_config import AppConfig, StorageConfig, load_config
from yomitore.domain.entities import ResultHistory
from yomitore.errors import PersistenceFailure, TerminalUnavailable
from yomitore.infrastructure.history_store import HistoryStore
from yomitore.infrastructure.model_clients import OFFLINE_MODEL, create_client
from yomitore.session.controller import SessionController
from yomitore.tui.render import render_report
from yomitore.tui.terminal import Terminal
from yomitore.use_cases.badges import recompute
from yomitore.use_cases.health_check import describe_failure, health_check_model
from yomitore.use_cases.training import TrainingService

logger = logging.getLogger("yomitore")

LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="yomitore",
        description="yomitore: reading comprehension trainer",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["play", "stats"],
        default="play",
        help="play: start a training session (default); stats: print the report",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use a canned passage and verdict instead of calling a model",
    )
    parser.add_argument(
        "--skip-check",
        action="store_true",
        help="Do not run the model health check before starting",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory for stats.json and the log file (default: YOMITORE_DATA_DIR or ~/.config/yomitore)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def setup_logging(storage: StorageConfig) -> None:
    """
    Send the package's log records to a rotating file in the data directory.

    The terminal belongs to the session UI, so nothing is logged to the console.
    """
    if any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers):
        return
    storage.data_path.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        storage.log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"
    ))
    logger.addHandler(handler)
    logger.setLevel(storage.log_level.upper())
    logger.propagate = False


def load_history(store: HistoryStore) -> tuple[ResultHistory, str | None]:
    """
    Load the stored history.

    Returns:
        (history, warning): an empty history and a warning if the file could not be read
    """
    try:
        history = store.load_history()
    except PersistenceFailure as e:
        logger.error("Starting with an empty history: %s", e)
        return ResultHistory(), f"Warning: {e}"
    if store.skipped_entries:
        return history, f"Warning: skipped {store.skipped_entries} unreadable entries in {store.path}"
    return history, None


def run_stats(config: AppConfig, console: Console) -> int:
    store = HistoryStore(config.storage.history_path)
    history, warning = load_history(store)
    if warning:
        console.print(f"[yellow]{warning}[/yellow]")
    badges = config.badges
    report = recompute(
        history,
        interval=badges.interval,
        streak_cap=badges.streak_cap,
        cumulative_cap=badges.cumulative_cap,
    )
    console.print(render_report(history, report.streak, report.badges))
    return 0


def run_play(args: argparse.Namespace, config: AppConfig, console: Console) -> int:
    model_name = OFFLINE_MODEL if args.offline else config.api.model
    try:
        client = create_client(model_name, config=config)
    except ValueError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        console.print("Set it in the environment or in a .env file, or run with --offline.")
        return 1

    if not (args.offline or args.skip_check):
        console.print(f"Checking {model_name}... ", end="")
        result = health_check_model(client)
        if not result.success:
            console.print("[red]FAILED[/red]")
            console.print(describe_failure(result), markup=False)
            logger.error("Health check failed for %s: %s", model_name, result.error)
            return 1
        console.print(f"[green]OK[/green] ({result.latency_ms}ms)")

    store = HistoryStore(config.storage.history_path)
    history, warning = load_history(store)
    controller = SessionController(
        TrainingService(client),
        history=history,
        store=store,
        config=config,
    )
    controller.status = warning

    logger.info("Session started (model=%s, %d stored results)", model_name, len(history))
    try:
        with Terminal(console=console) as terminal:
            controller.run(terminal)
    except TerminalUnavailable as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        controller.shutdown()
    logger.info("Session ended (%d stored results)", len(controller.history))
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)

    console = Console()
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"ERROR: {e}", style="red", markup=False)
        sys.exit(1)
    if args.data_dir:
        config.storage.data_dir = args.data_dir
    setup_logging(config.storage)

    if args.command == "stats":
        sys.exit(run_stats(config, console))
    sys.exit(run_play(args, config, console))


if __name__ == "__main__":
    main()
