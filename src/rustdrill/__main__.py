"""Punto de entrada principal."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.text import Text

from .config import Config, get_config
from .core.catalog import Catalog, CatalogError
from .core.exercise import Exercise
from .core.outcome import AllDone
from .core.persistence import StateStore
from .runner.session import verify_pending
from .runner.verify import run_exercise
from .toolchain.runners import ToolchainError, default_runners
from .tui.app import ListAction, list_exercises

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rustdrill",
        description="Work through small Rust exercises one at a time.",
    )
    sub = parser.add_subparsers(dest="command")

    verify_cmd = sub.add_parser("verify", help="Verify pending exercises in order")
    verify_cmd.add_argument("--verbose", action="store_true", help="Show test output")
    verify_cmd.add_argument("--hints", action="store_true", help="Show hints on stop")

    sub.add_parser("list", help="Browse exercises interactively")

    run_cmd = sub.add_parser("run", help="Run a single exercise")
    run_cmd.add_argument("name")
    run_cmd.add_argument("--verbose", action="store_true")

    hint_cmd = sub.add_parser("hint", help="Show the hint of an exercise")
    hint_cmd.add_argument("name")

    reset_cmd = sub.add_parser("reset", help="Mark an exercise as pending again")
    reset_cmd.add_argument("name")

    return parser


def _find(catalog: Catalog, name: str) -> Exercise:
    exercise = catalog.find(name)
    if exercise is None:
        raise CatalogError(f"No exercise named {name!r}")
    return exercise


def run_command(args: argparse.Namespace, config: Config, console: Console) -> int:
    """Ejecutar el subcomando pedido."""
    catalog = Catalog.load(config.info_file)
    store = StateStore(config.state_file, len(catalog))
    command = args.command or "verify"

    if command == "list":
        if list_exercises(catalog, store) is not ListAction.CONTINUE_AT:
            return 0
        command = "verify"
        args.verbose = False
        args.hints = False

    if command == "verify":
        outcome = verify_pending(
            config,
            catalog,
            store,
            verbose=args.verbose,
            show_hints=args.hints,
            console=console,
        )
        return 0 if isinstance(outcome, AllDone) else 1

    if command == "run":
        ok = run_exercise(
            _find(catalog, args.name),
            args.verbose,
            runners=default_runners(config.toolchain_timeout),
            console=console,
            no_emoji=config.no_emoji,
        )
        return 0 if ok else 1

    if command == "hint":
        console.print(_find(catalog, args.name).hint, markup=False, highlight=False)
        return 0

    if command == "reset":
        exercise = _find(catalog, args.name)
        state = store.load()
        state.reset(catalog.index_of(exercise))
        store.save(state)
        console.print(f"The exercise {exercise} has been reset", markup=False)
        return 0

    raise ValueError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> int:
    """Ejecutar aplicación."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.verbose = False
        args.hints = False

    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    console = Console()
    try:
        return run_command(args, config, console)
    except (CatalogError, ToolchainError) as e:
        logger.debug("Aborting", exc_info=True)
        console.print(Text.assemble(("Error: ", "bold red"), str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
