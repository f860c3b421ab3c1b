"""Verificación secuencial de ejercicios pendientes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from rich.console import Console
from rich.text import Text

from ..core.exercise import ContextLine, Exercise, Mode, RunResult
from ..core.outcome import AllDone, Failed, VerifyOutcome
from ..toolchain.runners import ModeRunner, ToolchainError, default_runners
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

SEPARATOR = "===================="


def render_banner(message: str, no_emoji: bool = False) -> str:
    """Banner de éxito, con o sin emojis."""
    if no_emoji:
        return f"~*~ {message} ~*~"
    return f"🎉 🎉 {message} 🎉 🎉"


def _success(console: Console, message: str, no_emoji: bool) -> None:
    mark = "✓" if no_emoji else "✅"
    console.print(Text(f"{mark} {message}", style="bold green"))


def _warn(console: Console, message: str, no_emoji: bool) -> None:
    mark = "!" if no_emoji else "⚠️ "
    console.print(Text(f"{mark} {message}", style="bold red"))


def _echo(console: Console, data: bytes) -> None:
    """Volcar salida capturada (puede traer colores ANSI de rustc)."""
    if data:
        console.print(Text.from_ansi(data.decode("utf-8", errors="replace")), end="")


def _print_context(console: Console, context: Iterable[ContextLine]) -> None:
    for context_line in context:
        line = Text(context_line.line, style="bold" if context_line.important else "")
        console.print(
            Text.assemble(
                (f"{context_line.number:>2}", "bold blue"),
                " ",
                ("|", "blue"),
                "  ",
                line,
            )
        )


def report_failure(
    console: Console,
    exercise: Exercise,
    runner: ModeRunner,
    result: RunResult,
    no_emoji: bool = False,
) -> None:
    """Mostrar toda la salida de un ejercicio que no compila o falla."""
    _warn(console, runner.failure_message(exercise), no_emoji)
    _echo(console, result.stdout)
    _echo(console, result.stderr)


def prompt_for_completion(
    console: Console,
    exercise: Exercise,
    runner: ModeRunner,
    result: RunResult,
    context: Iterable[ContextLine],
    show_hints: bool = False,
    no_emoji: bool = False,
) -> None:
    """Avisar de que el ejercicio funciona pero sigue marcado como no terminado."""
    _success(console, f"Successfully {runner.past_verb} {exercise}!", no_emoji)
    console.print()
    console.print(render_banner(runner.success_message(no_emoji), no_emoji))
    console.print()

    if runner.shows_output:
        console.print("Output:")
        console.print(SEPARATOR, style="bold")
        _echo(console, result.stdout)
        console.print()
        console.print(SEPARATOR, style="bold")
        console.print()

    if show_hints:
        console.print("Hints:")
        console.print(SEPARATOR, style="bold")
        console.print(exercise.hint, markup=False, highlight=False)
        console.print(SEPARATOR, style="bold")
        console.print()

    console.print("You can keep working on this exercise,")
    console.print(
        Text.assemble(
            "or jump into the next one by removing the ",
            ("`I AM NOT DONE`", "bold"),
            " comment:",
        )
    )
    console.print()
    _print_context(console, context)


def verify(
    pending: Iterable[Exercise],
    progress: tuple[int, int],
    verbose: bool = False,
    show_hints: bool = False,
    *,
    runners: Mapping[Mode, ModeRunner] | None = None,
    console: Console | None = None,
    no_emoji: bool = False,
) -> VerifyOutcome:
    """Verificar en orden los ejercicios pendientes, parando en el primero sin terminar.

    Un ejercicio se considera terminado si el toolchain termina sin error y
    su código ya no contiene la marca `I AM NOT DONE`. Si compila pero la
    marca sigue ahí, la pasada también se detiene en él. Un error al invocar
    el toolchain cuenta como un fallo de ese ejercicio.

    Args:
        pending: Ejercicios a verificar, en orden de catálogo
        progress: (terminados, total) antes de empezar
        verbose: Mostrar la salida de los tests aunque pasen
        show_hints: Mostrar la pista al detenerse en un ejercicio
        runners: Ejecutor por modo (por defecto el toolchain de Rust)
        console: Consola de salida
        no_emoji: Banners en texto plano

    Returns:
        AllDone() o Failed(exercise)
    """
    console = console or Console()
    num_done, total = progress
    if total == 0:
        console.print("You completed all exercises!")
        return AllDone()

    runners = runners if runners is not None else default_runners()
    percentage = num_done / total * 100

    halted: tuple[Exercise, ModeRunner, RunResult | ToolchainError, tuple[ContextLine, ...]] | None = None

    with ProgressTracker(total, console=console) as tracker:
        tracker.set_position(num_done)
        tracker.set_message(f"({percentage:.1f} %)")

        for exercise in pending:
            runner = runners[exercise.mode]
            try:
                with tracker.spinner(f"{runner.verb} {exercise}..."):
                    result = runner.run(exercise)
            except ToolchainError as e:
                logger.warning("Could not run the toolchain for %s: %s", exercise, e)
                halted = (exercise, runner, e, ())
                break

            if not result.exit_success:
                logger.info("%s failed", exercise)
                halted = (exercise, runner, result, ())
                break

            if verbose and exercise.mode is Mode.TEST:
                _echo(tracker.console, result.stdout)

            state = exercise.state()
            if not state.done:
                logger.info("%s passes but is still marked as not done", exercise)
                halted = (exercise, runner, result, state.context)
                break

            percentage += 100 / total
            tracker.increment()
            tracker.set_message(f"({percentage:.1f} %)")
        else:
            tracker.finish()
        logger.debug("Stopped at %d/%d", tracker.position, total)

    if halted is None:
        console.print("You completed all exercises!")
        return AllDone()

    exercise, runner, result, context = halted
    if isinstance(result, ToolchainError):
        _warn(console, runner.failure_message(exercise), no_emoji)
        console.print(str(result), markup=False, highlight=False)
    elif result.exit_success:
        prompt_for_completion(console, exercise, runner, result, context, show_hints, no_emoji)
    else:
        report_failure(console, exercise, runner, result, no_emoji)
    return Failed(exercise)


def run_exercise(
    exercise: Exercise,
    verbose: bool = False,
    *,
    runners: Mapping[Mode, ModeRunner] | None = None,
    console: Console | None = None,
    no_emoji: bool = False,
) -> bool:
    """Ejecutar un solo ejercicio sin pedir confirmación de terminado."""
    console = console or Console()
    runners = runners if runners is not None else default_runners()
    runner = runners[exercise.mode]

    with console.status(f"{runner.verb} {exercise}...", refresh_per_second=10):
        result = runner.run(exercise)

    if not result.exit_success:
        report_failure(console, exercise, runner, result, no_emoji)
        return False

    if runner.shows_output or verbose:
        _echo(console, result.stdout)
    _success(console, f"Successfully {runner.past_verb} {exercise}!", no_emoji)
    return True
