"""Barra de progreso de la verificación."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

# Redibujado independiente de lo que tarde el toolchain (~100ms)
REFRESH_PER_SECOND = 10


class ProgressTracker:
    """Muestra `Progress: [####>---] pos/len (pct %)` mientras avanza el runner.

    Solo presentación: no decide nada. Se usa como context manager; al salir
    deja de dibujar y libera la terminal.
    """

    def __init__(self, total: int, console: Console | None = None) -> None:
        self.total = total
        self.console = console or Console()
        self._progress = Progress(
            SpinnerColumn(finished_text=" "),
            TextColumn("Progress:"),
            TextColumn("["),
            BarColumn(
                bar_width=60,
                style="red",
                complete_style="green",
                finished_style="green",
            ),
            TextColumn("]"),
            TextColumn("{task.completed:.0f}/{task.total:.0f}"),
            TextColumn("{task.fields[message]}"),
            TextColumn("{task.fields[status]}", style="dim"),
            console=self.console,
            auto_refresh=True,
            refresh_per_second=REFRESH_PER_SECOND,
        )
        self._task = self._progress.add_task("", total=total, message="", status="")

    def __enter__(self) -> ProgressTracker:
        self._progress.start()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._progress.stop()

    @property
    def position(self) -> int:
        return int(self._progress.tasks[self._task].completed)

    def set_position(self, n: int) -> None:
        self._progress.update(self._task, completed=n)

    def increment(self) -> None:
        self._progress.advance(self._task, 1)

    def set_message(self, text: str) -> None:
        self._progress.update(self._task, message=text)

    def finish(self) -> None:
        """Completar la barra y detener la animación."""
        self._progress.update(self._task, completed=self.total, status="")
        self._progress.stop()

    @contextmanager
    def spinner(self, text: str) -> Iterator[None]:
        """Mostrar `text` junto a la barra mientras dura una invocación."""
        self._progress.update(self._task, status=text)
        try:
            yield
        finally:
            self._progress.update(self._task, status="")
