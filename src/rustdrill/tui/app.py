"""Lista interactiva de ejercicios."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.widget import Widget
from textual.widgets import Static

if TYPE_CHECKING:
    from ..core.catalog import Catalog
    from ..core.persistence import StateStore
    from ..core.state import CompletionState

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "↓/j ↑/k home/g end/G │ Filter <d>one/<p>ending │ <r>eset │ <c>ontinue at │ <q>uit"
)
NEXT_MARKER = ">>>>"
SELECTED_STYLE = "on rgb(50,50,50)"


class ListAction(str, Enum):
    """Qué hacer tras una tecla."""

    NONE = "none"
    QUIT = "quit"
    CONTINUE_AT = "continue_at"


class RowFilter(str, Enum):
    """Filas visibles."""

    ALL = "all"
    DONE = "done"
    PENDING = "pending"


class ListState:
    """Selección, filtro y scroll de la lista.

    `selected` es un índice sobre las filas visibles y siempre empieza en 0,
    sea cual sea el siguiente ejercicio.
    """

    def __init__(self, state: CompletionState, catalog: Catalog) -> None:
        self.state = state
        self.catalog = catalog
        self.filter = RowFilter.ALL
        self.selected = 0
        self.offset = 0
        # Hay cambios en el estado que guardar
        self.dirty = False

    def rows(self) -> list[int]:
        """Índices de catálogo de las filas visibles."""
        indices = range(len(self.catalog))
        if self.filter is RowFilter.DONE:
            return [i for i in indices if self.state.progress[i]]
        if self.filter is RowFilter.PENDING:
            return [i for i in indices if not self.state.progress[i]]
        return list(indices)

    @property
    def last(self) -> int:
        return max(len(self.rows()) - 1, 0)

    def selected_exercise_index(self) -> int | None:
        rows = self.rows()
        if not rows:
            return None
        return rows[self.selected]

    def select_next(self) -> None:
        self.selected = min(self.selected + 1, self.last)

    def select_previous(self) -> None:
        self.selected = max(self.selected - 1, 0)

    def select_first(self) -> None:
        self.selected = 0

    def select_last(self) -> None:
        self.selected = self.last

    def toggle_filter(self, row_filter: RowFilter) -> None:
        """Mostrar solo hechos/pendientes; pulsar otra vez quita el filtro."""
        self.filter = RowFilter.ALL if self.filter is row_filter else row_filter
        self.selected = min(self.selected, self.last)
        self.offset = 0

    def reset_selected(self) -> None:
        """Marcar el ejercicio seleccionado como pendiente."""
        index = self.selected_exercise_index()
        if index is None:
            return
        self.state.reset(index)
        self.dirty = True
        logger.info("Reset %s", self.catalog[index].name)
        # Puede desaparecer de la vista con el filtro de hechos
        self.selected = min(self.selected, self.last)

    def continue_at_selected(self) -> bool:
        """Continuar la verificación por el ejercicio seleccionado."""
        index = self.selected_exercise_index()
        if index is None:
            return False
        self.state.set_next(index)
        self.dirty = True
        logger.info("Continuing at %s", self.catalog[index].name)
        return True

    def handle_key(self, key: str) -> ListAction:
        """Aplicar una tecla y decir si hay que salir."""
        if key == "q":
            return ListAction.QUIT
        if key in ("down", "j"):
            self.select_next()
        elif key in ("up", "k"):
            self.select_previous()
        elif key in ("home", "g"):
            self.select_first()
        elif key in ("end", "G"):
            self.select_last()
        elif key == "d":
            self.toggle_filter(RowFilter.DONE)
        elif key == "p":
            self.toggle_filter(RowFilter.PENDING)
        elif key == "r":
            self.reset_selected()
        elif key == "c":
            if self.continue_at_selected():
                return ListAction.CONTINUE_AT
        return ListAction.NONE

    def window(self, height: int) -> list[int]:
        """Filas que caben en `height` líneas (una va a la cabecera)."""
        rows = self.rows()
        fit = max(height - 1, 1)
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + fit:
            self.offset = self.selected - fit + 1
        self.offset = max(min(self.offset, len(rows) - fit), 0)
        return rows[self.offset : self.offset + fit]


def build_table(view: ListState, height: int) -> Table:
    """Tabla Next/State/Name/Path de las filas visibles."""
    name_width = max((len(exercise.name) for exercise in view.catalog), default=4)

    table = Table(box=None, padding=(0, 1), expand=True, show_edge=False)
    table.add_column("Next", width=4, no_wrap=True)
    table.add_column("State", width=7, no_wrap=True)
    table.add_column("Name", width=name_width, no_wrap=True)
    table.add_column("Path", ratio=1, no_wrap=True, overflow="ellipsis")

    selected_index = view.selected_exercise_index()
    for index in view.window(height):
        exercise = view.catalog[index]
        done = view.state.progress[index]
        table.add_row(
            Text(NEXT_MARKER, style="bold red") if index == view.state.next_exercise_index else "",
            Text("DONE", style="green") if done else Text("PENDING", style="yellow"),
            exercise.name,
            str(exercise),
            style=SELECTED_STYLE if index == selected_index else None,
        )
    return table


class ExerciseTable(Widget, can_focus=True):
    """Tabla de ejercicios; recibe las teclas."""

    def __init__(self, list_state: ListState, **kwargs) -> None:
        super().__init__(**kwargs)
        self.list_state = list_state

    def render(self) -> Table:
        return build_table(self.list_state, self.size.height)

    def on_resize(self, event: events.Resize) -> None:
        self.refresh()

    def on_key(self, event: events.Key) -> None:
        key = event.character if event.is_printable and event.character else event.key
        event.stop()
        action = self.list_state.handle_key(key)
        if action is not ListAction.NONE:
            self.app.exit(action)
            return
        self.refresh()


class ExerciseListApp(App[ListAction]):
    """Lista navegable de ejercicios."""

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layout: vertical;
    }

    #exercises {
        height: 1fr;
    }

    #help {
        height: 1;
        dock: bottom;
    }
    """

    def __init__(self, list_state: ListState) -> None:
        super().__init__()
        self.list_state = list_state

    def compose(self) -> ComposeResult:
        yield ExerciseTable(self.list_state, id="exercises")
        yield Static(HELP_TEXT, id="help", markup=False)

    def on_mount(self) -> None:
        self.query_one(ExerciseTable).focus()


def list_exercises(catalog: Catalog, store: StateStore) -> ListAction:
    """Mostrar la lista hasta que el usuario salga.

    Textual pone la terminal en modo raw y pantalla alternativa al arrancar y
    la restaura en cualquier salida, también si la app falla. El estado se
    guarda aunque la app termine con error.
    """
    state = store.load()
    view = ListState(state, catalog)
    app = ExerciseListApp(view)
    try:
        action = app.run()
    finally:
        if view.dirty:
            store.save(state)
    return action or ListAction.QUIT
