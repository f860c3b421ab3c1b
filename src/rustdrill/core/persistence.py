"""Capa de persistencia para el estado de progreso."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .state import CompletionState

logger = logging.getLogger(__name__)


class StateStore:
    """Maneja la persistencia del estado de progreso."""

    def __init__(self, path: Path, catalog_size: int) -> None:
        """Inicializar con ruta del fichero y tamaño del catálogo."""
        self.path = Path(path)
        self.catalog_size = catalog_size

    def load(self) -> CompletionState:
        """Cargar estado, o uno nuevo si no existe o está corrupto."""
        if not self.path.exists():
            logger.info("No state file at %s, starting fresh", self.path)
            return CompletionState.fresh(self.catalog_size)

        try:
            state = CompletionState.load(self.path)
        except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed state file %s: %s", self.path, e)
            return CompletionState.fresh(self.catalog_size)

        if state.total != self.catalog_size:
            logger.warning(
                "State file %s tracks %d exercises, catalog has %d; starting fresh",
                self.path,
                state.total,
                self.catalog_size,
            )
            return CompletionState.fresh(self.catalog_size)

        return state

    def save(self, state: CompletionState) -> None:
        """Guardar estado a disco."""
        state.save(self.path)
        logger.debug(
            "Saved state to %s (%d/%d done, next=%d)",
            self.path,
            state.done_count,
            state.total,
            state.next_exercise_index,
        )

