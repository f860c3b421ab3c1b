"""Estado del progreso del alumno."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .outcome import AllDone, Failed, VerifyOutcome

if TYPE_CHECKING:
    from .catalog import Catalog
    from .exercise import Exercise


@dataclass
class CompletionState:
    """Un indicador por ejercicio más el índice del siguiente pendiente."""

    progress: list[bool] = field(default_factory=list)
    next_exercise_index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.next_exercise_index <= len(self.progress):
            raise ValueError(
                f"next_exercise_index {self.next_exercise_index} out of range "
                f"for {len(self.progress)} exercises"
            )

    @classmethod
    def fresh(cls, total: int) -> CompletionState:
        """Estado inicial: nada hecho, empezar por el primero."""
        return cls(progress=[False] * total, next_exercise_index=0)

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {
            "progress": list(self.progress),
            "next_exercise_index": self.next_exercise_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletionState:
        """Crear desde diccionario."""
        progress = data["progress"]
        index = data["next_exercise_index"]
        if not isinstance(progress, list) or not all(isinstance(p, bool) for p in progress):
            raise ValueError("progress must be a list of booleans")
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValueError("next_exercise_index must be an integer")
        return cls(progress=list(progress), next_exercise_index=index)

    def save(self, path: Path) -> None:
        """Guardar estado a disco."""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        tmp_path.replace(path)

    @classmethod
    def load(cls, path: Path) -> CompletionState:
        """Cargar estado desde disco."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("state file must contain an object")
        return cls.from_dict(data)

    @property
    def total(self) -> int:
        return len(self.progress)

    @property
    def done_count(self) -> int:
        return sum(self.progress)

    def mark_done(self, index: int) -> None:
        """Marcar ejercicio como terminado."""
        self.progress[index] = True

    def reset(self, index: int) -> None:
        """Volver a marcar un ejercicio como pendiente.

        Si queda antes del siguiente, la próxima pasada empieza por él.
        """
        self.progress[index] = False
        self.next_exercise_index = min(self.next_exercise_index, index)

    def set_next(self, index: int) -> None:
        """Cambiar el ejercicio por el que continuar."""
        if not 0 <= index <= len(self.progress):
            raise IndexError(f"Exercise index out of range: {index}")
        self.next_exercise_index = index

    def first_pending(self) -> int:
        """Primer ejercicio sin terminar, o el total si no queda ninguno."""
        for index, done in enumerate(self.progress):
            if not done:
                return index
        return len(self.progress)

    def pending_indices(self) -> list[int]:
        """Ejercicios sin terminar a partir del siguiente, en orden."""
        return [
            index
            for index in range(self.next_exercise_index, len(self.progress))
            if not self.progress[index]
        ]

    def pending_exercises(self, catalog: Catalog) -> list[Exercise]:
        """Ejercicios pendientes de verificar, en orden de catálogo."""
        return [catalog[index] for index in self.pending_indices()]

    def apply_outcome(
        self,
        pending: Sequence[Exercise],
        outcome: VerifyOutcome,
        catalog: Catalog,
    ) -> None:
        """Aplicar el resultado de una pasada de verificación.

        Todo ejercicio pendiente anterior al que falló queda terminado.
        """
        for exercise in pending:
            if isinstance(outcome, Failed) and exercise == outcome.exercise:
                break
            self.mark_done(catalog.index_of(exercise))

        if isinstance(outcome, Failed):
            self.next_exercise_index = catalog.index_of(outcome.exercise)
        elif isinstance(outcome, AllDone):
            self.next_exercise_index = self.first_pending()
