"""Carga del catálogo de ejercicios."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import yaml

from .exercise import Exercise

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Error al cargar el catálogo."""

    pass


class Catalog(Sequence[Exercise]):
    """Secuencia ordenada e inmutable de ejercicios."""

    INFO_FILE = "info.yaml"

    def __init__(self, exercises: Sequence[Exercise]) -> None:
        self._exercises = tuple(exercises)
        self._by_name = {exercise.name: index for index, exercise in enumerate(self._exercises)}
        if len(self._by_name) != len(self._exercises):
            raise CatalogError("Duplicate exercise names in catalog")

    def __getitem__(self, index):  # type: ignore[override]
        return self._exercises[index]

    def __len__(self) -> int:
        return len(self._exercises)

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def find(self, name: str) -> Exercise | None:
        """Obtener ejercicio por nombre."""
        index = self._by_name.get(name)
        return None if index is None else self._exercises[index]

    def index_of(self, exercise: Exercise) -> int:
        """Posición del ejercicio en el catálogo (su identidad)."""
        try:
            return self._by_name[exercise.name]
        except KeyError:
            raise CatalogError(f"Exercise not in catalog: {exercise.name}") from None

    @classmethod
    def load(cls, path: Path) -> Catalog:
        """Cargar catálogo desde disco."""
        path = Path(path)
        if not path.exists():
            raise CatalogError(f"Catalog file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise CatalogError(f"Invalid catalog file {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("exercises"), list):
            raise CatalogError(f"Catalog file {path} has no 'exercises' list")

        exercises = []
        for entry in data["exercises"]:
            try:
                exercises.append(Exercise.from_dict(entry, base_path=path.parent))
            except (KeyError, TypeError, ValueError) as e:
                raise CatalogError(f"Invalid exercise entry {entry!r}: {e}") from e

        logger.debug("Loaded %d exercises from %s", len(exercises), path)
        return cls(exercises)
