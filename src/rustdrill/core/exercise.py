"""Modelos de datos para ejercicios."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

# Marca que el alumno borra para indicar que terminó el ejercicio
MARKER_RE = re.compile(r"^[ \t]*///?[ \t]*I[ \t]+AM[ \t]+NOT[ \t]+DONE", re.MULTILINE)
CONTEXT = 2


class Mode(str, Enum):
    """Modo de verificación de un ejercicio."""

    TEST = "test"
    COMPILE = "compile"
    CLIPPY = "clippy"


@dataclass(frozen=True)
class ContextLine:
    """Línea de código alrededor de la marca."""

    number: int
    line: str
    important: bool = False


@dataclass(frozen=True)
class ExerciseState:
    """Estado del código fuente: hecho o pendiente con contexto."""

    context: tuple[ContextLine, ...] = ()

    @property
    def done(self) -> bool:
        return not self.context

    @classmethod
    def pending(cls, context: list[ContextLine]) -> ExerciseState:
        return cls(context=tuple(context))


DONE = ExerciseState()


@dataclass(frozen=True)
class RunResult:
    """Resultado de invocar el toolchain sobre un ejercicio."""

    exit_success: bool
    stdout: bytes = b""
    stderr: bytes = b""


@dataclass(frozen=True)
class Exercise:
    """Un ejercicio del catálogo."""

    name: str
    path: Path
    mode: Mode
    hint: str = ""
    # Ruta tal como aparece en el catálogo (para mostrar)
    display_path: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.display_path or str(self.path)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_path: Path | None = None) -> Exercise:
        """Crear desde diccionario."""
        raw_path = str(data["path"])
        path = Path(raw_path)
        if base_path is not None and not path.is_absolute():
            path = base_path / path
        return cls(
            name=str(data["name"]),
            path=path,
            mode=Mode(data.get("mode", "compile")),
            hint=str(data.get("hint", "")).strip(),
            display_path=raw_path,
        )

    def read_source(self) -> str:
        """Leer el código fuente del ejercicio."""
        return self.path.read_text(encoding="utf-8")

    def state(self) -> ExerciseState:
        """Determinar si el ejercicio sigue marcado como no terminado."""
        context = find_marker_context(self.read_source())
        if not context:
            return DONE
        return ExerciseState.pending(context)


def find_marker_context(source: str) -> list[ContextLine]:
    """Buscar la primera marca y devolver las líneas que la rodean.

    Devuelve una lista vacía si el código ya no contiene la marca.
    """
    match = MARKER_RE.search(source)
    if match is None:
        return []

    # Mismo criterio de fin de línea que el índice de la marca
    lines = [line.removesuffix("\r") for line in source.removesuffix("\n").split("\n")]
    marker_index = source.count("\n", 0, match.start())
    start = max(marker_index - CONTEXT, 0)
    end = min(marker_index + CONTEXT + 1, len(lines))

    return [
        ContextLine(
            number=index + 1,
            line=lines[index],
            important=index == marker_index,
        )
        for index in range(start, end)
    ]
