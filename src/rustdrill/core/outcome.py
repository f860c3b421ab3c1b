"""Resultado de una pasada de verificación."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .exercise import Exercise


@dataclass(frozen=True)
class AllDone:
    """Todos los ejercicios pendientes quedaron terminados."""


@dataclass(frozen=True)
class Failed:
    """La pasada se detuvo en este ejercicio."""

    exercise: Exercise


VerifyOutcome = Union[AllDone, Failed]
