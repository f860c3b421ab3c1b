"""Core: ejercicios, catálogo, estado y persistencia."""

from .catalog import Catalog, CatalogError
from .exercise import ContextLine, Exercise, ExerciseState, Mode, RunResult
from .outcome import AllDone, Failed, VerifyOutcome
from .persistence import StateStore
from .state import CompletionState

__all__ = [
    "Catalog",
    "CatalogError",
    "ContextLine",
    "Exercise",
    "ExerciseState",
    "Mode",
    "RunResult",
    "AllDone",
    "Failed",
    "VerifyOutcome",
    "StateStore",
    "CompletionState",
]
