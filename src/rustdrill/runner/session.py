"""Orquesta una pasada de verificación y guarda el progreso."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rich.console import Console

from ..config import Config
from ..core.catalog import Catalog
from ..core.exercise import Mode
from ..core.outcome import VerifyOutcome
from ..core.persistence import StateStore
from ..toolchain.runners import ModeRunner, default_runners
from .verify import verify

logger = logging.getLogger(__name__)


def verify_pending(
    config: Config,
    catalog: Catalog,
    store: StateStore,
    verbose: bool = False,
    show_hints: bool = False,
    *,
    runners: Mapping[Mode, ModeRunner] | None = None,
    console: Console | None = None,
) -> VerifyOutcome:
    """Verificar los ejercicios pendientes y aplicar el resultado al estado."""
    state = store.load()
    pending = state.pending_exercises(catalog)
    logger.info(
        "Verifying %d pending exercises from #%d", len(pending), state.next_exercise_index
    )

    if runners is None:
        runners = default_runners(config.toolchain_timeout)

    outcome = verify(
        pending,
        (state.done_count, state.total),
        verbose,
        show_hints,
        runners=runners,
        console=console,
        no_emoji=config.no_emoji,
    )

    state.apply_outcome(pending, outcome, catalog)
    store.save(state)
    return outcome
