"""Configuración global de la aplicación."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_data_dir


@dataclass(frozen=True)
class Config:
    """Configuración inmutable de la aplicación."""

    # Ejercicios
    exercises_root: Path = field(default_factory=Path.cwd)
    info_file: Path | None = None

    # Toolchain
    toolchain_timeout: int = 120

    # Salida
    no_emoji: bool = False
    log_level: str = "WARNING"

    # Paths
    data_dir: Path = Path(user_data_dir("rustdrill"))
    state_file: Path = field(init=False)

    def __post_init__(self) -> None:
        if self.info_file is None:
            object.__setattr__(self, "info_file", self.exercises_root / "info.yaml")
        object.__setattr__(self, "state_file", self.data_dir / "state.json")

    @classmethod
    def from_env(cls) -> Config:
        """Crear configuración desde variables de entorno."""
        root = os.getenv("RUSTDRILL_ROOT")
        info = os.getenv("RUSTDRILL_INFO")
        data_dir = os.getenv("RUSTDRILL_DATA_DIR")

        return cls(
            exercises_root=Path(root) if root else Path.cwd(),
            info_file=Path(info) if info else None,
            toolchain_timeout=int(os.getenv("RUSTDRILL_TIMEOUT", "120")),
            no_emoji=os.getenv("NO_EMOJI") is not None,
            log_level=os.getenv("RUSTDRILL_LOG_LEVEL", "WARNING").upper(),
            data_dir=Path(data_dir) if data_dir else Path(user_data_dir("rustdrill")),
        )

    def ensure_dirs(self) -> None:
        """Crear directorios necesarios si no existen."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Instancia global
_config: Config | None = None


def get_config() -> Config:
    """Obtener instancia de configuración (singleton)."""
    global _config
    if _config is None:
        _config = Config.from_env()
        _config.ensure_dirs()
    return _config


def set_config(config: Config) -> None:
    """Establecer configuración (para tests)."""
    global _config
    _config = config
    _config.ensure_dirs()
