"""Ejecutores del toolchain de Rust, uno por modo de ejercicio."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from ..core.exercise import Exercise, Mode, RunResult

logger = logging.getLogger(__name__)

CLIPPY_MANIFEST = """\
[package]
name = "{name}"
version = "0.0.1"
edition = "2021"

[[bin]]
name = "{name}"
path = "{path}"
"""


class ToolchainError(Exception):
    """No se pudo invocar el toolchain."""

    pass


class ModeRunner(ABC):
    """Interfaz base para compilar/ejecutar/probar un ejercicio."""

    def __init__(self, timeout: int = 120) -> None:
        """Inicializar ejecutor."""
        self.timeout = timeout

    @property
    @abstractmethod
    def mode(self) -> Mode:
        """Modo soportado."""
        pass

    @property
    @abstractmethod
    def verb(self) -> str:
        """Texto del spinner mientras corre ("Compiling", ...)."""
        pass

    @property
    @abstractmethod
    def past_verb(self) -> str:
        """Para "Successfully <past_verb> <exercise>!"."""
        pass

    # Mostrar la salida del programa junto al banner de éxito
    shows_output: bool = False

    @abstractmethod
    def success_message(self, no_emoji: bool = False) -> str:
        """Mensaje del banner cuando el ejercicio compila."""
        pass

    def failure_message(self, exercise: Exercise) -> str:
        """Aviso cuando la invocación termina con error."""
        return f"{self.verb} of {exercise} failed! Please try again. Here's the output:"

    @abstractmethod
    def run(self, exercise: Exercise) -> RunResult:
        """Invocar el toolchain y retornar resultado."""
        pass

    def _exec(self, cmd: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
        """Ejecutar un comando capturando la salida en bytes."""
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                timeout=self.timeout,
                cwd=cwd,
            )
        except FileNotFoundError as e:
            raise ToolchainError(f"Command not found: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise ToolchainError(f"Timeout: {cmd[0]} took more than {self.timeout}s") from e

    def _build(self, exercise: Exercise, binary: Path, *extra: str) -> subprocess.CompletedProcess:
        """Compilar con rustc a un binario temporal."""
        return self._exec(
            ["rustc", str(exercise.path), "-o", str(binary), "--color", "always", *extra]
        )


class CompileRunner(ModeRunner):
    """Compila y ejecuta el binario."""

    @property
    def mode(self) -> Mode:
        return Mode.COMPILE

    @property
    def verb(self) -> str:
        return "Running"

    @property
    def past_verb(self) -> str:
        return "ran"

    shows_output = True

    def failure_message(self, exercise: Exercise) -> str:
        return f"Ran {exercise} with errors"

    def success_message(self, no_emoji: bool = False) -> str:
        return "The code is compiling!"

    def run(self, exercise: Exercise) -> RunResult:
        with tempfile.TemporaryDirectory() as tmpdir:
            binary = Path(tmpdir) / "exercise"
            build = self._build(exercise, binary)
            if build.returncode != 0:
                return RunResult(False, build.stdout, build.stderr)

            result = self._exec([str(binary)])
            return RunResult(result.returncode == 0, result.stdout, result.stderr)


class TestRunner(ModeRunner):
    """Compila el arnés de tests y lo ejecuta."""

    # Evitar que pytest intente recolectar esta clase
    __test__ = False

    @property
    def mode(self) -> Mode:
        return Mode.TEST

    @property
    def verb(self) -> str:
        return "Testing"

    @property
    def past_verb(self) -> str:
        return "tested"

    def success_message(self, no_emoji: bool = False) -> str:
        return "The code is compiling, and the tests pass!"

    def run(self, exercise: Exercise) -> RunResult:
        with tempfile.TemporaryDirectory() as tmpdir:
            binary = Path(tmpdir) / "exercise"
            build = self._build(exercise, binary, "--test")
            if build.returncode != 0:
                return RunResult(False, build.stdout, build.stderr)

            result = self._exec([str(binary), "--show-output", "--test-threads", "1"])
            return RunResult(result.returncode == 0, result.stdout, result.stderr)


class ClippyRunner(ModeRunner):
    """Solo compila y pasa clippy; los avisos cuentan como fallo."""

    @property
    def mode(self) -> Mode:
        return Mode.CLIPPY

    @property
    def verb(self) -> str:
        return "Compiling"

    @property
    def past_verb(self) -> str:
        return "compiled"

    def success_message(self, no_emoji: bool = False) -> str:
        if no_emoji:
            return "The code is compiling, and Clippy is happy!"
        return "The code is compiling, and 📎 Clippy 📎 is happy!"

    def run(self, exercise: Exercise) -> RunResult:
        with tempfile.TemporaryDirectory() as tmpdir:
            work_dir = Path(tmpdir)
            manifest = work_dir / "Cargo.toml"
            manifest.write_text(
                CLIPPY_MANIFEST.format(
                    name=exercise.name.replace("-", "_"),
                    path=exercise.path.resolve().as_posix(),
                ),
                encoding="utf-8",
            )
            result = self._exec(
                [
                    "cargo",
                    "clippy",
                    "--manifest-path",
                    str(manifest),
                    "--target-dir",
                    str(work_dir / "target"),
                    "--",
                    "-D",
                    "warnings",
                ],
                cwd=work_dir,
            )
            return RunResult(result.returncode == 0, result.stdout, result.stderr)


RUNNERS: dict[Mode, type[ModeRunner]] = {
    Mode.COMPILE: CompileRunner,
    Mode.TEST: TestRunner,
    Mode.CLIPPY: ClippyRunner,
}


def get_runner(mode: Mode, timeout: int = 120) -> ModeRunner:
    """Factory para obtener el ejecutor de un modo."""
    return RUNNERS[mode](timeout=timeout)


def default_runners(timeout: int = 120) -> dict[Mode, ModeRunner]:
    """Un ejecutor por modo."""
    return {mode: get_runner(mode, timeout) for mode in Mode}
