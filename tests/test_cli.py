"""Tests para configuración y línea de comandos."""

import json
from pathlib import Path

import pytest

from rustdrill import config as config_module
from rustdrill.__main__ import main
from rustdrill.config import Config, set_config
from rustdrill.core.exercise import RunResult
from rustdrill.toolchain.runners import CompileRunner

INFO = """\
exercises:
  - name: intro1
    path: intro1.rs
    mode: compile
    hint: Just remove the marker.
  - name: tests1
    path: tests1.rs
    mode: test
    hint: Make the assertion pass.
"""


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Config:
    (tmp_path / "info.yaml").write_text(INFO, encoding="utf-8")
    # Se restaura la instancia global al terminar
    monkeypatch.setattr(config_module, "_config", None)
    config = Config(exercises_root=tmp_path, data_dir=tmp_path / "data")
    set_config(config)
    return config


def write_state(config: Config, progress: list[bool], next_index: int) -> None:
    config.state_file.parent.mkdir(parents=True, exist_ok=True)
    config.state_file.write_text(
        json.dumps({"progress": progress, "next_exercise_index": next_index}),
        encoding="utf-8",
    )


class TestConfig:
    """Tests para la configuración."""

    def test_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Las variables de entorno se leen una sola vez aquí."""
        monkeypatch.setenv("RUSTDRILL_ROOT", str(tmp_path))
        monkeypatch.setenv("RUSTDRILL_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("RUSTDRILL_TIMEOUT", "30")
        monkeypatch.setenv("NO_EMOJI", "1")

        config = Config.from_env()

        assert config.info_file == tmp_path / "info.yaml"
        assert config.state_file == tmp_path / "data" / "state.json"
        assert config.toolchain_timeout == 30
        assert config.no_emoji

    def test_emoji_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Sin NO_EMOJI se usan emojis."""
        monkeypatch.delenv("NO_EMOJI", raising=False)

        assert not Config.from_env().no_emoji


class TestCli:
    """Tests para los subcomandos."""

    def test_hint(self, workspace: Config, capsys: pytest.CaptureFixture) -> None:
        """hint muestra la pista."""
        assert main(["hint", "tests1"]) == 0
        assert "Make the assertion pass." in capsys.readouterr().out

    def test_unknown_exercise(self, workspace: Config, capsys: pytest.CaptureFixture) -> None:
        """Un nombre desconocido termina con error."""
        assert main(["hint", "nope"]) == 1
        assert "No exercise named 'nope'" in capsys.readouterr().out

    def test_reset(self, workspace: Config) -> None:
        """reset vuelve a dejar pendiente el ejercicio."""
        write_state(workspace, [True, True], 2)

        assert main(["reset", "intro1"]) == 0

        data = json.loads(workspace.state_file.read_text(encoding="utf-8"))
        assert data["progress"] == [False, True]
        assert data["next_exercise_index"] == 0

    def test_reset_then_verify_runs_it_again(self, workspace: Config, monkeypatch: pytest.MonkeyPatch) -> None:
        """Tras reset, verify vuelve a invocar el toolchain para ese ejercicio."""
        (workspace.exercises_root / "intro1.rs").write_text("fn main() {}\n", encoding="utf-8")
        write_state(workspace, [True, True], 2)
        invoked: list[str] = []

        def fake_run(self, exercise):
            invoked.append(exercise.name)
            return RunResult(True)

        monkeypatch.setattr(CompileRunner, "run", fake_run)

        assert main(["reset", "intro1"]) == 0
        assert main(["verify"]) == 0

        assert invoked == ["intro1"]
        data = json.loads(workspace.state_file.read_text(encoding="utf-8"))
        assert data == {"progress": [True, True], "next_exercise_index": 2}

    def test_verify_when_everything_is_done(self, workspace: Config, capsys: pytest.CaptureFixture) -> None:
        """Con todo hecho verify no invoca el toolchain."""
        write_state(workspace, [True, True], 2)

        assert main(["verify"]) == 0
        assert "You completed all exercises!" in capsys.readouterr().out

    def test_missing_catalog(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Sin info.yaml se informa y se sale con 1."""
        monkeypatch.setattr(
            config_module, "_config", Config(exercises_root=tmp_path, data_dir=tmp_path / "data")
        )

        assert main(["list"]) == 1
