"""Tests para ejercicios y catálogo."""

from pathlib import Path

import pytest

from rustdrill.core.catalog import Catalog, CatalogError
from rustdrill.core.exercise import ContextLine, Exercise, Mode, find_marker_context


SOURCE_PENDING = """\
fn main() {
    let x = 5;
    // I AM NOT DONE
    println!("{}", x);
}
"""

SOURCE_DONE = """\
fn main() {
    let x = 5;
    println!("{}", x);
}
"""


class TestMarker:
    """Tests para la detección de la marca."""

    def test_no_marker_means_done(self) -> None:
        """Sin marca no hay contexto."""
        assert find_marker_context(SOURCE_DONE) == []

    def test_context_around_marker(self) -> None:
        """Devuelve dos líneas a cada lado, numeradas desde 1."""
        context = find_marker_context(SOURCE_PENDING)

        assert [c.number for c in context] == [1, 2, 3, 4, 5]
        assert [c.important for c in context] == [False, False, True, False, False]
        assert context[2] == ContextLine(3, "    // I AM NOT DONE", True)

    def test_context_clipped_at_start(self) -> None:
        """La marca en la primera línea no produce números negativos."""
        context = find_marker_context("// I AM NOT DONE\nfn main() {}\n")

        assert [c.number for c in context] == [1, 2]
        assert context[0].important

    def test_marker_after_blank_lines(self) -> None:
        """Las líneas vacías previas no desplazan la línea marcada."""
        context = find_marker_context("fn a() {}\n\n\n/// I  AM NOT   DONE\n")

        important = [c for c in context if c.important]
        assert important == [ContextLine(4, "/// I  AM NOT   DONE", True)]

    def test_marker_must_be_a_comment_line(self) -> None:
        """Una cadena con el texto no cuenta como marca."""
        assert find_marker_context('let s = "I AM NOT DONE";\n') == []

    def test_other_line_breaks_do_not_shift_marker(self) -> None:
        """Solo \\n separa líneas; \\r\\n, \\x0c y \\u2028 no desplazan la marca."""
        source = "fn a() {}\r\n// x\x0cy\u2028z\r\n// I AM NOT DONE\r\nfn main() {}\r\n"

        context = find_marker_context(source)

        assert [c.number for c in context] == [1, 2, 3, 4]
        assert context[2] == ContextLine(3, "// I AM NOT DONE", True)
        assert context[1].line == "// x\x0cy\u2028z"

    def test_exercise_state_reads_file(self, tmp_path: Path) -> None:
        """El estado se calcula desde el fichero."""
        source = tmp_path / "ex1.rs"
        source.write_text(SOURCE_PENDING, encoding="utf-8")
        exercise = Exercise(name="ex1", path=source, mode=Mode.COMPILE)

        state = exercise.state()
        assert not state.done
        assert len(state.context) == 5

        source.write_text(SOURCE_DONE, encoding="utf-8")
        assert exercise.state().done

    def test_missing_source_propagates(self, tmp_path: Path) -> None:
        """Un fichero inexistente es un error de E/S."""
        exercise = Exercise(name="ghost", path=tmp_path / "ghost.rs", mode=Mode.TEST)

        with pytest.raises(FileNotFoundError):
            exercise.state()


class TestCatalog:
    """Tests para la carga del catálogo."""

    def write_info(self, tmp_path: Path, body: str) -> Path:
        info = tmp_path / "info.yaml"
        info.write_text(body, encoding="utf-8")
        return info

    def test_load_catalog(self, tmp_path: Path) -> None:
        """Carga en orden y resuelve rutas relativas."""
        info = self.write_info(
            tmp_path,
            """
exercises:
  - name: variables1
    path: exercises/variables/variables1.rs
    mode: compile
    hint: |
      Declare the variable with `let`.
  - name: tests1
    path: exercises/tests/tests1.rs
    mode: test
    hint: ""
""",
        )

        catalog = Catalog.load(info)

        assert len(catalog) == 2
        assert [e.name for e in catalog] == ["variables1", "tests1"]
        assert catalog[0].mode is Mode.COMPILE
        assert catalog[0].path == tmp_path / "exercises/variables/variables1.rs"
        assert str(catalog[0]) == "exercises/variables/variables1.rs"
        assert catalog[0].hint == "Declare the variable with `let`."
        assert catalog.find("tests1") is catalog[1]
        assert catalog.index_of(catalog[1]) == 1
        assert catalog.find("nope") is None

    def test_missing_file(self, tmp_path: Path) -> None:
        """Sin fichero, error de catálogo."""
        with pytest.raises(CatalogError):
            Catalog.load(tmp_path / "info.yaml")

    def test_unknown_mode(self, tmp_path: Path) -> None:
        """Un modo desconocido se rechaza."""
        info = self.write_info(
            tmp_path,
            "exercises:\n  - {name: a, path: a.rs, mode: bench}\n",
        )

        with pytest.raises(CatalogError):
            Catalog.load(info)

    def test_duplicate_names(self, tmp_path: Path) -> None:
        """Los nombres identifican ejercicios y no se pueden repetir."""
        info = self.write_info(
            tmp_path,
            "exercises:\n"
            "  - {name: a, path: a.rs, mode: compile}\n"
            "  - {name: a, path: b.rs, mode: test}\n",
        )

        with pytest.raises(CatalogError):
            Catalog.load(info)

    def test_not_a_catalog(self, tmp_path: Path) -> None:
        """YAML válido pero sin lista de ejercicios."""
        info = self.write_info(tmp_path, "- just\n- a list\n")

        with pytest.raises(CatalogError):
            Catalog.load(info)

    def test_exercise_serialization(self) -> None:
        """Crear ejercicio desde diccionario."""
        exercise = Exercise.from_dict(
            {"name": "clippy1", "path": "exercises/clippy1.rs", "mode": "clippy", "hint": "x"},
            base_path=Path("/course"),
        )

        assert exercise.name == "clippy1"
        assert exercise.mode is Mode.CLIPPY
        assert exercise.hint == "x"
        assert str(exercise) == "exercises/clippy1.rs"
        assert exercise.path == Path("/course/exercises/clippy1.rs")
