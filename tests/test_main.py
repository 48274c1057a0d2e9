"""Unit tests for the command line interface."""

import json

import pytest

from tests.conftest import SAMPLE_TEXT
from textmarks import __version__
from textmarks.main import build_parser, main
from textmarks.services.import_export import DocumentExporter


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "text.txt"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def export_file(tmp_path, sample_state):
    return DocumentExporter().export_json_file(sample_state, tmp_path / "doc.json")


def run(capsys, *argv):
    status = main([str(arg) for arg in argv])
    captured = capsys.readouterr()
    return status, captured


class TestParser:
    """Test cases for build_parser()."""

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_rejects_unknown_mode(self, text_file):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["snap", str(text_file), "0", "1", "-m", "line"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert __version__ in capsys.readouterr().out


class TestTokenizeCommand:
    """Test cases for the tokenize command."""

    def test_prints_tokens(self, capsys, text_file):
        status, captured = run(capsys, "tokenize", text_file)
        assert status == 0
        tokens = json.loads(captured.out)
        assert [t["text"] for t in tokens] == ["вы", " ", "мне", " ", "позволите"]
        assert tokens[2] == {
            "text": "мне",
            "startIndex": 3,
            "endIndex": 6,
            "type": "word",
        }


class TestSnapCommand:
    """Test cases for the snap command."""

    def test_word_mode_by_default(self, capsys, text_file):
        status, captured = run(capsys, "snap", text_file, 4, 5)
        assert status == 0
        assert json.loads(captured.out) == {"start": 3, "end": 6, "text": "мне"}

    def test_character_mode(self, capsys, text_file):
        _, captured = run(capsys, "snap", text_file, 4, 5, "--mode", "character")
        assert json.loads(captured.out) == {"start": 4, "end": 5, "text": "н"}

    def test_missing_file(self, capsys, tmp_path):
        status, captured = run(capsys, "snap", tmp_path / "nope.txt", 0, 1)
        assert status == 1
        assert captured.err.startswith("textmarks:")


class TestSegmentsCommand:
    """Test cases for the segments command."""

    def test_prints_segments(self, capsys, export_file):
        status, captured = run(capsys, "segments", export_file)
        assert status == 0
        segments = json.loads(captured.out)
        assert "".join(s["text"] for s in segments) == SAMPLE_TEXT
        assert [m["markId"] for m in segments[1]["marks"]] == [
            "outer",
            "middle",
            "inner",
        ]

    def test_malformed_export(self, capsys, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"marks": []}', encoding="utf-8")
        status, captured = run(capsys, "segments", bad)
        assert status == 1
        assert "missing required field 'text'" in captured.err
        assert captured.out == ""


class TestStatsCommand:
    """Test cases for the stats command."""

    def test_type_stats(self, capsys, export_file):
        status, captured = run(capsys, "stats", export_file)
        assert status == 0
        data = json.loads(captured.out)
        assert data["total"] == 3
        assert [s["count"] for s in data["types"]] == [1, 1, 1]
        assert data["categories"] == []

    def test_category_stats(self, capsys, export_file, tmp_path):
        categories = tmp_path / "categories.json"
        categories.write_text(
            json.dumps([{"name": "Motivation", "typeIds": ["t1", "t2"]}]),
            encoding="utf-8",
        )
        _, captured = run(capsys, "stats", export_file, "-c", categories)
        data = json.loads(captured.out)
        assert data["categories"][0]["categoryName"] == "Motivation"
        assert data["categories"][0]["count"] == 2


class TestImportExportCommands:
    """Test cases for the import and export commands."""

    def test_import_then_export(self, capsys, export_file, tmp_path):
        db = tmp_path / "marks.db"
        status, _ = run(capsys, "import", export_file, "--db", db, "--name", "doc")
        assert status == 0

        out = tmp_path / "again.json"
        status, _ = run(capsys, "export", out, "--db", db, "--name", "doc")
        assert status == 0
        original = json.loads(export_file.read_text(encoding="utf-8"))
        exported = json.loads(out.read_text(encoding="utf-8"))
        assert exported["marks"] == original["marks"]
        assert exported["annotationTypes"] == original["annotationTypes"]

    def test_export_unknown_document(self, capsys, tmp_path):
        status, captured = run(
            capsys, "export", tmp_path / "out.json", "--db", tmp_path / "marks.db"
        )
        assert status == 1
        assert "does not exist" in captured.err


class TestStatsCategoriesErrors:
    """Test cases for invalid categories files given to the stats command."""

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"name": "A", "typeIds": ["t1"]}',
            '[{"typeIds": ["t1"]}]',
            '["A"]',
        ],
    )
    def test_invalid_categories_exit_1(self, capsys, export_file, tmp_path, content):
        categories = tmp_path / "categories.json"
        categories.write_text(content, encoding="utf-8")
        status, captured = run(capsys, "stats", export_file, "-c", categories)
        assert status == 1
        assert "Invalid categories file" in captured.err
        assert captured.out == ""
