"""
Unit tests for the render CLI.

Tests cover:
- Source output from a file and from stdin
- Rule record output
- Validation and error exit codes
"""

import io
import json
import logging

import pytest

from app.compiler.interchange import expression_to_dict
from cli.render import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def avg_file(tmp_path, avg_call):
    path = tmp_path / "avg.json"
    path.write_text(json.dumps(expression_to_dict(avg_call)), encoding="utf-8")
    return path


class TestRenderSource:
    """Tests for plain source output."""

    def test_from_file(self, avg_file, capsys):
        assert main([str(avg_file)]) == 0
        assert capsys.readouterr().out.strip() == 'avg((price + 10), "x")'

    def test_from_stdin(self, monkeypatch, capsys, price_plus_ten):
        document = json.dumps(expression_to_dict(price_plus_ten))
        monkeypatch.setattr("sys.stdin", io.StringIO(document))

        assert main([]) == 0
        assert capsys.readouterr().out.strip() == "(price + 10)"


class TestRenderRule:
    """Tests for rule record output."""

    def test_rule_record(self, avg_file, capsys):
        assert main([str(avg_file), "--rule-id", "r1", "--priority", "5"]) == 0

        record = json.loads(capsys.readouterr().out)
        assert record["id"] == "r1"
        assert record["priority"] == 5
        assert record["source"] == 'avg((price + 10), "x")'
        assert record["tree"]["type"] == "function"


class TestRenderErrors:
    """Tests for failure exit codes."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        assert main([str(path)]) == 1

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "latin1.json"
        path.write_bytes(b"\xff\xfe{")

        assert main([str(path)]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_invalid_document(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"type": "empty"}), encoding="utf-8")

        assert main([str(path)]) == 1
        assert "Invalid expression document" in capsys.readouterr().err

    def test_arity_error(self, tmp_path, capsys):
        path = tmp_path / "unary.json"
        doc = {
            "type": "operation",
            "operator": "-",
            "return": "number",
            "operands": [
                {"type": "literal", "value": 1, "return": "number"},
                {"type": "literal", "value": 2, "return": "number"},
            ],
        }
        path.write_text(json.dumps(doc), encoding="utf-8")

        assert main([str(path)]) == 1
        assert "requires 1 operand" in capsys.readouterr().err

    def test_validate_flag(self, tmp_path, capsys):
        path = tmp_path / "mixed.json"
        doc = {
            "type": "operation",
            "operator": "+",
            "return": "number",
            "operands": [
                {"type": "literal", "value": 1, "return": "number"},
                {"type": "literal", "value": "2", "return": "string"},
            ],
        }
        path.write_text(json.dumps(doc), encoding="utf-8")

        assert main([str(path)]) == 0
        assert capsys.readouterr().out.strip() == '(1 + "2")'

        assert main([str(path), "--validate"]) == 1
        assert "expects number operands" in capsys.readouterr().err
