"""Tests for the lint command line."""
from __future__ import annotations

import io
import json

import lint_cli
from services.lint.schema_data import MATHML_NAMESPACE

CLEAN = f'<math xmlns="{MATHML_NAMESPACE}"><mi>x</mi></math>'


def test_clean_file_exits_zero(tmp_path, capsys) -> None:
    path = tmp_path / "eq.mml"
    path.write_text(CLEAN, encoding="utf-8")
    assert lint_cli.main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "MATHML LINT REPORT" in out
    assert "[L000]" in out


def test_invalid_xml_exits_one(tmp_path, capsys) -> None:
    path = tmp_path / "broken.mml"
    path.write_text("<math><mi>x</math>", encoding="utf-8")
    assert lint_cli.main([str(path)]) == 1
    assert "ERRORS (1)" in capsys.readouterr().out


def test_json_output(tmp_path, capsys) -> None:
    path = tmp_path / "eq.mml"
    path.write_text(CLEAN, encoding="utf-8")
    lint_cli.main([str(path), "--json", "--profile", "strict-core"])
    data = json.loads(capsys.readouterr().out)
    assert data["profile"] == "core-mathml3"
    assert data["findings"][0]["code"] == "L000"


def test_strict_renderer_attributes_from_stdin(monkeypatch, capsys) -> None:
    source = f'<math xmlns="{MATHML_NAMESPACE}"><mi data-mjx-texclass="ORD">x</mi></math>'
    monkeypatch.setattr("sys.stdin", io.StringIO(source))
    assert lint_cli.main(["-", "--strict-renderer-attributes"]) == 0
    assert "[L020]" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys) -> None:
    assert lint_cli.main([str(tmp_path / "missing.mml")]) == 2
    assert "Cannot read" in capsys.readouterr().err
