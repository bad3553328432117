"""Tests for the command-line interface."""

import io
import json

from doc_redactor.cli import main


def _run(monkeypatch, capsys, argv, stdin=""):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
    code = main(argv)
    return code, capsys.readouterr()


def test_redact_json(monkeypatch, capsys):
    code, out = _run(monkeypatch, capsys, ["redact"], "Contact: alice@example.com for queries.")
    assert code == 0
    data = json.loads(out.out)
    assert data["text"] == "Contact: [REDACTED:EMAIL#1] for queries."
    assert data["annotations"][0]["id"] == "EMAIL#1"
    assert data["summary"] == {"email": 1, "total_redactions": 1}


def test_redact_text_only(monkeypatch, capsys):
    _, out = _run(monkeypatch, capsys, ["redact", "--text-only"], "SSN 123-45-6789")
    assert out.out == "SSN [REDACTED:SSN#1]"


def test_redact_then_restore(monkeypatch, capsys):
    original = "Mail bob@test.org or call 415-555-1234."
    _, out = _run(monkeypatch, capsys, ["redact"], original)
    _, restored = _run(monkeypatch, capsys, ["restore"], out.out)
    assert restored.out == original


def test_skip_types_option(monkeypatch, capsys):
    _, out = _run(monkeypatch, capsys,
                  ["--skip-types", "email", "redact", "--text-only"], "bob@test.org")
    assert out.out == "bob@test.org"


def test_flag(monkeypatch, capsys):
    _, out = _run(monkeypatch, capsys, ["flag"], "This memo is privileged.")
    data = json.loads(out.out)
    assert data["flags"][0]["type"] == "PRIVILEGE"
    assert data["summary"]["risk_level"] == "MEDIUM"


def test_patterns_listing(monkeypatch, capsys):
    _, out = _run(monkeypatch, capsys, ["patterns"])
    rows = json.loads(out.out)
    assert rows[0]["type"] == "SSN"
    assert {"CREDIT_CARD", "EMAIL", "DATE"} <= {r["type"] for r in rows}


def test_config_error_exit_code(monkeypatch, capsys, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("redaction:\n  custom_patterns:\n    - type: X\n      regex: '('\n")
    code, out = _run(monkeypatch, capsys, ["--config", str(path), "patterns"])
    assert code == 2
    assert "invalid regex" in out.err
