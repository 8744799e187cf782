"""Tests for the runner entry point."""

import io
import json

from timekeeper.runner.__main__ import main


def test_main_round_trip(monkeypatch, capsys):
    request = {"command": "create_category", "args": {"name": "Work", "color_hex": "#4ECDC4"}}
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(request)))

    assert main() == 0
    output = json.loads(capsys.readouterr().out)
    assert output["success"] is True
    assert output["result"]["name"] == "Work"


def test_main_invalid_json(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))

    assert main() == 1
    output = json.loads(capsys.readouterr().out)
    assert output["success"] is False
    assert output["error_type"] == "ValidationError"


def test_main_failed_command_exits_nonzero(monkeypatch, capsys):
    request = {"command": "stop", "args": {"session_id": "missing"}}
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(request)))

    assert main() == 1
    assert json.loads(capsys.readouterr().out)["error_type"] == "RecordNotFoundError"
