import json

import pytest

from pomodoro.cli import EXIT_USAGE, main
from pomodoro.core.config import STATE_FILE_NAME


def read_state(data_dir):
    return json.loads((data_dir / STATE_FILE_NAME).read_text(encoding="utf-8"))


def test_config_sets_length(clean_settings, capsys):
    assert main(["config", "--minutes", "5"]) == 0

    assert read_state(clean_settings)["timer_length"] == 5
    assert "5 min" in capsys.readouterr().out


def test_config_rejects_zero(clean_settings, capsys):
    assert main(["config", "--minutes", "0"]) == EXIT_USAGE
    assert "ERROR" in capsys.readouterr().out


def test_start_pause_stop(clean_settings, capsys):
    assert main(["start"]) == 0
    assert read_state(clean_settings)["timer_state"] == "Running"
    assert "Running" in capsys.readouterr().out

    assert main(["pause"]) == 0
    assert read_state(clean_settings)["timer_state"] == "Paused"

    assert main(["stop"]) == 0
    state = read_state(clean_settings)
    assert state["timer_state"] == "Stopped"
    assert state["seconds_remaining"] == 1500


def test_status_on_first_run(clean_settings, capsys):
    assert main(["status"]) == 0
    assert "25:00" in capsys.readouterr().out


def test_migrate_needs_postgres(clean_settings, capsys):
    assert main(["migrate"]) == EXIT_USAGE


def test_invalid_settings(clean_settings, monkeypatch, capsys):
    monkeypatch.setenv("POMODORO_STORE", "postgres")

    assert main(["status"]) == EXIT_USAGE
    assert "invalid configuration" in capsys.readouterr().out


def test_unknown_command(clean_settings):
    with pytest.raises(SystemExit):
        main(["rewind"])
