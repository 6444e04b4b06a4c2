import json

import pytest

from rallypairing.cli import load_prefs, main
from rallypairing.exceptions import InvalidConfigurationException
from rallypairing.shell import execute_line


def test_plan_prints_every_round(capsys):
    assert main(["plan", "--players", "12"]) == 0
    out = capsys.readouterr().out
    assert "Round 1: prelim" in out
    assert "Round 2: eight" in out
    assert "Round 3: final" in out


def test_plan_rejects_small_fields(capsys):
    assert main(["plan", "--players", "7"]) == 1


def test_plan_uses_the_config_file(tmp_path, capsys):
    config = tmp_path / "prefs.json"
    config.write_text(json.dumps({"roundScoreCaps": {"1": 15}}), encoding="utf-8")
    assert main(["plan", "--players", "8", "--config", str(config)]) == 0
    assert "cap 15" in capsys.readouterr().out


def test_bad_config_fails_cleanly(tmp_path):
    config = tmp_path / "prefs.json"
    config.write_text("{not json", encoding="utf-8")
    assert main(["plan", "--players", "8", "--config", str(config)]) == 1


def test_load_prefs():
    assert load_prefs(None).wave_format == "adaptive"
    with pytest.raises(InvalidConfigurationException):
        load_prefs("/nonexistent/prefs.json")


def test_load_prefs_needs_an_object(tmp_path):
    config = tmp_path / "prefs.json"
    config.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidConfigurationException):
        load_prefs(str(config))


def test_rate_prints_both_teams(capsys):
    assert main(["rate", "1000", "1000", "1000", "1000", "--score", "21", "15"]) == 0
    out = capsys.readouterr().out
    assert "Team A (1000, 1000): +" in out
    assert "Team B (1000, 1000): -" in out


def test_simulate_writes_a_report(tmp_path, capsys):
    output = tmp_path / "report.json"
    code = main(
        ["simulate", "--players", "8", "--seed", "4", "--output", str(output)]
    )
    assert code == 0
    report = json.loads(output.read_text(encoding="utf-8"))
    assert len(report["standings"]) == 8
    assert "Champion:" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "rallypairing" in capsys.readouterr().out


def test_shell_runs_commands(capsys):
    assert execute_line("plan --players 8")
    assert "Round 2: final" in capsys.readouterr().out


def test_shell_survives_bad_input(capsys):
    assert execute_line("plan")
    assert execute_line("frobnicate")
    assert execute_line('rate "unterminated')
    assert "Unknown command" in capsys.readouterr().out


def test_shell_exit():
    assert not execute_line("exit")
    assert execute_line("")


def test_shell_prints_command_help(capsys):
    assert execute_line("help rate")
    out = capsys.readouterr().out
    assert "--score" in out
