import argparse
import json

import pytest

from courtscheduler.cli import main, parse_group_arg, parse_positive_int


def test_parse_group_arg():
    assert parse_group_arg("0,1,2,3") == (0, 1, 2, 3)
    assert parse_group_arg("4-7") == (4, 5, 6, 7)
    assert parse_group_arg("0-1,8-9") == (0, 1, 8, 9)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_group_arg("a,b")


def test_parse_positive_int():
    assert parse_positive_int("7") == 7
    with pytest.raises(argparse.ArgumentTypeError):
        parse_positive_int("0")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_positive_int("seven")


def test_pairings_command(capsys):
    assert main(["pairings", "--group", "0,1,2,3"]) == 0
    assert "2 pairings" in capsys.readouterr().out


def test_generate_then_validate(tmp_path, capsys):
    output = tmp_path / "season.json"

    exit_code = main(
        [
            "generate",
            "--participants",
            "8",
            "--weeks",
            "3",
            "--seed",
            "1",
            "--matrix",
            "--output",
            str(output),
        ]
    )

    assert exit_code == 0
    saved = json.loads(output.read_text(encoding="utf-8"))
    assert saved["config"]["num_participants"] == 8
    assert len(saved["schedule"]["weeks"]) == 3
    assert saved["valid"] is True
    assert "Schedule valid" in capsys.readouterr().out

    assert main(["validate", "--file", str(output)]) == 0


def test_validate_reports_violations(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(
        json.dumps(
            {
                "config": {
                    "num_participants": 4,
                    "num_weeks": 1,
                    "court_groups": [[0, 1, 2, 3]],
                },
                "schedule": {
                    "num_participants": 4,
                    "matches_per_week": 2,
                    "weeks": [[2, 3]],
                },
            }
        ),
        encoding="utf-8",
    )
    assert main(["validate", "--file", str(path)]) == 1


def test_missing_file_is_an_error(tmp_path):
    assert main(["validate", "--file", str(tmp_path / "missing.json")]) == 1


def test_infeasible_season_is_rejected():
    assert main(["generate", "--participants", "4", "--weeks", "3"]) == 1
