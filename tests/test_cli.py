"""Tests für die Click-CLI (main.py) über CliRunner."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def paths(tmp_path: Path) -> dict:
    return {"config": tmp_path / "engine_config.yaml", "store": tmp_path / "timetable.json"}


def _invoke(runner, paths, *args):
    return runner.invoke(cli, ["--config", str(paths["config"]),
                               "--store", str(paths["store"]), *args])


def _lesson_ids(paths) -> list[str]:
    data = json.loads(paths["store"].read_text(encoding="utf-8"))
    return [row["id"] for row in data["lessons"]]


@pytest.fixture
def with_subject(runner, paths):
    result = _invoke(runner, paths, "subject", "add", "math", "Mathe", "5a", "--school", "gym-1")
    assert result.exit_code == 0, result.output
    return paths


class TestLessonCommands:
    def test_add_and_show(self, runner, with_subject):
        result = _invoke(runner, with_subject, "add", "5a", "math", "1", "08:00", "--room", "R1")
        assert result.exit_code == 0, result.output
        assert "Mathe" in result.output

        stored = json.loads(with_subject["store"].read_text(encoding="utf-8"))["lessons"][0]
        assert stored["end_time"] == "08:45:00"    # Standarddauer 45 Minuten

        result = _invoke(runner, with_subject, "show", "5a")
        assert result.exit_code == 0, result.output
        assert "Mathe" in result.output

    def test_add_invalid_lists_all_violations(self, runner, with_subject):
        result = _invoke(runner, with_subject, "add", "5a", "math", "9", "10:00", "--end", "09:00")
        assert result.exit_code == 1
        assert "day_of_week" in result.output
        assert "end before start" in result.output

    def test_add_bad_start_without_end(self, runner, with_subject):
        """Nur der Beginn wird bemängelt, nicht ein nie angegebenes Ende."""
        result = _invoke(runner, with_subject, "add", "5a", "math", "1", "8 Uhr")
        assert result.exit_code == 1
        assert "start_time: bad time format" in result.output
        assert "end_time" not in result.output

    def test_add_foreign_subject(self, runner, with_subject):
        result = _invoke(runner, with_subject, "add", "6b", "math", "1", "08:00")
        assert result.exit_code == 1
        assert "subject does not belong to class" in result.output

    def test_edit_and_delete(self, runner, with_subject):
        _invoke(runner, with_subject, "add", "5a", "math", "1", "08:00")
        lesson_id = _lesson_ids(with_subject)[0]

        result = _invoke(runner, with_subject, "edit", lesson_id, "--day", "3", "--room", "R7")
        assert result.exit_code == 0, result.output
        assert "Mittwoch" in result.output

        result = _invoke(runner, with_subject, "delete", lesson_id)
        assert result.exit_code == 0, result.output
        assert _lesson_ids(with_subject) == []

    def test_delete_missing(self, runner, with_subject):
        result = _invoke(runner, with_subject, "delete", "gibt-es-nicht")
        assert result.exit_code == 1
        assert "nicht gefunden" in result.output

    def test_show_empty(self, runner, with_subject):
        result = _invoke(runner, with_subject, "show", "5a", "--week", "2024-06-05")
        assert result.exit_code == 0
        assert "Keine Stunden" in result.output


class TestWeekCommands:
    def test_copy_week_and_changes(self, runner, with_subject):
        _invoke(runner, with_subject, "add", "5a", "math", "1", "08:00", "--room", "R1")
        result = _invoke(runner, with_subject, "copy-week", "5a", "2024-06-05")
        assert result.exit_code == 0, result.output
        assert "2024-06-03" in result.output

        ids = _lesson_ids(with_subject)
        assert len(ids) == 2
        copy_id = ids[1]
        _invoke(runner, with_subject, "edit", copy_id, "--room", "R2")

        result = _invoke(runner, with_subject, "changes", copy_id, "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output[result.output.index("{"):])
        assert data["changes"] == [
            {"field": "room", "stable_value": "R1", "current_value": "R2"}]

    def test_day_view(self, runner, with_subject):
        _invoke(runner, with_subject, "add", "5a", "math", "1", "08:00")
        result = _invoke(runner, with_subject, "day", "5a", "2024-06-10")
        assert result.exit_code == 0, result.output
        assert "08:00" in result.output
        assert "45 min" in result.output

    def test_conflicts(self, runner, with_subject):
        _invoke(runner, with_subject, "add", "5a", "math", "1", "08:00")
        assert _invoke(runner, with_subject, "conflicts", "5a").exit_code == 0

        _invoke(runner, with_subject, "add", "5a", "math", "1", "08:30")
        assert _invoke(runner, with_subject, "conflicts", "5a").exit_code == 1


class TestConfigCommands:
    def test_init_then_show(self, runner, paths):
        result = _invoke(runner, paths, "config", "init")
        assert result.exit_code == 0, result.output
        assert paths["config"].exists()

        result = _invoke(runner, paths, "config", "init")
        assert "existiert bereits" in result.output

        result = _invoke(runner, paths, "config", "show")
        assert result.exit_code == 0, result.output
        assert "#2196F3" in result.output

    def test_invalid_config_aborts(self, runner, paths):
        paths["config"].write_text("log_level: LAUT\n", encoding="utf-8")
        result = _invoke(runner, paths, "show", "5a")
        assert result.exit_code == 1
