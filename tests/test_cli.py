"""Tests for the click command line."""

from __future__ import annotations

import pytest
import yaml
from click.testing import CliRunner

from geoquiz.cli import main


@pytest.fixture
def runner(tmp_path, countries_file, monkeypatch):
    config = tmp_path / "config.yaml"
    config.write_text(yaml.dump({"data_file": str(countries_file)}))
    monkeypatch.setenv("GEOQUIZ_CONFIG", str(config))
    monkeypatch.delenv("GEOQUIZ_LOG_LEVEL", raising=False)
    return CliRunner()


class TestCountries:
    def test_lists_all(self, runner):
        result = runner.invoke(main, ["countries"])
        assert result.exit_code == 0
        assert "France: Paris (Europe)" in result.output
        assert "Japan: Tokyo (Asia)" in result.output

    def test_filter_by_continent(self, runner):
        result = runner.invoke(main, ["countries", "--continent", "Oceania"])
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.strip()]
        assert len(lines) == 2
        assert "Australia: Canberra" in lines[0]
        assert "New Zealand: Wellington" in lines[1]


class TestPlay:
    def test_quit_immediately(self, runner):
        result = runner.invoke(main, ["play", "--seed", "1"], input="!quit\n")
        assert result.exit_code == 0
        assert "What is the capital of" in result.output
        assert "Game over: 0/0 points" in result.output
        assert "No questions answered yet." in result.output

    def test_hint_then_skip(self, runner):
        result = runner.invoke(main, ["play", "-n", "1", "--seed", "1"], input="?\n!skip\n")
        assert result.exit_code == 0
        assert "Hint: The capital has" in result.output
        assert "Skipped. The answer was" in result.output
        assert "Game over: 0/3 points" in result.output

    def test_wrong_then_quit(self, runner):
        result = runner.invoke(main, ["play", "--seed", "1"], input="Atlantis\n!quit\n")
        assert result.exit_code == 0
        assert "Incorrect. Try again or request a hint!" in result.output

    def test_stops_after_question_count(self, runner):
        result = runner.invoke(main, ["play", "-n", "2", "--seed", "3"], input="!skip\n!skip\n")
        assert result.exit_code == 0
        assert "Q1." in result.output
        assert "Q2." in result.output
        assert "Q3." not in result.output
        assert "Questions Answered: 2" in result.output

    def test_flag_category(self, runner):
        result = runner.invoke(
            main, ["play", "--category", "flag_to_country", "--seed", "1"], input="?\n!quit\n",
        )
        assert result.exit_code == 0
        assert "Which country does this flag belong to?" in result.output
        assert "Hint: This country is in" in result.output

    def test_continent_filter(self, runner):
        result = runner.invoke(
            main, ["play", "--continent", "Oceania", "-n", "1"], input="!skip\n",
        )
        assert result.exit_code == 0
        assert "Australia" in result.output or "New Zealand" in result.output

    def test_unknown_continent(self, runner):
        result = runner.invoke(main, ["play", "--continent", "Antarctica"])
        assert result.exit_code == 2
        assert "Antarctica" in result.output

    def test_unknown_category(self, runner):
        result = runner.invoke(main, ["play", "--category", "planets"])
        assert result.exit_code == 2

    def test_play_is_default_command(self, runner):
        result = runner.invoke(main, [], input="!quit\n")
        assert result.exit_code == 0
        assert "Game over" in result.output


class TestExplore:
    def test_search(self, runner):
        result = runner.invoke(main, ["countries", "--search", "english"])
        assert result.exit_code == 0
        assert "United States" in result.output
        assert "New Zealand" in result.output
        assert "France" not in result.output

    def test_search_with_continent(self, runner):
        result = runner.invoke(main, ["countries", "--search", "english", "--continent", "Oceania"])
        assert result.exit_code == 0
        assert "United States" not in result.output
        assert "Australia" in result.output

    def test_search_no_match(self, runner):
        result = runner.invoke(main, ["countries", "--search", "atlantis"])
        assert result.exit_code == 0
        assert "No countries found." in result.output

    def test_country_detail(self, runner):
        result = runner.invoke(main, ["country", "france"])
        assert result.exit_code == 0
        assert "France" in result.output
        assert "Capital: Paris" in result.output
        assert "Sub-continent: Western Europe" in result.output
        assert "Population: 67,750,000" in result.output
        assert "Main Language: French" in result.output
        assert "Area: 643,801 km²" in result.output

    def test_country_with_airport(self, runner, tmp_path, monkeypatch):
        table = tmp_path / "airports.yaml"
        table.write_text(yaml.dump([{
            "name": "Chad", "capital": "N'Djamena", "continent": "Africa",
            "airport": "N'Djamena International",
        }]))
        config = tmp_path / "airports-config.yaml"
        config.write_text(yaml.dump({"data_file": str(table)}))
        monkeypatch.setenv("GEOQUIZ_CONFIG", str(config))
        result = runner.invoke(main, ["country", "Chad"])
        assert result.exit_code == 0
        assert "Main Airport: N'Djamena International" in result.output

    def test_unknown_country(self, runner):
        result = runner.invoke(main, ["country", "Atlantis"])
        assert result.exit_code == 2
        assert "Unknown country" in result.output

    def test_trivia_after_skip(self, runner):
        result = runner.invoke(main, ["play", "-n", "1", "--seed", "1"], input="!skip\n")
        assert result.exit_code == 0
        assert "About " in result.output
        assert "Capital: " in result.output
        assert "Population: " in result.output

    def test_trivia_after_correct_answer(self, runner):
        result = runner.invoke(
            main, ["play", "-n", "1", "--continent", "Oceania", "--seed", "2"],
            input="Canberra\nWellington\n",
        )
        assert result.exit_code == 0
        assert "Correct! Well done!" in result.output
        assert "Main Language: English" in result.output
