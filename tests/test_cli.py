"""Tests for CLI commands."""

from __future__ import annotations

import json

import pytest
import yaml
from typer.testing import CliRunner

from racefuel import cli
from racefuel.cli import app
from racefuel.config.settings import Settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Keep the user's ~/.racefuel/config.yaml out of CLI tests."""
    monkeypatch.setattr(cli, "get_settings", lambda: Settings())


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        yaml.dump(
            {
                "items": [
                    {"name": "Energy Gel", "category": "Gels", "carbs": 25, "sodium": 50},
                    {
                        "name": "Electrolyte Drink Mix",
                        "category": "Drinks",
                        "carbs": 20,
                        "sodium": 200,
                    },
                    {"name": "Water", "category": "Water", "water": 500},
                ]
            }
        )
    )
    return path


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "suggest" in result.output

    def test_suggest_requires_minutes(self, catalog_file):
        """Test that suggest requires a duration."""
        result = runner.invoke(app, ["suggest", str(catalog_file)])
        assert result.exit_code != 0

    def test_strategies(self):
        """Test that the built-in strategies are listed."""
        result = runner.invoke(app, ["strategies"])
        assert result.exit_code == 0
        for strategy_id in ("balanced", "drink-focused", "gel-focused", "electrolyte-light"):
            assert strategy_id in result.output

    def test_target_json(self):
        """Test target output as JSON."""
        result = runner.invoke(app, ["target", "--minutes", "90", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert (data["carbs"], data["sodium"], data["water"]) == (90, 450, 750)

    def test_target_custom_rate(self):
        """Test that rate options override the defaults."""
        result = runner.invoke(
            app, ["target", "-m", "60", "--carbs-per-hour", "90", "--json"]
        )
        assert json.loads(result.output)["carbs"] == 90


class TestSuggestCommand:
    """Tests for the suggest command."""

    def test_json_output(self, catalog_file):
        """Test suggestions as JSON."""
        result = runner.invoke(
            app, ["suggest", str(catalog_file), "--minutes", "60", "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["plans"][0]["strategy"] == "balanced"
        assert data["plans"][0]["score"] == 100

    def test_table_output(self, catalog_file):
        """Test the default table output."""
        result = runner.invoke(app, ["suggest", str(catalog_file), "-m", "60"])
        assert result.exit_code == 0
        assert "Balanced Mix" in result.output

    def test_output_file_uses_markdown(self, catalog_file, tmp_path):
        """Test that table output written to a file becomes markdown."""
        out = tmp_path / "plan.md"
        result = runner.invoke(
            app,
            ["suggest", str(catalog_file), "-m", "60", "--segment", "Leg 1", "-o", str(out)],
        )
        assert result.exit_code == 0
        text = out.read_text()
        assert text.startswith("# Fueling Suggestions")
        assert "**Segment:** Leg 1" in text

    def test_zero_minutes_warns(self, catalog_file):
        """Test that a zero duration is reported as a warning."""
        result = runner.invoke(
            app, ["suggest", str(catalog_file), "-m", "0", "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["plans"] == []
        assert data["warnings"]

    def test_missing_catalog(self, tmp_path):
        """Test that a missing catalog file exits with an error."""
        result = runner.invoke(app, ["suggest", str(tmp_path / "nope.yaml"), "-m", "60"])
        assert result.exit_code == 1

    def test_invalid_catalog(self, tmp_path):
        """Test that an invalid catalog exits with an error."""
        path = tmp_path / "bad.yaml"
        path.write_text("- name: Banana\n  category: Fruit\n")
        result = runner.invoke(app, ["suggest", str(path), "-m", "60"])
        assert result.exit_code == 1
        assert "Fruit" in result.output

    def test_unknown_format(self, catalog_file):
        """Test that an unknown output format exits with an error."""
        result = runner.invoke(app, ["suggest", str(catalog_file), "-m", "60", "-f", "xml"])
        assert result.exit_code == 1


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_init_and_show(self, tmp_path):
        """Test writing a default config and printing it back."""
        path = tmp_path / "config.yaml"
        result = runner.invoke(app, ["config", "init", "--path", str(path)])
        assert result.exit_code == 0
        assert path.exists()

        result = runner.invoke(app, ["config", "show", "--path", str(path)])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["planner"]["band_floor"] == 90
        assert data["rates"]["carbs_per_hour"] == 60

    def test_init_refuses_overwrite(self, tmp_path):
        """Test that init will not overwrite without --force."""
        path = tmp_path / "config.yaml"
        path.write_text("rates: {}\n")

        result = runner.invoke(app, ["config", "init", "--path", str(path)])
        assert result.exit_code == 1

        result = runner.invoke(app, ["config", "init", "--path", str(path), "--force"])
        assert result.exit_code == 0
        assert "planner" in path.read_text()
