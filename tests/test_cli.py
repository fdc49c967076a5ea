"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from card_manager import __version__
from card_manager import main
from card_manager.extractor.replicate import ReplicateExtractor

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    for key in ("REPLICATE_API_TOKEN", "REPLICATE_MODEL", "CARD_MANAGER_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def model_output(monkeypatch):
    """Replace the model call with a canned completion."""
    prompts = []

    def fake_complete(self, prompt):
        prompts.append(prompt)
        return '```json\n{"name": "Jane Doe", "company": "Acme", "email": "jane@acme.com"}\n```'

    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_test")
    monkeypatch.setattr(ReplicateExtractor, "complete", fake_complete)
    return prompts


class TestCli:
    """Test cardmgr commands."""

    def test_version(self):
        result = runner.invoke(main.app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_extract_json_from_stdin(self, model_output):
        """Test extract reads stdin and prints the fields as JSON."""
        result = runner.invoke(main.app, ["extract", "-", "--json"], input="Jane Doe\nAcme\n")

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["name"] == "Jane Doe"
        assert data["title"] == ""
        assert "Jane Doe\nAcme" in model_output[0]

    def test_extract_from_file(self, model_output, tmp_path):
        """Test formatted output from a text file."""
        text_file = tmp_path / "card.txt"
        text_file.write_text("Jane Doe\nAcme", encoding="utf-8")

        result = runner.invoke(main.app, ["extract", str(text_file)])

        assert result.exit_code == 0, result.output
        assert "Jane Doe" in result.output
        assert "jane@acme.com" in result.output

    def test_extract_missing_file(self, model_output, tmp_path):
        result = runner.invoke(main.app, ["extract", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_extract_without_token(self):
        """Test a missing token is reported and exits with 1."""
        result = runner.invoke(main.app, ["extract", "-"], input="Jane")

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_email(self, monkeypatch):
        """Test email prints the drafted text."""
        monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_test")
        monkeypatch.setattr(
            ReplicateExtractor, "complete", lambda self, prompt: "Hi Jane,\nBest regards,"
        )

        result = runner.invoke(main.app, ["email", "--name", "Jane", "--company", "Acme"])

        assert result.exit_code == 0, result.output
        assert "Hi Jane" in result.output

    def test_batch_rejects_unknown_format(self, tmp_path):
        result = runner.invoke(
            main.app, ["batch", str(tmp_path), "-o", str(tmp_path / "out.xml"), "-f", "xml"]
        )
        assert result.exit_code == 1
        assert "Invalid format" in result.output
