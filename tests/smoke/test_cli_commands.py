"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(*args: str, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m readpath.cli'
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    env = dict(os.environ, PYTHONIOENCODING="utf-8", COLUMNS="200")
    env.pop("READPATH_CATALOG_PATH", None)

    result = subprocess.run(
        [sys.executable, "-m", "readpath.cli", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        encoding="utf-8",
        env=env,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


def write_json(path: Path, data) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        for command in ("catalog", "recommend", "next-skill", "rate", "baseline"):
            assert command in stdout

    @pytest.mark.parametrize("command", ["catalog", "recommend", "next-skill", "rate", "baseline"])
    def test_command_help(self, command):
        code, stdout, stderr = run_cli_command(command, "--help")

        assert code == 0, f"{command} help failed: {stderr}"

    def test_version(self):
        code, stdout, stderr = run_cli_command("version")

        assert code == 0, f"Version failed: {stderr}"
        assert "readpath" in stdout


class TestCLICatalog:
    def test_bundled_catalog(self):
        code, stdout, stderr = run_cli_command("catalog")

        assert code == 0, f"Catalog failed: {stderr}"
        assert "Catalog is valid" in stdout
        assert "45 skills" in stdout

    def test_invalid_catalog_fails(self, tmp_path):
        path = write_json(tmp_path / "broken.json", {"skills": [{"slug": "x"}]})
        code, stdout, stderr = run_cli_command("catalog", "--catalog", path)

        assert code == 1
        assert "Invalid skill catalog" in stdout


class TestCLIEngines:
    def test_recommend(self, tmp_path):
        progress = write_json(
            tmp_path / "progress.json",
            [
                {"skill_id": "topic-the-sun", "attempts": 4, "mastery": 0.9, "dominated": True},
                {"skill_id": "topic-the-moon", "attempts": 4, "mastery": 0.9, "dominated": True},
                {"skill_id": "topic-gravity", "attempts": 5, "mastery": 0.95, "dominated": True},
                {"skill_id": "topic-solar-system", "attempts": 3, "mastery": 0.88},
                {"skill_id": "topic-the-stars", "attempts": 3, "mastery": 0.9},
            ],
        )
        code, stdout, stderr = run_cli_command(
            "recommend", "--age", "8", "--interest", "universe",
            "--progress", progress, "--current", "gravity",
        )

        assert code == 0, f"Recommend failed: {stderr}"
        assert "Suggestions" in stdout
        assert "deepen" in stdout

    def test_next_skill(self):
        code, stdout, stderr = run_cli_command("next-skill", "--age", "7", "--interest", "universe")

        assert code == 0, f"Next skill failed: {stderr}"
        assert "Next skill" in stdout
        assert "story_first" in stdout or "balanced" in stdout

    def test_rate(self, tmp_path):
        responses = write_json(
            tmp_path / "responses.json",
            [
                {"category": "literal", "correct": True},
                {"category": "inference", "correct": True, "item_difficulty": 4},
                {"category": "summary", "correct": False, "item_difficulty": 2},
            ],
        )
        code, stdout, stderr = run_cli_command(
            "rate", "--responses", responses, "--level", "2.0", "--days-inactive", "20"
        )

        assert code == 0, f"Rate failed: {stderr}"
        assert "Band:" in stdout

    def test_rate_rejects_bad_difficulty(self, tmp_path):
        responses = write_json(
            tmp_path / "responses.json", [{"category": "literal", "correct": True, "item_difficulty": 9}]
        )
        code, stdout, stderr = run_cli_command("rate", "--responses", responses, "--level", "2.0")

        assert code == 1
        assert "Invalid input" in stdout

    def test_baseline(self, tmp_path):
        results = write_json(
            tmp_path / "placement.json",
            [
                {"level": 1, "total_questions": 3, "correct": 3,
                 "correct_by_category": {"literal": 1, "inference": 1, "vocabulary": 1}},
                {"level": 2, "total_questions": 3, "correct": 2,
                 "correct_by_category": {"literal": 1, "inference": 1, "vocabulary": 0}},
            ],
        )
        code, stdout, stderr = run_cli_command("baseline", results)

        assert code == 0, f"Baseline failed: {stderr}"
        assert "Confidence" in stdout
        assert "low" in stdout
