"""Tests for the parse-git-log command line."""

import json
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner
from git import Actor, Repo

from parse_git_log.cli.main import main


@pytest.fixture
def temp_git_project():
    """Create a temporary git project with two commits."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir)
        repo = Repo.init(project_path)
        author = Actor("Test User", "test@example.com")

        for name, message in [("a.py", "first"), ("b.py", "second")]:
            (project_path / name).write_text("pass\n")
            repo.index.add([name])
            repo.index.commit(message, author=author, committer=author)

        yield project_path
        repo.close()


def test_json_output(temp_git_project):
    """Test that --json prints one commit object per line."""
    result = CliRunner().invoke(main, [str(temp_git_project), "--json"])

    assert result.exit_code == 0, result.output
    commits = [json.loads(line) for line in result.output.splitlines()]
    assert [c["header"] for c in commits] == ["second", "first"]
    assert [c["id"] for c in commits] == [0, 1]
    assert commits[1]["parents"] == []
    assert commits[0]["author"]["name"] == "Test User"


def test_table_output(temp_git_project):
    result = CliRunner().invoke(main, [str(temp_git_project)])

    assert result.exit_code == 0, result.output
    assert "second" in result.output
    assert "first" in result.output


def test_empty_repository(tmp_path):
    Repo.init(tmp_path).close()

    result = CliRunner().invoke(main, [str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "No commits found" in result.output


def test_not_a_repository(tmp_path):
    result = CliRunner().invoke(main, [str(tmp_path)])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert "Aborted" in result.output
