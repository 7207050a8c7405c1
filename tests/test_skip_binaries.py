from pathlib import Path

import pytest
from click.testing import CliRunner
from git import Repo

from codedigest.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def repo_dir(tmp_path: Path):
    """
    Create a temporary git repo with:
    - a text file (should appear in the file contents)
    - a binary file (should be skipped in the file contents, but still appear in the tree)
    """
    Repo.init(tmp_path)

    # normal text file
    (tmp_path / "hello.txt").write_text("hello\n", encoding="utf-8")

    # "binary" file: PNG header, which contains NUL bytes
    (tmp_path / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")

    return tmp_path


def run_codedigest(runner: CliRunner, repo_dir: Path, *args):
    return runner.invoke(
        cli,
        [str(repo_dir), "--print", *args],
        catch_exceptions=False,  # IMPORTANT
    )


def test_binary_file_is_listed_in_tree_but_skipped_in_file_contents(runner, repo_dir):
    result = run_codedigest(runner, repo_dir)
    assert result.exit_code == 0

    out = result.stdout

    # Tree should list both files
    assert "hello.txt" in out
    assert "image.png" in out

    # File contents should include the hello.txt block only
    assert "=== hello.txt ===\nhello\n" in out
    assert "=== image.png ===" not in out

    # the repository's own .git directory never shows up
    assert ".git/" not in out
    assert "Files skipped: 2" in result.stderr


def test_text_file_is_rendered_normally(runner, repo_dir):
    result = run_codedigest(runner, repo_dir)
    assert result.exit_code == 0
    assert "=== hello.txt ===\n" in result.stdout
    assert "hello\n" in result.stdout


def test_included_binary_that_cannot_be_decoded_is_reported(runner, repo_dir):
    result = run_codedigest(runner, repo_dir, "--include-binary")
    assert result.exit_code == 0

    assert "=== image.png ===" not in result.stdout
    assert "Some files could not be processed" in result.stderr
    assert "- image.png:" in result.stderr
