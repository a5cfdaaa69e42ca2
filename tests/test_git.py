"""Tests for formatdiff.git."""

from pathlib import Path
from unittest.mock import patch

import pytest

from formatdiff import git
from formatdiff.utils.error_handling import SubprocessError
from formatdiff.utils.process import ProcessResult


def _result(exit_code=0, stdout="", stderr="", cmd=None):
    return ProcessResult(exit_code, stdout, stderr, cmd or ["git"])


class TestGitQueries:
    @patch("formatdiff.git.ProcessRunner.run_git_command")
    def test_repo_root(self, mock_git):
        mock_git.return_value = _result(stdout="/work/repo\n")

        assert git.repo_root("/work/repo/src") == Path("/work/repo")
        mock_git.assert_called_once_with(["rev-parse", "--show-toplevel"], cwd="/work/repo/src")

    @patch("formatdiff.git.ProcessRunner.run_git_command")
    def test_merge_base(self, mock_git):
        mock_git.return_value = _result(stdout="abc123\n")

        assert git.merge_base("master") == "abc123"
        mock_git.assert_called_once_with(["merge-base", "master", "HEAD"], cwd=None)

    @patch("formatdiff.git.ProcessRunner.run_git_command")
    def test_diff_limits_to_paths(self, mock_git):
        mock_git.return_value = _result(stdout="diff --git a/x.cc b/x.cc\n")

        text = git.diff("abc123", ["src", "include"], cwd="/work/repo")

        assert text.startswith("diff --git")
        mock_git.assert_called_once_with(
            ["diff", "abc123", "--", "src", "include"], cwd="/work/repo"
        )

    @patch("formatdiff.git.ProcessRunner.run_git_command")
    def test_failure_raises_subprocess_error(self, mock_git):
        mock_git.return_value = _result(
            exit_code=128,
            stderr="fatal: not a git repository\n",
            cmd=["git", "rev-parse", "--show-toplevel"],
        )

        with pytest.raises(SubprocessError) as exc_info:
            git.repo_root()

        error = exc_info.value
        assert error.exit_code == 128
        assert error.cmd == "git rev-parse --show-toplevel"
        assert error.operation == "git rev-parse"
        assert "not a git repository" in error.message
