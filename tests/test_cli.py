"""Tests for the formatdiff command line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest

from formatdiff.cli import create_parser, main
from formatdiff.resolver import FailureKind, ResolvedCommand, Strategy
from formatdiff.utils.error_handling import ResolutionError, SubprocessDetails, SubprocessError
from formatdiff.utils.process import ProcessResult

REPO = Path("/work/repo")
CFD = ResolvedCommand("clang-format-diff", ("clang-format-diff",), Strategy.ON_PATH)
DIFF = "diff --git a/db.cc b/db.cc\n--- a/db.cc\n+++ b/db.cc\n@@ -1 +1 @@\n-int x;\n+int  x;\n"


@pytest.fixture
def git_stubs(isolated_environment):
    with (
        patch("formatdiff.git.repo_root", return_value=REPO) as repo_root,
        patch("formatdiff.git.merge_base", return_value="abc123def456") as merge_base,
        patch("formatdiff.git.diff", return_value=DIFF) as diff,
    ):
        yield {"repo_root": repo_root, "merge_base": merge_base, "diff": diff}


@pytest.fixture
def formatter():
    with patch("formatdiff.cli.ProcessRunner.run_passthrough") as run:
        run.return_value = ProcessResult(0, "", "", ["clang-format-diff"])
        yield run


def _resolve_returns(command):
    return patch("formatdiff.cli.ToolResolver.resolve", return_value=command)


def _resolve_fails(kind, context=None):
    return patch(
        "formatdiff.cli.ToolResolver.resolve",
        side_effect=ResolutionError(kind, "clang-format-diff", context),
    )


class TestParser:
    def test_defaults(self):
        args = create_parser().parse_args([])
        assert args.paths == []
        assert args.base is None
        assert args.dry_run is False
        assert args.verbose == 0

    def test_unknown_flag_returns_invalid_args(self, isolated_environment):
        assert main(["--no-such-flag"]) == 2


class TestFormatting:
    def test_pipes_diff_into_formatter(self, git_stubs, formatter):
        with _resolve_returns(CFD):
            assert main([]) == 0

        git_stubs["merge_base"].assert_called_once_with("master", cwd=Path.cwd())
        git_stubs["diff"].assert_called_once_with("abc123def456", (".",), cwd=Path.cwd())
        formatter.assert_called_once_with(
            ["clang-format-diff", "-style=google", "-p1", "-i"], cwd=REPO, input_text=DIFF
        )

    def test_arguments_override_configuration(self, git_stubs, formatter):
        with _resolve_returns(CFD):
            assert main(["--base", "main", "--style", "llvm", "src", "include"]) == 0

        git_stubs["merge_base"].assert_called_once_with("main", cwd=Path.cwd())
        git_stubs["diff"].assert_called_once_with("abc123def456", ("src", "include"), cwd=Path.cwd())
        assert formatter.call_args.args[0] == ["clang-format-diff", "-style=llvm", "-p1", "-i"]

    def test_environment_configures_base_and_paths(self, git_stubs, formatter, monkeypatch):
        monkeypatch.setenv("FORMATDIFF_BASE", "develop")
        monkeypatch.setenv("FORMATDIFF_PATHS", "./librocksdb_sys/crocksdb")

        with _resolve_returns(CFD):
            assert main([]) == 0

        git_stubs["merge_base"].assert_called_once_with("develop", cwd=Path.cwd())
        git_stubs["diff"].assert_called_once_with(
            "abc123def456", ("./librocksdb_sys/crocksdb",), cwd=Path.cwd()
        )

    def test_formatter_exit_code_is_passed_through(self, git_stubs, formatter):
        formatter.return_value = ProcessResult(3, "", "", ["clang-format-diff"])

        with _resolve_returns(CFD):
            assert main([]) == 3

    def test_empty_diff_skips_formatter(self, git_stubs, formatter):
        git_stubs["diff"].return_value = ""

        with _resolve_returns(CFD):
            assert main([]) == 0

        formatter.assert_not_called()

    def test_dry_run_prints_pipeline(self, git_stubs, formatter, capsys):
        command = ResolvedCommand(
            "clang-format-diff",
            ("python3", "/work/repo/clang-format-diff.py"),
            Strategy.INTERPRETED_SCRIPT,
        )

        with _resolve_returns(command):
            assert main(["--dry-run", "src"]) == 0

        out = capsys.readouterr().out
        assert out.strip() == (
            "git diff abc123def456 -- src | "
            "python3 /work/repo/clang-format-diff.py -style=google -p1 -i"
        )
        git_stubs["diff"].assert_not_called()
        formatter.assert_not_called()


class TestResolutionFailures:
    @pytest.mark.parametrize(
        ("kind", "exit_code", "snippet"),
        [
            (FailureKind.NOT_FOUND, 128, "You didn't have clang-format-diff.py"),
            (FailureKind.UNUSABLE, 128, "did not exit successfully"),
            (FailureKind.MISSING_DEPENDENCY, 129, "pip install argparse"),
            (FailureKind.VERSION_MISMATCH, 130, "for Python 2 but are using a Python 3"),
        ],
    )
    def test_failure_kind_maps_to_exit_code(
        self, git_stubs, formatter, capsys, kind, exit_code, snippet
    ):
        context = {"modules": "argparse", "interpreter": "python3"}

        with _resolve_fails(kind, context):
            assert main([]) == exit_code

        assert snippet in capsys.readouterr().err
        git_stubs["merge_base"].assert_not_called()
        formatter.assert_not_called()

    def test_not_found_message_points_at_repo_root(self, git_stubs, formatter, capsys):
        with _resolve_fails(FailureKind.NOT_FOUND):
            main([])

        assert "-o /work/repo/clang-format-diff.py" in capsys.readouterr().err

    def test_override_note_is_printed(self, git_stubs, formatter, capsys, monkeypatch):
        monkeypatch.setenv("CLANG_FORMAT_DIFF", "/opt/cfd")

        with _resolve_returns(CFD):
            main([])

        assert "Note: CLANG_FORMAT_DIFF='/opt/cfd'" in capsys.readouterr().err


class TestEnvironmentErrors:
    def test_git_failure_returns_error_code(self, isolated_environment, formatter):
        error = SubprocessError(
            "git rev-parse failed with exit code 128: fatal: not a git repository",
            SubprocessDetails(cmd=["git", "rev-parse", "--show-toplevel"], exit_code=128),
            operation="git rev-parse",
        )

        with patch("formatdiff.git.repo_root", side_effect=error):
            assert main([]) == 1

        formatter.assert_not_called()

    def test_unlaunchable_formatter_returns_error_code(self, git_stubs, formatter):
        formatter.side_effect = FileNotFoundError("clang-format-diff")

        with _resolve_returns(CFD):
            assert main([]) == 1

    def test_invalid_configuration_returns_invalid_args(self, isolated_environment, monkeypatch):
        monkeypatch.setenv("FORMATDIFF_PROBE_TIMEOUT", "-1")
        assert main([]) == 2

    def test_unusable_exit_code_clashing_with_success_is_rejected(
        self, isolated_environment, monkeypatch, caplog
    ):
        monkeypatch.setenv("FORMATDIFF_EXIT_CODE_UNUSABLE", "0")

        assert main([]) == 2
        assert "must not reuse success/error/invalid-args codes" in caplog.text
