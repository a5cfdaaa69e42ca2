"""Git queries: repository root, merge-base and the diff to format."""

from __future__ import annotations

from pathlib import Path

from .utils.error_handling import SubprocessDetails, SubprocessError
from .utils.logging import get_logger
from .utils.process import ProcessResult, ProcessRunner

log = get_logger(__name__)


def _checked(git_args: list[str], cwd: str | Path | None, operation: str) -> ProcessResult:
    result = ProcessRunner.run_git_command(git_args, cwd=cwd)
    if not result.success:
        details = SubprocessDetails(
            cmd=result.cmd,
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
        )
        message = f"{operation} failed with exit code {result.exit_code}: {result.stderr.strip()}"
        raise SubprocessError(message, details, operation=operation)
    return result


def repo_root(cwd: str | Path | None = None) -> Path:
    """Top-level directory of the working tree containing ``cwd``.

    Raises:
        SubprocessError: outside a git repository, or if git is missing
    """
    result = _checked(["rev-parse", "--show-toplevel"], cwd, "git rev-parse")
    return Path(result.stdout.strip())


def merge_base(base: str, head: str = "HEAD", cwd: str | Path | None = None) -> str:
    """Best common ancestor of ``base`` and ``head``."""
    result = _checked(["merge-base", base, head], cwd, "git merge-base")
    commit = result.stdout.strip()
    log.debug(f"merge-base of {base} and {head} is {commit}")
    return commit


def diff(revision: str, paths: list[str] | tuple[str, ...], cwd: str | Path | None = None) -> str:
    """Unified diff of the working tree against ``revision``, limited to ``paths``."""
    result = _checked(["diff", revision, "--", *paths], cwd, "git diff")
    return result.stdout
