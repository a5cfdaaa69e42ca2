#!/usr/bin/env python3
"""formatdiff CLI - run clang-format-diff over the changes since the merge-base."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path

from formatdiff import __version__, git
from formatdiff.config import ConfigValidationError, FormatDiffConfig, get_config
from formatdiff.messages import render
from formatdiff.resolver import Prober, ResolvedCommand, ToolResolver
from formatdiff.tools import clang_format_diff_spec
from formatdiff.utils.decorators import time_execution
from formatdiff.utils.error_handling import ResolutionError, SubprocessError
from formatdiff.utils.logging import configure_logging, get_logger
from formatdiff.utils.process import ProcessResult, ProcessRunner

log = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formatdiff",
        description=(
            "Format the lines changed since the merge-base with a base branch "
            "using clang-format-diff."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Limit the diff to these paths (default: FORMATDIFF_PATHS or '.')",
    )
    parser.add_argument("--base", help="Branch to diff against (default: master)")
    parser.add_argument("--style", help="clang-format style (default: google)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resolved command instead of running it",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Show errors only")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


@dataclass
class RunOptions:
    """Diff selection after merging CLI arguments over configuration."""

    base: str
    style: str
    strip: int
    paths: tuple[str, ...]
    dry_run: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace, config: FormatDiffConfig) -> RunOptions:
        return cls(
            base=args.base or config.diff.base_branch,
            style=args.style or config.diff.style,
            strip=config.diff.strip,
            paths=tuple(args.paths) or config.diff.paths,
            dry_run=args.dry_run,
        )


def _setup_logging(args: argparse.Namespace) -> None:
    """Setup logging configuration based on args."""
    if args.quiet:
        level = logging.ERROR
    elif args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    # FORMATDIFF_LOG_FORMAT=json switches to structured logs
    configure_logging(level=level, fmt=None, stream=sys.stderr)


def resolve_formatter(config: FormatDiffConfig, repo_root: Path) -> ResolvedCommand:
    """Resolve clang-format-diff using the configured candidates.

    Raises:
        ResolutionError: when the formatter cannot be found or trusted
    """
    tool = config.tool
    if tool.override is not None:
        print(f"Note: {tool.override_env}='{tool.override}'", file=sys.stderr)

    resolver = ToolResolver(Prober(timeout=config.timeouts.probe_seconds))
    return resolver.resolve(clang_format_diff_spec(tool, repo_root))


@time_execution(log_threshold=1.0, operation_name="clang-format-diff")
def _run_formatter(invocation: list[str], diff_text: str, repo_root: Path) -> ProcessResult:
    # Diff paths are relative to the repository root, hence -p1 from there
    return ProcessRunner.run_passthrough(invocation, cwd=repo_root, input_text=diff_text)


def format_changes(options: RunOptions, config: FormatDiffConfig, cwd: Path) -> int:
    """Resolve the formatter and feed it the branch diff. Returns the exit code."""
    codes = config.exit_codes
    root = git.repo_root(cwd)

    try:
        command = resolve_formatter(config, root)
    except ResolutionError as e:
        defaults = {
            "repo_root": str(root),
            "script_name": config.tool.script_name,
            "url": config.tool.download_url,
        }
        print(render(e, defaults), file=sys.stderr)
        return codes.for_failure(e.kind)

    revision = git.merge_base(options.base, cwd=cwd)
    invocation = command.invocation(f"-style={options.style}", f"-p{options.strip}", "-i")

    if options.dry_run:
        diff_cmd = shlex.join(["git", "diff", revision, "--", *options.paths])
        print(f"{diff_cmd} | {shlex.join(invocation)}")
        return codes.success

    diff_text = git.diff(revision, options.paths, cwd=cwd)
    if not diff_text.strip():
        log.info(f"No changes since {options.base} ({revision[:12]})")
        return codes.success

    result = _run_formatter(invocation, diff_text, root)
    if not result.success:
        log.warning(f"{command.tool_name} exited with code {result.exit_code}")
    return result.exit_code


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        code = e.code
        return code if isinstance(code, int) else (0 if code is None else 2)
    _setup_logging(args)

    try:
        config = get_config()
    except ConfigValidationError as e:
        log.error(f"Invalid configuration: {e}")
        return 2

    try:
        return format_changes(RunOptions.from_args(args, config), config, Path.cwd())
    except SubprocessError as e:
        log.error(e.message)
        return config.exit_codes.error
    except OSError as e:
        log.error(f"Error: {e}")
        return config.exit_codes.error


if __name__ == "__main__":
    raise SystemExit(main())
