"""The clang-format-diff tool definition, built from configuration."""

from __future__ import annotations

import shlex
from pathlib import Path

from . import checks
from .config.models import ToolConfig
from .resolver import ScriptFallback, Strategy, ToolCandidate, ToolSpec


def interpreter_argv(tool: ToolConfig) -> tuple[str, ...]:
    """The interpreter command, split the way a shell would split ``$PYTHON``."""
    return tuple(shlex.split(tool.interpreter)) or (tool.default_interpreter,)


def clang_format_diff_spec(tool: ToolConfig, repo_root: Path | None) -> ToolSpec:
    """
    Describe how to find and vet clang-format-diff.

    Candidates, tried in order:
    1. each of ``tool.command_names`` on PATH
    2. the script in the repository root, executed directly
    Failing those, the script is looked up in the repository root and then on
    PATH and run through the configured interpreter.
    """
    interpreter = interpreter_argv(tool)

    candidates = [ToolCandidate(Strategy.ON_PATH, (name,)) for name in tool.command_names]
    if repo_root is not None:
        candidates.append(
            ToolCandidate(Strategy.REPO_RELATIVE_PATH, (str(repo_root / tool.script_name),))
        )

    fallback = ScriptFallback(
        script_name=tool.script_name,
        repo_root=repo_root,
        interpreter=interpreter,
        preconditions=(
            checks.requires_modules(interpreter, tool.required_modules),
            checks.matches_interpreter_generation(
                interpreter,
                tool.legacy_markers,
                tool.modern_version_marker,
                tool.download_url,
            ),
            checks.runnable(),
        ),
    )

    return ToolSpec(
        name=tool.name,
        override=tool.override,
        override_preconditions=(checks.runnable(),),
        candidates=tuple(candidates),
        fallback=fallback,
    )
