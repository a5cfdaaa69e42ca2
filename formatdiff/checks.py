"""Precondition factories used to vet a selected tool candidate."""

from __future__ import annotations

import shlex
from pathlib import Path

from .resolver import LIVENESS_FLAG, FailureKind, Precondition, Prober, ToolCandidate
from .utils.logging import get_logger

log = get_logger(__name__)


def runnable(kind: FailureKind = FailureKind.UNUSABLE) -> Precondition:
    """The assembled command answers ``--help`` with exit status 0."""

    def check(candidate: ToolCandidate, prober: Prober) -> bool:
        return prober.alive(candidate.argv)

    return Precondition(name="runnable", kind=kind, check=check, context={"flag": LIVENESS_FLAG})


def requires_modules(interpreter: tuple[str, ...], modules: tuple[str, ...]) -> Precondition:
    """The interpreter can import every module in ``modules``.

    The imports are piped to the interpreter on stdin, so nothing is executed
    from the candidate script itself.
    """
    source = "".join(f"import {module}\n" for module in modules)

    def check(candidate: ToolCandidate, prober: Prober) -> bool:
        result = prober.run(interpreter, input_text=source)
        if not result.success:
            log.debug(f"{shlex.join(interpreter)} cannot import {', '.join(modules)}")
        return result.success

    return Precondition(
        name="requires_modules",
        kind=FailureKind.MISSING_DEPENDENCY,
        check=check,
        context={"modules": ",".join(modules), "interpreter": shlex.join(interpreter)},
    )


def matches_interpreter_generation(
    interpreter: tuple[str, ...],
    legacy_markers: tuple[str, ...],
    modern_version_marker: str,
    download_url: str,
) -> Precondition:
    """The script is not written for an older interpreter generation.

    Fails only when the script contains a legacy syntax marker *and* the
    interpreter reports the modern major version. The interpreter is not asked
    for its version unless the script looks legacy.
    """

    def check(candidate: ToolCandidate, prober: Prober) -> bool:
        if candidate.script is None or not script_has_markers(candidate.script, legacy_markers):
            return True
        # Older interpreters print their version on stderr
        version = prober.run([*interpreter, "--version"]).output
        return modern_version_marker not in version

    return Precondition(
        name="matches_interpreter_generation",
        kind=FailureKind.VERSION_MISMATCH,
        check=check,
        context={"interpreter": shlex.join(interpreter), "url": download_url},
    )


def script_has_markers(script: Path, markers: tuple[str, ...]) -> bool:
    """True if any marker occurs in the script text. Unreadable scripts have none."""
    try:
        text = script.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.debug(f"Cannot read {script}: {e}")
        return False
    return any(marker in text for marker in markers)
