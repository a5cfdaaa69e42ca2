"""Tool resolution: turning candidate strategies into one trusted command.

A :class:`ToolSpec` lists, as plain data, the ways an external tool may be
found. :class:`ToolResolver` walks that list with a single :class:`Prober`,
runs the preconditions attached to whichever candidate it selects, and either
returns a :class:`ResolvedCommand` or raises exactly one
:class:`~formatdiff.utils.error_handling.ResolutionError`.

Usage:
    resolver = ToolResolver(Prober(timeout=10))
    command = resolver.resolve(spec)
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .utils.decorators import log_operation
from .utils.error_handling import ResolutionError
from .utils.logging import get_logger
from .utils.process import ProcessResult, ProcessRunner

__all__ = [
    "FailureKind",
    "Precondition",
    "Prober",
    "ResolvedCommand",
    "ScriptFallback",
    "Strategy",
    "ToolCandidate",
    "ToolResolver",
    "ToolSpec",
]

log = get_logger(__name__)

LIVENESS_FLAG = "--help"


class Strategy(Enum):
    """How a candidate command was obtained."""

    ENV_OVERRIDE = "env_override"
    ON_PATH = "on_path"
    REPO_RELATIVE_PATH = "repo_relative_path"
    INTERPRETED_SCRIPT = "interpreted_script"


class FailureKind(Enum):
    """Why a resolution attempt failed. Each kind maps to one exit code."""

    NOT_FOUND = "not_found"
    UNUSABLE = "unusable"
    MISSING_DEPENDENCY = "missing_dependency"
    VERSION_MISMATCH = "version_mismatch"


class Prober:
    """Runs probe commands with stdin fed empty and a per-probe timeout.

    ``runner`` has the signature of :meth:`ProcessRunner.run_with_capture`;
    tests pass a scripted fake.
    """

    def __init__(
        self,
        timeout: float | None = 10.0,
        runner: Callable[..., ProcessResult] = ProcessRunner.run_with_capture,
    ):
        self.timeout = timeout
        self._runner = runner

    def run(self, argv: list[str] | tuple[str, ...], input_text: str = "") -> ProcessResult:
        result = self._runner(list(argv), timeout=self.timeout, input_text=input_text)
        log.debug(
            f"probe exited {result.exit_code}: {result.cmd_str}",
            extra={"probe": result.cmd_str, "exit_code": result.exit_code},
        )
        return result

    def alive(self, argv: list[str] | tuple[str, ...]) -> bool:
        """True if ``argv --help`` runs and exits 0.

        Missing, non-executable and hung commands are all simply not alive.
        """
        return self.run([*argv, LIVENESS_FLAG]).success


@dataclass(frozen=True)
class ToolCandidate:
    """One strategy for obtaining a runnable command."""

    strategy: Strategy
    argv: tuple[str, ...]
    script: Path | None = None
    preconditions: tuple[Precondition, ...] = ()

    @property
    def display(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class Precondition:
    """A check run against a selected candidate before it is trusted.

    ``check`` receives the candidate and the prober and returns True when the
    candidate passes. ``context`` is merged into the failure so the message for
    ``kind`` can be rendered.
    """

    name: str
    kind: FailureKind
    check: Callable[[ToolCandidate, Prober], bool]
    context: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ScriptFallback:
    """Last-resort discovery of the tool's script, run through an interpreter."""

    script_name: str
    repo_root: Path | None
    interpreter: tuple[str, ...]
    preconditions: tuple[Precondition, ...] = ()


@dataclass(frozen=True)
class ToolSpec:
    """Everything needed to resolve one logical tool.

    ``override`` is the value of the override variable as read at startup, or
    None when it was unset.
    """

    name: str
    override: str | None = None
    override_preconditions: tuple[Precondition, ...] = ()
    candidates: tuple[ToolCandidate, ...] = ()
    fallback: ScriptFallback | None = None


@dataclass(frozen=True)
class ResolvedCommand:
    """A validated, ready-to-invoke command."""

    tool_name: str
    argv: tuple[str, ...]
    strategy: Strategy
    script: Path | None = None

    def invocation(self, *args: str) -> list[str]:
        """The full command line with the given extra arguments."""
        return [*self.argv, *args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


class ToolResolver:
    """Resolves a :class:`ToolSpec` into a :class:`ResolvedCommand`.

    The resolver keeps no state between calls; identical inputs give identical
    results.
    """

    def __init__(self, prober: Prober, which: Callable[[str], str | None] = shutil.which):
        self.prober = prober
        self._which = which

    @log_operation("tool resolution", log_level="DEBUG")
    def resolve(self, spec: ToolSpec) -> ResolvedCommand:
        """Select a candidate for ``spec`` and vet it.

        Raises:
            ResolutionError: when no candidate is found or a precondition fails
        """
        if spec.override is not None:
            candidate = self._override_candidate(spec)
        else:
            candidate = self._search(spec)

        self._check_preconditions(spec.name, candidate)
        get_logger(__name__, tool=spec.name).info(
            f"Using {spec.name} via {candidate.strategy.value}: {candidate.display}",
            extra={"strategy": candidate.strategy.value},
        )
        return ResolvedCommand(
            tool_name=spec.name,
            argv=candidate.argv,
            strategy=candidate.strategy,
            script=candidate.script,
        )

    def _override_candidate(self, spec: ToolSpec) -> ToolCandidate:
        argv = tuple(shlex.split(spec.override or ""))
        if not argv:
            raise ResolutionError(FailureKind.UNUSABLE, spec.name, {"command": spec.override or ""})
        log.debug(f"{spec.name} overridden: {spec.override}")
        return ToolCandidate(
            strategy=Strategy.ENV_OVERRIDE,
            argv=argv,
            preconditions=spec.override_preconditions,
        )

    def _search(self, spec: ToolSpec) -> ToolCandidate:
        for candidate in spec.candidates:
            if self.prober.alive(candidate.argv):
                return candidate
            log.debug(f"{spec.name} candidate not usable: {candidate.display}")

        script = self._find_script(spec.fallback) if spec.fallback else None
        if script is None:
            raise ResolutionError(FailureKind.NOT_FOUND, spec.name, self._fallback_context(spec))

        fallback = spec.fallback
        return ToolCandidate(
            strategy=Strategy.INTERPRETED_SCRIPT,
            argv=(*fallback.interpreter, str(script)),
            script=script,
            preconditions=fallback.preconditions,
        )

    def _find_script(self, fallback: ScriptFallback) -> Path | None:
        if fallback.repo_root is not None:
            local = fallback.repo_root / fallback.script_name
            if local.is_file():
                return local
        found = self._which(fallback.script_name)
        return Path(found) if found else None

    @staticmethod
    def _fallback_context(spec: ToolSpec) -> dict[str, str]:
        if spec.fallback is None:
            return {}
        root = spec.fallback.repo_root
        return {
            "script_name": spec.fallback.script_name,
            "repo_root": str(root) if root is not None else ".",
        }

    def _check_preconditions(self, tool_name: str, candidate: ToolCandidate) -> None:
        tool_log = get_logger(__name__, tool=tool_name)
        for precondition in candidate.preconditions:
            if precondition.check(candidate, self.prober):
                tool_log.debug(f"{tool_name} precondition passed: {precondition.name}")
                continue
            context = {"command": candidate.display, **precondition.context}
            if candidate.script is not None:
                context["script"] = str(candidate.script)
            raise ResolutionError(precondition.kind, tool_name, context)
