"""
Exception hierarchy for formatdiff.

Resolution failures carry a failure kind which the CLI turns into a fixed exit
code; subprocess failures carry the details of the command that failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..resolver import FailureKind


@dataclass
class SubprocessDetails:
    """Container for subprocess execution details."""

    cmd: str | list[str]
    exit_code: int | None = None
    stdout: str | None = None
    stderr: str | None = None

    @property
    def cmd_str(self) -> str:
        """Command as a string for display."""
        return self.cmd if isinstance(self.cmd, str) else " ".join(self.cmd)


class FormatDiffError(Exception):
    """Base exception class for formatdiff operations."""

    def __init__(self, message: str, operation: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.cause = cause


class SubprocessError(FormatDiffError):
    """Standardized exception for subprocess execution errors."""

    def __init__(
        self,
        message: str,
        details: SubprocessDetails,
        *,
        operation: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, operation, cause)
        self.details = details
        self.cmd = details.cmd_str
        self.exit_code = details.exit_code
        self.stdout = details.stdout
        self.stderr = details.stderr


class ResolutionError(FormatDiffError):
    """A tool could not be resolved into a trusted command.

    Exactly one of these is raised per failed resolution; ``kind`` selects both
    the remediation text and the exit code.
    """

    def __init__(
        self, kind: FailureKind, tool_name: str, context: dict[str, str] | None = None
    ):
        self.kind = kind
        self.tool_name = tool_name
        self.context = dict(context or {})
        super().__init__(
            f"{tool_name}: {kind.value}",
            operation="resolve",
        )
