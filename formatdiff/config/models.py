"""Configuration models for formatdiff.

Every environment variable the program honours is read here, once, when the
configuration is built. Nothing downstream consults ``os.environ`` directly.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import ConfigValidationError, CrossFieldValidationError, FieldValidationError

if TYPE_CHECKING:
    from ..resolver import FailureKind

CLANG_FORMAT_DIFF_URL = (
    "https://raw.githubusercontent.com/llvm/llvm-project/main/"
    "clang/tools/clang-format/clang-format-diff.py"
)


def _csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _int_env(name: str, default: int, field_name: str) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise FieldValidationError(
            f"Expected an integer, got {raw!r}", field=field_name, env_var=name
        ) from e


@dataclass
class TimeoutConfig:
    """Timeout configuration for external probes."""

    probe_seconds: float = 10.0  # Per liveness/precondition probe

    @classmethod
    def from_env(cls) -> "TimeoutConfig":
        """Create TimeoutConfig from environment variables."""
        raw = os.getenv("FORMATDIFF_PROBE_TIMEOUT", "10")
        try:
            probe_seconds = float(raw)
        except ValueError as e:
            raise FieldValidationError(
                f"Expected a number of seconds, got {raw!r}",
                field="timeouts.probe_seconds",
                env_var="FORMATDIFF_PROBE_TIMEOUT",
            ) from e
        return cls(probe_seconds=probe_seconds)


@dataclass
class ExitCodeConfig:
    """Exit codes for different scenarios."""

    success: int = 0
    error: int = 1
    invalid_args: int = 2
    tool_not_found: int = 128
    tool_unusable: int = 128
    missing_dependency: int = 129
    version_mismatch: int = 130

    @classmethod
    def from_env(cls) -> "ExitCodeConfig":
        """Create ExitCodeConfig from environment variables."""
        return cls(
            success=_int_env("FORMATDIFF_EXIT_CODE_SUCCESS", 0, "exit_codes.success"),
            error=_int_env("FORMATDIFF_EXIT_CODE_ERROR", 1, "exit_codes.error"),
            invalid_args=_int_env("FORMATDIFF_EXIT_CODE_INVALID_ARGS", 2, "exit_codes.invalid_args"),
            tool_not_found=_int_env(
                "FORMATDIFF_EXIT_CODE_NOT_FOUND", 128, "exit_codes.tool_not_found"
            ),
            tool_unusable=_int_env(
                "FORMATDIFF_EXIT_CODE_UNUSABLE", 128, "exit_codes.tool_unusable"
            ),
            missing_dependency=_int_env(
                "FORMATDIFF_EXIT_CODE_MISSING_DEPENDENCY", 129, "exit_codes.missing_dependency"
            ),
            version_mismatch=_int_env(
                "FORMATDIFF_EXIT_CODE_VERSION_MISMATCH", 130, "exit_codes.version_mismatch"
            ),
        )

    def for_failure(self, kind: "FailureKind") -> int:
        """Exit code for a resolution failure kind."""
        return {
            "not_found": self.tool_not_found,
            "unusable": self.tool_unusable,
            "missing_dependency": self.missing_dependency,
            "version_mismatch": self.version_mismatch,
        }[kind.value]


@dataclass
class ToolConfig:
    """Where to look for the formatter and how to vet it.

    ``override`` and ``interpreter`` hold values taken from the environment;
    the remaining fields describe the tool itself.
    """

    name: str = "clang-format-diff"
    override_env: str = "CLANG_FORMAT_DIFF"
    interpreter_env: str = "PYTHON"
    default_interpreter: str = "python3"
    command_names: tuple[str, ...] = ("clang-format-diff", "clang-format-diff.py")
    script_name: str = "clang-format-diff.py"
    required_modules: tuple[str, ...] = ("argparse",)
    legacy_markers: tuple[str, ...] = ("print '",)
    modern_version_marker: str = "ython 3"
    download_url: str = CLANG_FORMAT_DIFF_URL
    override: str | None = None
    interpreter: str = "python3"

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """Create ToolConfig from environment variables."""
        base = cls()
        return cls(
            command_names=_csv(
                os.getenv("FORMATDIFF_COMMAND_NAMES", ",".join(base.command_names))
            ),
            script_name=os.getenv("FORMATDIFF_SCRIPT_NAME", base.script_name),
            required_modules=_csv(
                os.getenv("FORMATDIFF_REQUIRED_MODULES", ",".join(base.required_modules))
            ),
            override=os.getenv(base.override_env) or None,
            interpreter=os.getenv(base.interpreter_env) or base.default_interpreter,
        )


@dataclass
class DiffConfig:
    """Which diff is handed to the formatter and how it is applied."""

    base_branch: str = "master"
    style: str = "google"
    strip: int = 1
    paths: tuple[str, ...] = (".",)

    @classmethod
    def from_env(cls) -> "DiffConfig":
        """Create DiffConfig from environment variables."""
        return cls(
            base_branch=os.getenv("FORMATDIFF_BASE", "master"),
            style=os.getenv("FORMATDIFF_STYLE", "google"),
            strip=_int_env("FORMATDIFF_STRIP", 1, "diff.strip"),
            paths=_csv(os.getenv("FORMATDIFF_PATHS", ".")) or (".",),
        )


@dataclass
class FormatDiffConfig:
    """Main configuration container for formatdiff."""

    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    exit_codes: ExitCodeConfig = field(default_factory=ExitCodeConfig)
    tool: ToolConfig = field(default_factory=ToolConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)

    @classmethod
    def from_env(cls) -> "FormatDiffConfig":
        """Create configuration from environment variables."""
        return cls(
            timeouts=TimeoutConfig.from_env(),
            exit_codes=ExitCodeConfig.from_env(),
            tool=ToolConfig.from_env(),
            diff=DiffConfig.from_env(),
        )

    def validate(self) -> None:
        """Validate configuration values and fail fast if invalid."""
        if self.timeouts.probe_seconds <= 0:
            raise FieldValidationError(
                "Probe timeout must be positive",
                field="timeouts.probe_seconds",
                env_var="FORMATDIFF_PROBE_TIMEOUT",
            )

        if not self.tool.command_names:
            raise FieldValidationError(
                "At least one command name is required",
                field="tool.command_names",
                env_var="FORMATDIFF_COMMAND_NAMES",
            )

        if not self.tool.script_name:
            raise FieldValidationError(
                "Script name must not be empty",
                field="tool.script_name",
                env_var="FORMATDIFF_SCRIPT_NAME",
            )

        if self.diff.strip < 0:
            raise FieldValidationError(
                "Strip depth must be non-negative", field="diff.strip", env_var="FORMATDIFF_STRIP"
            )

        codes = self.exit_codes
        # Not-found and unusable may share a code; every other failure needs its own.
        distinct = {
            "exit_codes.tool_not_found": codes.tool_not_found,
            "exit_codes.missing_dependency": codes.missing_dependency,
            "exit_codes.version_mismatch": codes.version_mismatch,
        }
        if len(set(distinct.values())) != len(distinct):
            raise CrossFieldValidationError(
                "Not-found, missing-dependency and version-mismatch exit codes must differ",
                fields=tuple(distinct),
            )
        if codes.tool_unusable in (codes.missing_dependency, codes.version_mismatch):
            raise CrossFieldValidationError(
                "Unusable exit code must differ from missing-dependency and version-mismatch",
                fields=(
                    "exit_codes.tool_unusable",
                    "exit_codes.missing_dependency",
                    "exit_codes.version_mismatch",
                ),
            )

        reserved = {codes.success, codes.error, codes.invalid_args}
        failures = {**distinct, "exit_codes.tool_unusable": codes.tool_unusable}
        clashing = tuple(name for name, code in failures.items() if code in reserved)
        if clashing:
            raise CrossFieldValidationError(
                "Resolution exit codes must not reuse success/error/invalid-args codes",
                fields=clashing,
            )


_config_instance: FormatDiffConfig | None = None


def get_config() -> FormatDiffConfig:
    """Get the global configuration instance, creating it if needed."""
    global _config_instance
    if _config_instance is None:
        _config_instance = FormatDiffConfig.from_env()
        _config_instance.validate()
    return _config_instance


def reset_config() -> None:
    """Reset the global configuration instance (mainly for testing)."""
    global _config_instance
    _config_instance = None


__all__ = [
    "ConfigValidationError",
    "DiffConfig",
    "ExitCodeConfig",
    "FormatDiffConfig",
    "TimeoutConfig",
    "ToolConfig",
    "get_config",
    "reset_config",
]
