"""
Process execution utilities shared by tool probing, git and formatter delegation.

Every captured run feeds its standard input explicitly, so a misbehaving program
waiting on a read sees end-of-file instead of blocking the caller.

Streams are exchanged as bytes and converted with UTF-8 plus "surrogateescape",
so output that is not valid UTF-8 (a diff of a Latin-1 source file, say)
survives the trip back into a child's stdin byte for byte. Newlines are left
alone.
"""

import subprocess
from pathlib import Path

STREAM_ENCODING = "utf-8"
STREAM_ERRORS = "surrogateescape"


class ProcessResult:
    """Result of a process execution."""

    def __init__(self, exit_code: int, stdout: str, stderr: str, cmd: list[str]):
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.cmd = cmd

    @property
    def success(self) -> bool:
        """True if process exited successfully (exit code 0)."""
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Stdout and stderr combined, for checks that do not care which stream."""
        return self.stdout + self.stderr

    @property
    def cmd_str(self) -> str:
        """Command as a string for logging/display."""
        return " ".join(self.cmd)


def _decode(data: str | bytes | None) -> str:
    if not data:
        return ""
    if isinstance(data, bytes):
        return data.decode(STREAM_ENCODING, errors=STREAM_ERRORS)
    return data


def _encode(text: str) -> bytes:
    return text.encode(STREAM_ENCODING, errors=STREAM_ERRORS)


class ProcessRunner:
    """Centralized process execution with consistent error handling."""

    @staticmethod
    def run_with_capture(
        cmd: str | list[str],
        cwd: str | Path | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        input_text: str = "",
    ) -> ProcessResult:
        """
        Run command with output capture and consistent error handling.

        Args:
            cmd: Command to run (string or list of strings)
            cwd: Working directory for command execution
            env: Environment variables (replaces the current env if provided)
            timeout: Timeout in seconds (None for no timeout)
            input_text: Text fed on stdin; the stream is closed afterwards

        Returns:
            ProcessResult with exit code, stdout, stderr. Launch failures and
            timeouts are reported through the exit code instead of raising.
        """
        if isinstance(cmd, str):
            cmd_list = cmd.split()
        else:
            cmd_list = list(cmd)

        if cwd is not None:
            cwd = str(cwd)

        try:
            result = subprocess.run(
                cmd_list,
                cwd=cwd,
                env=env,
                timeout=timeout,
                input=_encode(input_text),
                capture_output=True,
                check=False,
            )

            return ProcessResult(
                exit_code=result.returncode,
                stdout=_decode(result.stdout),
                stderr=_decode(result.stderr),
                cmd=cmd_list,
            )

        except subprocess.TimeoutExpired as e:
            return ProcessResult(
                exit_code=124,  # Standard timeout exit code
                stdout=_decode(e.stdout),
                stderr=f"Command timed out after {timeout} seconds",
                cmd=cmd_list,
            )
        except FileNotFoundError:
            return ProcessResult(
                exit_code=127,  # Standard "command not found" exit code
                stdout="",
                stderr=f"Command not found: {cmd_list[0]}",
                cmd=cmd_list,
            )
        except OSError as e:
            # Covers PermissionError for files that exist but are not executable
            return ProcessResult(
                exit_code=126,
                stdout="",
                stderr=f"Failed to execute command: {e}",
                cmd=cmd_list,
            )

    @staticmethod
    def run_passthrough(
        cmd: list[str],
        cwd: str | Path | None = None,
        input_text: str = "",
    ) -> ProcessResult:
        """
        Run command with its output going straight to the terminal.

        Used for the delegated formatter run, which has no timeout and whose
        exit code is reported unchanged.

        Raises:
            FileNotFoundError: If command executable is not found
            OSError: If command cannot be executed
        """
        result = subprocess.run(
            list(cmd),
            cwd=str(cwd) if cwd is not None else None,
            input=_encode(input_text),
            check=False,
        )
        return ProcessResult(exit_code=result.returncode, stdout="", stderr="", cmd=list(cmd))

    @staticmethod
    def run_git_command(git_args: list[str], cwd: str | Path | None = None) -> ProcessResult:
        """
        Run git command with consistent error handling.

        Args:
            git_args: Git command arguments (without 'git' prefix)
            cwd: Working directory for git command

        Returns:
            ProcessResult with git command output
        """
        cmd = ["git"] + git_args
        return ProcessRunner.run_with_capture(cmd, cwd=cwd)
