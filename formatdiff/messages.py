"""Remediation text shown when a tool cannot be resolved.

The text is data: one template per failure kind, filled from the failure's
context. Changing wording or URLs never touches resolution logic.
"""

from __future__ import annotations

from .resolver import FailureKind
from .utils.error_handling import ResolutionError

PYPI_URL = "https://pypi.python.org/pypi/"

REMEDIATION: dict[FailureKind, str] = {
    FailureKind.NOT_FOUND: """\
You didn't have {script_name} and/or clang-format available in your computer!
You can download {script_name} by running:
    curl --location {url} -o {repo_root}/{script_name}
You should make sure the downloaded script is not compromised.
You can download clang-format by running:
    brew install clang-format
  Or
    apt install clang-format
  This might work too:
    yum install git-clang-format
Then make sure clang-format is available and executable from $PATH:
    clang-format --version""",
    FailureKind.UNUSABLE: """\
{tool} could not be run: '{command} {flag}' did not exit successfully.
Check that the command exists, is executable and that its dependencies are installed.""",
    FailureKind.MISSING_DEPENDENCY: """\
To run {script_name}, we'll need {library} to be
installed. You can try either of the follow ways to install it:
  1. Manually download {downloads}
  2. easy_install {packages} (if you have easy_install)
  3. pip install {packages} (if you have pip)""",
    FailureKind.VERSION_MISMATCH: """\
You have {script_name} for Python 2 but are using a Python 3
interpreter ({interpreter}).
You can download {script_name} for Python 3 by running:
    curl --location {url} -o {repo_root}/{script_name}
You should make sure the downloaded script is not compromised.""",
}


def _module_values(modules: str) -> dict[str, str]:
    """Prose, download lines and install arguments for a comma-separated module list."""
    names = [name.strip() for name in modules.split(",") if name.strip()]
    if not names:
        return {"library": "the required libraries", "downloads": PYPI_URL, "packages": ""}
    if len(names) == 1:
        library = f"the library {names[0]}"
    else:
        library = f"the libraries {', '.join(names[:-1])} and {names[-1]}"
    return {
        "library": library,
        "downloads": "\n     ".join(f"{name}: {PYPI_URL}{name}" for name in names),
        "packages": " ".join(names),
    }


def render(error: ResolutionError, defaults: dict[str, str] | None = None) -> str:
    """Render the remediation text for ``error``.

    ``defaults`` supplies values the failure context lacks (repository root,
    download URL, ...); the failure's own context wins.
    """
    values: dict[str, str] = {
        "tool": error.tool_name,
        "command": error.tool_name,
        "flag": "--help",
        "script_name": error.tool_name,
        "repo_root": ".",
        "url": "",
        "modules": "",
        "interpreter": "",
    }
    values.update(defaults or {})
    values.update(error.context)
    values.update(_module_values(values["modules"]))
    return REMEDIATION[error.kind].format(**values)
