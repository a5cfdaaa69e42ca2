"""formatdiff - run clang-format-diff over the changes on the current branch."""

__version__ = "0.1.0"
