"""Configuration system for formatdiff."""

from .exceptions import ConfigValidationError
from .models import FormatDiffConfig, get_config, reset_config

__all__ = ["ConfigValidationError", "FormatDiffConfig", "get_config", "reset_config"]
