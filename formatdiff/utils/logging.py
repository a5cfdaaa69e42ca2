"""
Logging utilities for formatdiff.

Provides consistent configuration with either key=value text or structured
(JSON) output, and a logger adapter for contextual logging.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from collections.abc import MutableMapping
from typing import Any

FORMATDIFF_LOGGER_NAME = "formatdiff"


def _coerce_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        lookup = {
            "CRITICAL": logging.CRITICAL,
            "ERROR": logging.ERROR,
            "WARNING": logging.WARNING,
            "INFO": logging.INFO,
            "DEBUG": logging.DEBUG,
            "NOTSET": logging.NOTSET,
        }
        return lookup.get(level.upper(), logging.INFO)
    return logging.INFO


def _record_extras(record: logging.LogRecord, skip: set[str]) -> dict[str, Any]:
    reserved = set(vars(logging.makeLogRecord({})).keys())
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in reserved and key not in skip
    }


class JsonFormatter(logging.Formatter):
    """Render log records as JSON with useful context fields."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
            "msg": record.getMessage(),
        }
        payload.update(_record_extras(record, set(payload) | {"message", "asctime"}))

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, separators=(",", ":"), default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        # UTC for easier aggregation
        ct = time.gmtime(record.created)
        s = time.strftime(datefmt or self.default_time_format, ct)
        return self.default_msec_format % (s, record.msecs)


class KeyValueFormatter(logging.Formatter):
    """Key=value text formatter suitable for local debugging."""

    def format(self, record: logging.LogRecord) -> str:
        base = (
            f"ts={self.formatTime(record)} level={record.levelname} "
            f"logger={record.name} where={record.module}:{record.lineno}:{record.funcName} "
            f'msg="{record.getMessage()}"'
        )

        extras: list[str] = []
        for key, value in _record_extras(record, {"message", "asctime"}).items():
            try:
                extras.append(f"{key}={json.dumps(value, separators=(',', ':'))}")
            except (TypeError, ValueError):
                extras.append(f'{key}="{value}"')
        if record.exc_info:
            extras.append(f"exc={json.dumps(self.formatException(record.exc_info))}")
        return base + (" " + " ".join(extras) if extras else "")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        ct = time.gmtime(record.created)
        return time.strftime("%Y-%m-%dT%H:%M:%S", ct) + f".{int(record.msecs):03d}Z"


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges provided context into each log record."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra: dict[str, Any] = dict(getattr(self, "extra", {}) or {})
        kw_extra = kwargs.get("extra")
        if isinstance(kw_extra, dict):
            extra.update(kw_extra)
        kwargs = dict(kwargs)
        if extra:
            kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str | None = None, **context: Any) -> logging.Logger | ContextAdapter:
    """
    Return a logger (or adapter) under the formatdiff namespace.

    If context is provided, a ContextAdapter is returned so that the context appears
    with each log message (and in JSON payloads).
    """
    logger = logging.getLogger(name or FORMATDIFF_LOGGER_NAME)
    return ContextAdapter(logger, context) if context else logger


def configure_logging(
    level: int | str | None = None,
    fmt: str | None = None,
    stream=sys.stderr,
) -> None:
    """
    Configure global logging with consistent formatting.

    - level: numeric or string level; defaults to INFO
    - fmt: 'json' or 'text' (key=value). Defaults from FORMATDIFF_LOG_FORMAT env.
    """
    resolved_level = _coerce_level(level)
    env_fmt = os.environ.get("FORMATDIFF_LOG_FORMAT", "").strip().lower()
    resolved_fmt = (fmt or env_fmt or "text").lower()
    if resolved_fmt not in {"json", "text"}:
        resolved_fmt = "text"

    # Stable stream so pytest's capture swapping does not close our handler's stream
    real_stream = sys.__stderr__ if stream is sys.stderr else stream
    root = logging.getLogger()
    root.setLevel(resolved_level)

    desired_formatter: logging.Formatter = (
        JsonFormatter() if resolved_fmt == "json" else KeyValueFormatter()
    )
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is real_stream:
            h.setFormatter(desired_formatter)
            h.setLevel(resolved_level)
            break
    else:
        handler = logging.StreamHandler(real_stream)
        handler.setFormatter(desired_formatter)
        handler.setLevel(resolved_level)
        root.addHandler(handler)

    # Root controls the effective level
    pkg_logger = logging.getLogger(FORMATDIFF_LOGGER_NAME)
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True
