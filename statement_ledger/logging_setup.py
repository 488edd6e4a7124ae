"""Logging for the ``statement_ledger`` package.

Library modules log through ``get_logger("statement_ledger.<module>")`` and
never attach handlers. The package logger carries a ``NullHandler``, so an
application embedding the library sees nothing until it configures logging.

The CLI calls :func:`configure_logging` on every invocation. Statement JSON
is written to stdout, so records always go to stderr. At INFO the output is
one ``[parse]`` summary line per file; DEBUG adds skipped-row counts and the
resolved period, prefixed with a timestamp and the emitting module.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "statement_ledger"
LEVEL_ENV_VAR = "STATEMENT_LEDGER_LOG_LEVEL"

_BRIEF_FORMAT = "%(levelname)s %(message)s"
_DETAILED_FORMAT = "%(asctime)s %(levelname)s %(short_name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class _StderrHandler(logging.StreamHandler):
    """The one handler :func:`configure_logging` installs (and replaces)."""


class _ShortNameFormatter(logging.Formatter):
    """Expose ``statement_ledger.ingest.tabular`` as ``ingest.tabular``."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = PACKAGE_LOGGER + "."
        name = record.name
        record.short_name = name[len(prefix) :] if name.startswith(prefix) else name
        return super().format(record)


def resolve_level(level: int | str | None = None) -> int:
    """Explicit ``level``, else ``$STATEMENT_LEDGER_LOG_LEVEL``, else INFO.

    Level names are case-insensitive and numeric strings are accepted; any
    other value raises ``ValueError``.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR, "").strip() or logging.INFO
    if isinstance(level, int):
        return level
    text = level.strip().upper()
    if text.isdigit():
        return int(text)
    try:
        return logging.getLevelNamesMapping()[text]
    except KeyError:
        raise ValueError(f"unknown log level: {level!r}") from None


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
) -> int:
    """Install the package stderr handler and return the effective level.

    A second call replaces the handler from the first, so each CLI
    invocation in a long-lived process logs to the current ``sys.stderr``
    at the level it asked for.
    """

    resolved = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if isinstance(h, _StderrHandler):
            logger.removeHandler(h)

    handler = _StderrHandler(stream if stream is not None else sys.stderr)
    fmt = _DETAILED_FORMAT if resolved <= logging.DEBUG else _BRIEF_FORMAT
    handler.setFormatter(_ShortNameFormatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    # Records stay out of the root logger (and any host handlers on it).
    logger.propagate = False
    return resolved


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["LEVEL_ENV_VAR", "configure_logging", "get_logger", "resolve_level"]
