"""Runtime configuration resolved from the environment.

Variables (all optional):

- ``SL_TIMEZONE``: institutional timezone statements are interpreted in
  (default ``Asia/Bishkek``).
- ``SL_PROFILE``: default bank profile name (default ``mbank``).
- ``SL_PROFILES_PATH``: JSON file with additional bank profiles.
- ``SL_MAX_FILE_BYTES``: upper bound on accepted statement file size
  (default 20 MiB).

The CLI loads ``.env`` via ``python-dotenv`` before calling
:meth:`Settings.from_env`; values already present in the environment win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "Asia/Bishkek"
DEFAULT_PROFILE = "mbank"
DEFAULT_MAX_FILE_BYTES = 20 * 1024 * 1024


def resolve_zone(name: str) -> ZoneInfo:
    """Return the ``ZoneInfo`` for ``name`` or raise ``ValueError``."""

    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {name!r}") from exc


@dataclass(frozen=True, slots=True)
class Settings:
    timezone: str = DEFAULT_TIMEZONE
    profile: str = DEFAULT_PROFILE
    profiles_path: Path | None = None
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES

    @property
    def zone(self) -> ZoneInfo:
        return resolve_zone(self.timezone)

    @classmethod
    def from_env(cls) -> Settings:
        timezone = (os.getenv("SL_TIMEZONE") or "").strip() or DEFAULT_TIMEZONE
        profile = (os.getenv("SL_PROFILE") or "").strip() or DEFAULT_PROFILE
        raw_path = (os.getenv("SL_PROFILES_PATH") or "").strip()

        raw_max = (os.getenv("SL_MAX_FILE_BYTES") or "").strip()
        try:
            max_file_bytes = int(raw_max) if raw_max else DEFAULT_MAX_FILE_BYTES
        except ValueError as exc:
            raise ValueError(f"SL_MAX_FILE_BYTES must be an integer, got {raw_max!r}") from exc
        if max_file_bytes <= 0:
            raise ValueError("SL_MAX_FILE_BYTES must be positive")

        # Fail fast on a misconfigured zone rather than on first use.
        resolve_zone(timezone)

        return cls(
            timezone=timezone,
            profile=profile,
            profiles_path=Path(raw_path) if raw_path else None,
            max_file_bytes=max_file_bytes,
        )


__all__ = ["DEFAULT_TIMEZONE", "Settings", "resolve_zone"]
