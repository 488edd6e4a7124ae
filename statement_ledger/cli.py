"""CLI for the ``statement_ledger`` package.

Command handlers (``cmd_parse``, ``cmd_preview``, ``cmd_profiles``) return a
process exit code and print JSON to stdout; errors go to stderr. The Typer
application below wires them to console options. Environment variables are
loaded from a local ``.env`` using ``python-dotenv`` before settings are
resolved. Business logic lives in ``statement_ledger.api``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo

from .logging_setup import configure_logging, get_logger
from .profiles import BankProfile, ProfileError, available_profiles, get_profile, load_profiles
from .settings import Settings, resolve_zone

_logger = get_logger("statement_ledger.cli")


# ---- Small module-level helpers ---------------------------------------------


def _json_default(value: Any) -> str:
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value)


def _emit(obj: Any, indent: int | None) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=indent, default=_json_default))


def _load_extra_profiles(profiles_path: Path | None) -> dict[str, BankProfile]:
    return load_profiles(profiles_path) if profiles_path is not None else {}


def _parse_day(raw: str | None, option: str) -> date | None:
    if raw is None or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{option} must be YYYY-MM-DD, got {raw!r}") from exc


# ---- Command handlers -------------------------------------------------------


def cmd_parse(
    file_path: str,
    *,
    settings: Settings,
    profile_name: str | None = None,
    timezone_name: str | None = None,
    header_index: int | None = None,
    period_from: str | None = None,
    period_to: str | None = None,
    profiles_path: Path | None = None,
    indent: int | None = None,
) -> int:
    """Normalize one statement file and print the JSON payload.

    Option values override ``settings``; the header row defaults to the
    selected profile's ``header_index``.
    """

    # Deferred imports keep ``--help`` fast.
    from .api import normalize_statement
    from .ingest import StatementReadError, read_statement
    from .payload import FileMeta, build_payload, payload_dict

    try:
        zone = resolve_zone(timezone_name or settings.timezone)
        extra = _load_extra_profiles(profiles_path or settings.profiles_path)
        profile = get_profile(profile_name or settings.profile, extra)
        start = _parse_day(period_from, "--from")
        end = _parse_day(period_to, "--to")
    except (ProfileError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    path = Path(file_path)
    hdr = profile.header_index if header_index is None else header_index
    try:
        sheet = read_statement(path, header_index=hdr, max_bytes=settings.max_file_bytes)
    except StatementReadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        result = normalize_statement(
            sheet.rows, profile, zone=zone, period_from=start, period_to=end
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    size = path.stat().st_size
    payload = build_payload(
        result,
        profile=profile,
        processed_at=datetime.now(zone),
        file=FileMeta(name=path.name, size=size),
        sheet=sheet.name,
    )
    _logger.info(
        "[parse] file=%r size=%dB rows=%d transactions=%d parseMs=%.1f",
        path.name,
        size,
        result.rows_read,
        len(result.transactions),
        result.elapsed_ms,
    )
    _emit(payload_dict(payload), indent)
    return 0


def cmd_preview(
    file_path: str,
    *,
    settings: Settings,
    header_index: int | None = None,
    profile_name: str | None = None,
    limit: int = 3,
    indent: int | None = 2,
) -> int:
    """Print the header row and first rows as seen with ``header_index``."""

    from .ingest import StatementReadError, preview_statement

    try:
        if header_index is None:
            header_index = get_profile(
                profile_name or settings.profile, _load_extra_profiles(settings.profiles_path)
            ).header_index
        preview = preview_statement(
            file_path,
            header_index=header_index,
            limit=limit,
            max_bytes=settings.max_file_bytes,
        )
    except (StatementReadError, ProfileError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit({"debug": preview}, indent)
    return 0


def cmd_profiles(*, settings: Settings, profiles_path: Path | None = None) -> int:
    try:
        profiles = available_profiles(
            _load_extra_profiles(profiles_path or settings.profiles_path)
        )
    except ProfileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit(
        [
            {
                "name": p.name,
                "bank": p.bank,
                "currency": p.currency,
                "headerIndex": p.header_index,
                "incomeColumns": list(p.income_synonyms),
                "expenseColumns": list(p.expense_synonyms),
            }
            for p in sorted(profiles.values(), key=lambda p: p.name)
        ],
        2,
    )
    return 0


def _settings_or_exit() -> Settings:
    try:
        return Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(1) from e


# ---- Typer-based console interface ------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Normalize bank statement exports (XLSX/XLS/CSV) into transactions, "
        "daily aggregates and a running balance. Loads settings from a local .env."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
FILE_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Statement file (.xlsx, .xls or .csv)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)


@app.command("parse")
def parse_cmd(
    file_path: Annotated[Path, FILE_ARGUMENT],
    *,
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Bank profile name (defaults to SL_PROFILE or 'mbank')."
    ),
    tz: str | None = typer.Option(
        None, "--tz", help="Institutional timezone (defaults to SL_TIMEZONE or Asia/Bishkek)."
    ),
    header_index: int | None = typer.Option(
        None, "--header-index", min=0, help="Zero-based header row; defaults to the profile's."
    ),
    period_from: str | None = typer.Option(
        None, "--from", help="Explicit period start (YYYY-MM-DD)."
    ),
    period_to: str | None = typer.Option(None, "--to", help="Explicit period end (YYYY-MM-DD)."),
    profiles_path: Path | None = typer.Option(
        None, "--profiles-path", help="JSON file with additional bank profiles."
    ),
    indent: int | None = typer.Option(None, "--indent", min=0, help="Pretty-print JSON."),
) -> None:
    code = cmd_parse(
        str(file_path),
        settings=_settings_or_exit(),
        profile_name=profile,
        timezone_name=tz,
        header_index=header_index,
        period_from=period_from,
        period_to=period_to,
        profiles_path=profiles_path,
        indent=indent,
    )
    raise typer.Exit(code)


@app.command("preview")
def preview_cmd(
    file_path: Annotated[Path, FILE_ARGUMENT],
    *,
    header_index: int | None = typer.Option(
        None, "--header-index", min=0, help="Zero-based header row; defaults to the profile's."
    ),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Bank profile name."),
    limit: int = typer.Option(3, "--limit", min=0, help="Number of rows to preview."),
) -> None:
    code = cmd_preview(
        str(file_path),
        settings=_settings_or_exit(),
        header_index=header_index,
        profile_name=profile,
        limit=limit,
    )
    raise typer.Exit(code)


@app.command("profiles")
def profiles_cmd(
    profiles_path: Path | None = typer.Option(
        None, "--profiles-path", help="JSON file with additional bank profiles."
    ),
) -> None:
    raise typer.Exit(cmd_profiles(settings=_settings_or_exit(), profiles_path=profiles_path))


@app.callback()
def _root(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log skipped-row counts and the resolved period."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Log warnings and errors only."),
) -> None:
    """Load ``.env`` from the working directory (existing environment wins)
    and configure package logging.

    ``--verbose``/``--quiet`` override ``STATEMENT_LEDGER_LOG_LEVEL``.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    level = logging.DEBUG if verbose else logging.WARNING if quiet else None
    try:
        configure_logging(level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(1) from e


if __name__ == "__main__":  # pragma: no cover
    app()
