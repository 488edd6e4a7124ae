"""Public interface for the ``statement_ledger`` package.

Symbol re-exports only; there is no runtime logic here.
"""

from .aggregate import build_daily_buckets, compute_totals, derive_period
from .amounts import parse_amount
from .api import normalize_statement
from .assembler import assemble_transactions
from .columns import DEFAULT_COLUMNS, ColumnSpec, resolve_column
from .cumulative import attach_daily_close, build_cumulative_timeline
from .ingest import Sheet, StatementReadError, preview_statement, read_statement
from .models import (
    CumulativePoint,
    DailyBucket,
    DailyClose,
    Direction,
    Period,
    RawRow,
    StatementResult,
    Totals,
    Transaction,
)
from .profiles import BankProfile, ProfileError, get_profile, load_profiles
from .temporal import normalize_time_cell, reconstruct_instant

__all__ = [
    # Pipeline
    "normalize_statement",
    "resolve_column",
    "reconstruct_instant",
    "normalize_time_cell",
    "parse_amount",
    "assemble_transactions",
    "derive_period",
    "build_daily_buckets",
    "build_cumulative_timeline",
    "attach_daily_close",
    "compute_totals",
    # Configuration
    "BankProfile",
    "ColumnSpec",
    "DEFAULT_COLUMNS",
    "ProfileError",
    "get_profile",
    "load_profiles",
    # Ingest
    "Sheet",
    "StatementReadError",
    "read_statement",
    "preview_statement",
    # Models / types
    "RawRow",
    "Transaction",
    "Direction",
    "Period",
    "DailyBucket",
    "CumulativePoint",
    "DailyClose",
    "Totals",
    "StatementResult",
]
