"""Bank profiles: which columns carry inflow and which carry outflow.

Exports reuse generic header text ("Debit", "Credit", "Дебет", "Кредит") with
meanings that differ between institutions and even between export versions
of one institution. A :class:`BankProfile` makes that choice explicit: the
caller selects a profile by name and the assembler reads income from
``income_synonyms`` and expense from ``expense_synonyms``. Nothing is inferred
from the file.

Extra profiles can be supplied as a JSON list of objects::

    [
      {
        "name": "acme",
        "bank": "Acme Bank",
        "currency": "USD",
        "income_synonyms": ["Deposits"],
        "expense_synonyms": ["Withdrawals"],
        "header_index": 3
      }
    ]
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator

from .columns import DEFAULT_COLUMNS, EXPENSE_AMOUNT, INCOME_AMOUNT, ColumnSpec


class ProfileError(ValueError):
    """Unknown profile name or malformed profile definition."""


class BankProfile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str
    bank: str = ""
    currency: str = ""
    income_synonyms: tuple[str, ...]
    expense_synonyms: tuple[str, ...]
    header_index: int = 0

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, v: str) -> str:
        if not v:
            raise ValueError("name must be non-empty")
        return v.lower()

    @field_validator("income_synonyms", "expense_synonyms")
    @classmethod
    def _non_empty_synonyms(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        items = tuple(s.strip() for s in v if s.strip())
        if not items:
            raise ValueError("at least one header synonym is required")
        return items

    @field_validator("header_index")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("header_index must be >= 0")
        return v

    def column_spec(self) -> ColumnSpec:
        """Full field -> synonyms mapping for rows of this export format."""

        spec: dict[str, tuple[str, ...]] = dict(DEFAULT_COLUMNS)
        spec[INCOME_AMOUNT] = self.income_synonyms
        spec[EXPENSE_AMOUNT] = self.expense_synonyms
        return spec


# MBank exports put incoming money under the generic debit-side headers and
# outgoing money under the credit-side ones.
MBANK = BankProfile(
    name="mbank",
    bank="MBank",
    currency="KGS",
    income_synonyms=("Списание", "Дебет", "Расход", "Debit"),
    expense_synonyms=("Поступление", "Кредит", "Доход", "Credit"),
    header_index=12,
)

STANDARD = BankProfile(
    name="standard",
    income_synonyms=("Поступление", "Кредит", "Доход", "Credit", "Income"),
    expense_synonyms=("Списание", "Дебет", "Расход", "Debit", "Expense"),
    header_index=0,
)

BUILTIN_PROFILES: dict[str, BankProfile] = {p.name: p for p in (MBANK, STANDARD)}

_PROFILE_LIST = TypeAdapter(list[BankProfile])


def load_profiles(path: str | PathLike[str]) -> dict[str, BankProfile]:
    """Read additional profiles from a JSON file, keyed by name."""

    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProfileError(f"cannot read profiles file {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ProfileError(f"profiles file {p} is not valid JSON: {exc}") from exc

    try:
        profiles = _PROFILE_LIST.validate_python(raw)
    except ValidationError as exc:
        raise ProfileError(f"invalid profile definition in {p}: {exc}") from exc

    out: dict[str, BankProfile] = {}
    for profile in profiles:
        if profile.name in out:
            raise ProfileError(f"duplicate profile name in {p}: {profile.name!r}")
        out[profile.name] = profile
    return out


def available_profiles(
    extra: Mapping[str, BankProfile] | Iterable[BankProfile] | None = None,
) -> dict[str, BankProfile]:
    """Built-in profiles overlaid with ``extra`` (extra wins on name clashes)."""

    merged = dict(BUILTIN_PROFILES)
    if extra is None:
        return merged
    items = extra.values() if isinstance(extra, Mapping) else extra
    for profile in items:
        merged[profile.name] = profile
    return merged


def get_profile(
    name: str,
    extra: Mapping[str, BankProfile] | Iterable[BankProfile] | None = None,
) -> BankProfile:
    profiles = available_profiles(extra)
    key = name.strip().lower()
    try:
        return profiles[key]
    except KeyError:
        known = ", ".join(sorted(profiles))
        raise ProfileError(f"unknown bank profile: {name!r} (known: {known})") from None


__all__ = [
    "BUILTIN_PROFILES",
    "MBANK",
    "STANDARD",
    "BankProfile",
    "ProfileError",
    "available_profiles",
    "get_profile",
    "load_profiles",
]
