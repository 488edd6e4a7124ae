"""Readers turning statement files into raw header -> cell rows."""

from .tabular import Sheet, StatementReadError, preview_statement, read_statement

__all__ = ["Sheet", "StatementReadError", "preview_statement", "read_statement"]
