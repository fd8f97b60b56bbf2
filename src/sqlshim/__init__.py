"""
sqlshim: SQL-shaped statements over a table-store API

Accepts parameterized INSERT/SELECT/UPDATE/DELETE strings ($1, $2, ...)
and translates them into structured select/insert/update/delete calls with
equality filters against a PostgREST-style store such as Supabase.
"""

__version__ = "0.1.0"

from .config import ShimConfig
from .errors import (
    BackendError,
    ConfigurationError,
    SQLShimError,
    UnparseableStatementError,
)
from .pool import SQLShim
from .sql_translator import Parsed, RowSet, StatementKind, Unparsed, parse_statement
from .store import SupabaseStore, TableStore, normalize_response

__all__ = [
    "__version__",
    "SQLShim",
    "ShimConfig",
    "SupabaseStore",
    "TableStore",
    "normalize_response",
    "parse_statement",
    "RowSet",
    "Parsed",
    "Unparsed",
    "StatementKind",
    "SQLShimError",
    "BackendError",
    "ConfigurationError",
    "UnparseableStatementError",
]
