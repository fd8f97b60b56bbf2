"""
Exception types for sqlshim.

Only BackendError (or the store's own exception) ever escapes
SQLShim.execute(). Parse misses are reported as Unparsed outcomes and
UnparseableStatementError is raised only when a caller asks for it.
"""

from typing import Any, List, Optional


class SQLShimError(Exception):
    """Base class for all sqlshim errors"""


class ConfigurationError(SQLShimError):
    """Raised when a ShimConfig fails validation"""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid sqlshim configuration: " + "; ".join(self.problems))


class BackendError(SQLShimError):
    """
    Wraps an error the table store reported as a value rather than raising.

    The original value is kept untouched on ``.error`` so callers can inspect
    whatever the store handed back (PostgREST error dicts, codes, etc).
    """

    def __init__(self, error: Any, table: Optional[str] = None):
        self.error = error
        self.table = table
        message = error.get("message") if isinstance(error, dict) else None
        super().__init__(message or str(error))


class UnparseableStatementError(SQLShimError):
    """Opt-in error for statements the translators could not match"""

    def __init__(self, text: str, kind: str, reason: str):
        self.text = text
        self.kind = kind
        self.reason = reason
        super().__init__(f"Unparseable {kind} statement ({reason}): {text[:100]}")
