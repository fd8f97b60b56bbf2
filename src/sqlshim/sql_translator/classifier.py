"""
Statement classifier

Buckets raw statement text by ordered, case-insensitive substring tests.
The order is significant: a statement mentioning both INSERT and SELECT
(``INSERT INTO ... SELECT``, or a SELECT from a table named ``inserts``)
is classified INSERT.
"""

from typing import List, Tuple

from .models import StatementKind

_ORDERED_MARKERS: List[Tuple[str, StatementKind]] = [
    ('INSERT', StatementKind.INSERT),
    ('SELECT', StatementKind.SELECT),
    ('UPDATE', StatementKind.UPDATE),
    ('DELETE', StatementKind.DELETE),
]


def classify(text: str) -> StatementKind:
    """Return the statement kind; UNRECOGNIZED when no marker is present"""
    upper = text.upper()
    for marker, kind in _ORDERED_MARKERS:
        if marker in upper:
            return kind
    return StatementKind.UNRECOGNIZED
