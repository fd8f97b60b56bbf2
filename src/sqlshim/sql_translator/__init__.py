"""
SQL-shaped statement translation

Turns parameterized INSERT/SELECT/UPDATE/DELETE text into fluent table-store
calls. Classification, tokenizing, predicate extraction and the two
parameter binding rules live here; execution lives in sqlshim.pool.
"""

from .classifier import classify
from .lexer import Token, TokenType, tokenize
from .models import (
    DeleteStatement,
    InsertStatement,
    Outcome,
    Parsed,
    ParsedStatement,
    Predicate,
    RowSet,
    SelectStatement,
    StatementKind,
    Unparsed,
    Unrecognized,
    UpdateStatement,
)
from .predicates import MISSING, bind_by_digit, bind_by_position
from .translators import (
    DeleteTranslator,
    InsertTranslator,
    SelectTranslator,
    StatementTranslator,
    UpdateTranslator,
    get_translator,
)


def parse_statement(text: str) -> ParsedStatement:
    """Classify and parse statement text without touching any store"""
    kind = classify(text)
    translator = get_translator(kind)
    if translator is None:
        return Unrecognized(kind=kind, reason="no INSERT/SELECT/UPDATE/DELETE keyword")
    return translator.parse(tokenize(text))


__all__ = [
    "classify",
    "tokenize",
    "parse_statement",
    "get_translator",
    "Token",
    "TokenType",
    "StatementKind",
    "Predicate",
    "InsertStatement",
    "SelectStatement",
    "UpdateStatement",
    "DeleteStatement",
    "Unrecognized",
    "ParsedStatement",
    "RowSet",
    "Parsed",
    "Unparsed",
    "Outcome",
    "MISSING",
    "bind_by_position",
    "bind_by_digit",
    "StatementTranslator",
    "InsertTranslator",
    "SelectTranslator",
    "UpdateTranslator",
    "DeleteTranslator",
]
