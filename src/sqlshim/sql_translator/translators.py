"""
Per-kind statement translators

Each translator does two pure steps:

    parse(tokens)                 -> ParsedStatement or Unrecognized
    build(statement, params, ...) -> store QueryBuilder or Unrecognized

SQLShim then awaits the builder once. Nothing here touches the network, so
a translator can be shared freely between concurrent calls.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

import structlog

from ..store import QueryBuilder, TableStore
from .lexer import Token, TokenType, find_keyword
from .models import (
    DeleteStatement,
    InsertStatement,
    ParsedStatement,
    SelectStatement,
    StatementKind,
    Unrecognized,
    UpdateStatement,
)
from .predicates import (
    MISSING,
    bind_all,
    bind_by_digit,
    bind_by_position,
    extract_predicates,
    split_on_and,
    split_on_comma,
)

logger = structlog.get_logger()

BuildResult = Union[QueryBuilder, Unrecognized]


def _token_at(tokens: Sequence[Token], index: int) -> Optional[Token]:
    if 0 <= index < len(tokens):
        return tokens[index]
    return None


def _identifier_at(tokens: Sequence[Token], index: int) -> Optional[str]:
    token = _token_at(tokens, index)
    if token is not None and token.type is TokenType.IDENTIFIER and token.value:
        return token.value
    return None


class StatementTranslator:
    """Base class; subclasses set ``kind`` and ``shape``"""

    kind: StatementKind
    shape: str = ""

    def parse(self, tokens: List[Token]) -> ParsedStatement:
        raise NotImplementedError

    def build(self, statement: ParsedStatement, params: Sequence[Any],
              store: TableStore, select_columns: str = "*") -> BuildResult:
        raise NotImplementedError

    def unrecognized(self, reason: str) -> Unrecognized:
        return Unrecognized(kind=self.kind, reason=f"{reason}; expected {self.shape}")


class InsertTranslator(StatementTranslator):
    """``INSERT INTO <table> (<col>, ...) VALUES`` -> insert([record])"""

    kind = StatementKind.INSERT
    shape = "INSERT INTO <table> (<columns>) VALUES"

    def parse(self, tokens: List[Token]) -> ParsedStatement:
        for index, token in enumerate(tokens):
            if not token.is_keyword('INSERT'):
                continue
            into = _token_at(tokens, index + 1)
            table = _identifier_at(tokens, index + 2)
            opening = _token_at(tokens, index + 3)
            if into is None or not into.is_keyword('INTO') or table is None:
                continue
            if opening is None or not opening.is_punct('('):
                continue

            columns = self._parse_column_list(tokens, index + 4)
            if columns is None:
                continue
            return InsertStatement(table=table, columns=tuple(columns))

        return self.unrecognized("no INSERT INTO match")

    def _parse_column_list(self, tokens: List[Token], start: int) -> Optional[List[str]]:
        """Columns up to the closing paren, which must be followed by VALUES"""
        columns: List[str] = []
        expect_column = True
        index = start

        while index < len(tokens):
            token = tokens[index]
            if expect_column:
                if token.type is not TokenType.IDENTIFIER:
                    return None
                columns.append(token.value)
                expect_column = False
            elif token.is_punct(','):
                expect_column = True
            elif token.is_punct(')'):
                following = _token_at(tokens, index + 1)
                if following is not None and following.is_keyword('VALUES'):
                    return columns
                return None
            else:
                return None
            index += 1

        return None

    def build(self, statement: InsertStatement, params: Sequence[Any],
              store: TableStore, select_columns: str = "*") -> BuildResult:
        # zip() stops at the shorter side: unmatched columns are left out of
        # the record entirely, not sent as NULL.
        record: Dict[str, Any] = dict(zip(statement.columns, params))

        dropped = statement.columns[len(params):]
        if dropped:
            logger.debug("Insert columns without parameters omitted",
                         table=statement.table, columns=list(dropped))

        logger.debug("Insert record built", table=statement.table, record_keys=list(record))
        return store.from_(statement.table).insert([record])


class SelectTranslator(StatementTranslator):
    """``... FROM <table> [WHERE a = $1 AND b = $2 ...]`` -> select + eq filters"""

    kind = StatementKind.SELECT
    shape = "SELECT ... FROM <table> [WHERE <col> = $n AND ...]"

    # Recognized so the WHERE span stops here; never applied to the query.
    WHERE_TERMINATORS = ('ORDER', 'LIMIT')

    def parse(self, tokens: List[Token]) -> ParsedStatement:
        from_index = find_keyword(tokens, 'FROM')
        table = _identifier_at(tokens, from_index + 1) if from_index >= 0 else None
        if table is None:
            return self.unrecognized("no FROM <table> match")

        where_index = find_keyword(tokens, 'WHERE', from_index + 2)
        if where_index < 0:
            return SelectStatement(table=table)

        end = len(tokens)
        for index in range(where_index + 1, len(tokens)):
            if any(tokens[index].is_keyword(word) for word in self.WHERE_TERMINATORS):
                end = index
                break

        span = tokens[where_index + 1:end]
        if not span:
            # "WHERE" directly followed by ORDER/LIMIT or end of text
            return SelectStatement(table=table)

        predicates = extract_predicates(span, split_on_and)
        return SelectStatement(table=table, predicates=tuple(predicates), has_where=True)

    def build(self, statement: SelectStatement, params: Sequence[Any],
              store: TableStore, select_columns: str = "*") -> BuildResult:
        query = store.from_(statement.table).select(select_columns)

        if statement.has_where and params:
            filters = bind_all(statement.predicates, params, bind_by_position)
            for column, value in filters:
                query = query.eq(column, value)
            logger.debug("Select filters bound by position",
                         table=statement.table, filters=[column for column, _ in filters])

        return query


class UpdateTranslator(StatementTranslator):
    """
    ``UPDATE <table> SET a = $1, ... WHERE id = $n`` -> update(...).eq(...)

    When the WHERE span has no ``<col> = $n`` predicate, or ``$n`` is past
    the end of the parameter list, the update is still sent without a
    filter and so rewrites every row of the table. That case is logged at
    error level as ``Update issued without filter``.
    """

    kind = StatementKind.UPDATE
    shape = "UPDATE <table> SET <col> = $n, ... WHERE <col> = $n"

    def parse(self, tokens: List[Token]) -> ParsedStatement:
        update_index = find_keyword(tokens, 'UPDATE')
        while update_index >= 0:
            table = _identifier_at(tokens, update_index + 1)
            set_token = _token_at(tokens, update_index + 2)
            if table is not None and set_token is not None and set_token.is_keyword('SET'):
                break
            update_index = find_keyword(tokens, 'UPDATE', update_index + 1)
        else:
            return self.unrecognized("no UPDATE <table> SET match")

        set_index = update_index + 2
        where_index = find_keyword(tokens, 'WHERE', set_index + 1)
        if where_index < 0:
            return self.unrecognized("missing WHERE clause")

        set_span = tokens[set_index + 1:where_index]
        if not set_span:
            return self.unrecognized("empty SET clause")

        assignments = extract_predicates(set_span, split_on_comma)
        where = extract_predicates(tokens[where_index + 1:], split_on_and)
        return UpdateStatement(table=table, assignments=tuple(assignments), where=tuple(where))

    def build(self, statement: UpdateStatement, params: Sequence[Any],
              store: TableStore, select_columns: str = "*") -> BuildResult:
        values = dict(bind_all(statement.assignments, params, bind_by_position))
        query = store.from_(statement.table).update(values)

        predicate = statement.where_predicate
        value = bind_by_digit(predicate, params) if predicate is not None else MISSING
        if value is MISSING:
            logger.error("Update issued without filter",
                         table=statement.table,
                         where_column=predicate.column if predicate else None,
                         placeholder=predicate.placeholder if predicate else None,
                         param_count=len(params))
            return query

        if len(statement.where) > 1:
            logger.debug("Extra UPDATE predicates ignored",
                         table=statement.table,
                         ignored=[p.column for p in statement.where[1:]])

        return query.eq(predicate.column, value)


class DeleteTranslator(StatementTranslator):
    """``DELETE FROM <table> WHERE id = $n`` -> delete().eq(...)"""

    kind = StatementKind.DELETE
    shape = "DELETE FROM <table> WHERE <col> = $n"

    def parse(self, tokens: List[Token]) -> ParsedStatement:
        for index, token in enumerate(tokens):
            following = _token_at(tokens, index + 1)
            if not token.is_keyword('DELETE') or following is None or not following.is_keyword('FROM'):
                continue
            table = _identifier_at(tokens, index + 2)
            if table is None:
                continue

            where_index = find_keyword(tokens, 'WHERE', index + 3)
            if where_index < 0:
                return self.unrecognized("missing WHERE clause")

            where = extract_predicates(tokens[where_index + 1:], split_on_and)
            if not where:
                return self.unrecognized("no <col> = $n predicate in WHERE")
            return DeleteStatement(table=table, where=tuple(where))

        return self.unrecognized("no DELETE FROM <table> match")

    def build(self, statement: DeleteStatement, params: Sequence[Any],
              store: TableStore, select_columns: str = "*") -> BuildResult:
        predicate = statement.where_predicate
        value = bind_by_digit(predicate, params)
        if value is MISSING:
            return self.unrecognized(f"parameter ${predicate.placeholder} not supplied")

        return store.from_(statement.table).delete().eq(predicate.column, value)


TRANSLATORS = {
    translator.kind: translator
    for translator in (InsertTranslator(), SelectTranslator(), UpdateTranslator(), DeleteTranslator())
}


def get_translator(kind: StatementKind) -> Optional[StatementTranslator]:
    """Translator for a classified kind; None for UNRECOGNIZED"""
    return TRANSLATORS.get(kind)
