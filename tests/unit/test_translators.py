"""
Unit tests for statement parsing (no store involved)

Covers the shapes each translator accepts and the cases that must fall
back to Unrecognized.
"""

import pytest

from sqlshim.sql_translator import (
    DeleteStatement,
    InsertStatement,
    Predicate,
    SelectStatement,
    StatementKind,
    Unrecognized,
    UpdateStatement,
    parse_statement,
)


pytestmark = pytest.mark.unit


class TestInsertParsing:

    def test_columns_extracted_and_trimmed(self):
        statement = parse_statement(
            "INSERT INTO contacts (agent_id ,  phone,name) VALUES ($1, $2, $3) RETURNING *"
        )

        assert statement == InsertStatement(table="contacts", columns=("agent_id", "phone", "name"))

    def test_lowercase_and_multiline(self):
        statement = parse_statement("insert into agents\n  (user_id, name)\nvalues ($1, $2)")
        assert statement == InsertStatement(table="agents", columns=("user_id", "name"))

    def test_missing_values_keyword_is_unrecognized(self):
        statement = parse_statement("INSERT INTO agents (name) SELECT name FROM templates")

        assert isinstance(statement, Unrecognized)
        assert statement.kind is StatementKind.INSERT

    def test_missing_column_list_is_unrecognized(self):
        assert isinstance(parse_statement("INSERT INTO agents VALUES ($1)"), Unrecognized)

    def test_empty_column_list_is_unrecognized(self):
        assert isinstance(parse_statement("INSERT INTO agents () VALUES ()"), Unrecognized)

    def test_select_mentioning_inserted_column_is_unrecognized(self):
        statement = parse_statement("SELECT * FROM agents WHERE inserted_by = $1")

        assert isinstance(statement, Unrecognized)
        assert statement.kind is StatementKind.INSERT


class TestSelectParsing:

    def test_without_where(self):
        assert parse_statement("SELECT * FROM agents") == SelectStatement(table="agents")

    def test_where_predicates_in_order(self):
        statement = parse_statement("SELECT * FROM agents WHERE b = $2 AND a = $1")

        assert statement.has_where
        assert statement.predicates == (Predicate("b", 2, 0), Predicate("a", 1, 1))

    def test_where_span_stops_at_order_and_limit(self):
        statement = parse_statement(
            "SELECT * FROM agents WHERE user_id = $1 ORDER BY created_at DESC LIMIT 10"
        )

        assert statement.predicates == (Predicate("user_id", 1, 0),)

    def test_limit_before_order(self):
        statement = parse_statement("SELECT * FROM agents WHERE a = $1 LIMIT 5")
        assert [p.column for p in statement.predicates] == ["a"]

    def test_column_named_like_terminator(self):
        statement = parse_statement("SELECT * FROM shapes WHERE border = $1 AND limits = $2")
        assert [p.column for p in statement.predicates] == ["border", "limits"]

    def test_lowercase_and_is_a_separator(self):
        statement = parse_statement("select id from agents where a = $1 and b = $2")
        assert [(p.column, p.position) for p in statement.predicates] == [("a", 0), ("b", 1)]

    def test_column_list_is_ignored(self):
        statement = parse_statement("SELECT id, name FROM agents")
        assert statement == SelectStatement(table="agents")

    def test_missing_from_is_unrecognized(self):
        statement = parse_statement("SELECT 1")

        assert isinstance(statement, Unrecognized)
        assert statement.kind is StatementKind.SELECT


class TestUpdateParsing:

    def test_assignments_and_where(self):
        statement = parse_statement("UPDATE agents SET name = $1, status = $2 WHERE id = $3")

        assert statement == UpdateStatement(
            table="agents",
            assignments=(Predicate("name", 1, 0), Predicate("status", 2, 1)),
            where=(Predicate("id", 3, 0),),
        )
        assert statement.where_predicate == Predicate("id", 3, 0)

    def test_only_first_where_predicate_is_exposed(self):
        statement = parse_statement("UPDATE agents SET name = $1 WHERE id = $2 AND user_id = $3")

        assert len(statement.where) == 2
        assert statement.where_predicate.column == "id"

    def test_first_matching_where_predicate_after_non_matching(self):
        statement = parse_statement("UPDATE agents SET name = $1 WHERE status = 'x' AND id = $2")
        assert statement.where_predicate == Predicate("id", 2, 1)

    def test_where_without_placeholder(self):
        statement = parse_statement("UPDATE agents SET name = $1 WHERE id = 4")

        assert isinstance(statement, UpdateStatement)
        assert statement.where_predicate is None

    def test_missing_where_is_unrecognized(self):
        assert isinstance(parse_statement("UPDATE agents SET name = $1"), Unrecognized)

    def test_empty_set_is_unrecognized(self):
        assert isinstance(parse_statement("UPDATE agents SET WHERE id = $1"), Unrecognized)

    def test_missing_set_is_unrecognized(self):
        assert isinstance(parse_statement("UPDATE agents WHERE id = $1"), Unrecognized)


class TestDeleteParsing:

    def test_delete(self):
        statement = parse_statement("DELETE FROM contacts WHERE id = $1")

        assert statement == DeleteStatement(table="contacts", where=(Predicate("id", 1, 0),))

    def test_delete_without_where_is_unrecognized(self):
        statement = parse_statement("DELETE FROM contacts")

        assert isinstance(statement, Unrecognized)
        assert statement.kind is StatementKind.DELETE

    def test_delete_with_literal_predicate_is_unrecognized(self):
        assert isinstance(parse_statement("DELETE FROM contacts WHERE id = 7"), Unrecognized)

    def test_delete_missing_from_is_unrecognized(self):
        assert isinstance(parse_statement("DELETE contacts WHERE id = $1"), Unrecognized)


def test_unrecognized_kind():
    statement = parse_statement("EXPLAIN ANALYZE something")

    assert isinstance(statement, Unrecognized)
    assert statement.kind is StatementKind.UNRECOGNIZED
