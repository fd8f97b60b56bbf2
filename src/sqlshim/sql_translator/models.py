"""
Data models for statement translation

ParsedStatement is a tagged variant: one frozen dataclass per statement kind
plus Unrecognized. Translators produce them, the pool executes them, and the
result comes back either as Parsed(rows) or Unparsed(reason).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..errors import UnparseableStatementError


class StatementKind(Enum):
    """Statement classification buckets, in classifier test order"""
    INSERT = "insert"
    SELECT = "select"
    UPDATE = "update"
    DELETE = "delete"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Predicate:
    """
    One ``<column> = $<n>`` match.

    ``placeholder`` is the n written after ``$``; ``position`` is the
    0-based index of the fragment the match came from within its clause.
    Which of the two selects the parameter depends on the binding rule.
    """
    column: str
    placeholder: int
    position: int


@dataclass(frozen=True)
class InsertStatement:
    table: str
    columns: Tuple[str, ...]

    kind = StatementKind.INSERT


@dataclass(frozen=True)
class SelectStatement:
    table: str
    predicates: Tuple[Predicate, ...] = ()
    has_where: bool = False

    kind = StatementKind.SELECT


@dataclass(frozen=True)
class UpdateStatement:
    table: str
    assignments: Tuple[Predicate, ...]
    where: Tuple[Predicate, ...] = ()

    kind = StatementKind.UPDATE

    @property
    def where_predicate(self) -> Optional[Predicate]:
        """The only WHERE predicate an UPDATE honors: the first one"""
        return self.where[0] if self.where else None


@dataclass(frozen=True)
class DeleteStatement:
    table: str
    where: Tuple[Predicate, ...] = ()

    kind = StatementKind.DELETE

    @property
    def where_predicate(self) -> Optional[Predicate]:
        """The only WHERE predicate a DELETE honors: the first one"""
        return self.where[0] if self.where else None


@dataclass(frozen=True)
class Unrecognized:
    """Statement that was classified but did not match its detailed shape"""
    kind: StatementKind
    reason: str


ParsedStatement = Union[InsertStatement, SelectStatement, UpdateStatement, DeleteStatement, Unrecognized]


@dataclass
class RowSet:
    """Uniform result shape returned for every statement kind"""
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {'rows': self.rows}


@dataclass
class Parsed:
    """Statement matched its shape and the store call succeeded"""
    statement: ParsedStatement
    rows: List[Dict[str, Any]]

    def to_row_set(self) -> RowSet:
        return RowSet(rows=self.rows)

    def raise_for_status(self) -> "Parsed":
        return self


@dataclass
class Unparsed:
    """Statement fell through to the fallback; no store call was made"""
    kind: StatementKind
    reason: str
    text: str

    def to_row_set(self) -> RowSet:
        return RowSet(rows=[])

    def raise_for_status(self):
        raise UnparseableStatementError(self.text, self.kind.value, self.reason)


Outcome = Union[Parsed, Unparsed]
