"""
Predicate extraction and parameter binding

Two binding rules coexist and are kept apart on purpose:

- bind_by_position: fragment ``i`` of a clause takes ``params[i]``.
  Used by SELECT's WHERE and UPDATE's SET.
- bind_by_digit: ``$n`` takes ``params[n - 1]``.
  Used by UPDATE's and DELETE's WHERE.

``SELECT * FROM t WHERE b = $2 AND a = $1`` with ``[5, 9]`` therefore
filters ``b == 5`` and ``a == 9``.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

import structlog

from .lexer import Token, TokenType, split_tokens
from .models import Predicate

logger = structlog.get_logger()


class _Missing:
    """Sentinel for a parameter reference outside the supplied list"""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def match_equality(fragment: Sequence[Token], position: int) -> Optional[Predicate]:
    """
    Find the first ``<identifier> = $<digits>`` run inside a fragment.

    The run may sit anywhere in the fragment, so ``(id = $1)`` and
    ``t.id = $1`` both match on the bare column name.
    """
    for index in range(len(fragment) - 2):
        column, operator, placeholder = fragment[index:index + 3]
        if (column.type is TokenType.IDENTIFIER
                and operator.type is TokenType.OPERATOR and operator.value == '='
                and placeholder.type is TokenType.PLACEHOLDER):
            return Predicate(column=column.value,
                             placeholder=placeholder.placeholder_number,
                             position=position)
    return None


def extract_predicates(tokens: Sequence[Token],
                       separator: Callable[[Token], bool]) -> List[Predicate]:
    """
    Split a clause on ``separator`` and match each fragment.

    Fragments that do not match are dropped but still consume a position,
    which is what makes positional binding skip their parameter.
    """
    predicates = []
    for position, fragment in enumerate(split_tokens(list(tokens), separator)):
        predicate = match_equality(fragment, position)
        if predicate is not None:
            predicates.append(predicate)
    return predicates


def split_on_and(token: Token) -> bool:
    return token.is_keyword('AND')


def split_on_comma(token: Token) -> bool:
    return token.is_punct(',')


def _lookup(params: Sequence[Any], index: int) -> Any:
    if 0 <= index < len(params):
        return params[index]
    return MISSING


def bind_by_position(predicate: Predicate, params: Sequence[Any]) -> Any:
    """Parameter at the predicate's fragment position, or MISSING"""
    return _lookup(params, predicate.position)


def bind_by_digit(predicate: Predicate, params: Sequence[Any]) -> Any:
    """Parameter named by ``$n`` (1-based), or MISSING"""
    return _lookup(params, predicate.placeholder - 1)


def bind_all(predicates: Sequence[Predicate], params: Sequence[Any],
             binder: Callable[[Predicate, Sequence[Any]], Any]) -> List[Tuple[str, Any]]:
    """
    Bind each predicate and drop the ones whose parameter is missing.

    ``None`` is a supplied value (SQL NULL), only MISSING is dropped.
    """
    bound = []
    for predicate in predicates:
        value = binder(predicate, params)
        if value is MISSING:
            logger.debug("Parameter missing, predicate skipped",
                         column=predicate.column,
                         placeholder=predicate.placeholder,
                         position=predicate.position,
                         param_count=len(params))
            continue
        bound.append((predicate.column, value))
    return bound
