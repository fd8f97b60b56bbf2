"""
SQLShim: a pool-like ``execute(text, params)`` over a table store

Callers keep writing parameterized SQL-shaped statements; each call is
classified, parsed, bound and sent to the store as a single request.
Statements that cannot be matched are logged and answered with an empty
row set rather than an error, so ``execute()`` only raises when the store
itself fails. ``run()`` exposes the difference for callers who need it.
"""

from typing import Any, Optional, Sequence

import structlog

from .config import ShimConfig
from .sql_translator import classify, get_translator, tokenize
from .sql_translator.models import (
    Outcome,
    Parsed,
    RowSet,
    Unparsed,
    Unrecognized,
)
from .store import SupabaseStore, TableStore, normalize_response

logger = structlog.get_logger()


class SQLShim:
    """
    Translate SQL-shaped statements into table-store calls.

    Holds no per-call state: concurrent execute() calls share only the
    store and the (immutable) translators.
    """

    def __init__(self, store: TableStore, config: Optional[ShimConfig] = None):
        self.store = store
        self.config = config or ShimConfig()

    @classmethod
    async def from_env(cls) -> "SQLShim":
        """Build a Supabase-backed shim from SUPABASE_* environment variables"""
        config = ShimConfig.from_env().require_valid()
        store = await SupabaseStore.connect(config)
        return cls(store, config)

    async def execute(self, text: str, params: Optional[Sequence[Any]] = None) -> RowSet:
        """
        Execute a statement and return its rows.

        Unmatched statements return an empty RowSet. Store failures raise
        the store's original error.
        """
        outcome = await self.run(text, params)
        return outcome.to_row_set()

    async def run(self, text: str, params: Optional[Sequence[Any]] = None) -> Outcome:
        """Execute a statement and report whether it was matched at all"""
        params = list(params) if params is not None else []

        kind = classify(text)
        translator = get_translator(kind)
        if translator is None:
            return self._fallback(text, Unrecognized(kind=kind, reason="no statement keyword found"))

        statement = translator.parse(tokenize(text))
        if isinstance(statement, Unrecognized):
            return self._fallback(text, statement)

        query = translator.build(statement, params, self.store, self.config.select_columns)
        if isinstance(query, Unrecognized):
            return self._fallback(text, query)

        logger.info("Executing translated statement",
                    kind=kind.value,
                    table=statement.table,
                    param_count=len(params))

        try:
            response = await query.execute()
            rows = normalize_response(response, table=statement.table)
        except Exception as e:
            logger.error("Query error",
                         kind=kind.value,
                         table=statement.table,
                         error=str(e))
            raise

        logger.debug("Statement complete", kind=kind.value, table=statement.table, row_count=len(rows))
        return Parsed(statement=statement, rows=rows)

    def _fallback(self, text: str, unrecognized: Unrecognized) -> Unparsed:
        logger.warning("Unhandled query",
                       kind=unrecognized.kind.value,
                       reason=unrecognized.reason,
                       sql_preview=text[:200])
        return Unparsed(kind=unrecognized.kind, reason=unrecognized.reason, text=text)

    def table(self, name: str):
        """Raw store builder for callers that want the fluent API directly"""
        return self.store.from_(name)

    async def check_connection(self) -> bool:
        """
        Probe the store without failing.

        Returns False (and logs a warning) when the store is unreachable or
        has no ping(); the shim keeps working either way.
        """
        ping = getattr(self.store, 'ping', None)
        if ping is None:
            logger.warning("Store does not support connection checks",
                           store=type(self.store).__name__)
            return False

        try:
            await ping()
        except Exception as e:
            logger.warning("Database connection test failed",
                           error=str(e),
                           note="non-critical, statements may still work")
            return False

        logger.info("Database connected", store=type(self.store).__name__)
        return True
