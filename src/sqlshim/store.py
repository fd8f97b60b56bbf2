"""
Table store collaborator

The translators only talk to a PostgREST-style fluent builder:

    store.from_(table).select("*").eq(col, value).execute()

``execute()`` is awaited once per statement. Whatever it resolves to goes
through normalize_response(), which turns the store's reply into a plain
row list or raises the store's error unchanged.

SupabaseStore adapts supabase-py's async client to this shape.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

import structlog

from .config import ShimConfig
from .errors import BackendError

logger = structlog.get_logger()


@runtime_checkable
class QueryBuilder(Protocol):
    """Fluent builder returned by TableStore.from_()"""

    def select(self, columns: str = "*") -> "QueryBuilder":
        ...

    def insert(self, records: List[Dict[str, Any]]) -> "QueryBuilder":
        ...

    def update(self, record: Dict[str, Any]) -> "QueryBuilder":
        ...

    def delete(self) -> "QueryBuilder":
        ...

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        ...

    async def execute(self) -> Any:
        """Resolve to a response with ``.data`` (and maybe ``.error``)"""
        ...


@runtime_checkable
class TableStore(Protocol):
    """Anything that hands out QueryBuilders per table"""

    def from_(self, table: str) -> QueryBuilder:
        ...


def normalize_response(response: Any, table: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Normalize a store reply into a list of row dicts.

    Accepts response objects (``.data`` / ``.error`` attributes, as
    supabase-py returns) and ``{"data": ..., "error": ...}`` mappings.
    An error reported as a value is raised: exceptions as-is, anything else
    wrapped in BackendError with the original value on ``.error``.
    """
    if isinstance(response, Mapping):
        data = response.get('data')
        error = response.get('error')
    else:
        data = getattr(response, 'data', None)
        error = getattr(response, 'error', None)

    if error is not None:
        if isinstance(error, BaseException):
            raise error
        raise BackendError(error, table=table)

    if data is None:
        return []
    if isinstance(data, Mapping):
        return [dict(data)]
    return list(data)


class SupabaseStore:
    """
    TableStore backed by a supabase-py AsyncClient.

    supabase-py raises postgrest's APIError from ``execute()`` on failure;
    those propagate untouched through the translators.
    """

    def __init__(self, client):
        self.client = client

    @classmethod
    async def connect(cls, config: ShimConfig) -> "SupabaseStore":
        """Create an async Supabase client for server-side use"""
        config.require_valid()

        # Imported here so the translators can run against any TableStore
        # without supabase installed in the calling process.
        from supabase import acreate_client
        from supabase.lib.client_options import AsyncClientOptions

        options = AsyncClientOptions(
            auto_refresh_token=config.auto_refresh_token,
            persist_session=config.persist_session,
        )
        client = await acreate_client(config.supabase_url, config.service_role_key, options=options)

        logger.info("Supabase client created",
                    url=config.supabase_url,
                    key_prefix=config.service_role_key[:8] + "...")
        return cls(client)

    def from_(self, table: str):
        return self.client.table(table)

    async def ping(self) -> None:
        """Cheap admin call that needs no table permissions"""
        await self.client.auth.admin.list_users(page=1, per_page=1)
