from __future__ import annotations

import asyncio
from typing import Any, Callable

from supabase import Client, create_client

from research_chat.config import settings
from research_chat.errors import StoreError
from research_chat.models.records import Query, QueryHistory, Session, SummaryAndLink
from research_chat.services import logger as log_service

SESSIONS_TABLE = "research_sessions"
QUERIES_TABLE = "queries"
SEARCH_RESULTS_TABLE = "search_results"
AI_RESPONSES_TABLE = "ai_responses"


def get_client() -> Client:
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")
    return create_client(settings.supabase_url, settings.supabase_anon_key)


_client: Client | None = None


def client() -> Client:
    global _client
    if _client is None:
        _client = get_client()
    return _client


def user_client(access_token: str) -> Client:
    """Build a client whose PostgREST calls run as the given user (row level security applies)."""
    db = get_client()
    db.postgrest.auth(access_token)
    return db


async def _execute(query: Any) -> Any:
    """Run blocking Supabase query execution in a worker thread."""
    return await asyncio.to_thread(query.execute)


def _first_row(result: Any, table: str, operation: str) -> dict[str, Any]:
    rows = getattr(result, "data", None) or []
    if not rows:
        raise StoreError(table, f"{operation} returned no row")
    return rows[0]


class SupabaseStore:
    """Append-only persistence for sessions, queries, results and responses."""

    def __init__(self, client_factory: Callable[[], Client] = client):
        self._client_factory = client_factory
        self._client: Client | None = None

    def _table(self, name: str) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client.table(name)

    # --- Sessions ---

    async def ensure_session(self, session_id: str, default_name: str) -> Session:
        """Create the session if absent; an existing row is left untouched."""
        await _execute(
            self._table(SESSIONS_TABLE).upsert(
                {"session_id": session_id, "session_name": default_name},
                on_conflict="session_id",
                ignore_duplicates=True,
            )
        )
        log_service.log_db_operation("upsert", SESSIONS_TABLE, "success", details=session_id)
        return Session(session_id=session_id)

    async def get_session(self, session_id: str) -> Session | None:
        result = await _execute(
            self._table(SESSIONS_TABLE)
            .select("session_id, session_name")
            .eq("session_id", session_id)
            .limit(1)
        )
        if not result.data:
            return None
        row = result.data[0]
        return Session(session_id=row["session_id"], session_name=row.get("session_name"))

    # --- Queries ---

    async def insert_query(self, session_id: str, text: str) -> Query:
        result = await _execute(
            self._table(QUERIES_TABLE).insert({"session_id": session_id, "query": text})
        )
        row = _first_row(result, QUERIES_TABLE, "insert")
        log_service.log_db_operation("insert", QUERIES_TABLE, "success", details=str(row.get("id")))
        return Query(id=row["id"], session_id=session_id, query=text)

    async def get_queries(self, session_id: str) -> list[QueryHistory]:
        result = await _execute(
            self._table(QUERIES_TABLE)
            .select("id, query, created_at, search_results(summary, source_url), ai_responses(response)")
            .eq("session_id", session_id)
            .order("created_at")
        )
        history: list[QueryHistory] = []
        for row in result.data or []:
            history.append(
                QueryHistory(
                    id=row["id"],
                    query=row.get("query", ""),
                    created_at=row.get("created_at"),
                    results=[
                        SummaryAndLink(summary=r.get("summary") or "", link=r.get("source_url") or "")
                        for r in row.get("search_results") or []
                    ],
                    responses=[r.get("response") or "" for r in row.get("ai_responses") or []],
                )
            )
        return history

    # --- Search results ---

    async def insert_search_results(self, query_id: Any, items: list[SummaryAndLink]) -> None:
        if not items:
            return
        rows = [
            {"query_id": query_id, "summary": item.summary, "source_url": item.link}
            for item in items
        ]
        await _execute(self._table(SEARCH_RESULTS_TABLE).insert(rows))
        log_service.log_db_operation(
            "insert", SEARCH_RESULTS_TABLE, "success", details=f"{len(rows)} rows for query {query_id}"
        )

    # --- AI responses ---

    async def insert_aggregate_response(self, query_id: Any, text: str) -> None:
        await _execute(
            self._table(AI_RESPONSES_TABLE).insert({"query_id": query_id, "response": text})
        )
        log_service.log_db_operation("insert", AI_RESPONSES_TABLE, "success", details=str(query_id))
