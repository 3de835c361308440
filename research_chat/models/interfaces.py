from __future__ import annotations

from typing import Any, Protocol

from fastapi import Request

from research_chat.models.records import (
    AuthenticatedUser,
    Query,
    QueryHistory,
    Session,
    SummaryAndLink,
)
from research_chat.tools.exa_search import SearchHit


class Authenticator(Protocol):
    async def get_current_user(self, request: Request) -> AuthenticatedUser | None: ...


class SearchProvider(Protocol):
    async def search(self, query: str) -> list[SearchHit]: ...


class Summarizer(Protocol):
    async def complete(self, system_prompt: str, user_prompt: str) -> str: ...


class Store(Protocol):
    async def ensure_session(self, session_id: str, default_name: str) -> Session: ...

    async def get_session(self, session_id: str) -> Session | None: ...

    async def insert_query(self, session_id: str, text: str) -> Query: ...

    async def get_queries(self, session_id: str) -> list[QueryHistory]: ...

    async def insert_search_results(self, query_id: Any, items: list[SummaryAndLink]) -> None: ...

    async def insert_aggregate_response(self, query_id: Any, text: str) -> None: ...
