"""Shared test doubles for the search, summarizer and store collaborators."""
from __future__ import annotations

import asyncio
import itertools
from typing import Any

import pytest

from research_chat.agents.orchestrator import ResearchOrchestrator
from research_chat.models.records import (
    AuthenticatedUser,
    Query,
    QueryHistory,
    Session,
    SummaryAndLink,
)
from research_chat.tools.exa_search import SearchHit


class FakeSearch:
    def __init__(self, hits: list[SearchHit] | None = None, error: Exception | None = None):
        self.hits = hits or []
        self.error = error
        self.calls: list[str] = []

    async def search(self, query: str) -> list[SearchHit]:
        self.calls.append(query)
        if self.error:
            raise self.error
        return list(self.hits)


class FakeSummarizer:
    """Echoes ``summary of: <user prompt>`` and records call start/end order."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.events: list[tuple[str, str]] = []
        self.calls: list[tuple[str, str]] = []

    @staticmethod
    def is_aggregate(system_prompt: str) -> bool:
        return "research assistant" in system_prompt

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        kind = "aggregate" if self.is_aggregate(system_prompt) else "result"
        self.events.append(("start", kind))
        # later results finish first so ordering bugs would show up
        await asyncio.sleep(0.01 * (len(user_prompt) % 5))
        if self.fail_on and self.fail_on in user_prompt:
            raise TimeoutError("simulated provider timeout")
        self.events.append(("end", kind))
        return f"summary of: {user_prompt}"


class FakeStore:
    def __init__(self):
        self._ids = itertools.count(1)
        self.sessions: dict[str, Session] = {}
        self.queries: list[Query] = []
        self.result_batches: list[tuple[Any, list[SummaryAndLink]]] = []
        self.responses: list[tuple[Any, str]] = []
        self.calls: list[str] = []

    @property
    def search_results(self) -> list[tuple[Any, SummaryAndLink]]:
        return [(qid, item) for qid, batch in self.result_batches for item in batch]

    async def ensure_session(self, session_id: str, default_name: str) -> Session:
        self.calls.append("ensure_session")
        self.sessions.setdefault(session_id, Session(session_id=session_id, session_name=default_name))
        return self.sessions[session_id]

    async def get_session(self, session_id: str) -> Session | None:
        self.calls.append("get_session")
        return self.sessions.get(session_id)

    async def insert_query(self, session_id: str, text: str) -> Query:
        self.calls.append("insert_query")
        query = Query(id=next(self._ids), session_id=session_id, query=text)
        self.queries.append(query)
        return query

    async def get_queries(self, session_id: str) -> list[QueryHistory]:
        self.calls.append("get_queries")
        return [
            QueryHistory(
                id=q.id,
                query=q.query,
                results=[item for qid, item in self.search_results if qid == q.id],
                responses=[text for qid, text in self.responses if qid == q.id],
            )
            for q in self.queries
            if q.session_id == session_id
        ]

    async def insert_search_results(self, query_id: Any, items: list[SummaryAndLink]) -> None:
        self.calls.append("insert_search_results")
        if items:
            self.result_batches.append((query_id, list(items)))

    async def insert_aggregate_response(self, query_id: Any, text: str) -> None:
        self.calls.append("insert_aggregate_response")
        self.responses.append((query_id, text))


class FakeAuthenticator:
    def __init__(self, user: AuthenticatedUser | None = None):
        self.user = user
        self.calls = 0

    async def get_current_user(self, request) -> AuthenticatedUser | None:
        self.calls += 1
        return self.user


def make_hits(count: int) -> list[SearchHit]:
    return [
        SearchHit(text=f"content {i}", url=f"https://example.com/{i}", title=f"Result {i}")
        for i in range(1, count + 1)
    ]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def fake_search() -> FakeSearch:
    return FakeSearch(make_hits(3))


@pytest.fixture
def orchestrator(fake_search, fake_summarizer, fake_store) -> ResearchOrchestrator:
    return ResearchOrchestrator(
        search_client=fake_search,
        summarizer=fake_summarizer,
        store=fake_store,
        default_session_name="New Research Session",
    )
