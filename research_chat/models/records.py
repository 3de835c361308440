from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuthenticatedUser:
    id: str
    email: str | None = None
    access_token: str | None = field(default=None, repr=False)


@dataclass
class Session:
    session_id: str
    session_name: str | None = None


@dataclass
class Query:
    id: Any
    session_id: str
    query: str


@dataclass
class SummaryAndLink:
    summary: str
    link: str


@dataclass
class QueryHistory:
    id: Any
    query: str
    created_at: str | None = None
    results: list[SummaryAndLink] = field(default_factory=list)
    responses: list[str] = field(default_factory=list)


@dataclass
class ResearchOutcome:
    session_id: str
    query_id: Any
    message: str
    summaries_and_links: list[SummaryAndLink]
