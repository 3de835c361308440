from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from research_chat.errors import MalformedUpstreamResponse
from research_chat.services import logger as log_service

EXA_SEARCH_PATH = "/search"

# Fixed request shape: neural search, provider-side query rewriting,
# ten hits with 300 characters of plain extracted text and a short summary each.
SEARCH_TYPE = "neural"
USE_AUTOPROMPT = True
MAX_RESULTS = 10
MAX_TEXT_CHARACTERS = 300


@dataclass
class SearchHit:
    text: str
    url: str
    title: str = ""
    summary: str = ""


class ExaResult(BaseModel):
    url: str
    text: str | None = None
    title: str | None = None
    summary: str | None = None


class ExaSearchPayload(BaseModel):
    results: list[ExaResult]
    autopromptString: str | None = None


def build_search_body(query: str) -> dict[str, Any]:
    return {
        "query": query,
        "type": SEARCH_TYPE,
        "useAutoprompt": USE_AUTOPROMPT,
        "numResults": MAX_RESULTS,
        "contents": {
            "text": {
                "includeHtmlTags": False,
                "maxCharacters": MAX_TEXT_CHARACTERS,
            },
            "summary": True,
        },
    }


def parse_search_payload(payload: Any) -> ExaSearchPayload:
    """Validate a raw Exa response body."""
    try:
        return ExaSearchPayload.model_validate(payload)
    except ValidationError as e:
        raise MalformedUpstreamResponse("exa", str(e)) from e


class ExaSearchClient:
    """Semantic web search with content extraction against the Exa API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.exa.ai",
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def search(self, query: str) -> list[SearchHit]:
        if not self.api_key:
            raise RuntimeError("EXA_API_KEY is not configured")

        started = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}{EXA_SEARCH_PATH}",
                json=build_search_body(query),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "x-api-key": self.api_key,
                },
            )
            response.raise_for_status()
            try:
                raw = response.json()
            except ValueError as e:
                raise MalformedUpstreamResponse("exa", "response body is not JSON") from e

        payload = parse_search_payload(raw)
        hits = [
            SearchHit(
                text=item.text or "",
                url=item.url,
                title=item.title or "",
                summary=item.summary or "",
            )
            for item in payload.results[:MAX_RESULTS]
        ]
        log_service.log_search_call(
            query=query,
            results_count=len(hits),
            duration_ms=int((time.monotonic() - started) * 1000),
            autoprompt=payload.autopromptString,
        )
        return hits
