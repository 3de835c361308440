from __future__ import annotations

import asyncio

from research_chat.config import settings
from research_chat.models.interfaces import SearchProvider, Store, Summarizer
from research_chat.models.records import ResearchOutcome, SummaryAndLink
from research_chat.services import logger as log_service
from research_chat.services.prompt_store import render_pair
from research_chat.tools.exa_search import SearchHit


class ResearchOrchestrator:
    """Search, summarize and persist one research query.

    Steps run strictly in order: search, per-result summaries (concurrent,
    all-or-nothing), session upsert, query insert, result batch insert,
    aggregate synthesis, aggregate insert. Nothing is retried and earlier
    writes are not rolled back when a later step fails.
    """

    def __init__(
        self,
        search_client: SearchProvider,
        summarizer: Summarizer,
        store: Store | None = None,
        *,
        default_session_name: str | None = None,
    ):
        self.search_client = search_client
        self.summarizer = summarizer
        self.store = store
        self.default_session_name = default_session_name or settings.default_session_name

    async def search(self, message: str) -> list[SearchHit]:
        return await self.search_client.search(message)

    async def summarize_result(self, hit: SearchHit) -> SummaryAndLink:
        system_prompt, user_prompt = render_pair("result_summary", text=hit.text)
        summary = await self.summarizer.complete(system_prompt, user_prompt)
        return SummaryAndLink(summary=summary, link=hit.url)

    async def summarize_results(self, hits: list[SearchHit]) -> list[SummaryAndLink]:
        # gather keeps input order and raises on the first failure
        return list(await asyncio.gather(*(self.summarize_result(hit) for hit in hits)))

    async def synthesize(self, message: str, items: list[SummaryAndLink]) -> str:
        summaries = "\n".join(item.summary for item in items)
        system_prompt, user_prompt = render_pair(
            "aggregate_summary", message=message, summaries=summaries
        )
        return await self.summarizer.complete(system_prompt, user_prompt)

    async def run(self, message: str, session_id: str) -> ResearchOutcome:
        if self.store is None:
            raise RuntimeError("ResearchOrchestrator.run requires a store")

        hits = await self.search(message)
        log_service.log_event(
            event_type="search_completed",
            message="Search completed",
            session_id=session_id,
            results_count=len(hits),
        )

        summaries_and_links = await self.summarize_results(hits)

        session = await self.store.ensure_session(session_id, self.default_session_name)
        query = await self.store.insert_query(session.session_id, message)
        await self.store.insert_search_results(query.id, summaries_and_links)

        final_summary = await self.synthesize(message, summaries_and_links)
        await self.store.insert_aggregate_response(query.id, final_summary)

        log_service.log_event(
            event_type="research_completed",
            message="Research query persisted",
            session_id=session_id,
            query_id=str(query.id),
            results_count=len(summaries_and_links),
        )
        return ResearchOutcome(
            session_id=session.session_id,
            query_id=query.id,
            message=final_summary,
            summaries_and_links=summaries_and_links,
        )
