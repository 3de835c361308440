"""research-chat - web research summaries

Simple CLI for running a research query without authentication or persistence.
"""

import argparse
import asyncio

from research_chat.agents.orchestrator import ResearchOrchestrator
from research_chat.config import settings
from research_chat.llm_client import LLMSummarizer
from research_chat.tools.exa_search import ExaSearchClient


def build_orchestrator(model: str | None = None) -> ResearchOrchestrator:
    return ResearchOrchestrator(
        search_client=ExaSearchClient(
            settings.exa_api_key,
            base_url=settings.exa_base_url,
            timeout=settings.exa_timeout_seconds,
        ),
        summarizer=LLMSummarizer(model=model, caller="cli"),
    )


async def run_research(query: str, orchestrator: ResearchOrchestrator):
    """Search, summarize each hit and print the overall summary."""
    print(f"Research query: {query}")
    print("-" * 50)

    hits = await orchestrator.search(query)
    print(f"\n[*] {len(hits)} results")

    items = await orchestrator.summarize_results(hits)
    for i, item in enumerate(items, 1):
        print(f"\n  {i}. {item.link}")
        print(f"     {item.summary}")

    print(f"\n[+] Synthesizing summary...")
    final_summary = await orchestrator.synthesize(query, items)

    print(f"\n{'='*50}")
    print("SUMMARY:")
    print(f"{'='*50}")
    print(final_summary)
    return final_summary


def main():
    parser = argparse.ArgumentParser(description="research-chat web research")
    parser.add_argument("--query", "-q", required=True, help="Research query")
    parser.add_argument("--model", "-m", help="Model to use (default: from config)")

    args = parser.parse_args()

    asyncio.run(run_research(args.query, build_orchestrator(args.model)))


if __name__ == "__main__":
    main()
