import pytest

from conftest import FakeSearch, FakeSummarizer, make_hits
from main import run_research
from research_chat.agents.orchestrator import ResearchOrchestrator


@pytest.mark.asyncio
async def test_run_research_prints_summaries_without_store(capsys):
    orchestrator = ResearchOrchestrator(FakeSearch(make_hits(2)), FakeSummarizer())

    final_summary = await run_research("graphene", orchestrator)

    out = capsys.readouterr().out
    assert "Research query: graphene" in out
    assert "[*] 2 results" in out
    assert "https://example.com/2" in out
    assert final_summary in out
    assert final_summary.startswith("summary of: Based on these summaries")
