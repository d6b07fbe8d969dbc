import mcp.types as types
import pytest

from dutch_legal_mcp.core.errors import HttpError, NetworkError
from dutch_legal_mcp.mcp import server as mcp_server
from dutch_legal_mcp.mcp.formatters import NO_CASES_MESSAGE
from dutch_legal_mcp.models.entities import CaseRecord, PrecedentWeight


CASE = CaseRecord(
    ecli="ECLI:NL:HR:2023:1",
    title="ECLI:NL:HR:2023:1 - Hoge Raad",
    court="Hoge Raad",
    date="2023-03-15",
    subjects=("Civiel recht",),
    precedent_value=PrecedentWeight.high,
    url="https://view.test/details?id=ECLI%3ANL%3AHR%3A2023%3A1",
    case_number="22/01234",
)


class FakeCollector:
    def __init__(self, cases=(), error=None):
        self.cases = list(cases)
        self.error = error
        self.criteria = []

    async def search(self, criteria):
        self.criteria.append(criteria)
        if self.error:
            raise self.error
        return self.cases

    async def get_details(self, ecli, base_url=None):
        if self.error:
            raise self.error
        return self.cases[0]


@pytest.fixture()
def fake_collector(monkeypatch):
    collector = FakeCollector(cases=[CASE])
    monkeypatch.setattr(mcp_server, "collector", collector)
    return collector


@pytest.mark.asyncio
async def test_list_tools_names():
    tools = await mcp_server.list_tools()

    assert [tool.name for tool in tools] == [
        "search_dutch_case_law",
        "get_case_details",
        "check_gdpr_compliance",
        "classify_ai_system",
        "analyze_legal_risk",
    ]


@pytest.mark.asyncio
async def test_search_tool_returns_text_and_structured_result(fake_collector):
    content, structured = await mcp_server.call_tool(
        "search_dutch_case_law", {"query": "privacy", "court": "Hoge Raad", "maxResults": 1000}
    )

    assert fake_collector.criteria[0].max_results == 1000
    assert fake_collector.criteria[0].court == "Hoge Raad"
    assert "**Found:** 1 decisions" in content[0].text
    assert "**Precedent Value:** HIGH" in content[0].text
    assert structured["total_count"] == 1
    assert structured["results"][0]["ecli"] == CASE.ecli
    assert structured["results"][0]["precedent_value"] == "high"


@pytest.mark.asyncio
async def test_search_tool_without_results(monkeypatch):
    monkeypatch.setattr(mcp_server, "collector", FakeCollector())

    content, structured = await mcp_server.call_tool("search_dutch_case_law", {"query": "niets"})

    assert content[0].text == NO_CASES_MESSAGE
    assert structured["results"] == []


@pytest.mark.asyncio
async def test_provider_failure_is_reported_as_error(monkeypatch):
    monkeypatch.setattr(
        mcp_server, "collector", FakeCollector(error=HttpError("Provider responded with HTTP 503", status=503))
    )

    with pytest.raises(ValueError, match=r"^Error: API error \(HTTP 503\)"):
        await mcp_server.call_tool("search_dutch_case_law", {"query": "privacy"})


@pytest.mark.asyncio
async def test_invalid_arguments_are_validation_errors(fake_collector):
    with pytest.raises(ValueError, match="^Error: Validation error: "):
        await mcp_server.call_tool("search_dutch_case_law", {"query": "privacy", "dateFrom": "15-03-2023"})

    assert fake_collector.criteria == []


@pytest.mark.asyncio
async def test_unknown_tool():
    with pytest.raises(ValueError, match="Unknown tool"):
        await mcp_server.call_tool("translate_law", {})


@pytest.mark.asyncio
async def test_case_details_tool(fake_collector):
    content, structured = await mcp_server.call_tool("get_case_details", {"ecli": CASE.ecli})

    assert content[0].text.startswith(f"# {CASE.title}")
    assert "**Case Number:** 22/01234" in content[0].text
    assert structured["case_number"] == "22/01234"


@pytest.mark.asyncio
async def test_gdpr_tool():
    content, structured = await mcp_server.call_tool(
        "check_gdpr_compliance", {"dataTypes": ["email"], "processingPurpose": "newsletter"}
    )

    assert content[0].text.startswith("# GDPR Compliance Assessment")
    assert structured["risk_level"] == "medium"
    assert [v["code"] for v in structured["violations"]] == ["GDPR-Art6", "GDPR-Art5"]


@pytest.mark.asyncio
async def test_ai_act_tool():
    content, structured = await mcp_server.call_tool(
        "classify_ai_system", {"systemDescription": "A chatbot for customer support", "applicationDomain": "retail"}
    )

    assert "**Risk Category:** LIMITED" in content[0].text
    assert structured["metadata"]["risk_category"] == "limited"


@pytest.mark.asyncio
async def test_risk_tool():
    content, structured = await mcp_server.call_tool(
        "analyze_legal_risk", {"businessDescription": "Online B2C webshop selling shoes"}
    )

    assert content[0].text.startswith("# Legal Risk Analysis")
    assert structured["ai_act_risk"] is None


@pytest.mark.asyncio
async def test_protocol_handler_marks_failures_as_errors(monkeypatch):
    monkeypatch.setattr(mcp_server, "collector", FakeCollector(error=NetworkError("connection refused")))
    handler = mcp_server.server.request_handlers[types.CallToolRequest]

    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="search_dutch_case_law", arguments={"query": "privacy"}),
        )
    )

    assert result.root.isError is True
    assert result.root.content[0].text == "Error: API error: connection refused"
