"""dutch_legal_mcp.mcp.server

MCP (Model Context Protocol) server for Dutch legal research.

Transport: stdio

Tools:
  - search_dutch_case_law
  - get_case_details
  - check_gdpr_compliance
  - classify_ai_system
  - analyze_legal_risk

Case-law tools call the Rechtspraak open data API through the shared
client registry; the compliance tools are local heuristics.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable

import anyio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from dutch_legal_mcp.compliance.scoring import analyze_risk, assess_ai_act, assess_gdpr
from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.core.errors import CaseLawError, error_to_message
from dutch_legal_mcp.core.registry import ClientRegistry
from dutch_legal_mcp.mcp.formatters import (
    format_ai_act_result,
    format_case_detail,
    format_court_cases,
    format_error,
    format_gdpr_result,
    format_risk_assessment,
)
from dutch_legal_mcp.models.requests import (
    AISystemCriteria,
    CaseDetailRequest,
    GDPRCriteria,
    RiskAnalysisCriteria,
    SearchCriteria,
    parse_input,
)
from dutch_legal_mcp.pipeline.collectors.case_collector import CaseLawCollector
from dutch_legal_mcp.utils.logger import get_logger

logger = get_logger(__name__)


SERVER_NAME = "dutch-legal-mcp"

LEGAL_DISCLAIMER = (
    "LEGAL DISCLAIMER: you are responsible for every action performed with this tool, "
    "for compliance with the court data API terms of service and for verifying results. "
    "This tool provides research assistance only, not legal advice."
)

# Process-wide; clients (and their caches) live as long as the server.
registry = ClientRegistry()
collector = CaseLawCollector(registry)


server = Server(
    SERVER_NAME,
    version=settings.service_version,
    instructions=(
        "Dutch legal research tools. Use search_dutch_case_law to find court decisions "
        "on rechtspraak.nl, get_case_details for one ECLI, and the GDPR / AI Act tools "
        "for a first compliance assessment."
    ),
)


TOOLS = [
    types.Tool(
        name="search_dutch_case_law",
        description=(
            "Search Dutch court decisions from the Rechtspraak.nl database "
            "by keywords, court, legal domain or date range."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search terms, case name, or legal concepts"},
                "court": {
                    "type": "string",
                    "description": 'Specific court (e.g., "Hoge Raad", "Rechtbank Amsterdam")',
                },
                "dateFrom": {"type": "string", "description": "Start date (YYYY-MM-DD format)"},
                "dateTo": {"type": "string", "description": "End date (YYYY-MM-DD format)"},
                "maxResults": {
                    "type": "integer",
                    "minimum": 1,
                    "default": settings.default_max_results,
                    "description": f"Maximum number of results (capped at {settings.max_search_results})",
                },
                "subject": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Legal domains (rechtsgebieden) to filter on",
                },
                "baseUrl": {"type": "string", "description": "Alternative court data API base URL"},
            },
            "required": ["query"],
        },
    ),
    types.Tool(
        name="get_case_details",
        description="Fetch a single Dutch court decision by its ECLI.",
        inputSchema={
            "type": "object",
            "properties": {
                "ecli": {"type": "string", "description": "European Case Law Identifier"},
                "baseUrl": {"type": "string", "description": "Alternative court data API base URL"},
            },
            "required": ["ecli"],
        },
    ),
    types.Tool(
        name="check_gdpr_compliance",
        description=(
            "Analyze data processing activities against GDPR requirements. "
            "Returns a compliance score, violations and recommendations."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "dataTypes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Types of personal data processed (e.g., "email", "location", "biometric")',
                },
                "processingPurpose": {"type": "string", "description": "Purpose of data processing"},
                "legalBasis": {"type": "string", "description": "GDPR legal basis for processing"},
                "dataRetention": {"type": "string", "description": "Data retention period"},
                "thirdPartySharing": {"type": "boolean", "description": "Whether data is shared with third parties"},
            },
            "required": ["dataTypes", "processingPurpose"],
        },
    ),
    types.Tool(
        name="classify_ai_system",
        description="Classify an AI system according to EU AI Act risk categories.",
        inputSchema={
            "type": "object",
            "properties": {
                "systemDescription": {"type": "string", "description": "What the AI system does"},
                "applicationDomain": {
                    "type": "string",
                    "description": 'Domain of application (e.g., "healthcare", "finance", "recruitment")',
                },
                "userImpact": {"type": "string"},
                "dataTypes": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["systemDescription", "applicationDomain"],
        },
    ),
    types.Tool(
        name="analyze_legal_risk",
        description="Legal risk overview covering GDPR, the EU AI Act and Dutch contract law.",
        inputSchema={
            "type": "object",
            "properties": {
                "businessDescription": {"type": "string", "description": "Description of business or application"},
                "dataProcessing": {"type": "object", "description": "Data processing details"},
                "aiComponents": {"type": "boolean", "description": "Whether the system includes AI components"},
                "targetMarket": {"type": "string", "description": "Target market or jurisdiction"},
            },
            "required": ["businessDescription"],
        },
    ),
]


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    return TOOLS


def _text_and_structured(text: str, payload: dict[str, Any]):
    return ([types.TextContent(type="text", text=text)], payload)


async def _search_dutch_case_law(args: dict[str, Any]):
    criteria = parse_input(SearchCriteria, args)

    started = time.perf_counter()
    cases = await collector.search(criteria)
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    payload = {
        "results": [case.model_dump(mode="json") for case in cases],
        "total_count": len(cases),
        "search_time_ms": elapsed_ms,
    }
    return _text_and_structured(format_court_cases(cases), payload)


async def _get_case_details(args: dict[str, Any]):
    request = parse_input(CaseDetailRequest, args)
    case = await collector.get_details(request.ecli, request.base_url)
    return _text_and_structured(format_case_detail(case), case.model_dump(mode="json"))


async def _check_gdpr_compliance(args: dict[str, Any]):
    result = assess_gdpr(parse_input(GDPRCriteria, args))
    return _text_and_structured(format_gdpr_result(result), result.model_dump(mode="json"))


async def _classify_ai_system(args: dict[str, Any]):
    result = assess_ai_act(parse_input(AISystemCriteria, args))
    return _text_and_structured(format_ai_act_result(result), result.model_dump(mode="json"))


async def _analyze_legal_risk(args: dict[str, Any]):
    assessment = analyze_risk(parse_input(RiskAnalysisCriteria, args))
    return _text_and_structured(format_risk_assessment(assessment), assessment.model_dump(mode="json"))


TOOL_HANDLERS: dict[str, Callable[[dict[str, Any]], Awaitable[Any]]] = {
    "search_dutch_case_law": _search_dutch_case_law,
    "get_case_details": _get_case_details,
    "check_gdpr_compliance": _check_gdpr_compliance,
    "classify_ai_system": _classify_ai_system,
    "analyze_legal_risk": _analyze_legal_risk,
}


@server.call_tool()
async def call_tool(name: str, arguments: dict | None):
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise ValueError(f"Unknown tool: {name}")

    try:
        return await handler(arguments or {})
    except CaseLawError as exc:
        # Surfaced to the client as an isError tool result
        logger.error(f"Tool {name} failed: {exc.code}: {exc}")
        raise ValueError(format_error(error_to_message(exc))) from exc


async def _run() -> None:
    logger.warning(LEGAL_DISCLAIMER)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(
                    notification_options=NotificationOptions(
                        prompts_changed=False,
                        resources_changed=False,
                        tools_changed=False,
                    ),
                    experimental_capabilities={},
                ),
            )
    finally:
        await registry.aclose()


def main() -> None:
    anyio.run(_run)


if __name__ == "__main__":
    main()
