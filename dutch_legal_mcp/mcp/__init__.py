"""MCP server package for dutch-legal-mcp.

The MCP server is meant for LLM agents to call domain tools like:
- search_dutch_case_law
- get_case_details
- check_gdpr_compliance / classify_ai_system / analyze_legal_risk

Transport:
- stdio
"""
