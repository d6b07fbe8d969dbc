"""Markdown renderings of tool results"""

from __future__ import annotations

from collections.abc import Sequence

from dutch_legal_mcp.models.entities import CaseRecord, ComplianceResult, RiskAssessment

NO_CASES_MESSAGE = "No court decisions found. Try broader search terms or different keywords."

_AI_CATEGORY_BANNERS = {
    "unacceptable": "🚫 **PROHIBITED** - This AI system is banned under the EU AI Act.",
    "high": "⚠️ **HIGH RISK** - Strict requirements apply before market placement.",
    "limited": "⚡ **LIMITED RISK** - Transparency obligations apply.",
    "minimal": "✅ **MINIMAL RISK** - Few regulatory requirements.",
}


def _case_lines(case: CaseRecord) -> list[str]:
    lines = [
        f"**ECLI:** {case.ecli}",
        f"**Court:** {case.court}",
        f"**Date:** {case.date}",
        f"**Precedent Value:** {case.precedent_value.value.upper()}",
    ]
    if case.case_number:
        lines.append(f"**Case Number:** {case.case_number}")
    if case.subjects:
        lines.append(f"**Legal Domains:** {', '.join(case.subjects)}")
    if case.summary:
        lines.append(f"**Summary:** {case.summary}")
    lines.append(f"**URL:** [View Decision]({case.url})")
    return lines


def format_court_cases(cases: Sequence[CaseRecord]) -> str:
    if not cases:
        return NO_CASES_MESSAGE

    parts = [
        "# Court Case Law Results\n",
        "⚖️ **Disclaimer:** User is responsible for compliance with court data API terms of service.\n",
        f"**Found:** {len(cases)} decisions\n",
    ]
    for index, case in enumerate(cases, start=1):
        parts.append(f"## {index}. {case.title}\n")
        parts.append("\n".join(_case_lines(case)) + "\n")
        if index < len(cases):
            parts.append("---\n")
    return "\n".join(parts)


def format_case_detail(case: CaseRecord) -> str:
    return "\n".join([f"# {case.title}\n", *_case_lines(case)]) + "\n"


def format_gdpr_result(result: ComplianceResult) -> str:
    output = "# GDPR Compliance Assessment\n\n"
    output += f"**Risk Level:** {result.risk_level.value.upper()}\n"
    output += f"**Compliance Score:** {result.score}/100\n\n"

    if result.violations:
        output += "## ⚠️ Violations Found\n\n"
        for index, violation in enumerate(result.violations, start=1):
            output += f"{index}. **{violation.code}** ({violation.severity})\n"
            output += f"   {violation.description}\n"
            output += f"   *Remedy:* {violation.remedy}\n\n"

    if result.recommendations:
        output += "## 🔧 Recommendations\n\n"
        output += "".join(f"- {rec}\n" for rec in result.recommendations)
        output += "\n"

    return output


def format_ai_act_result(result: ComplianceResult) -> str:
    category = str(result.metadata.get("risk_category") or "unknown")

    output = "# EU AI Act Classification\n\n"
    output += f"**Risk Category:** {category.upper()}\n"
    output += f"**Compliance Score:** {result.score}/100\n\n"

    banner = _AI_CATEGORY_BANNERS.get(category)
    if banner:
        output += f"{banner}\n\n"

    if result.recommendations:
        output += "## 📋 Compliance Requirements\n\n"
        output += "".join(f"- {req}\n" for req in result.recommendations)

    return output


def format_risk_assessment(assessment: RiskAssessment) -> str:
    output = "# Legal Risk Analysis\n\n"
    output += f"**Overall Risk:** {assessment.overall_risk.value.upper()}\n\n"

    output += "## 🔒 GDPR Risk\n"
    output += f"- **Level:** {assessment.gdpr_risk.risk_level.value}\n"
    output += f"- **Score:** {assessment.gdpr_risk.score}/100\n\n"

    if assessment.ai_act_risk is not None:
        output += "## 🤖 AI Act Risk\n"
        output += f"- **Level:** {assessment.ai_act_risk.risk_level.value}\n"
        output += f"- **Score:** {assessment.ai_act_risk.score}/100\n\n"

    if assessment.contractual_risks:
        output += "## 📄 Contractual Risks\n\n"
        output += "".join(f"- {risk}\n" for risk in assessment.contractual_risks)
        output += "\n"

    if assessment.urgent_actions:
        output += "## ⚡ Urgent Actions\n\n"
        output += "".join(f"- {action}\n" for action in assessment.urgent_actions)

    return output


def format_error(message: str) -> str:
    return f"Error: {message}"
