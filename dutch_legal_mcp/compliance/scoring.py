"""GDPR and EU AI Act scoring.

Rule-based heuristics over validated input; no remote calls. The output is
research assistance, not legal advice.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from dutch_legal_mcp.models.entities import (
    ComplianceResult,
    ComplianceViolation,
    RiskAssessment,
    RiskLevel,
)
from dutch_legal_mcp.models.requests import (
    AISystemCriteria,
    GDPRCriteria,
    RiskAnalysisCriteria,
    parse_input,
)

from .constants import (
    AI_ACT_RECOMMENDATIONS,
    AI_CATEGORY_RISK,
    AI_HIGH_RISK_DOMAINS,
    AI_LIMITED_RISK_USES,
    AI_PROHIBITED_PRACTICES,
    DEFAULT_RISK_DATA_TYPES,
    GDPR_RISK_THRESHOLDS,
    HIGH_RISK_DATA_TYPES,
    SENSITIVE_DATA_TYPES,
)

_LEVEL_ORDER = (RiskLevel.low, RiskLevel.medium, RiskLevel.high, RiskLevel.critical)


def _request_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def risk_level(score: int) -> RiskLevel:
    if score >= GDPR_RISK_THRESHOLDS["critical"]:
        return RiskLevel.critical
    if score >= GDPR_RISK_THRESHOLDS["high"]:
        return RiskLevel.high
    if score >= GDPR_RISK_THRESHOLDS["medium"]:
        return RiskLevel.medium
    return RiskLevel.low


def gdpr_risk_score(criteria: GDPRCriteria) -> int:
    score = 0
    for data_type in criteria.data_types:
        lowered = data_type.lower()
        if any(s in lowered for s in SENSITIVE_DATA_TYPES):
            score += 30
        elif any(h in lowered for h in HIGH_RISK_DATA_TYPES):
            score += 20
        else:
            score += 10

    if criteria.third_party_sharing:
        score += 20
    if not criteria.legal_basis:
        score += 15
    if not criteria.data_retention:
        score += 10

    return min(score, 100)


def _gdpr_violations(criteria: GDPRCriteria) -> list[ComplianceViolation]:
    violations = []
    if not criteria.legal_basis:
        violations.append(
            ComplianceViolation(
                code="GDPR-Art6",
                severity="major",
                description="No legal basis specified for data processing",
                remedy="Define lawful basis under GDPR Article 6",
            )
        )
    if not criteria.data_retention:
        violations.append(
            ComplianceViolation(
                code="GDPR-Art5",
                severity="minor",
                description="Data retention period not specified",
                remedy="Implement clear retention and deletion policies",
            )
        )
    return violations


def _gdpr_recommendations(level: RiskLevel, has_violations: bool) -> list[str]:
    recommendations = []
    if level in (RiskLevel.high, RiskLevel.critical):
        recommendations.append("Conduct Data Protection Impact Assessment (DPIA)")
        recommendations.append("Consult with Data Protection Officer (DPO)")

    recommendations.extend(
        [
            "Implement privacy by design principles",
            "Document all processing activities (Article 30)",
            "Establish data subject rights procedures",
        ]
    )
    if has_violations:
        recommendations.append("Address identified compliance violations immediately")
    return recommendations


def assess_gdpr(criteria: GDPRCriteria) -> ComplianceResult:
    risk = gdpr_risk_score(criteria)
    level = risk_level(risk)
    violations = _gdpr_violations(criteria)

    return ComplianceResult(
        request_id=_request_id("gdpr"),
        risk_level=level,
        score=max(0, 100 - risk),
        violations=tuple(violations),
        recommendations=tuple(_gdpr_recommendations(level, bool(violations))),
        metadata={
            "data_types": list(criteria.data_types),
            "processing_purpose": criteria.processing_purpose,
            "assessment_type": "gdpr",
        },
    )


def classify_ai_system(description: str, domain: Optional[str]) -> str:
    desc = description.lower()
    dom = (domain or "").lower()

    if any(p in desc for p in AI_PROHIBITED_PRACTICES):
        return "unacceptable"
    if any(h in dom or h in desc for h in AI_HIGH_RISK_DOMAINS):
        return "high"
    if any(u in desc for u in AI_LIMITED_RISK_USES):
        return "limited"
    return "minimal"


def assess_ai_act(criteria: AISystemCriteria) -> ComplianceResult:
    category = classify_ai_system(criteria.system_description, criteria.application_domain)
    risk = AI_CATEGORY_RISK.get(category, 50)

    return ComplianceResult(
        request_id=_request_id("ai-act"),
        risk_level=risk_level(risk),
        score=max(0, 100 - risk),
        recommendations=AI_ACT_RECOMMENDATIONS[category],
        metadata={
            "risk_category": category,
            "system_description": criteria.system_description,
            "application_domain": criteria.application_domain,
            "assessment_type": "ai-act",
        },
    )


def _overall_risk(*results: Optional[ComplianceResult]) -> RiskLevel:
    levels = [r.risk_level for r in results if r is not None]
    return max(levels, key=_LEVEL_ORDER.index, default=RiskLevel.low)


def _contractual_risks(description: str, target_market: Optional[str]) -> list[str]:
    desc = description.lower()
    market = (target_market or "").lower()
    risks = []

    if "consumer" in desc or "b2c" in desc:
        risks.append("Consumer protection law compliance required")
    if "eu" in market or "international" in market:
        risks.append("Cross-border regulatory compliance")
    if "finance" in desc or "payment" in desc:
        risks.append("Financial services regulation (AFM)")
    return risks


def _urgent_actions(
    overall: RiskLevel,
    gdpr: ComplianceResult,
    ai_act: Optional[ComplianceResult],
) -> list[str]:
    actions = []
    if overall == RiskLevel.critical:
        actions.append("Immediate legal counsel consultation required")
        actions.append("Consider suspending operations until compliance verified")
    if gdpr.risk_level in (RiskLevel.high, RiskLevel.critical):
        actions.append("GDPR compliance audit within 30 days")
    if ai_act is not None and ai_act.risk_level == RiskLevel.high:
        actions.append("EU AI Act conformity assessment required")
    if not actions:
        actions.append("Regular compliance monitoring recommended")
    return actions


def analyze_risk(criteria: RiskAnalysisCriteria) -> RiskAssessment:
    """Combined GDPR / AI Act / contractual risk overview"""
    gdpr_input = {
        "dataTypes": list(DEFAULT_RISK_DATA_TYPES),
        "processingPurpose": criteria.business_description,
        **(criteria.data_processing or {}),
    }
    gdpr = assess_gdpr(parse_input(GDPRCriteria, gdpr_input))

    ai_act = None
    if criteria.ai_components:
        ai_act = assess_ai_act(
            AISystemCriteria(
                system_description=criteria.business_description,
                application_domain=criteria.target_market or "business",
            )
        )

    overall = _overall_risk(gdpr, ai_act)
    return RiskAssessment(
        overall_risk=overall,
        gdpr_risk=gdpr,
        ai_act_risk=ai_act,
        contractual_risks=tuple(_contractual_risks(criteria.business_description, criteria.target_market)),
        urgent_actions=tuple(_urgent_actions(overall, gdpr, ai_act)),
    )
