"""Domain entities.

Immutable records built from provider payloads or computed by the
compliance heuristics. None of them are persisted.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PrecedentWeight(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class RiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class CaseRecord(BaseModel):
    """One court decision"""

    model_config = ConfigDict(frozen=True)

    ecli: str
    title: str
    court: str
    date: str = ""  # YYYY-MM-DD, or empty when the source date is unparseable
    subjects: tuple[str, ...] = ()
    precedent_value: PrecedentWeight = PrecedentWeight.low
    url: str = ""
    summary: Optional[str] = None
    case_number: Optional[str] = None


class ComplianceViolation(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    severity: str  # minor | major | critical
    description: str
    remedy: str


class ComplianceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_id: str
    risk_level: RiskLevel
    score: int = Field(ge=0, le=100)
    violations: tuple[ComplianceViolation, ...] = ()
    recommendations: tuple[str, ...] = ()
    metadata: dict[str, Any] = Field(default_factory=dict)


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_risk: RiskLevel
    gdpr_risk: ComplianceResult
    ai_act_risk: Optional[ComplianceResult] = None
    contractual_risks: tuple[str, ...] = ()
    urgent_actions: tuple[str, ...] = ()
