"""Input schemas for tools and REST endpoints.

Field aliases follow the camelCase names exposed in the MCP tool schemas;
snake_case names are accepted as well.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.core.errors import ValidationError

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

_Model = TypeVar("_Model", bound=BaseModel)


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)


def _check_http_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("Invalid URL format")
    return value


class SearchCriteria(_Request):
    """Case-law search parameters"""

    query: str = Field(..., min_length=1, description="Search terms, case name, or legal concepts")
    court: Optional[str] = None
    date_from: Optional[str] = Field(default=None, alias="dateFrom", pattern=ISO_DATE_PATTERN)
    date_to: Optional[str] = Field(default=None, alias="dateTo", pattern=ISO_DATE_PATTERN)
    # Not bounded above here: the collector applies the hard ceiling.
    max_results: int = Field(default=settings.default_max_results, ge=1, alias="maxResults")
    subjects: tuple[str, ...] = Field(default=(), alias="subject")
    base_url: Optional[str] = Field(default=None, alias="baseUrl")

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_http_url(value)

    def to_params(self) -> dict[str, str]:
        """Query parameters for the provider's search endpoint"""
        params: dict[str, str] = {"q": self.query}
        if self.court:
            params["instantie"] = self.court
        if self.date_from:
            params["from"] = self.date_from
        if self.date_to:
            params["to"] = self.date_to
        params["max"] = str(self.max_results)
        if self.subjects:
            params["rechtsgebied"] = ",".join(self.subjects)
        return params


class CaseDetailRequest(_Request):
    ecli: str = Field(..., min_length=1, description="European Case Law Identifier")
    base_url: Optional[str] = Field(default=None, alias="baseUrl")

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_http_url(value)


class GDPRCriteria(_Request):
    data_types: tuple[str, ...] = Field(..., min_length=1, alias="dataTypes")
    processing_purpose: str = Field(..., min_length=1, alias="processingPurpose")
    legal_basis: Optional[str] = Field(default=None, alias="legalBasis")
    data_retention: Optional[str] = Field(default=None, alias="dataRetention")
    third_party_sharing: bool = Field(default=False, alias="thirdPartySharing")


class AISystemCriteria(_Request):
    system_description: str = Field(..., min_length=10, alias="systemDescription")
    application_domain: str = Field(..., min_length=1, alias="applicationDomain")
    user_impact: Optional[str] = Field(default=None, alias="userImpact")
    data_types: tuple[str, ...] = Field(default=(), alias="dataTypes")


class RiskAnalysisCriteria(_Request):
    business_description: str = Field(..., min_length=10, alias="businessDescription")
    data_processing: Optional[dict[str, Any]] = Field(default=None, alias="dataProcessing")
    ai_components: bool = Field(default=False, alias="aiComponents")
    target_market: Optional[str] = Field(default=None, alias="targetMarket")


def parse_input(model: type[_Model], data: Any) -> _Model:
    """Validate ``data`` against ``model``, flattening pydantic errors

    Raises:
        ValidationError: with every problem joined into one message
    """
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as exc:
        errors = exc.errors()
        messages = []
        for err in errors:
            location = ".".join(str(part) for part in err.get("loc", ()))
            messages.append(f"{location}: {err['msg']}" if location else err["msg"])
        field = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else None
        raise ValidationError(", ".join(messages), field=field) from exc
