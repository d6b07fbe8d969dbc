"""
Rechtspraak case-law collector

Two-phase lookup against the court data API:
1. search (/zoeken) returns an Atom feed of ECLIs
2. content (/content?id=ECLI) is fetched once per ECLI, sequentially

Only a failure of the search call fails the whole operation. A detail
fetch that fails is logged and skipped, so callers get whatever could be
retrieved.
"""
from enum import Enum
from typing import List, Optional

import anyio

from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.core.errors import CaseLawError, NetworkError, ValidationError
from dutch_legal_mcp.core.http_client import TransportClient
from dutch_legal_mcp.core.markup import decode
from dutch_legal_mcp.core.registry import ClientRegistry
from dutch_legal_mcp.models.entities import CaseRecord
from dutch_legal_mcp.models.requests import SearchCriteria
from dutch_legal_mcp.pipeline.collectors.case_mapper import (
    MappingObserver,
    log_mapping_event,
    map_detail,
    map_search_results,
)
from dutch_legal_mcp.utils.logger import get_logger

logger = get_logger(__name__)


class SearchPhase(str, Enum):
    idle = "idle"
    search_issued = "search_issued"
    identifiers_extracted = "identifiers_extracted"
    detail_fetch_loop = "detail_fetch_loop"
    completed = "completed"
    failed = "failed"


class CaseLawCollector:
    """Case-law search and detail retrieval"""

    def __init__(
        self,
        registry: ClientRegistry,
        *,
        api_base_url: Optional[str] = None,
        view_base_url: Optional[str] = None,
        max_results_ceiling: Optional[int] = None,
        search_timeout: Optional[float] = None,
        observer: MappingObserver = log_mapping_event,
    ):
        self.registry = registry
        self.api_base_url = api_base_url or settings.dutch_legal_api_base_url
        self.view_base_url = view_base_url or settings.dutch_legal_view_base_url
        self.max_results_ceiling = max_results_ceiling or settings.max_search_results
        self.search_timeout = settings.search_timeout if search_timeout is None else search_timeout
        self.observer = observer

    def _client(self, endpoint: str, base_url: Optional[str]) -> TransportClient:
        base = (base_url or self.api_base_url).strip().rstrip("/")
        return self.registry.client_for(f"{base}/{endpoint}" if base else "")

    def _log_phase(self, phase: SearchPhase, query: str, **extra) -> None:
        logger.debug(f"search '{query}' -> {phase.value} {extra or ''}".rstrip())

    async def search(self, criteria: SearchCriteria) -> List[CaseRecord]:
        """
        Search decisions and fetch the details of each hit

        Args:
            criteria: validated search parameters; max_results is capped
                at the configured ceiling (50) whatever the caller asks for

        Returns:
            Records in feed order; possibly fewer than requested, possibly empty

        Raises:
            CaseLawError: the search call itself failed or the time budget
                ran out before the feed arrived
        """
        requested = min(criteria.max_results, self.max_results_ceiling)
        params = criteria.to_params()
        params["max"] = str(requested)
        search_client = self._client("zoeken", criteria.base_url)

        self._log_phase(SearchPhase.search_issued, criteria.query, params=params)
        feed = None
        with anyio.move_on_after(self.search_timeout) as budget:
            try:
                feed = await search_client.fetch_and_decode("", params)
            except CaseLawError as exc:
                self._log_phase(SearchPhase.failed, criteria.query, error=exc.code)
                logger.error(f"Case law search failed for query '{criteria.query}': {exc}")
                raise

        if feed is None:
            self._log_phase(SearchPhase.failed, criteria.query, error="timeout")
            raise NetworkError(f"Search timed out after {self.search_timeout}s", query=criteria.query)

        identifiers = map_search_results(feed, self.observer)
        limit = min(len(identifiers), requested)
        self._log_phase(SearchPhase.identifiers_extracted, criteria.query, found=len(identifiers), limit=limit)

        cases: List[CaseRecord] = []
        self._log_phase(SearchPhase.detail_fetch_loop, criteria.query)
        with anyio.CancelScope(deadline=budget.deadline) as loop_scope:
            for ecli in identifiers[:limit]:
                try:
                    cases.append(await self._fetch_detail(ecli, criteria.base_url))
                except CaseLawError as exc:
                    logger.error(f"Failed to get details for {ecli}: {exc}")

        if loop_scope.cancelled_caught:
            logger.warning(
                f"Search budget of {self.search_timeout}s exhausted; "
                f"returning {len(cases)} of {limit} cases for query '{criteria.query}'"
            )

        self._log_phase(SearchPhase.completed, criteria.query, returned=len(cases))
        logger.info(f"Fetched {len(cases)} cases for query: {criteria.query}")
        return cases

    async def _fetch_detail(self, ecli: str, base_url: Optional[str]) -> CaseRecord:
        client = self._client("content", base_url)
        result = await client.fetch("", {"id": ecli})
        if result.from_cache:
            logger.debug(f"Detail for {ecli} served from cache")
        return map_detail(decode(result.payload), self.view_base_url, self.observer)

    async def get_details(self, ecli: str, base_url: Optional[str] = None) -> CaseRecord:
        """
        Fetch a single decision by ECLI

        Raises:
            ValidationError: empty identifier
            CaseLawError: the decision could not be retrieved or mapped
        """
        identifier = (ecli or "").strip()
        if not identifier:
            raise ValidationError("ECLI is required", field="ecli")
        return await self._fetch_detail(identifier, base_url)
