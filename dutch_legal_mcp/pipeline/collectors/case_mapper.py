"""
Rechtspraak payload mapping

Turns decoded provider markup into identifiers (search feed) and
CaseRecord objects (content documents). Missing optional fields fall back
to defaults; only a missing document envelope is fatal.
"""
from datetime import datetime
from typing import Callable, Iterable, List, Optional
from urllib.parse import quote

from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.core.errors import MappingError
from dutch_legal_mcp.core.markup import Node
from dutch_legal_mcp.models.entities import CaseRecord, PrecedentWeight
from dutch_legal_mcp.utils.logger import get_logger

logger = get_logger(__name__)


UNKNOWN_COURT = "Unknown Court"

# Precedent weight lookup (matched case-insensitively as substrings)
HIGH_AUTHORITY_COURTS = ("hoge raad",)
APPELLATE_COURTS = ("gerechtshof",)
HIGH_VALUE_SUBJECTS = ("grondrecht", "europees")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y%m%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%d.%m.%Y",
)

# Receives (event, detail) whenever the mapper silently degrades.
MappingObserver = Callable[[str, dict], None]


def log_mapping_event(event: str, detail: dict) -> None:
    """Default observer: schema drift shows up in the logs"""
    logger.warning(f"Mapping fallback '{event}': {detail}")


def normalize_date(value: Optional[str]) -> str:
    """
    Rewrite any parseable calendar date as YYYY-MM-DD, else return ""
    """
    text = (value or "").strip()
    if not text:
        return ""

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue

    return ""


def determine_precedent_value(court: str, subjects: Iterable[str]) -> PrecedentWeight:
    court_lower = court.lower()

    if any(name in court_lower for name in HIGH_AUTHORITY_COURTS):
        return PrecedentWeight.high
    if any(name in court_lower for name in APPELLATE_COURTS):
        return PrecedentWeight.medium

    # Constitutional or European-law subjects lift lower-court decisions
    for subject in subjects:
        subject_lower = subject.lower()
        if any(keyword in subject_lower for keyword in HIGH_VALUE_SUBJECTS):
            return PrecedentWeight.medium

    return PrecedentWeight.low


def build_view_url(ecli: str, view_base_url: Optional[str] = None) -> str:
    base = (view_base_url or settings.dutch_legal_view_base_url).rstrip("/")
    return f"{base}/details?id={quote(ecli, safe='')}"


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def map_search_results(
    decoded: Node,
    observer: MappingObserver = log_mapping_event,
) -> List[str]:
    """
    Extract ECLIs from an Atom search feed (feed/entry/id)

    An entry whose id is absent is skipped; repeated ids collapse to the first.
    """
    feed = decoded if decoded.tag == "feed" else decoded.first("feed")
    if feed is None:
        observer("feed_missing", {"root": decoded.tag})
        return []

    identifiers: List[str] = []
    for index, entry in enumerate(feed.all("entry")):
        ids = entry.values("id")
        if not ids:
            observer("entry_without_identifier", {"index": index})
            continue
        identifiers.append(ids[0])

    return identifiers


def _find_envelope(decoded: Node) -> Optional[Node]:
    if decoded.tag == "open-rechtspraak":
        return decoded
    return decoded.first("open-rechtspraak")


def map_detail(
    decoded: Node,
    view_base_url: Optional[str] = None,
    observer: MappingObserver = log_mapping_event,
) -> CaseRecord:
    """
    Build a CaseRecord from an open-rechtspraak content document

    Raises:
        MappingError: the open-rechtspraak/rdf:RDF/rdf:Description envelope
            is missing, meaning the provider changed its document format.
    """
    envelope = _find_envelope(decoded)
    description = envelope.find("rdf:RDF", "rdf:Description") if envelope is not None else None
    if description is None:
        raise MappingError("Invalid content response format", root=decoded.tag)

    ecli = description.value("dcterms:identifier")
    if not ecli:
        observer("identifier_missing", {"root": decoded.tag})

    court = description.value("dcterms:creator")
    if not court:
        court = UNKNOWN_COURT
        observer("court_defaulted", {"ecli": ecli})

    subjects = _unique(description.values("dcterms:subject"))

    summary_node = envelope.first("inhoudsindicatie")
    summary = summary_node.content if summary_node is not None and summary_node.content else None

    return CaseRecord(
        ecli=ecli,
        title=f"{ecli} - {court}",
        court=court,
        date=normalize_date(description.value("dcterms:date")),
        subjects=tuple(subjects),
        precedent_value=determine_precedent_value(court, subjects),
        url=build_view_url(ecli, view_base_url),
        summary=summary,
        case_number=description.value("psi:zaaknummer") or None,
    )

