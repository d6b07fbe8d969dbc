"""Shared fixtures: provider payload builders, fake clock and sleep."""

import pytest

from dutch_legal_mcp.core.http_client import TransportClient
from dutch_legal_mcp.core.registry import ClientRegistry
from dutch_legal_mcp.core.retry import RetryPolicy

API_BASE = "https://data.test/uitspraken"
VIEW_BASE = "https://view.test"

RDF_NAMESPACES = (
    'xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" '
    'xmlns:dcterms="http://purl.org/dc/terms/" '
    'xmlns:psi="http://psi.rechtspraak.nl/"'
)


def build_feed(*identifiers):
    """Atom search feed; None produces an entry without an id"""
    entries = []
    for ecli in identifiers:
        id_element = f"<id>{ecli}</id>" if ecli is not None else ""
        entries.append(f"<entry>{id_element}<title>{ecli or 'untitled'}</title></entry>")
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom">'
        "<title>Rechtspraak Open Data</title>"
        f"{''.join(entries)}"
        "</feed>"
    )


def build_content(
    ecli="ECLI:NL:HR:2023:1",
    court="Hoge Raad",
    date="2023-03-15",
    subjects=("Civiel recht",),
    case_number="22/01234",
    summary="Cassatie verworpen.",
):
    fields = [f"<dcterms:identifier>{ecli}</dcterms:identifier>"]
    if court is not None:
        fields.append(
            '<dcterms:creator scheme="overheid.RechterlijkeMacht" '
            f'resourceIdentifier="http://standaarden.overheid.nl/owms/terms/x">{court}</dcterms:creator>'
        )
    if date is not None:
        fields.append(f"<dcterms:date>{date}</dcterms:date>")
    if case_number is not None:
        fields.append(f"<psi:zaaknummer>{case_number}</psi:zaaknummer>")
    fields.extend(f"<dcterms:subject>{s}</dcterms:subject>" for s in subjects)
    summary_xml = f"<inhoudsindicatie><para>{summary}</para></inhoudsindicatie>" if summary else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        "<open-rechtspraak>"
        f"<rdf:RDF {RDF_NAMESPACES}><rdf:Description>{''.join(fields)}</rdf:Description></rdf:RDF>"
        f"{summary_xml}"
        "</open-rechtspraak>"
    )


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def sleeps():
    return SleepRecorder()


@pytest.fixture()
def registry(sleeps):
    """Registry whose clients retry once, without real waiting"""

    def factory(base_url):
        return TransportClient(
            base_url,
            retry_policy=RetryPolicy(max_retries=1, base_delay=0, max_delay=0),
            sleep=sleeps,
        )

    return ClientRegistry(factory)


@pytest.fixture()
def make_feed():
    return build_feed


@pytest.fixture()
def make_content():
    return build_content
