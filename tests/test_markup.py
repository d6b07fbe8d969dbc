import pytest

from dutch_legal_mcp.core.errors import ParseError
from dutch_legal_mcp.core.markup import decode


def test_decode_feed_uses_local_names_for_default_namespace(make_feed):
    root = decode(make_feed("ECLI:NL:HR:2023:1", "ECLI:NL:HR:2023:2"))

    assert root.tag == "feed"
    assert root.value("title") == "Rechtspraak Open Data"
    assert [entry.value("id") for entry in root.all("entry")] == [
        "ECLI:NL:HR:2023:1",
        "ECLI:NL:HR:2023:2",
    ]


def test_decode_keeps_document_prefixes(make_content):
    root = decode(make_content())

    description = root.find("rdf:RDF", "rdf:Description")
    assert description is not None
    assert description.value("dcterms:identifier") == "ECLI:NL:HR:2023:1"
    assert description.value("psi:zaaknummer") == "22/01234"
    creator = description.first("dcterms:creator")
    assert creator.attributes["scheme"] == "overheid.RechterlijkeMacht"


def test_single_and_repeated_children_read_the_same_way():
    root = decode("<doc><tag>one</tag><multi>a</multi><multi>b</multi><multi/></doc>")

    assert root.values("tag") == ["one"]
    assert root.values("multi") == ["a", "b"]
    assert root.first("multi").text == "a"
    assert len(root.all("multi")) == 3


def test_missing_fields_fall_back():
    root = decode("<doc><present>x</present></doc>")

    assert root.first("absent") is None
    assert root.all("absent") == []
    assert root.value("absent", "fallback") == "fallback"
    assert root.find("present", "deeper") is None


def test_content_flattens_nested_text():
    root = decode("<doc><para>Eerste  zin.</para>\n<para>Tweede <b>zin</b>.</para></doc>")

    assert root.content == "Eerste zin. Tweede zin."


def test_str_with_encoding_declaration_decodes():
    root = decode('<?xml version="1.0" encoding="utf-8"?><a><b>é</b></a>')

    assert root.value("b") == "é"


@pytest.mark.parametrize("payload", ["", "   ", "<a><b></a>", "not markup", "<a>"])
def test_malformed_payload_raises_parse_error(payload):
    with pytest.raises(ParseError):
        decode(payload)
