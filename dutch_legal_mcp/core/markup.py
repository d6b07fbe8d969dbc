"""Markup decoder.

Turns a raw XML payload into a tree of :class:`Node` objects. Decoding is
purely structural: no document schema is assumed, so callers read fields
through accessors that tolerate absent and repeated children.

Namespaced names are rendered with the prefix the document itself declares
(``dcterms:identifier``); names in the default namespace keep only their
local part (``feed``, ``entry``).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional, Union

from .errors import ParseError


@dataclass
class Node:
    """Generic element: attributes, own text and children grouped by tag.

    A field may occur once or many times in the provider's markup;
    ``children`` always stores a list so :meth:`first` and :meth:`all`
    give a single normalized view of both shapes.
    """

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""
    content: str = ""
    children: dict[str, list["Node"]] = field(default_factory=dict)

    def all(self, name: str) -> list["Node"]:
        return list(self.children.get(name, ()))

    def first(self, name: str) -> Optional["Node"]:
        nodes = self.children.get(name)
        return nodes[0] if nodes else None

    def find(self, *path: str) -> Optional["Node"]:
        """Follow the first child at every step of ``path``"""
        node: Optional[Node] = self
        for name in path:
            if node is None:
                return None
            node = node.first(name)
        return node

    def value(self, name: str, default: str = "") -> str:
        node = self.first(name)
        if node is None or not node.text:
            return default
        return node.text

    def values(self, name: str) -> list[str]:
        return [node.text for node in self.all(name) if node.text]

    def _append(self, child: "Node") -> None:
        self.children.setdefault(child.tag, []).append(child)


def _qualify(name: str, prefixes: dict[str, str]) -> str:
    if not name.startswith("{"):
        return name
    uri, _, local = name[1:].partition("}")
    prefix = prefixes.get(uri)
    return f"{prefix}:{local}" if prefix else local


def decode(raw: Union[str, bytes]) -> Node:
    """Parse ``raw`` into a root :class:`Node`.

    Raises:
        ParseError: the payload is empty or not well-formed. A malformed
            payload is never turned into an empty tree, since that would be
            indistinguishable from a legitimate empty result.
    """
    if raw is None or not raw.strip():
        raise ParseError("Empty markup payload")

    parser = ET.XMLPullParser(events=("start-ns", "start", "end"))
    try:
        parser.feed(raw)
        parser.close()
    except ET.ParseError as exc:
        raise ParseError(f"Malformed markup: {exc}") from exc

    prefixes: dict[str, str] = {}
    stack: list[Node] = []
    root: Optional[Node] = None

    for event, item in parser.read_events():
        if event == "start-ns":
            prefix, uri = item
            prefixes.setdefault(uri, prefix)
        elif event == "start":
            stack.append(
                Node(
                    tag=_qualify(item.tag, prefixes),
                    attributes={_qualify(k, prefixes): v for k, v in item.attrib.items()},
                )
            )
        else:
            node = stack.pop()
            node.text = (item.text or "").strip()
            node.content = " ".join("".join(item.itertext()).split())
            if stack:
                stack[-1]._append(node)
            else:
                root = node

    if root is None:
        raise ParseError("Markup payload has no root element")
    return root
