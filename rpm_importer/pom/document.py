"""Format-preserving XML document.

The text is split into raw spans (character data, whitespace, comments,
processing instructions, CDATA, doctype) and elements. Each element keeps
its start and end tags verbatim, so serializing an unedited tree reproduces
the input byte for byte. Edits only replace the children of the element
they target.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Iterator, Union
from xml.sax.saxutils import escape

from rpm_importer.errors import FormatError

_TOKEN = re.compile(
    r"""
    (?P<comment><!--.*?-->)
    |(?P<cdata><!\[CDATA\[.*?\]\]>)
    |(?P<pi><\?.*?\?>)
    |(?P<doctype><!DOCTYPE[^>\[]*(?:\[.*?\])?\s*>)
    |(?P<end></\s*(?P<end_name>[^\s>]+)\s*>)
    |(?P<start><(?P<start_name>[^\s/>!?]+)
        (?:\s+[^\s=/>]+\s*=\s*(?:"[^"]*"|'[^']*'))*
        \s*(?P<empty>/)?>)
    """,
    re.DOTALL | re.VERBOSE,
)


@dataclass(frozen=True)
class Span:
    """An immutable run of raw text that is never interpreted on output."""

    raw: str
    kind: str = "text"  # text | comment | cdata | pi | doctype

    @property
    def is_whitespace(self) -> bool:
        return self.kind == "text" and not self.raw.strip()

    def to_xml(self) -> str:
        return self.raw


Node = Union[Span, "Element"]


@dataclass(eq=False)
class Element:
    name: str
    start_tag: str
    end_tag: str | None = None  # None for a self-closing tag
    children: list[Node] = field(default_factory=list)
    parent: Element | None = field(default=None, repr=False)

    @classmethod
    def new(cls, name: str, text: str | None = None) -> Element:
        element = cls(name=name, start_tag=f"<{name}>", end_tag=f"</{name}>")
        if text is not None:
            element.children.append(Span(escape(text)))
        return element

    @property
    def self_closing(self) -> bool:
        return self.end_tag is None

    def elements(self, name: str | None = None) -> Iterator[Element]:
        for child in self.children:
            if isinstance(child, Element) and (name is None or child.name == name):
                yield child

    def child(self, name: str) -> Element | None:
        return next(self.elements(name), None)

    def find(self, path: str) -> Element | None:
        """Follow a ``/``-separated path of first-matching child names."""
        current: Element | None = self
        for name in path.split("/"):
            if current is None:
                return None
            current = current.child(name)
        return current

    @property
    def text(self) -> str:
        """Character data of the direct text and CDATA children, unescaped and stripped."""
        parts = []
        for child in self.children:
            if isinstance(child, Span) and child.kind == "text":
                parts.append(html.unescape(child.raw))
            elif isinstance(child, Span) and child.kind == "cdata":
                parts.append(child.raw[len("<![CDATA["):-len("]]>")])
        return "".join(parts).strip()

    @text.setter
    def text(self, value: str) -> None:
        self.open()
        self.children = [Span(escape(value))]

    def open(self) -> None:
        """Turn ``<x/>`` into ``<x></x>`` so it can take children."""
        if self.self_closing:
            self.start_tag = re.sub(r"\s*/>$", ">", self.start_tag)
            self.end_tag = f"</{self.name}>"

    def insert(self, index: int, *nodes: Node) -> None:
        self.open()
        for offset, node in enumerate(nodes):
            if isinstance(node, Element):
                node.parent = self
            self.children.insert(index + offset, node)

    def to_xml(self) -> str:
        if self.self_closing:
            return self.start_tag
        return self.start_tag + "".join(child.to_xml() for child in self.children) + self.end_tag


@dataclass(eq=False)
class Document:
    root: Element
    prolog: list[Span] = field(default_factory=list)
    epilog: list[Span] = field(default_factory=list)
    # Line ending used for inserted nodes, detected once when parsing.
    newline: str = "\n"

    def to_xml(self) -> str:
        return (
            "".join(s.raw for s in self.prolog)
            + self.root.to_xml()
            + "".join(s.raw for s in self.epilog)
        )

    @classmethod
    def parse(cls, source: str) -> Document:
        """Split *source* into spans and elements.

        Raises:
            FormatError: On mismatched tags, stray markup, or no single root.
        """
        prolog: list[Span] = []
        epilog: list[Span] = []
        root: Element | None = None
        stack: list[Element] = []

        def add(span: Span) -> None:
            if stack:
                stack[-1].children.append(span)
            elif root is None:
                prolog.append(span)
            else:
                epilog.append(span)

        pos = 0
        while pos < len(source):
            if source[pos] != "<":
                end = source.find("<", pos)
                end = len(source) if end == -1 else end
                span = Span(source[pos:end])
                if not stack and not span.is_whitespace:
                    raise FormatError(f"Text outside the root element at offset {pos}", raw=span.raw[:80])
                add(span)
                pos = end
                continue

            match = _TOKEN.match(source, pos)
            if match is None:
                raise FormatError(f"Malformed markup at offset {pos}", raw=source[pos:pos + 80])
            kind = match.lastgroup
            raw = match.group(0)
            pos = match.end()

            if match.group("start"):
                element = Element(name=match.group("start_name"), start_tag=raw)
                element.end_tag = None if match.group("empty") else ""
                if stack:
                    element.parent = stack[-1]
                    stack[-1].children.append(element)
                elif root is None:
                    root = element
                else:
                    raise FormatError(f"Multiple root elements: <{element.name}>")
                if not match.group("empty"):
                    stack.append(element)
            elif match.group("end"):
                name = match.group("end_name")
                if not stack or stack[-1].name != name:
                    expected = stack[-1].name if stack else None
                    raise FormatError(f"Unexpected </{name}> (expected </{expected}>)", raw=raw)
                stack.pop().end_tag = raw
            else:
                add(Span(raw, kind=kind or "text"))

        if stack:
            raise FormatError(f"Unclosed element <{stack[-1].name}>")
        if root is None:
            raise FormatError("Document has no root element")
        newline = "\r\n" if "\r\n" in source else "\n"
        return cls(root=root, prolog=prolog, epilog=epilog, newline=newline)
