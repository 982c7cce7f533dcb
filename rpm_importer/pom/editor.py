"""Maven-aware edits on top of :class:`Document`.

New elements are indented like their siblings; regions that are not edited
keep their original formatting.
"""

from __future__ import annotations

from rpm_importer.errors import FormatError
from rpm_importer.pom.document import Document, Element, Span

DEFAULT_INDENT = "    "

# Element names used by the manifest
NAME = "name"
GROUP_ID = "groupId"
ARTIFACT_ID = "artifactId"
VERSION = "version"
TYPE = "type"
CLASSIFIER = "classifier"
PROPERTIES = "properties"
DEPENDENCY_MANAGEMENT = "dependencyManagement"
DEPENDENCIES = "dependencies"
DEPENDENCY = "dependency"
BUILD = "build"
PLUGINS = "plugins"


def _trailing_indent(text: str) -> str | None:
    """Whitespace after the last newline of *text*, or None if it has no newline."""
    if "\n" not in text:
        return None
    return text.rsplit("\n", 1)[1]


class PomEditor:
    """Edit points over a parsed pom."""

    def __init__(self, document: Document):
        self.document = document

    @classmethod
    def parse(cls, source: str) -> PomEditor:
        return cls(Document.parse(source))

    def root(self) -> Element:
        return self.document.root

    def to_xml(self) -> str:
        return self.document.to_xml()

    # ── Lookup ────────────────────────────────────────────────────────

    def find_child(self, parent: Element, name: str) -> Element:
        """First child of *parent* called *name*.

        Raises:
            FormatError: If there is none.
        """
        child = parent.child(name)
        if child is None:
            raise FormatError(f"<{parent.name}> has no <{name}> element")
        return child

    def find_path(self, path: str, parent: Element | None = None) -> Element:
        current = parent or self.root()
        for name in path.split("/"):
            current = self.find_child(current, name)
        return current

    def set_text(self, parent: Element, name: str, value: str) -> Element:
        element = self.find_child(parent, name)
        element.text = value
        return element

    # ── Indentation ───────────────────────────────────────────────────

    def indent_of(self, element: Element) -> str:
        """Indentation of the line *element* starts on."""
        parent = element.parent
        if parent is None:
            return ""
        index = parent.children.index(element)
        if index > 0:
            previous = parent.children[index - 1]
            if isinstance(previous, Span) and previous.kind == "text":
                indent = _trailing_indent(previous.raw)
                if indent is not None:
                    return indent
        return self.indent_of(parent) + self.indent_unit()

    def indent_unit(self) -> str:
        """Indent step of the document, taken from the root's first child."""
        root = self.root()
        for index, child in enumerate(root.children):
            if isinstance(child, Element):
                if index > 0 and isinstance(root.children[index - 1], Span):
                    indent = _trailing_indent(root.children[index - 1].raw)
                    if indent:
                        return indent
                break
        return DEFAULT_INDENT

    # ── Insertion ─────────────────────────────────────────────────────

    def insert_element(self, parent: Element, name: str, text: str | None = None) -> Element:
        """Append ``<name>text</name>`` as the last child of *parent*."""
        newline = self.document.newline
        element = Element.new(name, text)
        content = [i for i, c in enumerate(parent.children) if not (isinstance(c, Span) and c.is_whitespace)]

        if content:
            last = content[-1]
            indent = None
            if last > 0 and isinstance(parent.children[last - 1], Span):
                indent = _trailing_indent(parent.children[last - 1].raw)
            if indent is None:
                indent = self.indent_of(parent) + self.indent_unit()
            parent.insert(last + 1, Span(newline + indent), element)
        else:
            parent_indent = self.indent_of(parent)
            parent.open()
            parent.children = []
            parent.insert(
                0,
                Span(newline + parent_indent + self.indent_unit()),
                element,
                Span(newline + parent_indent),
            )
        return element

    def add_dependency(self, dependencies: Element, group_id: str, artifact_id: str, version: str) -> Element:
        dependency = self.insert_element(dependencies, DEPENDENCY)
        self.insert_element(dependency, GROUP_ID, group_id)
        self.insert_element(dependency, ARTIFACT_ID, artifact_id)
        self.insert_element(dependency, VERSION, version)
        return dependency

    def find_plugin(self, plugins: Element, artifact_id: str) -> Element:
        for plugin in plugins.elements("plugin"):
            found = plugin.child(ARTIFACT_ID)
            if found is not None and found.text == artifact_id:
                return plugin
        raise FormatError(f"No plugin with artifactId {artifact_id} in <{plugins.name}>")
