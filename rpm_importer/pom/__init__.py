"""Format-preserving pom.xml editing."""

from rpm_importer.pom.document import Document, Element, Span
from rpm_importer.pom.editor import PomEditor

__all__ = ["Document", "Element", "Span", "PomEditor"]
