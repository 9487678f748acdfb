#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/ast/nodes.py
"""Node classes for document representation.

This module defines the node tree the converter pipeline consumes. Each node
exposes a stable ``node_name`` identifying its kind; converters, and the
templates that override them, are selected by that name.

Nodes do not know how to render themselves. A ``Document`` carries the
converter it is being converted with, and every node reaches it through its
parent chain: ``node.convert()`` converts the node itself and ``node.content``
converts its children. Templates therefore render nested content with
``{{ node.content }}`` and overrides apply at every depth of the tree.

Node Kinds
----------
Block-level nodes:
    - document, section, paragraph, listing, ulist, olist, list_item
    - table, image, admonition, thematic_break

Inline nodes:
    - text, inline_quoted, inline_anchor

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Literal, Optional

from docrender.exceptions import ConversionError

QuoteKind = Literal["emphasis", "strong", "monospaced"]
AdmonitionName = Literal["note", "tip", "important", "caution", "warning"]


@dataclass
class Node:
    """Base class for all document nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Child nodes, converted in order by ``content``
    id : str or None, default = None
        Optional unique identifier (used for anchors)
    attributes : dict, default = empty dict
        Arbitrary attributes available to converters and templates

    """

    node_name: ClassVar[str] = "node"
    content_separator: ClassVar[str] = "\n"

    children: list[Node] = field(default_factory=list)
    id: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)
    parent: Optional[Node] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Link children back to this node."""
        for child in self.children:
            child.parent = self

    def append(self, child: Node) -> Node:
        """Append a child node and link it to this node.

        Returns
        -------
        Node
            The appended child

        """
        child.parent = self
        self.children.append(child)
        return child

    def attr(self, name: str, default: Any = None) -> Any:
        """Look up an attribute, returning ``default`` when it is not set."""
        return self.attributes.get(name, default)

    @property
    def document(self) -> Optional[Document]:
        """The document at the root of this node's tree, if attached."""
        node: Optional[Node] = self
        while node is not None:
            if isinstance(node, Document):
                return node
            node = node.parent
        return None

    @property
    def level(self) -> int:
        """Depth of the node below the document root."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def convert(self, transform: str | None = None) -> str:
        """Convert this node with the converter of its document.

        Parameters
        ----------
        transform : str or None, default = None
            Convert as if the node were of this kind instead of ``node_name``

        Raises
        ------
        ConversionError
            If the node is not attached to a document that has a converter

        """
        document = self.document
        if document is None or document.converter is None:
            raise ConversionError(
                f"Node '{self.node_name}' is not attached to a document with a converter",
                node_name=self.node_name,
            )
        return document.converter.convert(self, transform)

    @property
    def content(self) -> str:
        """Children converted in order and joined with ``content_separator``."""
        return self.content_separator.join(child.convert() for child in self.children)

    @property
    def plain_text(self) -> str:
        """Text of all descendant ``text`` nodes, without markup."""
        return "".join(node.text for node in self.walk() if isinstance(node, Text))

    def walk(self) -> Iterator[Node]:
        """Yield this node and all of its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node.

    Parameters
    ----------
    title : str or None, default = None
        Document title
    converter : Converter or None, default = None
        Converter the document is being converted with. Set by
        ``docrender.api.convert_document``.

    """

    node_name: ClassVar[str] = "document"

    title: Optional[str] = None
    converter: Any = field(default=None, repr=False, compare=False)


@dataclass
class Section(Node):
    """Titled section containing block-level children.

    Parameters
    ----------
    title : str, default = ""
        Section title
    section_level : int, default = 1
        Section level (1-5); level 1 is a top-level section

    """

    node_name: ClassVar[str] = "section"

    title: str = ""
    section_level: int = 1

    def __post_init__(self) -> None:
        """Validate section level is between 1 and 5."""
        super().__post_init__()
        if not 1 <= self.section_level <= 5:
            raise ValueError(f"Section level must be 1-5, got {self.section_level}")


@dataclass
class Paragraph(Node):
    """Paragraph of inline content."""

    node_name: ClassVar[str] = "paragraph"
    content_separator: ClassVar[str] = ""


@dataclass
class Listing(Node):
    """Verbatim source listing.

    Parameters
    ----------
    source : str, default = ""
        Listing text, not processed for markup
    language : str or None, default = None
        Source language for syntax highlighting

    """

    node_name: ClassVar[str] = "listing"

    source: str = ""
    language: Optional[str] = None
    title: Optional[str] = None


@dataclass
class UnorderedList(Node):
    """Bulleted list whose children are ``list_item`` nodes."""

    node_name: ClassVar[str] = "ulist"

    title: Optional[str] = None


@dataclass
class OrderedList(Node):
    """Numbered list whose children are ``list_item`` nodes.

    Parameters
    ----------
    start : int, default = 1
        Number of the first item

    """

    node_name: ClassVar[str] = "olist"

    title: Optional[str] = None
    start: int = 1


@dataclass
class ListItem(Node):
    """List item of inline content."""

    node_name: ClassVar[str] = "list_item"
    content_separator: ClassVar[str] = ""


@dataclass
class Table(Node):
    """Table of plain-text cells.

    Parameters
    ----------
    header : list of str or None, default = None
        Header row cells
    rows : list of list of str, default = empty list
        Body rows
    title : str or None, default = None
        Table caption

    """

    node_name: ClassVar[str] = "table"

    header: Optional[list[str]] = None
    rows: list[list[str]] = field(default_factory=list)
    title: Optional[str] = None

    @property
    def column_count(self) -> int:
        """Widest row in the table, header included."""
        widths = [len(row) for row in self.rows]
        if self.header:
            widths.append(len(self.header))
        return max(widths, default=0)


@dataclass
class Image(Node):
    """Block image.

    Parameters
    ----------
    target : str, default = ""
        Image URL or path
    alt : str, default = ""
        Alternative text
    title : str or None, default = None
        Caption
    width : int or None, default = None
    height : int or None, default = None

    """

    node_name: ClassVar[str] = "image"

    target: str = ""
    alt: str = ""
    title: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class Admonition(Node):
    """Admonition block (note, tip, warning, ...) containing blocks.

    Parameters
    ----------
    name : str, default = "note"
        Admonition kind
    title : str or None, default = None
        Optional title

    """

    node_name: ClassVar[str] = "admonition"

    name: AdmonitionName = "note"
    title: Optional[str] = None

    @property
    def caption(self) -> str:
        """Label shown for the admonition kind."""
        return self.name.capitalize()


@dataclass
class ThematicBreak(Node):
    """Horizontal rule between blocks."""

    node_name: ClassVar[str] = "thematic_break"


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run.

    Parameters
    ----------
    text : str, default = ""
        Text content, escaped by the converter for its output format

    """

    node_name: ClassVar[str] = "text"

    text: str = ""


@dataclass
class InlineQuoted(Node):
    """Formatted inline span (emphasis, strong or monospaced).

    Parameters
    ----------
    kind : {"emphasis", "strong", "monospaced"}, default = "emphasis"
        Formatting applied to the span

    """

    node_name: ClassVar[str] = "inline_quoted"
    content_separator: ClassVar[str] = ""

    kind: QuoteKind = "emphasis"

    def __post_init__(self) -> None:
        """Validate the quote kind."""
        super().__post_init__()
        if self.kind not in ("emphasis", "strong", "monospaced"):
            raise ValueError(f"Unsupported inline_quoted kind: {self.kind}")


@dataclass
class InlineAnchor(Node):
    """Hyperlink whose children are the link text.

    Parameters
    ----------
    target : str, default = ""
        Link target URL

    """

    node_name: ClassVar[str] = "inline_anchor"
    content_separator: ClassVar[str] = ""

    target: str = ""


NODE_CLASSES: dict[str, type[Node]] = {
    cls.node_name: cls
    for cls in (
        Document,
        Section,
        Paragraph,
        Listing,
        UnorderedList,
        OrderedList,
        ListItem,
        Table,
        Image,
        Admonition,
        ThematicBreak,
        Text,
        InlineQuoted,
        InlineAnchor,
    )
}
