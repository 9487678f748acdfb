#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/converters/docbook.py
"""DocBook base converters.

``DocBook5Converter`` renders DocBook 5 (namespaced, ``xlink`` links) and
``DocBook45Converter`` renders DocBook 4.5 (DOCTYPE declaration, ``ulink``
links, ``id`` attributes). The two differ in the document prolog, the
identifier attribute, link markup and ordered-list start numbers.

"""

from __future__ import annotations

from docrender.ast.nodes import (
    Admonition,
    Document,
    Image,
    InlineAnchor,
    InlineQuoted,
    Listing,
    ListItem,
    Node,
    OrderedList,
    Paragraph,
    Section,
    Table,
    Text,
    ThematicBreak,
    UnorderedList,
)
from docrender.converters.base import BaseConverter
from docrender.utils.escape import escape_xml

DOCBOOK5_NAMESPACE = "http://docbook.org/ns/docbook"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
DOCBOOK45_DOCTYPE = (
    '<!DOCTYPE article PUBLIC "-//OASIS//DTD DocBook XML V4.5//EN" '
    '"http://www.oasis-open.org/docbook/xml/4.5/docbookx.dtd">'
)
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class DocBook5Converter(BaseConverter):
    """Convert document nodes to DocBook 5 XML."""

    id_attribute = "xml:id"
    supports_starting_number = True

    def _common_attrs(self, node: Node) -> str:
        return f' {self.id_attribute}="{escape_xml(node.id)}"' if node.id else ""

    def _article_open(self, node: Document) -> str:
        lang = escape_xml(node.attr("lang", "en"))
        return f'<article xmlns="{DOCBOOK5_NAMESPACE}" xmlns:xlink="{XLINK_NAMESPACE}" version="5.0" xml:lang="{lang}">'

    def _info(self, node: Document) -> str:
        title = f"<title>{escape_xml(node.title)}</title>\n" if node.title else ""
        return f"<info>\n{title}</info>"

    def convert_document(self, node: Document, standalone: bool | None = None) -> str:
        """Render the document, optionally with XML prolog and article element."""
        if standalone is None:
            standalone = self.options.standalone

        content = node.content if node.children else ""
        if not standalone:
            return content

        parts = [self._prolog(), self._article_open(node), self._info(node)]
        if content:
            parts.append(content)
        parts.append("</article>")
        return "\n".join(parts)

    def _prolog(self) -> str:
        return XML_DECLARATION

    def convert_section(self, node: Section) -> str:
        """Render a section with its title."""
        parts = [f"<section{self._common_attrs(node)}>", f"<title>{escape_xml(node.title)}</title>"]
        if node.children:
            parts.append(node.content)
        parts.append("</section>")
        return "\n".join(parts)

    def convert_paragraph(self, node: Paragraph) -> str:
        """Render a paragraph."""
        return f"<simpara{self._common_attrs(node)}>{node.content}</simpara>"

    def convert_listing(self, node: Listing) -> str:
        """Render a verbatim listing."""
        language = f' language="{escape_xml(node.language)}"' if node.language else ""
        listing = (
            f'<programlisting{self._common_attrs(node)}{language} linenumbering="unnumbered">'
            f"{escape_xml(node.source)}</programlisting>"
        )
        if node.title:
            return f"<formalpara>\n<title>{escape_xml(node.title)}</title>\n<para>\n{listing}\n</para>\n</formalpara>"
        return listing

    def convert_ulist(self, node: UnorderedList) -> str:
        """Render a bulleted list."""
        title = f"<title>{escape_xml(node.title)}</title>\n" if node.title else ""
        return f"<itemizedlist{self._common_attrs(node)}>\n{title}{node.content}\n</itemizedlist>"

    def convert_olist(self, node: OrderedList) -> str:
        """Render a numbered list."""
        start = f' startingnumber="{node.start}"' if node.start != 1 and self.supports_starting_number else ""
        title = f"<title>{escape_xml(node.title)}</title>\n" if node.title else ""
        opening = f'<orderedlist{self._common_attrs(node)} numeration="arabic"{start}>'
        return f"{opening}\n{title}{node.content}\n</orderedlist>"

    def convert_list_item(self, node: ListItem) -> str:
        """Render a list item."""
        return f"<listitem>\n<simpara>{node.content}</simpara>\n</listitem>"

    def convert_table(self, node: Table) -> str:
        """Render a CALS table, formal when it has a title."""
        tag = "table" if node.title else "informaltable"
        parts = [f'<{tag}{self._common_attrs(node)} frame="all" rowsep="1" colsep="1">']
        if node.title:
            parts.append(f"<title>{escape_xml(node.title)}</title>")
        parts.append(f'<tgroup cols="{node.column_count}">')
        for index in range(node.column_count):
            parts.append(f'<colspec colname="col_{index + 1}"/>')
        if node.header:
            parts.append("<thead>")
            parts.append(self._row(node.header))
            parts.append("</thead>")
        parts.append("<tbody>")
        for row in node.rows:
            parts.append(self._row(row))
        parts.append("</tbody>")
        parts.append("</tgroup>")
        parts.append(f"</{tag}>")
        return "\n".join(parts)

    @staticmethod
    def _row(cells: list[str]) -> str:
        entries = "".join(f"<entry>{escape_xml(cell)}</entry>" for cell in cells)
        return f"<row>{entries}</row>"

    def convert_image(self, node: Image) -> str:
        """Render a block image as a (formal or informal) figure."""
        dimensions = ""
        if node.width is not None:
            dimensions += f' contentwidth="{node.width}"'
        if node.height is not None:
            dimensions += f' contentdepth="{node.height}"'
        media = (
            "<mediaobject>\n"
            f'<imageobject><imagedata fileref="{escape_xml(node.target)}"{dimensions}/></imageobject>\n'
            f"<textobject><phrase>{escape_xml(node.alt)}</phrase></textobject>\n"
            "</mediaobject>"
        )
        if node.title:
            return f"<figure{self._common_attrs(node)}>\n<title>{escape_xml(node.title)}</title>\n{media}\n</figure>"
        return f"<informalfigure{self._common_attrs(node)}>\n{media}\n</informalfigure>"

    def convert_admonition(self, node: Admonition) -> str:
        """Render an admonition with the element named after its kind."""
        parts = [f"<{node.name}{self._common_attrs(node)}>"]
        if node.title:
            parts.append(f"<title>{escape_xml(node.title)}</title>")
        if node.children:
            parts.append(node.content)
        parts.append(f"</{node.name}>")
        return "\n".join(parts)

    def convert_thematic_break(self, node: ThematicBreak) -> str:
        """Render a horizontal rule as a processing instruction."""
        return "<simpara><?asciidoc-hr?></simpara>"

    def convert_text(self, node: Text) -> str:
        """Render escaped text."""
        return escape_xml(node.text)

    def convert_inline_quoted(self, node: InlineQuoted) -> str:
        """Render emphasis, strong or monospaced text."""
        if node.kind == "strong":
            return f'<emphasis role="strong">{node.content}</emphasis>'
        if node.kind == "monospaced":
            return f"<literal>{node.content}</literal>"
        return f"<emphasis>{node.content}</emphasis>"

    def convert_inline_anchor(self, node: InlineAnchor) -> str:
        """Render a hyperlink."""
        target = escape_xml(node.target)
        if not node.children:
            return f'<link xlink:href="{target}"/>'
        return f'<link xlink:href="{target}">{node.content}</link>'


class DocBook45Converter(DocBook5Converter):
    """Convert document nodes to DocBook 4.5 XML."""

    id_attribute = "id"
    supports_starting_number = False

    def _prolog(self) -> str:
        return f"{XML_DECLARATION}\n{DOCBOOK45_DOCTYPE}"

    def _article_open(self, node: Document) -> str:
        return f'<article lang="{escape_xml(node.attr("lang", "en"))}">'

    def _info(self, node: Document) -> str:
        title = f"<title>{escape_xml(node.title)}</title>\n" if node.title else ""
        return f"<articleinfo>\n{title}</articleinfo>"

    def convert_inline_anchor(self, node: InlineAnchor) -> str:
        """Render a hyperlink as a ``ulink``."""
        target = escape_xml(node.target)
        text = node.content if node.children else target
        return f'<ulink url="{target}">{text}</ulink>'
