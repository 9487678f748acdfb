#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/converters/manpage.py
"""Man page (roff) base converter.

Renders document nodes to roff using the ``man`` macro package. Block
macros always start on a new line; inline formatting uses font escapes.

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
    OrderedList,
    Paragraph,
    Section,
    Table,
    Text,
    ThematicBreak,
    UnorderedList,
)
from docrender.converters.base import BaseConverter
from docrender.utils.escape import escape_roff

_FONTS = {"emphasis": "\\fI", "strong": "\\fB", "monospaced": "\\f(CR"}


def _quote_arg(text: str) -> str:
    """Quote a macro argument, escaping embedded double quotes."""
    return '"' + escape_roff(text).replace('"', '\\(dq') + '"'


def _cell(text: str) -> str:
    return escape_roff(text).replace("|", "\\(ba")


class ManPageConverter(BaseConverter):
    """Convert document nodes to a roff man page.

    Document attributes used:
      - ``manvolnum``: manual section number (default ``"1"``)
      - ``mansource``: source of the command (e.g. package name and version)
      - ``manmanual``: manual title
      - ``date``: date shown in the page footer

    """

    def convert_document(self, node: Document) -> str:
        """Render the title header followed by the page content."""
        title = (node.title or node.attr("manname", "untitled")).upper()
        header = " ".join(
            _quote_arg(str(value))
            for value in (
                title,
                node.attr("manvolnum", "1"),
                node.attr("date", ""),
                node.attr("mansource", ""),
                node.attr("manmanual", ""),
            )
        )
        parts = [f".TH {header}", ".ie \\n(.g .ds Aq \\(aq", ".el       .ds Aq '", ".nh", ".ad l"]
        if node.children:
            parts.append(node.content)
        return "\n".join(parts)

    def convert_section(self, node: Section) -> str:
        """Render a section heading; top-level headings are upper-cased."""
        if node.section_level == 1:
            heading = f".SH {_quote_arg(node.title.upper())}"
        else:
            heading = f".SS {_quote_arg(node.title)}"
        if node.children:
            return f"{heading}\n{node.content}"
        return heading

    def convert_paragraph(self, node: Paragraph) -> str:
        """Render a paragraph."""
        return f".sp\n{node.content}"

    def convert_listing(self, node: Listing) -> str:
        """Render a verbatim listing, indented and unfilled."""
        parts = [".sp"]
        if node.title:
            parts.append(f".B {_quote_arg(node.title)}")
            parts.append(".br")
        parts.extend([".if n .RS 4", ".nf", escape_roff(node.source), ".fi", ".if n .RE"])
        return "\n".join(parts)

    def convert_ulist(self, node: UnorderedList) -> str:
        """Render a bulleted list."""
        return self._list(node.title, node.content)

    def convert_olist(self, node: OrderedList) -> str:
        """Render a numbered list."""
        return self._list(node.title, node.content)

    @staticmethod
    def _list(title: str | None, content: str) -> str:
        parts = []
        if title:
            parts.extend([".sp", f".B {_quote_arg(title)}", ".br"])
        parts.extend([".RS 4", content, ".RE"])
        return "\n".join(parts)

    def convert_list_item(self, node: ListItem) -> str:
        """Render a list item with a bullet or its number."""
        parent = node.parent
        if isinstance(parent, OrderedList):
            number = parent.start + parent.children.index(node)
            marker = f'.IP " {number}." 4'
        else:
            marker = ".IP \\(bu 2"
        return f".sp\n{marker}\n{node.content}"

    def convert_table(self, node: Table) -> str:
        """Render a table with the ``tbl`` preprocessor."""
        columns = max(node.column_count, 1)
        parts = [".TS", "allbox tab(|);"]
        if node.title:
            parts.insert(0, f".sp\n.B {_quote_arg(node.title)}\n.br")
        if node.header:
            parts.append(" ".join(["lB"] * columns))
        parts.append(" ".join(["l"] * columns) + ".")
        if node.header:
            parts.append("|".join(_cell(cell) for cell in node.header))
        for row in node.rows:
            parts.append("|".join(_cell(cell) for cell in row))
        parts.append(".TE")
        return "\n".join(parts)

    def convert_image(self, node: Image) -> str:
        """Render the image's alternative text in brackets."""
        label = node.alt or node.target
        text = f"[{escape_roff(label)}]"
        if node.title:
            text += f"\n.br\n{escape_roff(node.title)}"
        return f".sp\n{text}"

    def convert_admonition(self, node: Admonition) -> str:
        """Render an admonition as a bold label followed by its content."""
        parts = [".sp", f".B {_quote_arg(node.title or node.caption)}", ".br"]
        if node.children:
            parts.append(node.content)
        return "\n".join(parts)

    def convert_thematic_break(self, node: ThematicBreak) -> str:
        """Render a centered rule."""
        return ".sp\n.ce\n\\l'\\n(.lu*25u/100u\\(ap'"

    def convert_text(self, node: Text) -> str:
        """Render roff-escaped text."""
        return escape_roff(node.text)

    def convert_inline_quoted(self, node: InlineQuoted) -> str:
        """Render emphasis, strong or monospaced text with font escapes."""
        return f"{_FONTS[node.kind]}{node.content}\\fP"

    def convert_inline_anchor(self, node: InlineAnchor) -> str:
        """Render a link as its text followed by the target in angle brackets."""
        target = escape_roff(node.target)
        if not node.children:
            return target
        return f"{node.content} <{target}>"
