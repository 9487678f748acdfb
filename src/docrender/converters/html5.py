#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/converters/html5.py
"""HTML5 base converter.

This module renders document nodes to semantic HTML5. It is the converter
used for the ``html5`` backend whenever no template overrides a node kind.

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
from docrender.utils.escape import escape_html_entities

_QUOTE_TAGS = {"emphasis": "em", "strong": "strong", "monospaced": "code"}


def _id_attr(node_id: str | None) -> str:
    return f' id="{escape_html_entities(node_id)}"' if node_id else ""


class Html5Converter(BaseConverter):
    """Convert document nodes to HTML5.

    Parameters
    ----------
    backend : str
        Backend identifier, normally ``"html5"``
    options : ConverterOptions or None, default = None
        Converter options; ``standalone`` controls whether ``document``
        produces a complete page or only the body content

    Examples
    --------
        >>> from docrender.ast import Document, Paragraph, Text
        >>> from docrender.api import convert_document
        >>> doc = Document(children=[Paragraph(children=[Text(text="Hi")])])
        >>> convert_document(doc, "html5", {"standalone": False})
        '<p>Hi</p>'

    """

    def convert_document(self, node: Document, standalone: bool | None = None) -> str:
        """Render the document, optionally as a complete HTML page."""
        if standalone is None:
            standalone = self.options.standalone

        body_parts = []
        if node.title:
            body_parts.append(f"<h1>{escape_html_entities(node.title)}</h1>")
        if node.children:
            body_parts.append(node.content)
        body = "\n".join(body_parts)

        if not standalone:
            return body

        lang = escape_html_entities(node.attr("lang", "en"))
        title = escape_html_entities(node.title or node.attr("title", "Untitled"))
        return (
            "<!DOCTYPE html>\n"
            f'<html lang="{lang}">\n'
            "<head>\n"
            '<meta charset="UTF-8">\n'
            f"<title>{title}</title>\n"
            "</head>\n"
            "<body>\n"
            f"{body}\n"
            "</body>\n"
            "</html>"
        )

    def convert_section(self, node: Section) -> str:
        """Render a section with a heading one level below its section level."""
        heading_level = min(6, node.section_level + 1)
        parts = [
            f'<section class="sect{node.section_level}"{_id_attr(node.id)}>',
            f"<h{heading_level}>{escape_html_entities(node.title)}</h{heading_level}>",
        ]
        if node.children:
            parts.append(node.content)
        parts.append("</section>")
        return "\n".join(parts)

    def convert_paragraph(self, node: Paragraph) -> str:
        """Render a paragraph."""
        return f"<p{_id_attr(node.id)}>{node.content}</p>"

    def convert_listing(self, node: Listing) -> str:
        """Render a verbatim listing."""
        class_attr = f' class="language-{escape_html_entities(node.language)}"' if node.language else ""
        code = f"<pre><code{class_attr}>{escape_html_entities(node.source)}</code></pre>"
        if node.title:
            caption = f"<figcaption>{escape_html_entities(node.title)}</figcaption>"
            return f"<figure{_id_attr(node.id)}>\n{caption}\n{code}\n</figure>"
        return code

    def convert_ulist(self, node: UnorderedList) -> str:
        """Render a bulleted list."""
        return f"<ul{_id_attr(node.id)}>\n{node.content}\n</ul>"

    def convert_olist(self, node: OrderedList) -> str:
        """Render a numbered list."""
        start_attr = f' start="{node.start}"' if node.start != 1 else ""
        return f"<ol{_id_attr(node.id)}{start_attr}>\n{node.content}\n</ol>"

    def convert_list_item(self, node: ListItem) -> str:
        """Render a list item."""
        return f"<li>{node.content}</li>"

    def convert_table(self, node: Table) -> str:
        """Render a table with an optional header row and caption."""
        parts = [f"<table{_id_attr(node.id)}>"]
        if node.title:
            parts.append(f"<caption>{escape_html_entities(node.title)}</caption>")
        if node.header:
            cells = "".join(f"<th>{escape_html_entities(cell)}</th>" for cell in node.header)
            parts.append(f"<thead>\n<tr>{cells}</tr>\n</thead>")
        if node.rows:
            parts.append("<tbody>")
            for row in node.rows:
                cells = "".join(f"<td>{escape_html_entities(cell)}</td>" for cell in row)
                parts.append(f"<tr>{cells}</tr>")
            parts.append("</tbody>")
        parts.append("</table>")
        return "\n".join(parts)

    def convert_image(self, node: Image) -> str:
        """Render a block image as a figure."""
        attrs = f'src="{escape_html_entities(node.target)}" alt="{escape_html_entities(node.alt)}"'
        if node.width is not None:
            attrs += f' width="{node.width}"'
        if node.height is not None:
            attrs += f' height="{node.height}"'
        parts = [f"<figure{_id_attr(node.id)}>", f"<img {attrs}>"]
        if node.title:
            parts.append(f"<figcaption>{escape_html_entities(node.title)}</figcaption>")
        parts.append("</figure>")
        return "\n".join(parts)

    def convert_admonition(self, node: Admonition) -> str:
        """Render an admonition as an aside."""
        label = escape_html_entities(node.title or node.caption)
        parts = [
            f'<aside class="admonition {node.name}"{_id_attr(node.id)}>',
            f'<p class="admonition-title">{label}</p>',
        ]
        if node.children:
            parts.append(node.content)
        parts.append("</aside>")
        return "\n".join(parts)

    def convert_thematic_break(self, node: ThematicBreak) -> str:
        """Render a horizontal rule."""
        return "<hr>"

    def convert_text(self, node: Text) -> str:
        """Render escaped text."""
        return escape_html_entities(node.text)

    def convert_inline_quoted(self, node: InlineQuoted) -> str:
        """Render emphasis, strong or monospaced text."""
        tag = _QUOTE_TAGS[node.kind]
        return f"<{tag}>{node.content}</{tag}>"

    def convert_inline_anchor(self, node: InlineAnchor) -> str:
        """Render a hyperlink, using the target as text when there is none."""
        target = escape_html_entities(node.target)
        text = node.content if node.children else target
        return f'<a href="{target}">{text}</a>'
