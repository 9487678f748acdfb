#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Document node tree consumed by the converter pipeline.

Examples
--------
    >>> from docrender.ast import Document, Paragraph, Text
    >>> doc = Document(children=[Paragraph(children=[Text(text="Hello")])])
    >>> doc.children[0].node_name
    'paragraph'

"""

from docrender.ast.nodes import (
    NODE_CLASSES,
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
from docrender.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast

__all__ = [
    "NODE_CLASSES",
    "Admonition",
    "Document",
    "Image",
    "InlineAnchor",
    "InlineQuoted",
    "ListItem",
    "Listing",
    "Node",
    "OrderedList",
    "Paragraph",
    "Section",
    "Table",
    "Text",
    "ThematicBreak",
    "UnorderedList",
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
