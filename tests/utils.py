"""Test utilities for the docrender test suite.

This module provides helpers for building template directory trees and
sample documents, plus converters that record how they were called.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Mapping

from docrender.ast import (
    Document,
    InlineAnchor,
    InlineQuoted,
    ListItem,
    OrderedList,
    Paragraph,
    Section,
    Table,
    Text,
    UnorderedList,
)
from docrender.converters.base import Converter


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def write_template(root: Path, relative_path: str, source: str) -> Path:
    """Write a template file below ``root``, creating parent directories."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


def sample_document() -> Document:
    """Create a document with a section, paragraphs, lists and a table."""
    return Document(
        title="Sample",
        children=[
            Section(
                title="Intro",
                id="intro",
                children=[
                    Paragraph(
                        children=[
                            Text(text="Hello "),
                            InlineQuoted(kind="strong", children=[Text(text="world")]),
                            Text(text=", see "),
                            InlineAnchor(target="https://example.com", children=[Text(text="the site")]),
                        ]
                    ),
                    UnorderedList(
                        children=[
                            ListItem(children=[Text(text="one")]),
                            ListItem(children=[Text(text="two")]),
                        ]
                    ),
                    OrderedList(start=3, children=[ListItem(children=[Text(text="three")])]),
                ],
            ),
            Table(header=["Name", "Value"], rows=[["a", "1"], ["b", "2"]]),
        ],
    )


def paragraph(text: str) -> Paragraph:
    """Create a paragraph containing a single text node."""
    return Paragraph(children=[Text(text=text)])


class RecordingConverter(Converter):
    """Converter that handles a fixed set of node kinds and records calls."""

    def __init__(self, backend: str, handled: set[str], label: str):
        super().__init__(backend)
        self.handled = set(handled)
        self.label = label
        self.calls: list[str] = []

    def handles(self, node_name: str) -> bool:
        return node_name in self.handled

    def convert(self, node, transform=None, opts: Mapping[str, Any] | None = None) -> str:
        node_name = transform or node.node_name
        self.calls.append(node_name)
        return f"{self.label}:{node_name}"
