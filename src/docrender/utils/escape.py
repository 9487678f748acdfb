#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/utils/escape.py
"""Format-specific text escaping utilities.

This module provides escape functions for the markup produced by the built-in
converters so that special characters in node text are properly handled.

"""

from __future__ import annotations

import html


def escape_html_entities(text: str) -> str:
    """Escape HTML special characters to entities.

    Used when embedding text in HTML and XML contexts. This function uses
    Python's built-in html.escape() for standard HTML5 entity encoding.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        Text with HTML entities

    Examples
    --------
        >>> escape_html_entities("<script>alert('XSS')</script>")
        '&lt;script&gt;alert(&#x27;XSS&#x27;)&lt;/script&gt;'

    """
    if not text:
        return text

    return html.escape(text, quote=True)


def escape_xml(text: str) -> str:
    """Escape text for XML output (DocBook and templates)."""
    if not text:
        return text
    return escape_html_entities(text)


def escape_roff(text: str) -> str:
    r"""Escape text for roff (man page) output.

    Backslashes become ``\e`` first, then hyphens are escaped so they are not
    turned into typographic dashes. A leading period or apostrophe would be
    read as a request, so it is protected with a zero-width ``\&``.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        roff-escaped text

    Examples
    --------
        >>> escape_roff(".start -x")
        '\\&.start \\-x'

    """
    if not text:
        return text

    result = text.replace("\\", "\\e").replace("-", "\\-")

    lines = []
    for line in result.split("\n"):
        if line.startswith((".", "'")):
            line = "\\&" + line
        lines.append(line)
    return "\n".join(lines)
