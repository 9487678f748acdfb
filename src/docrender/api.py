"""The major exported API functions for document conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/docrender/api.py
import logging
from typing import Optional

from docrender.ast.nodes import Document, Node
from docrender.constants import DEFAULT_BACKEND
from docrender.converters.base import Converter
from docrender.environment import HostEnvironment
from docrender.exceptions import ConfigurationError
from docrender.factory import OptionsInput, factory
from docrender.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


def convert_document(
    document: Document,
    backend: Optional[str] = None,
    options: OptionsInput = None,
    converter: Optional[Converter] = None,
    host: Optional[HostEnvironment] = None,
) -> str:
    """Convert a document tree to output markup.

    Parameters
    ----------
    document : Document
        Root of the node tree to convert
    backend : str or None, default = None
        Backend identifier. Defaults to the document's ``backend`` attribute,
        then to ``"html5"``.
    options : ConverterOptions, Mapping, or None, default = None
        Options for building the converter, e.g.
        ``{"template_dirs": ["./custom", "./fallback"]}``. Ignored when
        ``converter`` is given.
    converter : Converter or None, default = None
        Prebuilt converter to use instead of building one
    host : HostEnvironment or None, default = None
        Host description used when building the converter

    Returns
    -------
    str
        Converted document

    Raises
    ------
    ConfigurationError
        If no converter is available for the backend
    ConversionError
        If a node cannot be converted
    TemplateReadError
        If a template file exists but cannot be read

    Examples
    --------
    Override paragraphs with templates from two directories:

        >>> output = convert_document(doc, "html5", {"template_dirs": ["./custom", "./fallback"]})

    """
    if converter is None:
        backend = backend or document.attr("backend") or DEFAULT_BACKEND
        converter = factory.create(backend, options, host)
        if converter is None:
            raise ConfigurationError(backend, node_name=document.node_name, supported_backends=factory.list_backends())
    else:
        backend = converter.backend

    logger.debug(f"Converting document with {converter!r}")
    document.converter = converter
    with debug_timer(logger, f"Conversion ({backend})"):
        return converter.convert(document)


def convert_node(node: Node, converter: Converter, transform: Optional[str] = None) -> str:
    """Convert a single node, attaching the converter to its document.

    Parameters
    ----------
    node : Node
        Node to convert; nested content is converted through the converter
        of the node's document
    converter : Converter
        Converter to use
    transform : str or None, default = None
        Node kind to convert as, instead of ``node.node_name``

    Returns
    -------
    str
        Converted node

    """
    document = node.document
    if document is not None:
        document.converter = converter
    return converter.convert(node, transform)
