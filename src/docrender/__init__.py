"""docrender - A pluggable converter pipeline for rendering document trees.

docrender turns a tree of typed document nodes into output markup. Each
backend (``html5``, ``docbook5``, ``docbook45``, ``manpage`` or a custom one)
has a base converter; user-supplied templates found in a prioritized list of
directories can override how individual node kinds are rendered, with the
base converter handling every node kind no template covers.

Template Lookup
---------------
For each template directory, in order, the files below are tried and the
first one found wins::

    <dir>/<engine>/<backend>/<node_name>.<ext>
    <dir>/<engine>/<node_name>.<ext>
    <dir>/<backend>/<node_name>.<ext>
    <dir>/<node_name>.<ext>

Requirements
------------
- Python 3.10+
- Jinja2 for the built-in template engine

Examples
--------
Override paragraphs while keeping the built-in rendering of everything else:

    >>> from docrender import convert_document
    >>> from docrender.ast import Document, Paragraph, Text
    >>> doc = Document(children=[Paragraph(children=[Text(text="Hello")])])
    >>> html = convert_document(doc, "html5", {"template_dirs": ["./custom", "./fallback"]})

Building a converter directly:

    >>> from docrender import create_converter
    >>> converter = create_converter("docbook5")
    >>> converter.handles("paragraph")
    True

See Also
--------
docrender.factory : Converter construction
docrender.converters.template : Template resolution and rendering

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "docrender requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from docrender.api import convert_document, convert_node
from docrender.converters import (
    BaseConverter,
    CompositeConverter,
    Converter,
    ResolvedTemplate,
    TemplateConverter,
    TemplateResolver,
)
from docrender.engines import JinjaEngine, TemplateEngine, get_engine, register_engine
from docrender.environment import HostEnvironment
from docrender.exceptions import (
    ConfigurationError,
    ConversionError,
    DependencyError,
    DocRenderError,
    TemplateCompileError,
    TemplateNotFoundError,
    TemplateReadError,
    TemplateRenderError,
    ValidationError,
)
from docrender.factory import ConverterFactory, create_converter
from docrender.factory import factory as converter_factory
from docrender.options import ConverterOptions

__all__ = [
    "__version__",
    "convert_document",
    "convert_node",
    "create_converter",
    "converter_factory",
    "ConverterFactory",
    "ConverterOptions",
    "HostEnvironment",
    # Converters
    "Converter",
    "BaseConverter",
    "TemplateConverter",
    "TemplateResolver",
    "ResolvedTemplate",
    "CompositeConverter",
    # Engines
    "TemplateEngine",
    "JinjaEngine",
    "get_engine",
    "register_engine",
    # Exceptions
    "DocRenderError",
    "ValidationError",
    "ConfigurationError",
    "ConversionError",
    "TemplateNotFoundError",
    "TemplateCompileError",
    "TemplateRenderError",
    "TemplateReadError",
    "DependencyError",
]
