#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Node converters.

Base converters render node kinds with built-in markup for one backend; the
template converter renders node kinds from user templates; the composite
converter routes each node to one or the other. Built-in base converters are
imported lazily by the factory and are not re-exported here.
"""

from docrender.converters.base import BaseConverter, Converter
from docrender.converters.composite import CompositeConverter
from docrender.converters.template import ResolvedTemplate, TemplateConverter, TemplateResolver

__all__ = [
    "BaseConverter",
    "CompositeConverter",
    "Converter",
    "ResolvedTemplate",
    "TemplateConverter",
    "TemplateResolver",
]
