#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/converters/composite.py
"""Composite converter routing between template overrides and a base converter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from docrender.converters.base import Converter
from docrender.exceptions import ConfigurationError

if TYPE_CHECKING:
    from docrender.ast.nodes import Node
    from docrender.converters.template import TemplateConverter

logger = logging.getLogger(__name__)


class CompositeConverter(Converter):
    """Prefer template overrides, falling back to a base converter.

    For every conversion exactly one side runs: the template converter when
    it has a template for the node kind, the base converter otherwise.

    Parameters
    ----------
    backend : str
        Backend identifier
    template_converter : TemplateConverter
        Converter for template overrides
    base_converter : Converter or None
        Built-in or registered converter for the backend; None for a backend
        that only template overrides can serve

    """

    def __init__(self, backend: str, template_converter: TemplateConverter, base_converter: Converter | None):
        """Initialize the composite converter."""
        super().__init__(backend)
        self.template_converter = template_converter
        self.base_converter = base_converter

    def handles(self, node_name: str) -> bool:
        """Report whether either side can convert the node kind."""
        if self.template_converter.handles(node_name):
            return True
        return self.base_converter is not None and self.base_converter.handles(node_name)

    def convert(self, node: Node, transform: str | None = None, opts: Mapping[str, Any] | None = None) -> str:
        """Convert a node with the template override if one exists.

        Raises
        ------
        ConfigurationError
            If no template matches and there is no base converter

        """
        node_name = transform or node.node_name
        if self.template_converter.handles(node_name):
            logger.debug(f"Converting '{node_name}' with template override ({self.backend})")
            return self.template_converter.convert(node, transform, opts)

        if self.base_converter is None:
            raise ConfigurationError(self.backend, node_name=node_name)
        return self.base_converter.convert(node, transform, opts)

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return (
            f"{self.__class__.__name__}(backend={self.backend!r}, "
            f"template_converter={self.template_converter!r}, base_converter={self.base_converter!r})"
        )
