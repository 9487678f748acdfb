#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/converters/base.py
"""Base classes for node converters.

Every converter exposes exactly two operations: ``handles(node_name)``
reports whether it can convert a node kind, and ``convert(node)`` turns a
node into output markup. The built-in base converters, the template
converter and the composite converter all implement this interface.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Mapping

from docrender.exceptions import InvalidOptionsError, NodeNotHandledError
from docrender.options import ConverterOptions

if TYPE_CHECKING:
    from docrender.ast.nodes import Node


class Converter(ABC):
    """Abstract base class for all converters.

    Parameters
    ----------
    backend : str
        Backend identifier the converter produces output for

    """

    def __init__(self, backend: str):
        """Initialize the converter for a backend."""
        self.backend = backend

    @abstractmethod
    def handles(self, node_name: str) -> bool:
        """Report whether this converter can convert nodes of the given kind.

        Parameters
        ----------
        node_name : str
            Node kind, e.g. ``"paragraph"``

        Returns
        -------
        bool
            True if ``convert`` will produce output for this kind

        """

    @abstractmethod
    def convert(self, node: Node, transform: str | None = None, opts: Mapping[str, Any] | None = None) -> str:
        """Convert a node to output markup.

        Parameters
        ----------
        node : Node
            Node to convert
        transform : str or None, default = None
            Node kind to convert as, instead of ``node.node_name``
        opts : Mapping or None, default = None
            Per-call conversion options

        Returns
        -------
        str
            Converted output

        Raises
        ------
        ConversionError
            If the node cannot be converted

        """

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"{self.__class__.__name__}(backend={self.backend!r})"


class BaseConverter(Converter):
    """Converter that dispatches to ``convert_<node_name>`` methods.

    Subclasses implement one method per node kind they support. A method that
    accepts keyword arguments receives the ``opts`` passed to ``convert``.

    Parameters
    ----------
    backend : str
        Backend identifier
    options : ConverterOptions or None, default = None
        Converter options

    Examples
    --------
    Creating a custom converter:

        >>> class TextOnlyConverter(BaseConverter):
        ...     def convert_paragraph(self, node):
        ...         return node.plain_text
        >>> TextOnlyConverter("text").handles("paragraph")
        True

    """

    def __init__(self, backend: str, options: ConverterOptions | None = None):
        """Initialize the converter with optional configuration."""
        super().__init__(backend)
        self._validate_options_type(options, ConverterOptions, self.__class__.__name__)
        self.options: ConverterOptions = options or ConverterOptions()

    def handles(self, node_name: str) -> bool:
        """Report whether a ``convert_<node_name>`` method exists."""
        return callable(getattr(self, f"convert_{node_name}", None))

    def convert(self, node: Node, transform: str | None = None, opts: Mapping[str, Any] | None = None) -> str:
        """Convert a node with the method registered for its kind.

        Raises
        ------
        NodeNotHandledError
            If there is no ``convert_<node_name>`` method for the node kind

        """
        node_name = transform or node.node_name
        handler = getattr(self, f"convert_{node_name}", None)
        if not callable(handler):
            raise NodeNotHandledError(node_name, backend=self.backend)
        if opts:
            return handler(node, **opts)
        return handler(node)

    @staticmethod
    def _validate_options_type(options: Any, expected_type: type, converter_name: str) -> None:
        """Validate that options are of the correct type for this converter.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=converter_name,
                expected_type=expected_type,
                received_type=type(options),
            )
