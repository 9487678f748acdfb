#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/factory.py
"""Converter factory.

This module builds the converter used for a backend:

- a converter registered for the backend (or for the ``"*"`` wildcard),
  including plugins advertised through the ``docrender.converters`` entry
  point group, takes precedence;
- otherwise the built-in base converter for the backend is loaded lazily;
- when template directories are configured, the base converter is wrapped
  in a ``CompositeConverter`` so templates can override individual node
  kinds.

Without template directories no resolver is constructed and the filesystem
is never touched.
"""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Union

from docrender.constants import (
    BUILTIN_CONVERTERS,
    REVEALJS_BACKEND,
    REVEALJS_TEMPLATES_PATH,
    WILDCARD_BACKEND,
)
from docrender.converters.base import Converter
from docrender.converters.composite import CompositeConverter
from docrender.converters.template import TemplateConverter
from docrender.environment import HostEnvironment
from docrender.exceptions import ConfigurationError, InvalidOptionsError
from docrender.options import ConverterOptions

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "docrender.converters"

ConverterSpec = Union[Converter, type]
OptionsInput = Union[ConverterOptions, Mapping[str, Any], None]


@lru_cache(maxsize=None)
def _load_converter_class(backend: str) -> Optional[type]:
    """Import the built-in base converter class for a backend.

    Parameters
    ----------
    backend : str
        Backend identifier

    Returns
    -------
    type or None
        Converter class, or None if the backend has no built-in converter

    Raises
    ------
    ConfigurationError
        If the built-in converter module cannot be imported

    """
    class_spec = BUILTIN_CONVERTERS.get(backend)
    if class_spec is None:
        return None

    module_path, class_name = class_spec.rsplit(".", 1)
    try:
        # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
        module = importlib.import_module(module_path)
        converter_class = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            backend, message=f"Could not load converter class '{class_spec}': {e}", original_error=e
        ) from e

    logger.debug(f"Loaded base converter for '{backend}': {class_spec}")
    return converter_class


def coerce_options(options: OptionsInput) -> ConverterOptions:
    """Turn an options argument into ``ConverterOptions``.

    Parameters
    ----------
    options : ConverterOptions, Mapping, or None
        Options object, plain mapping of option values, or None for defaults

    Returns
    -------
    ConverterOptions
        Options instance

    Raises
    ------
    InvalidOptionsError
        If options is of any other type

    """
    if options is None:
        return ConverterOptions()
    if isinstance(options, ConverterOptions):
        return options
    if isinstance(options, Mapping):
        return ConverterOptions.from_mapping(options)
    raise InvalidOptionsError(
        converter_name="ConverterFactory",
        expected_type=ConverterOptions,
        received_type=type(options),
    )


def resolve_template_options(
    backend: str, options: ConverterOptions, host: HostEnvironment | None = None
) -> ConverterOptions:
    """Apply backend-specific template directory defaults.

    The ``revealjs`` backend picks up the templates installed by the
    ``asciidoctor-reveal.js`` npm package when the caller did not specify
    template directories and the host can read the local filesystem.

    Parameters
    ----------
    backend : str
        Backend identifier
    options : ConverterOptions
        Options as supplied by the caller
    host : HostEnvironment or None, default = None
        Host description; detected from the current process when None

    Returns
    -------
    ConverterOptions
        The options, possibly with ``template_dirs`` filled in

    """
    if backend != REVEALJS_BACKEND or options.template_dirs is not None:
        return options

    host = host or HostEnvironment.detect()
    if not host.has_filesystem:
        return options

    templates_path = host.cwd / REVEALJS_TEMPLATES_PATH
    if not templates_path.is_dir():
        return options

    logger.debug(f"Using reveal.js templates from {templates_path}")
    return options.create_updated(template_dirs=[str(templates_path)])


class ConverterFactory:
    """Build converters for backends.

    The factory is a singleton: every instantiation returns the same object,
    so converters registered anywhere are visible to ``create_converter``.

    Attributes
    ----------
    _instance : ConverterFactory or None
        Singleton instance of the factory
    _converters : dict
        Registered converter classes or instances by backend
    _initialized : bool
        Whether entry point plugins have been discovered

    Examples
    --------
    Register a converter for a new backend:

        >>> class TextConverter(BaseConverter):
        ...     def convert_paragraph(self, node):
        ...         return node.plain_text
        >>> factory.register("text", TextConverter)
        >>> factory.create("text").handles("paragraph")
        True

    """

    _instance: Optional[ConverterFactory] = None
    _converters: Dict[str, ConverterSpec] = {}
    _initialized: bool = False

    def __new__(cls) -> ConverterFactory:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._converters = {}
            cls._instance._initialized = False
        return cls._instance

    def register(self, backend: str, converter: ConverterSpec) -> None:
        """Register a converter for a backend.

        Parameters
        ----------
        backend : str
            Backend identifier, or ``"*"`` to answer for every backend that
            has no specific registration
        converter : Converter or type
            Converter instance, returned as-is, or converter class,
            instantiated with ``(backend, options)``

        """
        if not isinstance(converter, Converter) and not (
            isinstance(converter, type) and issubclass(converter, Converter)
        ):
            raise TypeError(f"Expected a Converter instance or subclass, got {type(converter).__name__}")

        if backend in self._converters:
            logger.debug(f"Replacing registered converter for '{backend}'")
        else:
            logger.debug(f"Registered converter for '{backend}'")
        self._converters[backend] = converter

    def unregister(self, backend: str) -> bool:
        """Remove a converter registration.

        Returns
        -------
        bool
            True if unregistered, False if not found

        """
        if backend in self._converters:
            del self._converters[backend]
            logger.debug(f"Unregistered converter for '{backend}'")
            return True
        return False

    def resolve(self, backend: str) -> Optional[ConverterSpec]:
        """Return the converter registered for a backend, if any.

        A registration for the backend itself wins over the ``"*"`` wildcard.
        """
        self.auto_discover()
        if backend in self._converters:
            return self._converters[backend]
        return self._converters.get(WILDCARD_BACKEND)

    def list_backends(self) -> list[str]:
        """Backends with a built-in or registered converter, sorted."""
        self.auto_discover()
        names = set(BUILTIN_CONVERTERS) | set(self._converters)
        names.discard(WILDCARD_BACKEND)
        return sorted(names)

    def create_registered(self, backend: str, options: ConverterOptions) -> Optional[Converter]:
        """Build the caller-registered converter for a backend.

        Returns
        -------
        Converter or None
            The registered instance, a new instance of the registered class,
            or None when nothing is registered for the backend

        """
        registered = self.resolve(backend)
        if registered is None or isinstance(registered, Converter):
            return registered
        return registered(backend, options)

    def create_base(self, backend: str, options: ConverterOptions) -> Optional[Converter]:
        """Build the built-in base converter for a backend, ignoring template directories.

        Returns
        -------
        Converter or None
            Built-in converter, or None for a backend without one

        """
        converter_class = _load_converter_class(backend)
        if converter_class is None:
            logger.debug(f"No base converter for backend '{backend}'")
            return None
        return converter_class(backend, options)

    def create(
        self, backend: str, options: OptionsInput = None, host: HostEnvironment | None = None
    ) -> Optional[Converter]:
        """Build the converter for a backend.

        Parameters
        ----------
        backend : str
            Backend identifier, e.g. ``"html5"``
        options : ConverterOptions, Mapping, or None, default = None
            Converter options; a mapping such as
            ``{"template_dirs": ["./custom"], "trim_blocks": True}`` is
            accepted, with keys that are not option fields passed on to the
            template engine
        host : HostEnvironment or None, default = None
            Host description used for backend-specific defaults

        Returns
        -------
        Converter or None
            The registered converter for the backend, unwrapped, when there is
            one; otherwise the base converter when no template directories are
            configured, a ``CompositeConverter`` when they are, or None
            for an unknown backend without template directories

        Raises
        ------
        InvalidOptionsError
            If options is not a ConverterOptions or mapping
        ValidationError
            If the configured template engine is unknown

        """
        converter_options = coerce_options(options)
        registered = self.create_registered(backend, converter_options)
        if registered is not None:
            logger.debug(f"Using registered converter for '{backend}': {registered!r}")
            return registered

        converter_options = resolve_template_options(backend, converter_options, host)
        base = self.create_base(backend, converter_options)

        if not converter_options.has_template_dirs:
            return base

        logger.debug(f"Template directories for '{backend}': {', '.join(converter_options.template_dirs or ())}")
        template_converter = TemplateConverter(backend, converter_options.template_dirs, converter_options)
        return CompositeConverter(backend, template_converter, base)

    def auto_discover(self) -> None:
        """Register converters advertised by installed plugins.

        Plugins declare an entry point in the ``docrender.converters`` group,
        named after the backend, that loads a ``Converter`` subclass or
        instance. Registrations made directly with ``register`` are kept.
        """
        if self._initialized:
            return
        self._initialized = True

        for entry_point in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            dist_name = entry_point.dist.name if entry_point.dist else "unknown"
            if entry_point.name in self._converters:
                logger.debug(f"Keeping registered converter for '{entry_point.name}' over plugin from '{dist_name}'")
                continue
            try:
                converter = entry_point.load()
                self.register(entry_point.name, converter)
            except (ImportError, AttributeError, TypeError) as e:
                logger.warning(f"Failed to load plugin converter '{entry_point.name}' from '{dist_name}': {e}")
                continue
            logger.info(f"Registered plugin converter '{entry_point.name}' from package '{dist_name}'")


# Global factory instance
factory = ConverterFactory()


def create_converter(
    backend: str, options: OptionsInput = None, host: HostEnvironment | None = None
) -> Optional[Converter]:
    """Build the converter for a backend with the global factory.

    Examples
    --------
        >>> converter = create_converter("html5", {"template_dirs": ["./custom", "./fallback"]})

    """
    return factory.create(backend, options, host)
