#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Template engines used to render node overrides.

A template engine turns template source text into a callable that takes a
context mapping and returns rendered text. The template converter selects
exactly one engine per instance; the engine's ``name`` doubles as the name of
the optional engine subdirectory in a template directory and its
``extension`` is the file extension templates are looked up with.

Jinja2 is the built-in engine. Additional engines can be made available by
name with ``register_engine``, or passed directly as an instance through
``ConverterOptions.template_engine``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Mapping

from docrender.ast.serialization import ast_to_dict
from docrender.constants import DEPS_JINJA
from docrender.exceptions import ValidationError
from docrender.options import ConverterOptions
from docrender.utils.decorators import requires_dependencies
from docrender.utils.escape import escape_html_entities, escape_roff, escape_xml

if TYPE_CHECKING:
    from jinja2 import Environment

logger = logging.getLogger(__name__)

CompiledTemplate = Callable[[Mapping[str, Any]], str]


class TemplateEngine(ABC):
    """Abstract base class for template engines.

    Parameters
    ----------
    options : ConverterOptions or None, default = None
        Converter options; engines read ``template_dirs``,
        ``strict_undefined`` and ``engine_options`` from them

    """

    name: str = ""
    extension: str = ""

    def __init__(self, options: ConverterOptions | None = None):
        """Initialize the engine with converter options."""
        self.options = options or ConverterOptions()

    @abstractmethod
    def compile(self, source: str, name: str | None = None) -> CompiledTemplate:
        """Compile template source text.

        Parameters
        ----------
        source : str
            Template source
        name : str or None, default = None
            Template name or path, used in engine error messages

        Returns
        -------
        CompiledTemplate
            Callable taking a context mapping and returning rendered text

        Raises
        ------
        Exception
            Any engine-specific error when the source is malformed

        """


class JinjaEngine(TemplateEngine):
    """Jinja2 template engine.

    Templates have access to the context variables ``node``, ``document`` and
    ``backend`` plus any ``extra_context``. Nested content is rendered with
    ``{{ node.content }}``, which converts the node's children through the
    same converter, so overrides apply throughout the tree.

    Available filters:
      - escape_xml, escape_html: XML/HTML escaping
      - escape_roff: roff (man page) escaping
      - to_dict: Convert a node to a dictionary

    The template directories are also installed as a ``FileSystemLoader`` so
    templates can ``{% include %}`` or ``{% extends %}`` shared partials.

    Examples
    --------
        >>> engine = JinjaEngine()
        >>> render = engine.compile("<p>{{ node.content }}</p>")

    """

    name = "jinja2"
    extension = "jinja2"

    def __init__(self, options: ConverterOptions | None = None):
        """Initialize the Jinja2 engine; the environment is created on first compile."""
        super().__init__(options)
        self._env: Environment | None = None

    def _setup_jinja_env(self) -> Environment:
        """Set up the Jinja2 environment with filters and loader."""
        from jinja2 import Environment, FileSystemLoader, StrictUndefined

        environment_options: dict[str, Any] = {"autoescape": False}
        environment_options.update(self.options.engine_options)

        if self.options.template_dirs:
            environment_options.setdefault("loader", FileSystemLoader(list(self.options.template_dirs)))

        try:
            # nosemgrep: python.flask.security.xss.audit.direct-use-of-jinja2.direct-use-of-jinja2
            env = Environment(**environment_options)  # nosec B701
        except TypeError as e:
            raise ValidationError(
                f"Invalid Jinja2 environment option: {e}",
                parameter_name="engine_options",
                parameter_value=self.options.engine_options,
                original_error=e,
            ) from e

        if self.options.strict_undefined:
            env.undefined = StrictUndefined

        env.filters["escape_xml"] = escape_xml
        env.filters["escape_html"] = escape_html_entities
        env.filters["escape_roff"] = escape_roff
        env.filters["to_dict"] = ast_to_dict

        logger.debug(f"Created Jinja2 environment (strict_undefined={self.options.strict_undefined})")
        return env

    @requires_dependencies("jinja2", DEPS_JINJA)
    def compile(self, source: str, name: str | None = None) -> CompiledTemplate:
        """Compile Jinja2 source into a render callable.

        Raises
        ------
        jinja2.TemplateSyntaxError
            If the source is not valid Jinja2

        """
        if self._env is None:
            self._env = self._setup_jinja_env()

        code = self._env.compile(source, name=name, filename=name)
        template = self._env.template_class.from_code(self._env, code, self._env.make_globals(None))
        return template.render


_ENGINES: dict[str, type[TemplateEngine]] = {JinjaEngine.name: JinjaEngine}


def register_engine(engine_class: type[TemplateEngine], name: str | None = None) -> None:
    """Make a template engine available by name.

    Parameters
    ----------
    engine_class : type[TemplateEngine]
        Engine class, constructed with the converter options
    name : str or None, default = None
        Registration name; defaults to ``engine_class.name``

    """
    engine_name = name or engine_class.name
    if not engine_name:
        raise ValidationError("Template engines must have a name", parameter_name="name")
    if engine_name in _ENGINES:
        logger.debug(f"Replacing template engine registration: {engine_name}")
    _ENGINES[engine_name] = engine_class


def unregister_engine(name: str) -> bool:
    """Remove a template engine registration.

    Returns
    -------
    bool
        True if unregistered, False if not found

    """
    return _ENGINES.pop(name, None) is not None


def list_engines() -> list[str]:
    """Names of all registered template engines."""
    return sorted(_ENGINES)


def get_engine(options: ConverterOptions) -> TemplateEngine:
    """Build the template engine selected by the options.

    Parameters
    ----------
    options : ConverterOptions
        Options whose ``template_engine`` is an engine name or instance

    Returns
    -------
    TemplateEngine
        Engine instance

    Raises
    ------
    ValidationError
        If the engine name is not registered

    """
    if isinstance(options.template_engine, TemplateEngine):
        return options.template_engine

    engine_class = _ENGINES.get(options.template_engine)
    if engine_class is None:
        raise ValidationError(
            f"Unknown template engine: {options.template_engine}. Available engines: {', '.join(list_engines())}",
            parameter_name="template_engine",
            parameter_value=options.template_engine,
        )
    return engine_class(options)
