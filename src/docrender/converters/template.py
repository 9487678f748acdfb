#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/converters/template.py
"""Template-based node overrides.

A template directory may override the built-in conversion of any node kind
by providing a file named ``<node_name>.<ext>``, where ``ext`` is the
template engine's extension. Within each directory the resolver looks in
nested subdirectories first, most specific first::

    <dir>/<engine>/<backend>/paragraph.jinja2
    <dir>/<engine>/paragraph.jinja2
    <dir>/<backend>/paragraph.jinja2
    <dir>/paragraph.jinja2

Directories are searched in the order given and the first match wins, so a
template in an earlier directory shadows one in a later directory even when
the later one is more specifically nested.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from docrender.converters.base import Converter
from docrender.engines import CompiledTemplate, TemplateEngine, get_engine
from docrender.exceptions import (
    DocRenderError,
    TemplateCompileError,
    TemplateNotFoundError,
    TemplateReadError,
    TemplateRenderError,
)
from docrender.options import ConverterOptions, normalize_template_dirs

if TYPE_CHECKING:
    from docrender.ast.nodes import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTemplate:
    """A template file found for a node kind.

    Parameters
    ----------
    node_name : str
        Node kind the template overrides
    path : Path
        Location of the template file
    source : str
        Template text

    """

    node_name: str
    path: Path
    source: str


class TemplateResolver:
    """Locate override templates for node kinds.

    Parameters
    ----------
    backend : str
        Backend identifier, used as the backend subdirectory name
    template_dirs : sequence of str or PathLike
        Directories to search, highest priority first
    engine : TemplateEngine
        Engine whose ``name`` is the engine subdirectory name and whose
        ``extension`` is the template file extension
    cache : bool, default = False
        Remember resolution results per node kind

    """

    def __init__(
        self,
        backend: str,
        template_dirs: Sequence[str] | None,
        engine: TemplateEngine,
        cache: bool = False,
    ):
        """Initialize the resolver; no filesystem access happens here."""
        self.backend = backend
        self.template_dirs: tuple[str, ...] = normalize_template_dirs(template_dirs) or ()
        self.engine = engine
        self._cache: dict[str, ResolvedTemplate | None] | None = {} if cache else None

    def candidate_dirs(self, template_dir: Path) -> list[Path]:
        """List the existing directories searched within one template directory.

        Parameters
        ----------
        template_dir : Path
            Template directory root

        Returns
        -------
        list of Path
            Existing candidate directories, most specific first, without
            duplicates

        """
        candidates = [
            template_dir / self.engine.name / self.backend,
            template_dir / self.engine.name,
            template_dir / self.backend,
            template_dir,
        ]
        result: list[Path] = []
        for candidate in candidates:
            if candidate in result or not candidate.is_dir():
                continue
            result.append(candidate)
        return result

    def candidate_paths(self, template_dir: Path | str, node_name: str) -> list[Path]:
        """List the template files that would override a node kind, in priority order."""
        filename = f"{node_name}.{self.engine.extension}"
        return [candidate / filename for candidate in self.candidate_dirs(Path(template_dir))]

    def resolve(self, node_name: str) -> ResolvedTemplate | None:
        """Find the template overriding a node kind.

        Parameters
        ----------
        node_name : str
            Node kind, e.g. ``"paragraph"``

        Returns
        -------
        ResolvedTemplate or None
            First matching template, or None when no directory provides one

        Raises
        ------
        TemplateReadError
            If a matching file exists but cannot be read or decoded

        """
        if self._cache is not None and node_name in self._cache:
            return self._cache[node_name]

        resolved = self._search(node_name)
        if self._cache is not None:
            self._cache[node_name] = resolved
        return resolved

    def _search(self, node_name: str) -> ResolvedTemplate | None:
        for template_dir in self.template_dirs:
            root = Path(template_dir)
            if not root.is_dir():
                logger.debug(f"Skipping missing template directory: {template_dir}")
                continue

            for path in self.candidate_paths(root, node_name):
                source = self._read(path)
                if source is not None:
                    logger.debug(f"Resolved template for '{node_name}' ({self.backend}): {path}")
                    return ResolvedTemplate(node_name=node_name, path=path, source=source)

        logger.debug(f"No template found for '{node_name}' ({self.backend})")
        return None

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError):
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateReadError(str(path), original_error=e) from e


class TemplateConverter(Converter):
    """Convert nodes by rendering override templates.

    Parameters
    ----------
    backend : str
        Backend identifier
    template_dirs : sequence of str or PathLike
        Directories to search for templates, highest priority first
    options : ConverterOptions or None, default = None
        Options selecting the template engine, caching and extra context

    Examples
    --------
    With ``./custom/paragraph.jinja2`` containing ``<p class="x">{{ node.content }}</p>``:

        >>> converter = TemplateConverter("html5", ["./custom"])
        >>> converter.handles("paragraph")
        True
        >>> converter.handles("table")
        False

    """

    def __init__(
        self,
        backend: str,
        template_dirs: Sequence[str] | None,
        options: ConverterOptions | None = None,
    ):
        """Initialize the converter and its resolver."""
        super().__init__(backend)
        options = options or ConverterOptions()
        dirs = normalize_template_dirs(template_dirs)
        if options.template_dirs != dirs:
            # The engine's loader serves includes from the same directories
            options = options.create_updated(template_dirs=dirs)
        self.options = options
        self.engine = get_engine(self.options)
        self.resolver = TemplateResolver(backend, dirs, self.engine, cache=self.options.template_cache)
        self._compiled: dict[str, CompiledTemplate] | None = {} if self.options.template_cache else None

    def handles(self, node_name: str) -> bool:
        """Report whether a template overrides the node kind."""
        return self.resolver.resolve(node_name) is not None

    def convert(self, node: Node, transform: str | None = None, opts: Mapping[str, Any] | None = None) -> str:
        """Render the template resolved for the node.

        Parameters
        ----------
        node : Node
            Node to convert
        transform : str or None, default = None
            Node kind to resolve a template for instead of ``node.node_name``
        opts : Mapping or None, default = None
            Per-call options, available to the template as ``opts``

        Returns
        -------
        str
            Rendered template output

        Raises
        ------
        TemplateNotFoundError
            If no template matches the node kind
        TemplateCompileError
            If the engine rejects the template text
        TemplateRenderError
            If the template raises while rendering

        """
        node_name = transform or node.node_name
        template = self.resolver.resolve(node_name)
        if template is None:
            raise TemplateNotFoundError(node_name, backend=self.backend)

        render = self._compile(template)
        context = self._build_context(node, opts)

        try:
            return render(context)
        except DocRenderError:
            raise
        except Exception as e:
            raise TemplateRenderError(
                node_name, str(template.path), backend=self.backend, original_error=e
            ) from e

    def _compile(self, template: ResolvedTemplate) -> CompiledTemplate:
        if self._compiled is not None and template.node_name in self._compiled:
            return self._compiled[template.node_name]

        try:
            render = self.engine.compile(template.source, name=str(template.path))
        except DocRenderError:
            raise
        except Exception as e:
            raise TemplateCompileError(
                template.node_name, str(template.path), backend=self.backend, original_error=e
            ) from e

        if self._compiled is not None:
            self._compiled[template.node_name] = render
        return render

    def _build_context(self, node: Node, opts: Mapping[str, Any] | None) -> dict[str, Any]:
        context: dict[str, Any] = {
            "node": node,
            "document": node.document,
            "backend": self.backend,
            "opts": dict(opts or {}),
        }
        if self.options.extra_context:
            context.update(self.options.extra_context)
        return context
