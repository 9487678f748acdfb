#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for building converters.

This module defines the frozen options dataclass handed to the converter
factory and, from there, to every converter it constructs.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any, Mapping, Sequence, Union

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from docrender.constants import (
    DEFAULT_STANDALONE,
    DEFAULT_STRICT_UNDEFINED,
    DEFAULT_TEMPLATE_CACHE,
    DEFAULT_TEMPLATE_ENGINE,
)

if TYPE_CHECKING:
    from docrender.engines import TemplateEngine

TemplateDirsInput = Union[str, "os.PathLike[str]", Sequence[Union[str, "os.PathLike[str]"]], None]


def normalize_template_dirs(template_dirs: TemplateDirsInput) -> tuple[str, ...] | None:
    """Normalize a template directory specification to a tuple of strings.

    Parameters
    ----------
    template_dirs : str, PathLike, sequence of those, or None
        A single directory or an ordered collection of directories

    Returns
    -------
    tuple of str or None
        Directories in their original order, or None when not specified

    Raises
    ------
    ValueError
        If the value is not a path or a sequence of paths

    """
    if template_dirs is None:
        return None
    if isinstance(template_dirs, (str, os.PathLike)):
        return (os.fspath(template_dirs),)
    if isinstance(template_dirs, (bytes, Mapping)) or not isinstance(template_dirs, Sequence):
        raise ValueError(f"template_dirs must be a path or a sequence of paths, got {type(template_dirs).__name__}")

    normalized = []
    for entry in template_dirs:
        if not isinstance(entry, (str, os.PathLike)):
            raise ValueError(f"template_dirs entries must be paths, got {type(entry).__name__}")
        normalized.append(os.fspath(entry))
    return tuple(normalized)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ConverterOptions(CloneFrozenMixin):
    """Options shared by the converter factory and the converters it builds.

    Parameters
    ----------
    template_dirs : str, PathLike, sequence of those, or None, default None
        Directories searched, in order, for templates that override the
        built-in conversion of a node kind. The first directory containing a
        match wins. None (or an empty sequence) disables template overrides.
    template_engine : str or TemplateEngine, default "jinja2"
        Name of a registered template engine, or an engine instance
    template_cache : bool, default False
        Cache resolved templates per node kind for the lifetime of the
        converter. Only enable when template directories do not change during
        a conversion run.
    strict_undefined : bool, default True
        Raise errors for undefined variables referenced by templates
    extra_context : dict[str, Any] or None, default None
        Additional variables made available to every template
    engine_options : dict[str, Any], default empty dict
        Extra keyword arguments for the template engine (for Jinja2, passed to
        ``jinja2.Environment``, e.g. ``trim_blocks``)
    standalone : bool, default True
        Wrap the converted document in a complete output document (HTML page,
        DocBook article with prolog). When False only the body is produced.

    Examples
    --------
        >>> options = ConverterOptions(template_dirs=["./custom", "./fallback"])
        >>> options.template_dirs
        ('./custom', './fallback')

    """

    template_dirs: tuple[str, ...] | None = field(
        default=None,
        metadata={
            "help": "Template directories searched in order for node overrides",
            "cli_name": "template-dir",
            "importance": "core",
        },
    )
    template_engine: Union[str, "TemplateEngine"] = field(
        default=DEFAULT_TEMPLATE_ENGINE,
        metadata={"help": "Template engine used to render overrides", "importance": "core"},
    )
    template_cache: bool = field(
        default=DEFAULT_TEMPLATE_CACHE,
        metadata={"help": "Cache resolved templates per node kind", "importance": "advanced"},
    )
    strict_undefined: bool = field(
        default=DEFAULT_STRICT_UNDEFINED,
        metadata={"help": "Raise errors for undefined template variables", "importance": "advanced"},
    )
    extra_context: dict[str, Any] | None = field(
        default=None,
        metadata={"help": "Additional template context variables", "type": dict, "importance": "advanced"},
    )
    engine_options: dict[str, Any] = field(
        default_factory=dict,
        metadata={"help": "Keyword arguments for the template engine", "type": dict, "importance": "advanced"},
    )
    standalone: bool = field(
        default=DEFAULT_STANDALONE,
        metadata={"help": "Produce a complete output document", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Normalize template directories and validate option values.

        Raises
        ------
        ValueError
            If template_dirs is malformed or template_engine is empty

        """
        object.__setattr__(self, "template_dirs", normalize_template_dirs(self.template_dirs))

        if isinstance(self.template_engine, str) and not self.template_engine:
            raise ValueError("template_engine must be a non-empty engine name")

    @property
    def has_template_dirs(self) -> bool:
        """Whether any template directory was supplied."""
        return bool(self.template_dirs)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ConverterOptions:
        """Build options from a plain mapping.

        Keys naming an option field are used directly; every other key is
        passed through to the template engine via ``engine_options``.

        Parameters
        ----------
        mapping : Mapping[str, Any]
            For example ``{"template_dirs": "./templates", "trim_blocks": True}``

        Returns
        -------
        ConverterOptions
            Options built from the mapping

        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        engine_options: dict[str, Any] = dict(mapping.get("engine_options") or {})

        for key, value in mapping.items():
            if key == "engine_options":
                continue
            if key in known:
                kwargs[key] = value
            else:
                engine_options[key] = value

        return cls(engine_options=engine_options, **kwargs)
