#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/constants.py
"""Constants and defaults used across docrender.

Backend identifiers, template engine defaults, dependency specifications and
the host-specific reveal.js template location live here so converters, the
factory and the CLI agree on them.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Backends
# =============================================================================

BuiltinBackend = Literal["html5", "docbook5", "docbook45", "manpage"]

DEFAULT_BACKEND = "html5"

# Built-in base converters, loaded lazily by import path on first use
BUILTIN_CONVERTERS: dict[str, str] = {
    "html5": "docrender.converters.html5.Html5Converter",
    "docbook5": "docrender.converters.docbook.DocBook5Converter",
    "docbook45": "docrender.converters.docbook.DocBook45Converter",
    "manpage": "docrender.converters.manpage.ManPageConverter",
}

# Registering a converter under this name makes it answer for any backend
WILDCARD_BACKEND = "*"

# =============================================================================
# Template engines
# =============================================================================

DEFAULT_TEMPLATE_ENGINE = "jinja2"
DEFAULT_TEMPLATE_CACHE = False
DEFAULT_STRICT_UNDEFINED = True
DEFAULT_STANDALONE = True

# (import name, requirement)
DEPS_JINJA = [("jinja2", "jinja2>=3.1.0")]

# =============================================================================
# Host environments
# =============================================================================

HostPlatform = Literal["native", "browser"]

# Hosts that can read the local filesystem
FILESYSTEM_PLATFORMS = frozenset({"native"})

REVEALJS_BACKEND = "revealjs"
REVEALJS_TEMPLATES_PATH = "node_modules/asciidoctor-reveal.js/templates"

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_CONVERSION_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 3

CONFIG_ENV_VAR = "DOCRENDER_CONFIG"
