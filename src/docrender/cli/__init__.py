"""Command-line interface for the docrender converter pipeline.

The CLI converts a document tree stored as JSON (see
``docrender.ast.serialization``) with a backend's converter, optionally
overriding node kinds with templates, and reports which template, if any,
overrides a given node kind.

Configuration File Support
--------------------------
Defaults for ``--backend``, ``--template-dir`` and the other conversion
options are read from ``.docrender.toml``/``.yaml``/``.yml``/``.json`` or a
``[tool.docrender]`` section in ``pyproject.toml``, discovered from the
working directory upwards, from the path in ``DOCRENDER_CONFIG``, or from
``--config``. Command line arguments always override configuration values.

Examples
--------
Convert with built-in HTML5 rendering::

    $ docrender convert document.json -o document.html

Override node kinds with templates from two directories::

    $ docrender convert document.json -T ./custom -T ./fallback

Render a man page fragment::

    $ docrender convert page.json --backend manpage --no-standalone

Show which templates would override paragraphs and tables::

    $ docrender resolve paragraph table -T ./custom -T ./fallback

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/docrender/cli/__init__.py

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from docrender import __version__
from docrender.cli.config import load_config_with_priority, merge_configs
from docrender.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_BACKEND,
    EXIT_CONVERSION_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from docrender.exceptions import ConfigurationError, DocRenderError, ValidationError
from docrender.logging_utils import configure_logging

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]


def _add_conversion_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options shared by the ``convert`` and ``resolve`` commands.

    Defaults are None so that only explicitly given flags override values
    from a configuration file.
    """
    parser.add_argument("-b", "--backend", help=f"Output backend (default: {DEFAULT_BACKEND})")
    parser.add_argument(
        "-T",
        "--template-dir",
        dest="template_dirs",
        action="append",
        metavar="DIR",
        help="Template directory; repeat to add more, earlier directories take precedence",
    )
    parser.add_argument("-E", "--template-engine", help="Template engine name (default: jinja2)")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``docrender`` command."""
    parser = argparse.ArgumentParser(
        prog="docrender",
        description="Render document trees with built-in converters and template overrides.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to a configuration file (JSON, TOML or YAML)")
    parser.add_argument("--no-config", action="store_true", help="Ignore configuration files and DOCRENDER_CONFIG")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    convert_parser = subparsers.add_parser("convert", help="Convert a JSON document tree")
    convert_parser.add_argument("input", help="JSON document tree, or '-' for stdin")
    convert_parser.add_argument("-o", "--out", help="Output file (default: stdout)")
    _add_conversion_arguments(convert_parser)
    convert_parser.add_argument(
        "--no-standalone",
        dest="standalone",
        action="store_false",
        default=None,
        help="Only render the document body, without the surrounding page or article",
    )
    convert_parser.add_argument(
        "--template-cache",
        action="store_true",
        default=None,
        help="Cache resolved templates for the duration of the run",
    )

    resolve_parser = subparsers.add_parser("resolve", help="Show which template overrides each node kind")
    resolve_parser.add_argument("node_names", nargs="+", metavar="NODE_NAME", help="Node kinds, e.g. paragraph")
    _add_conversion_arguments(resolve_parser)

    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    ``--trace`` takes highest precedence, then ``--verbose``, then ``--log-level``.
    """
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _load_config(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    if parsed_args.no_config:
        return {}
    return load_config_with_priority(parsed_args.config, os.environ.get(CONFIG_ENV_VAR))


def build_options(parsed_args: argparse.Namespace, config: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
    """Combine configuration values and command line flags.

    Returns
    -------
    tuple of (str, dict)
        Backend identifier and the option mapping for ``create_converter``

    """
    overrides: Dict[str, Any] = {}
    for key in ("backend", "template_dirs", "template_engine", "standalone", "template_cache"):
        value = getattr(parsed_args, key, None)
        if value is not None:
            overrides[key] = value

    merged = merge_configs(config, overrides)
    backend = merged.pop("backend", None) or DEFAULT_BACKEND
    return backend, merged


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(content: str, out: Optional[str]) -> None:
    if out is None:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
        return

    output_path = Path(out)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {output_path}")


def run_convert(parsed_args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Execute the ``convert`` command."""
    from docrender.api import convert_document
    from docrender.ast import Document, json_to_ast

    backend, options = build_options(parsed_args, config)

    try:
        text = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read input {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        document = json_to_ast(text)
        if not isinstance(document, Document):
            raise ValidationError(
                f"Input must describe a document node, got '{document.node_name}'",
                parameter_name="node_name",
                parameter_value=document.node_name,
            )
        output = convert_document(document, backend, options)
    except (ValidationError, ConfigurationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except DocRenderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR

    try:
        _write_output(output, parsed_args.out)
    except OSError as e:
        print(f"Error: Cannot write output {parsed_args.out}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    return EXIT_SUCCESS


def run_resolve(parsed_args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Execute the ``resolve`` command.

    Prints one line per node kind: the template path that overrides it, or
    the converter that handles it without a template.
    """
    from docrender.converters.template import TemplateResolver
    from docrender.engines import get_engine
    from docrender.factory import coerce_options, factory, resolve_template_options

    backend, option_values = build_options(parsed_args, config)

    try:
        options = coerce_options(option_values)
        registered = factory.create_registered(backend, options)
        if registered is not None:
            # Registered converters are used as-is, without template overrides
            label = f"registered ({registered.__class__.__name__})"
            for node_name in parsed_args.node_names:
                print(f"{node_name}: {label if registered.handles(node_name) else 'not handled'}")
            return EXIT_SUCCESS

        options = resolve_template_options(backend, options)
        engine = get_engine(options)
        resolver = TemplateResolver(backend, options.template_dirs, engine)
        base = factory.create_base(backend, options)
        for node_name in parsed_args.node_names:
            template = resolver.resolve(node_name)
            if template is not None:
                print(f"{node_name}: {template.path}")
            elif base is not None and base.handles(node_name):
                print(f"{node_name}: built-in ({base.__class__.__name__})")
            else:
                print(f"{node_name}: not handled")
    except (ValidationError, ConfigurationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except DocRenderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR

    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        config = _load_config(parsed_args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    if parsed_args.command == "resolve":
        return run_resolve(parsed_args, config)
    return run_convert(parsed_args, config)


if __name__ == "__main__":
    sys.exit(main())
