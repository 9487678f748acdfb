#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the docrender library.

This module defines specialized exception classes for the error conditions
that can occur while building converters and converting document nodes.
None of these errors are recovered inside the library; they propagate to the
caller of the top-level conversion entry point.

Exception Hierarchy
-------------------
- DocRenderError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a converter)

  - ConfigurationError (unsupported backend with no override path)

  - ConversionError (a node could not be converted)
    - NodeNotHandledError (base converter has no handler for the node kind)
      - TemplateNotFoundError (no template matched the node kind)
    - TemplateCompileError (engine rejected the template source)
    - TemplateRenderError (compiled template failed against its context)

  - TemplateReadError (template file exists but could not be read)

  - DependencyError (missing/incompatible template engine package)

"""

from typing import Any


class DocRenderError(Exception):
    """Base exception class for all docrender-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(DocRenderError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong type is supplied.

    Parameters
    ----------
    converter_name : str
        Name of the converter that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ConfigurationError(DocRenderError):
    """Exception raised when no converter is available for a backend.

    Raised lazily, at the first conversion attempt, when the backend is not one
    of the built-ins, nothing is registered for it, and no template override
    handles the node being converted.

    Parameters
    ----------
    backend : str
        The backend identifier that could not be served
    node_name : str, optional
        The node kind being converted when the problem surfaced
    supported_backends : list of str, optional
        Backends that are available
    message : str, optional
        Custom error message

    """

    def __init__(
        self,
        backend: str | None,
        node_name: str | None = None,
        supported_backends: list[str] | None = None,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the configuration error."""
        if message is None:
            message = f"No converter available for backend '{backend}'"
            if node_name:
                message += f" (while converting node '{node_name}')"
            if supported_backends:
                message += f". Supported backends: {', '.join(sorted(supported_backends))}"
        super().__init__(message, original_error=original_error)
        self.backend = backend
        self.node_name = node_name
        self.supported_backends = supported_backends or []


class ConversionError(DocRenderError):
    """Base exception for failures while converting a single node.

    Parameters
    ----------
    message : str
        Description of the conversion failure
    node_name : str, optional
        The node kind that failed to convert
    backend : str, optional
        The backend in use when the failure happened
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        node_name: str | None = None,
        backend: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the conversion error."""
        super().__init__(message, original_error=original_error)
        self.node_name = node_name
        self.backend = backend


class NodeNotHandledError(ConversionError):
    """Exception raised when a converter has no handler for a node kind."""

    def __init__(
        self,
        node_name: str,
        backend: str | None = None,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the error for the unhandled node kind."""
        if message is None:
            message = f"Converter for backend '{backend}' cannot handle node: {node_name}"
        super().__init__(message, node_name=node_name, backend=backend, original_error=original_error)


class TemplateNotFoundError(NodeNotHandledError):
    """Exception raised when no template matches a node kind."""

    def __init__(self, node_name: str, backend: str | None = None, original_error: Exception | None = None):
        """Initialize the error for the missing template."""
        message = f"Could not find a custom template to handle transform: {node_name} (backend '{backend}')"
        super().__init__(node_name, backend=backend, message=message, original_error=original_error)


class TemplateCompileError(ConversionError):
    """Exception raised when the template engine rejects template source.

    Parameters
    ----------
    node_name : str
        Node kind the template was resolved for
    template_path : str
        Path of the template file that failed to compile
    backend : str, optional
        Backend in use
    original_error : Exception, optional
        The engine's own exception

    """

    def __init__(
        self,
        node_name: str,
        template_path: str,
        backend: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the compile error."""
        message = f"Failed to compile template for node '{node_name}' (backend '{backend}'): {template_path}"
        if original_error:
            message += f": {original_error}"
        super().__init__(message, node_name=node_name, backend=backend, original_error=original_error)
        self.template_path = template_path


class TemplateRenderError(ConversionError):
    """Exception raised when a compiled template fails while rendering.

    Parameters
    ----------
    node_name : str
        Node kind being rendered
    template_path : str
        Path of the template file that failed
    backend : str, optional
        Backend in use
    original_error : Exception, optional
        The exception raised by the template

    """

    def __init__(
        self,
        node_name: str,
        template_path: str,
        backend: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the render error."""
        message = f"Failed to render template for node '{node_name}' (backend '{backend}'): {template_path}"
        if original_error:
            message += f": {original_error}"
        super().__init__(message, node_name=node_name, backend=backend, original_error=original_error)
        self.template_path = template_path


class TemplateReadError(DocRenderError):
    """Exception raised when a template file exists but cannot be read.

    A template that does not exist is never an error; this covers permission
    problems, undecodable contents and other I/O failures.

    Parameters
    ----------
    template_path : str
        Path of the unreadable template
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The underlying OSError or UnicodeDecodeError

    """

    def __init__(self, template_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the read error."""
        if message is None:
            message = f"Cannot read template file: {template_path}"
            if original_error:
                message += f" ({original_error})"
        super().__init__(message, original_error=original_error)
        self.template_path = template_path


class DependencyError(DocRenderError):
    """Exception raised when required dependencies are missing or incompatible.

    Parameters
    ----------
    converter_name : str
        Name of the component that needs the dependencies
    missing_packages : list of tuple
        Missing packages as (package_name, version_spec) tuples
    version_mismatches : list of tuple, optional
        Packages with wrong versions as (package_name, required, installed)
    message : str, optional
        Custom error message
    original_import_error : ImportError, optional
        The ImportError raised while importing the package

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error."""
        version_mismatches = version_mismatches or []
        if message is None:
            parts = [f"'{converter_name}' requires the following packages:"]
            for pkg_name, version_spec in missing_packages:
                parts.append(f"  - {pkg_name}{version_spec}")
            for pkg_name, required, installed in version_mismatches:
                parts.append(f"  - {pkg_name}{required} (installed: {installed})")
            requirements = [f"{p}{v}" for p, v in missing_packages] + [f"{p}{r}" for p, r, _ in version_mismatches]
            parts.append(f"Install with: pip install {' '.join(repr(r) for r in requirements)}")
            message = "\n".join(parts)
        super().__init__(message, original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.original_import_error = original_import_error
