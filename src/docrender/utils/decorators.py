#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/utils/decorators.py
"""Decorators and context managers shared by engines and the driver."""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, Sequence

from packaging.requirements import Requirement

from docrender.exceptions import DependencyError
from docrender.utils.packages import unmet_requirement


def _check_requirements(component: str, requirements: Sequence[tuple[str, str]]) -> None:
    missing: list[tuple[str, str]] = []
    mismatched: list[tuple[str, str, str]] = []
    import_error: ImportError | None = None

    for import_name, requirement_str in requirements:
        requirement = Requirement(requirement_str)
        try:
            importlib.import_module(import_name)
        except ImportError as e:
            missing.append((requirement.name, str(requirement.specifier)))
            import_error = import_error or e
            continue

        unmet = unmet_requirement(requirement)
        if unmet is not None:
            mismatched.append(unmet)

    if missing or mismatched:
        raise DependencyError(
            converter_name=component,
            missing_packages=missing,
            version_mismatches=mismatched,
            original_import_error=import_error,
        ) from import_error


def requires_dependencies(component: str, requirements: Sequence[tuple[str, str]]) -> Callable:
    """Verify optional packages are importable and new enough before each call.

    Parameters
    ----------
    component : str
        Name shown in the error message, e.g. ``"jinja2"``
    requirements : sequence of (str, str)
        ``(import_name, requirement)`` pairs such as ``("jinja2", "jinja2>=3.1.0")``

    Raises
    ------
    DependencyError
        If a package cannot be imported or its installed version does not
        satisfy the requirement

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            _check_requirements(component, requirements)
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Log the duration of the wrapped block at DEBUG level, e.g. ``Conversion (html5) took 3.1 ms``."""
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug(f"{operation} took {(time.perf_counter() - start) * 1000:.1f} ms")
