#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/utils/packages.py
"""Checks of installed distributions against requirement strings."""

from __future__ import annotations

from importlib import metadata

from packaging.requirements import Requirement


def installed_version(distribution: str) -> str | None:
    """Return the installed version of a distribution, or None if absent."""
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return None


def unmet_requirement(requirement: Requirement | str) -> tuple[str, str, str] | None:
    """Compare an installed distribution with a requirement.

    Parameters
    ----------
    requirement : Requirement or str
        Requirement such as ``"jinja2>=3.1.0"``

    Returns
    -------
    tuple of (str, str, str) or None
        ``(name, specifier, installed)`` when the installed version does not
        satisfy the specifier, with ``installed`` set to ``"unknown"`` if no
        distribution metadata is found; None when the requirement is met

    """
    if isinstance(requirement, str):
        requirement = Requirement(requirement)
    if not requirement.specifier:
        return None

    installed = installed_version(requirement.name)
    if installed is not None and requirement.specifier.contains(installed, prereleases=True):
        return None
    return requirement.name, str(requirement.specifier), installed or "unknown"
