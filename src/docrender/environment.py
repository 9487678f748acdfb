#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Host environment descriptor used when building converters.

The factory never inspects global process state directly. It receives a
``HostEnvironment`` describing the platform and working directory, so the
backend-specific option adjustments it makes can be tested in isolation.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

from docrender.constants import FILESYSTEM_PLATFORMS, HostPlatform


@dataclass(frozen=True)
class HostEnvironment:
    """Description of the host the converters run in.

    Parameters
    ----------
    platform : {"native", "browser"}, default "native"
        ``"native"`` for a regular interpreter with filesystem access,
        ``"browser"`` for in-browser runtimes such as Pyodide.
    cwd : Path
        Working directory that relative default paths are resolved against

    """

    platform: HostPlatform = "native"
    cwd: Path = field(default_factory=Path.cwd)

    @property
    def has_filesystem(self) -> bool:
        """Whether the host can read template files from local disk."""
        return self.platform in FILESYSTEM_PLATFORMS

    @classmethod
    def detect(cls) -> HostEnvironment:
        """Describe the current process."""
        platform: HostPlatform = "browser" if sys.platform == "emscripten" else "native"
        return cls(platform=platform, cwd=Path.cwd())
