"""Locating git and the package manager.

A global install on PATH is preferred; a copy vendored into the project's
node_modules/.bin is the fallback.

Functions:
    find_executable: Path to an executable, or None.
    require_executable: Path to an executable, or MicrofolioError.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from .errors import MicrofolioError


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Return the full path of ``name``, or None when it cannot be found.

    Args:
        name: Executable to look for, such as 'pnpm' or 'git'.
        project_root: Project whose node_modules/.bin is searched after PATH.
    """
    found = shutil.which(name)
    if found is None and project_root is not None:
        vendored = project_root / "node_modules" / ".bin" / name
        if vendored.exists():
            found = str(vendored)
    return found


def require_executable(name: str, project_root: Path | None = None) -> str:
    """Find an executable or raise MicrofolioError naming it."""
    found = find_executable(name, project_root)
    if found is None:
        raise MicrofolioError(
            f"'{name}' was not found on your PATH",
            hint=f"Install {name} and try again.",
        )
    return found
