"""Project directory handling for microfolio.

A microfolio project is any directory holding the marker file (package.json
by default). This module answers the two questions the CLI asks before
delegating work, and implements the multi-step ``new`` sequence.

Key functions:
- is_project: Check a directory for the project marker file.
- find_build_output: Locate a previous build's output directory.
- create_project: Scaffold a new project from the template repository.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import click

from .errors import ProjectError
from .executable_utils import require_executable


def is_project(root: Path, marker_file: str = "package.json") -> bool:
    """Return True when ``root`` contains the project marker file."""
    return (root / marker_file).is_file()


def find_build_output(root: Path, candidates: Iterable[str] = ("dist", "build")) -> Path | None:
    """Return the first existing build output directory, if any.

    Args:
        root: Project root directory.
        candidates: Output directory names to try, in order.

    Returns:
        Path to the output directory, or None when nothing was built yet.
    """
    for name in candidates:
        path = root / name
        if path.is_dir():
            return path
    return None


def create_project(
    target: Path,
    config: dict[str, Any],
    template: str | None = None,
    install: bool = True,
    git_init: bool = True,
) -> None:
    """Create a new project directory seeded from the template repository.

    The template is cloned to a temporary location, copied into ``target``
    without its version-control metadata, re-initialized as a fresh repository
    with a single commit, and its dependencies installed.

    Every step is fatal on failure. A partially created directory is left in
    place for the user to inspect.

    Args:
        target: Directory to create. Must not exist yet.
        config: Effective configuration (see config.load_config).
        template: Repository URL overriding ``config["template_repo"]``.
        install: Whether to install dependencies with the package manager.
        git_init: Whether to re-initialize the copy as a git repository.

    Raises:
        ProjectError: If the target exists or any step fails.
    """
    if target.exists():
        raise ProjectError(f"Directory '{target}' already exists")

    git_bin = require_executable("git")
    pm_name = config["package_manager"]
    pm_bin = require_executable(pm_name) if install else None
    repo = template or config["template_repo"]

    click.echo(f"📁 Creating project '{target}'...")
    target.mkdir(parents=True)

    with tempfile.TemporaryDirectory(prefix="microfolio-") as tmp:
        clone_dir = Path(tmp) / "template"
        result = _run([git_bin, "clone", "--depth", "1", repo, str(clone_dir)], cwd=target)
        if result.returncode != 0:
            raise ProjectError(
                f"Could not fetch the project template from {repo}",
                hint=_output_tail(result),
            )
        _copy_template(clone_dir, target)

    if git_init:
        _git(git_bin, ["init"], target)
        _git(git_bin, ["add", "."], target)
        _git(git_bin, ["commit", "-m", config["commit_message"]], target)

    if pm_bin is not None:
        click.echo("📦 Installing dependencies...")
        result = _run([pm_bin, "install"], cwd=target, capture=False)
        if result.returncode != 0:
            raise ProjectError(
                f"Dependency installation failed (exit code {result.returncode})",
                hint=f"The project was created in '{target}'. Run '{pm_name} install' there to retry.",
            )


def _copy_template(template_dir: Path, root: Path) -> None:
    """Copy the template tree into ``root``, skipping the .git directory."""
    for src_path in sorted(template_dir.rglob("*")):
        rel_path = src_path.relative_to(template_dir)
        if rel_path.parts[0] == ".git":
            continue
        dest_path = root / rel_path
        if src_path.is_dir() and not src_path.is_symlink():
            dest_path.mkdir(parents=True, exist_ok=True)
            continue
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path, follow_symlinks=False)


def _git(git_bin: str, args: list[str], cwd: Path) -> None:
    result = _run([git_bin, *args], cwd=cwd)
    if result.returncode != 0:
        raise ProjectError(f"git {args[0]} failed in '{cwd}'", hint=_output_tail(result))


def _run(cmd: list[str], cwd: Path, capture: bool = True) -> subprocess.CompletedProcess:
    """Run an external command, capturing its output unless told otherwise."""
    return subprocess.run(
        cmd,
        cwd=cwd,
        check=False,
        capture_output=capture,
        text=True,
    )


def _output_tail(result: subprocess.CompletedProcess, lines: int = 5) -> str | None:
    output = (result.stderr or result.stdout or "").strip()
    if not output:
        return None
    return "\n".join(output.splitlines()[-lines:])
