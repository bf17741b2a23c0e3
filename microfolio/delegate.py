"""Delegation of commands to the project's package manager.

Once preconditions pass, ``dev``, ``build``, ``preview`` and the image
commands run a package-manager script and the wrapper does nothing else: the
child inherits the terminal and standard streams, Ctrl+C reaches it straight
from the terminal, termination signals sent to the wrapper are passed on, and
the child's exit status becomes the wrapper's.

Key functions:
- run_script: Run a package-manager script inside a project.
- run_forwarding_signals: Launch a command and mirror its exit status.
- exit_status: Convert a subprocess return code into a shell exit status.
"""

from __future__ import annotations

import os
import signal
import subprocess
from collections.abc import Sequence
from pathlib import Path

from .executable_utils import require_executable

# Terminal interrupts reach the whole foreground process group, so the child
# already receives them; the wrapper ignores them while it waits.
if os.name == "nt":  # pragma: no cover
    IGNORED_SIGNALS: tuple[int, ...] = (signal.SIGINT,)
    FORWARDED_SIGNALS: tuple[int, ...] = ()
else:
    IGNORED_SIGNALS = (signal.SIGINT, signal.SIGQUIT)
    FORWARDED_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def run_script(
    script: str,
    args: Sequence[str],
    project_root: Path,
    package_manager: str = "pnpm",
) -> int:
    """Run ``<package_manager> <script> [args...]`` in the project root.

    Args:
        script: Name of the package.json script (e.g. 'dev').
        args: Extra arguments passed through to the script unchanged.
        project_root: Directory the script runs in.
        package_manager: Package manager executable name.

    Returns:
        Exit status of the script.

    Raises:
        MicrofolioError: If the package manager cannot be found.
    """
    pm_bin = require_executable(package_manager, project_root)
    return run_forwarding_signals([pm_bin, script, *args], cwd=project_root)


def run_forwarding_signals(cmd: list[str], cwd: Path) -> int:
    """Run a command to completion and return its exit status.

    Terminal interrupts are left to the child alone. Termination and hangup
    signals sent to the wrapper are passed on to the child.
    """
    # Dispositions change only after Popen returns, so the child starts with
    # the default handlers rather than inheriting SIG_IGN.
    process = subprocess.Popen(cmd, cwd=cwd)

    def forward(signum, frame):
        if process.poll() is None:
            process.send_signal(signum)

    previous = {}
    for sig in IGNORED_SIGNALS:
        previous[sig] = signal.signal(sig, signal.SIG_IGN)
    for sig in FORWARDED_SIGNALS:
        previous[sig] = signal.signal(sig, forward)
    try:
        returncode = process.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return exit_status(returncode)


def exit_status(returncode: int) -> int:
    """Map a Popen return code to the status a shell would report.

    A child killed by signal N has a return code of -N; shells report 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode
