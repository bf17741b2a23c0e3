"""Configuration loading for microfolio.

Settings come from three layers, later layers winning:

1. ``DEFAULT_CONFIG``
2. ``microfolio.yaml`` in the project root (optional)
3. ``MICROFOLIO_*`` environment variables

Key functions:
- load_config: Build the effective configuration for a project directory.
- env_flag: Read a boolean switch from the environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "microfolio.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "template_repo": "https://github.com/aker-dev/microfolio.git",
    "package_manager": "pnpm",
    "marker_file": "package.json",
    "output_dirs": ["dist", "build"],
    "dev_url": "http://localhost:5173",
    "preview_url": "http://localhost:4173",
    "commit_message": "Initial commit - microfolio project",
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "MICROFOLIO_TEMPLATE_REPO": "template_repo",
    "MICROFOLIO_PACKAGE_MANAGER": "package_manager",
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration for a project directory.

    Args:
        project_root: Directory that may contain a microfolio.yaml file.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config = DEFAULT_CONFIG.copy()
    config_path = project_root / CONFIG_FILENAME
    if config_path.is_file():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value
    if isinstance(config["output_dirs"], str):
        config["output_dirs"] = [config["output_dirs"]]
    return config


def env_flag(name: str) -> bool:
    """Return True when the environment variable is set to "1"."""
    return os.environ.get(name) == "1"
