"""
Project configuration — everything.yml.

The directory holding everything.yml is the project root: module paths
are owned by the project when they live below it, and the manifest,
deployment journal and run ledger are all stored relative to it.

    name: my-contracts
    engine: mock                 # or package.module:factory
    default_network: localhost
    networks:
      - {name: localhost, chain_id: 31337}
      - {name: polygon, chain_id: 137, url: https://polygon-rpc.com}
    ignition:
      strategy_config:
        create2: {salt: "0x..."}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from deploy_everything.core.models.project import Network, Project

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "everything.yml"
NETWORK_ENV_VAR = "EVERYTHING_NETWORK"

# How far up from the start directory to look for everything.yml
_MAX_SEARCH_DEPTH = 20


class ConfigError(Exception):
    """Raised when project configuration is invalid or missing."""


def find_project_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest everything.yml at or above ``start_dir`` (default: cwd)."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in [start, *start.parents][:_MAX_SEARCH_DEPTH]:
        candidate = directory / PROJECT_CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def locate_project_file(path: Path | None = None) -> Path:
    """Return ``path``, or the nearest everything.yml when None.

    Raises:
        ConfigError: No path given and none found above the cwd.
    """
    path = path or find_project_file()
    if path is None:
        raise ConfigError(
            f"No {PROJECT_CONFIG_FILE} found. "
            "Create one at the project root, or specify --config."
        )
    return path


def load_project(path: Path | None = None) -> Project:
    """Read and validate everything.yml.

    Args:
        path: Explicit config path; searched upward from cwd when None.

    Raises:
        ConfigError: Missing file, bad YAML, schema violation, duplicate
            network names or an undeclared default network.
    """
    path = locate_project_file(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Reading %s", path)
    project = _validate(_read_yaml(path))

    names = [n.name for n in project.networks]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate network names: {', '.join(duplicates)}")
    if project.default_network and project.get_network(project.default_network) is None:
        raise ConfigError(f"default_network '{project.default_network}' is not declared")

    logger.info("Loaded project '%s' (%d networks)", project.name, len(project.networks))
    return project


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def _validate(data: dict[str, Any]) -> Project:
    try:
        return Project.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid project configuration: {e}") from e


def select_network(project: Project, name: str | None = None) -> Network:
    """Pick the active network.

    Precedence: explicit name > EVERYTHING_NETWORK > default_network > first.

    Raises:
        ConfigError: Unknown network name, or no networks declared.
    """
    name = name or os.environ.get(NETWORK_ENV_VAR) or None
    if name:
        network = project.get_network(name)
        if network is None:
            declared = ", ".join(n.name for n in project.networks) or "none"
            raise ConfigError(f"Unknown network '{name}' (declared: {declared})")
        return network

    network = project.default_network_entry()
    if network is None:
        raise ConfigError("No networks declared in the project configuration.")
    return network


def project_root(config_path: Path) -> Path:
    """Get the project root directory from a config file path."""
    return config_path.parent.resolve()


def load_parameters(path: Path | str | None) -> dict[str, Any]:
    """Load a module-parameters JSON file.

    A missing, unreadable or non-object file yields no parameters; the
    problem is logged rather than raised.
    """
    if not path or not str(path).strip():
        return {}

    path = Path(str(path).strip())
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring parameters file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring parameters file %s: expected a JSON object", path)
        return {}
    return data
