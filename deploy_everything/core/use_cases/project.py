"""
Project session — load everything.yml and wire up a ProjectContext.

Every CLI use case starts here: find the config, pick the network,
create the engine for it, and bundle it all into a context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from deploy_everything.adapters.base import EngineError
from deploy_everything.adapters.loader import ModuleLoader
from deploy_everything.adapters.registry import EngineRegistry
from deploy_everything.core.config.loader import (
    ConfigError,
    load_project,
    locate_project_file,
    project_root,
    select_network,
)
from deploy_everything.core.context import ProjectContext
from deploy_everything.core.models.project import Network, Project

logger = logging.getLogger(__name__)


@dataclass
class ProjectSession:
    """A loaded project, bound to one network and one engine."""

    project: Project
    config_path: Path
    network: Network
    context: ProjectContext

    @property
    def root(self) -> Path:
        return self.context.root


def open_project(
    config_path: Path | None = None,
    network: str | None = None,
    mock_mode: bool = False,
    registry: EngineRegistry | None = None,
    loader: ModuleLoader | None = None,
) -> ProjectSession:
    """Load the project configuration and build its context.

    Args:
        config_path: Optional explicit path to everything.yml.
        network: Optional network name (see select_network).
        mock_mode: Use the mock engine regardless of configuration.
        registry: Optional pre-configured engine registry.
        loader: Optional module loader (default: FileModuleLoader).

    Raises:
        ConfigError: Missing/invalid configuration or unusable engine.
    """
    config_path = locate_project_file(config_path)
    project = load_project(config_path)

    root = project_root(config_path)
    selected = select_network(project, network)

    registry = registry or EngineRegistry()
    spec = "mock" if mock_mode else project.engine
    try:
        engine = registry.create(spec, root, selected)
    except EngineError as e:
        raise ConfigError(str(e)) from e
    except Exception as e:
        raise ConfigError(f"Cannot create engine '{spec}': {type(e).__name__}: {e}") from e

    context = ProjectContext(root=root, engine=engine)
    if loader is not None:
        context.loader = loader

    logger.info(
        "Project '%s' on %s (chain %d) via %s",
        project.name,
        selected.name,
        selected.chain_id,
        engine.name,
    )
    return ProjectSession(
        project=project,
        config_path=config_path,
        network=selected,
        context=context,
    )
