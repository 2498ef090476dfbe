"""
Project context — everything a core operation needs to know about "where".

Every registry, resolver, driver and inspection operation takes a
ProjectContext explicitly instead of reading process-wide state:

    - CLI:    use_cases.project.open_project() builds one from everything.yml
    - Tests:  ProjectContext(root=tmp_path, engine=MockEngine(tmp_path), ...)

The active chain id is read through an accessor on every call, so a
context can follow an engine that switches networks.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from deploy_everything.adapters.base import DeploymentEngine
from deploy_everything.adapters.loader import FileModuleLoader, ModuleLoader
from deploy_everything.core.persistence.manifest_file import default_manifest_path


@dataclass
class ProjectContext:
    """The project root, the active chain, and the two external seams."""

    root: Path
    engine: DeploymentEngine
    loader: ModuleLoader = field(default_factory=FileModuleLoader)
    chain_id_provider: Callable[[], int] | None = None
    manifest_path: Path | None = None

    def chain_id(self) -> int:
        """The currently active chain id (provider first, then the engine)."""
        if self.chain_id_provider is not None:
            return self.chain_id_provider()
        return self.engine.chain_id()

    @property
    def manifest_file(self) -> Path:
        return self.manifest_path or default_manifest_path(self.root)
