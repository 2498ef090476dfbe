"""
Manage use cases — add, remove, check and list registered modules.

Thin wrappers over ``core.services.registry`` that load the project and
turn failures into result objects the CLI can print or emit as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from deploy_everything.core.config.loader import ConfigError
from deploy_everything.core.errors import EverythingError
from deploy_everything.core.models.manifest import ModuleDescriptor, ModuleListing
from deploy_everything.core.services import registry
from deploy_everything.core.use_cases.project import open_project


@dataclass
class ManageResult:
    """Result of add/remove/check."""

    action: str = ""
    path: str = ""
    external: bool = False
    descriptor: ModuleDescriptor | None = None
    registered: bool | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {"action": self.action, "path": self.path, "external": self.external}
        if self.error:
            result["error"] = self.error
            return result
        if self.descriptor is not None:
            result["filename"] = self.descriptor.filename
        if self.registered is not None:
            result["registered"] = self.registered
        return result


@dataclass
class ListResult:
    """Result of listing the manifest."""

    chain_id: int | None = None
    network: str = ""
    modules: list[ModuleListing] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "network": self.network,
            "chain_id": self.chain_id,
            "modules": [m.to_dict() for m in self.modules],
        }


def add_module(
    path: str,
    external: bool = False,
    config_path: Path | None = None,
    **session_options,
) -> ManageResult:
    """Register a module at the end of the full deployment."""
    result = ManageResult(action="add", path=path, external=external)
    try:
        session = open_project(config_path, **session_options)
        result.descriptor = registry.add_module(session.context, path, external)
    except (ConfigError, EverythingError) as e:
        result.error = str(e)
    return result


def remove_module(
    path: str,
    external: bool = False,
    config_path: Path | None = None,
    **session_options,
) -> ManageResult:
    """Unregister a module from the full deployment."""
    result = ManageResult(action="remove", path=path, external=external)
    try:
        session = open_project(config_path, **session_options)
        result.descriptor = registry.remove_module(session.context, path, external)
    except (ConfigError, EverythingError) as e:
        result.error = str(e)
    return result


def check_module(
    path: str,
    external: bool = False,
    config_path: Path | None = None,
    **session_options,
) -> ManageResult:
    """Tell whether a module is registered. Never mutates anything."""
    result = ManageResult(action="check", path=path, external=external)
    try:
        session = open_project(config_path, **session_options)
        result.registered = registry.contains_module(session.context, path, external)
    except (ConfigError, EverythingError) as e:
        result.error = str(e)
    return result


def list_modules(config_path: Path | None = None, **session_options) -> ListResult:
    """List registered modules with the result ids they declare."""
    result = ListResult()
    try:
        session = open_project(config_path, **session_options)
        result.network = session.network.name
        result.chain_id = session.context.chain_id()
        result.modules = registry.list_modules(session.context)
    except (ConfigError, EverythingError) as e:
        result.error = str(e)
    return result
