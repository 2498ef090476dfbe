"""Adapters — the deployment engine and module loader seams.

Public re-exports for convenient access.
"""

from deploy_everything.adapters.base import DeploymentEngine, EngineError
from deploy_everything.adapters.loader import FileModuleLoader, ModuleLoader, ModuleLoadError
from deploy_everything.adapters.mock import MockEngine, StaticModuleLoader
from deploy_everything.adapters.registry import EngineRegistry

__all__ = [
    "DeploymentEngine",
    "EngineError",
    "EngineRegistry",
    "FileModuleLoader",
    "MockEngine",
    "ModuleLoadError",
    "ModuleLoader",
    "StaticModuleLoader",
]
