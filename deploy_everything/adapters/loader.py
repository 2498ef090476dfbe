"""
Module loader — turns a module path into a loaded DeploymentModule.

The resolver never imports anything itself; it asks a ModuleLoader.
FileModuleLoader is the real implementation:

    - absolute paths are loaded as Python source files,
    - package-style paths (``package/dir/file.py``) are located inside
      the directory of the importable top-level ``package``.

A module file must expose a module-level ``module`` attribute holding a
DeploymentModule (or a mapping that validates as one). Files are
executed fresh on every load and never registered in ``sys.modules``,
so edits are always picked up.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from deploy_everything.core.models.deployment import DeploymentModule

logger = logging.getLogger(__name__)

MODULE_ATTRIBUTE = "module"


class ModuleLoadError(Exception):
    """A module path could not be located, executed or validated."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot load module {path}: {reason}")
        self.path = path
        self.reason = reason


class ModuleLoader(ABC):
    """Capability to load a deployment module by path."""

    @abstractmethod
    def load_by_path(self, path: str) -> DeploymentModule:
        """Load the module at ``path``.

        Raises:
            ModuleLoadError: For any failure (missing file, error while
                executing it, missing or invalid ``module`` attribute).
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class FileModuleLoader(ModuleLoader):
    """Loads deployment modules from Python source files."""

    def load_by_path(self, path: str) -> DeploymentModule:
        file = self.locate(path)
        return self.load_file(file)

    def locate(self, path: str) -> Path:
        """Find the source file for an absolute or package-style path."""
        if os.path.isabs(path):
            candidate = Path(path)
            if not candidate.is_file():
                raise ModuleLoadError(path, "file not found")
            return candidate

        package, _, rest = path.replace("\\", "/").partition("/")
        if not package or not rest:
            raise ModuleLoadError(path, "expected 'package/path/to/file.py'")

        try:
            spec = importlib.util.find_spec(package)
        except (ImportError, ValueError) as e:
            raise ModuleLoadError(path, f"cannot locate package '{package}': {e}") from e

        if spec is None:
            raise ModuleLoadError(path, f"package '{package}' is not installed")

        locations = list(spec.submodule_search_locations or [])
        if not locations:
            raise ModuleLoadError(path, f"'{package}' is not a package")

        for location in locations:
            candidate = Path(location) / rest
            if candidate.is_file():
                return candidate

        raise ModuleLoadError(path, f"file not found in package '{package}'")

    def load_file(self, file: Path) -> DeploymentModule:
        """Execute a source file and extract its ``module`` attribute."""
        digest = hashlib.sha1(str(file).encode("utf-8")).hexdigest()[:12]
        spec = importlib.util.spec_from_file_location(f"_deploy_everything_{digest}", file)
        if spec is None or spec.loader is None:
            raise ModuleLoadError(str(file), "not a Python source file")

        code = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(code)
        except (Exception, SystemExit) as e:
            raise ModuleLoadError(str(file), f"{type(e).__name__}: {e}") from e

        declared = getattr(code, MODULE_ATTRIBUTE, None)
        if declared is None:
            raise ModuleLoadError(str(file), f"no '{MODULE_ATTRIBUTE}' attribute defined")
        if isinstance(declared, DeploymentModule):
            logger.debug("Loaded module '%s' from %s", declared.id, file)
            return declared

        try:
            module = DeploymentModule.model_validate(declared)
        except ValidationError as e:
            raise ModuleLoadError(str(file), f"invalid '{MODULE_ATTRIBUTE}': {e}") from e

        logger.debug("Loaded module '%s' from %s", module.id, file)
        return module
