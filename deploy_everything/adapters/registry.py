"""
Engine registry — maps an engine spec from everything.yml to an engine.

An engine spec is either a registered name (``mock``) or an import path
to a factory (``package.module:factory``). A factory is any callable
``(project_root, network) -> DeploymentEngine``.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from pathlib import Path

from deploy_everything.adapters.base import DeploymentEngine, EngineError
from deploy_everything.adapters.mock import MockEngine
from deploy_everything.core.models.project import Network

logger = logging.getLogger(__name__)

EngineFactory = Callable[[Path, Network], DeploymentEngine]


def _mock_factory(project_root: Path, network: Network) -> DeploymentEngine:
    return MockEngine(project_root, chain_id=network.chain_id)


class EngineRegistry:
    """Central registry of deployment engine factories.

    Features:
        - Register factories by name
        - Resolve ``package.module:factory`` specs on demand
        - Validate that factories really return a DeploymentEngine
    """

    def __init__(self, include_builtin: bool = True):
        self._factories: dict[str, EngineFactory] = {}
        if include_builtin:
            self.register("mock", _mock_factory)

    def register(self, name: str, factory: EngineFactory) -> None:
        if name in self._factories:
            logger.warning("Overwriting existing engine: %s", name)
        self._factories[name] = factory
        logger.debug("Registered engine: %s", name)

    def get(self, name: str) -> EngineFactory | None:
        return self._factories.get(name)

    def list_engines(self) -> list[str]:
        return list(self._factories.keys())

    def create(self, spec: str, project_root: Path, network: Network) -> DeploymentEngine:
        """Instantiate the engine named by ``spec`` for a network.

        Raises:
            EngineError: Unknown spec, failed import, or a factory that
                does not produce a DeploymentEngine.
        """
        factory = self.get(spec)
        if factory is None:
            if ":" not in spec:
                raise EngineError(
                    f"Unknown engine '{spec}'. Registered: {', '.join(self.list_engines()) or 'none'}"
                )
            factory = _import_factory(spec)

        engine = factory(project_root, network)
        if not isinstance(engine, DeploymentEngine):
            raise EngineError(
                f"Engine factory '{spec}' returned {type(engine).__name__}, "
                "expected a DeploymentEngine"
            )

        logger.debug("Created engine %r for network '%s'", engine, network.name)
        return engine


def _import_factory(spec: str) -> EngineFactory:
    module_name, _, attribute = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise EngineError(f"Cannot import engine module '{module_name}': {e}") from e

    factory = getattr(module, attribute, None)
    if not callable(factory):
        raise EngineError(f"'{attribute}' in '{module_name}' is not a callable engine factory")
    return factory
