"""
Project model — the root identity of a managed contracts project.

Loaded from everything.yml, this declares which networks exist, which
deployment engine drives them, and the engine's strategy settings.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Network(BaseModel):
    """A target chain."""

    name: str
    chain_id: int
    url: str | None = None
    description: str = ""


class IgnitionSettings(BaseModel):
    """Settings passed through to the deployment engine."""

    strategy_config: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Project(BaseModel):
    """Root project identity — loaded from everything.yml."""

    version: int = 1

    name: str
    description: str = ""
    engine: str = "mock"                 # registered name or "package.module:factory"

    default_network: str | None = None
    networks: list[Network] = Field(default_factory=list)
    ignition: IgnitionSettings = Field(default_factory=IgnitionSettings)

    def get_network(self, name: str) -> Network | None:
        """Look up a network by name."""
        for network in self.networks:
            if network.name == name:
                return network
        return None

    def default_network_entry(self) -> Network | None:
        """The declared default network, or the first one."""
        if self.default_network:
            return self.get_network(self.default_network)
        return self.networks[0] if self.networks else None

    def strategy_config_for(self, strategy: str) -> dict[str, Any]:
        return dict(self.ignition.strategy_config.get(strategy, {}))
