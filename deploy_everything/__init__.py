"""deploy-everything — ordered, network-aware replay of deployment modules."""

__version__ = "0.1.0"
