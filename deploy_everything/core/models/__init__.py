"""
Domain models — Pydantic types for deploy-everything.

All models are re-exported here for convenient access:

    from deploy_everything.core.models import Manifest, ModuleDescriptor, Project
"""

from deploy_everything.core.models.deployment import (
    ContractHandle,
    DeployArgs,
    DeploymentModule,
    DeployOutcome,
    Future,
)
from deploy_everything.core.models.manifest import (
    Manifest,
    ModuleDescriptor,
    ModuleListing,
)
from deploy_everything.core.models.project import IgnitionSettings, Network, Project

__all__ = [
    # deployment.py
    "ContractHandle",
    "DeployArgs",
    "DeployOutcome",
    "DeploymentModule",
    "Future",
    # project.py
    "IgnitionSettings",
    # manifest.py
    "Manifest",
    "ModuleDescriptor",
    "ModuleListing",
    "Network",
    "Project",
]
