"""
Module resolver — network-conditional module loading.

For a descriptor ``ignition/modules/Token.py`` on chain 137 the resolver
first tries ``ignition/modules/Token-137.py`` and falls back to the base
file. This lets a project keep a mock locally and a reference to an
existing deployment on a public chain without the caller knowing which
variants exist.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from deploy_everything.core.errors import ModuleImportError
from deploy_everything.core.models.deployment import DeploymentModule
from deploy_everything.core.models.manifest import ModuleDescriptor
from deploy_everything.core.services.paths import project_prefix

if TYPE_CHECKING:
    from deploy_everything.core.context import ProjectContext

logger = logging.getLogger(__name__)


def add_chain_id(filename: str, chain_id: int) -> str:
    """Insert ``-{chain_id}`` before the extension of the final segment.

    ``a/b.py`` → ``a/b-137.py``; ``a/b`` → ``a/b-137``.
    """
    cut = max(filename.rfind("/"), filename.rfind(os.sep)) + 1
    head, tail = filename[:cut], filename[cut:]
    stem, dot, extension = tail.rpartition(".")
    if not dot or not stem:
        return f"{head}{tail}-{chain_id}"
    return f"{head}{stem}-{chain_id}.{extension}"


def module_location(ctx: ProjectContext, filename: str, external: bool) -> str:
    """Path handed to the loader: as-is for external, absolute otherwise."""
    if external:
        return filename
    return project_prefix(ctx.root) + os.sep + filename


def resolve_module(
    ctx: ProjectContext,
    descriptor: ModuleDescriptor,
    chain_id: int,
) -> DeploymentModule:
    """Load the chain-specific variant of a module, or the module itself.

    Raises:
        ModuleImportError: If neither variant loads.
    """
    variant = add_chain_id(descriptor.filename, chain_id)
    try:
        module = ctx.loader.load_by_path(module_location(ctx, variant, descriptor.external))
        logger.debug("Using chain %s variant %s", chain_id, variant)
        return module
    except Exception as e:
        logger.debug("No usable chain %s variant for %s: %s", chain_id, descriptor.filename, e)

    try:
        return ctx.loader.load_by_path(
            module_location(ctx, descriptor.filename, descriptor.external)
        )
    except Exception as e:
        raise ModuleImportError(descriptor.filename, descriptor.external) from e
