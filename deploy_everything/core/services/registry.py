"""
Module registry — add, remove, check and list the modules of a full deployment.

Every operation reloads the manifest from disk (no caching), so manual
edits to ignition/deploy-everything.json are always observed. Mutating
operations are a full load → modify → save cycle.

Identity of an entry is (filename, external):
    - project modules are keyed by their root-relative path,
    - external modules by the package-style path exactly as given.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from deploy_everything.core.errors import (
    AlreadyRegisteredError,
    ForbiddenPathError,
    ForeignModuleError,
    ModuleImportError,
    NotRegisteredError,
)
from deploy_everything.core.models.manifest import ModuleDescriptor, ModuleListing
from deploy_everything.core.persistence.manifest_file import load_manifest, save_manifest
from deploy_everything.core.services.paths import normalize
from deploy_everything.core.services.resolver import module_location, resolve_module

if TYPE_CHECKING:
    from deploy_everything.core.context import ProjectContext

logger = logging.getLogger(__name__)


def descriptor_key(ctx: ProjectContext, path: str, external: bool) -> tuple[str, bool]:
    """Compute the identity key a path would be registered under."""
    external = bool(external)
    if external:
        return (path, True)
    return (normalize(path, ctx.root).path, False)


def add_module(ctx: ProjectContext, path: str, external: bool = False) -> ModuleDescriptor:
    """Register a module at the end of the deployment sequence.

    The module must load before it is accepted. Nothing is written
    unless every check passes.

    Raises:
        ForbiddenPathError: External path starting with ``/``.
        ForeignModuleError: Project path outside the project root.
        ModuleImportError: The module cannot be loaded.
        AlreadyRegisteredError: Same (filename, external) already present.
    """
    external = bool(external)

    if external:
        if path.startswith("/") or os.path.isabs(path):
            raise ForbiddenPathError(path)
        filename = path
    else:
        normalized = normalize(path, ctx.root)
        if not normalized.owned:
            raise ForeignModuleError(path)
        filename = normalized.path

    try:
        ctx.loader.load_by_path(module_location(ctx, filename, external))
    except Exception as e:
        raise ModuleImportError(path, external) from e

    manifest = load_manifest(ctx.manifest_file)
    descriptor = ModuleDescriptor(filename=filename, external=external)
    if descriptor.key in manifest:
        raise AlreadyRegisteredError(path)

    manifest.contents.append(descriptor)
    save_manifest(manifest, ctx.manifest_file)
    logger.info("Added %s module %s (%d registered)", descriptor.kind, filename, len(manifest))
    return descriptor


def remove_module(ctx: ProjectContext, path: str, external: bool = False) -> ModuleDescriptor:
    """Unregister a module; the remaining entries keep their order.

    Raises:
        NotRegisteredError: No entry with that identity.
    """
    key = descriptor_key(ctx, path, external)

    manifest = load_manifest(ctx.manifest_file)
    descriptor = manifest.find(key)
    if descriptor is None:
        raise NotRegisteredError(path)

    manifest.contents = [d for d in manifest.contents if d.key != key]
    save_manifest(manifest, ctx.manifest_file)
    logger.info("Removed %s module %s (%d registered)", descriptor.kind, key[0], len(manifest))
    return descriptor


def contains_module(ctx: ProjectContext, path: str, external: bool = False) -> bool:
    """Whether a module is registered. Only the manifest is consulted."""
    return descriptor_key(ctx, path, external) in load_manifest(ctx.manifest_file)


def list_modules(ctx: ProjectContext) -> list[ModuleListing]:
    """List registered modules, in deployment order, with their result ids.

    Each entry is resolved for the currently active chain. An entry that
    cannot be resolved is still listed, with no results: one broken or
    not-yet-built module must never hide the others.
    """
    chain_id = ctx.chain_id()
    listings = []
    for descriptor in load_manifest(ctx.manifest_file).contents:
        results: list[str] = []
        try:
            results = resolve_module(ctx, descriptor, chain_id).result_ids
        except ModuleImportError as e:
            logger.debug("Listing %s without results: %s", descriptor.filename, e)
        listings.append(ModuleListing(descriptor=descriptor, module_results=results))
    return listings
