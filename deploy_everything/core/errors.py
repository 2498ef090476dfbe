"""
Error taxonomy for registry, resolution and inspection operations.

Every error raised by the core derives from EverythingError, so callers
(the CLI in particular) can report any of them uniformly. Validation and
state errors are raised before the manifest is touched.
"""

from __future__ import annotations


class EverythingError(Exception):
    """Base class for all deploy-everything errors."""


# ── Validation ──────────────────────────────────────────────────


class ValidationError(EverythingError):
    """A module path was rejected before any persistence change."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class ForbiddenPathError(ValidationError):
    """An external module path starts with an absolute-path marker."""

    def __init__(self, path: str):
        super().__init__(f"Forbidden absolute external module path: {path}", path)


class ForeignModuleError(ValidationError):
    """A project module path resolves outside the project root."""

    def __init__(self, path: str):
        super().__init__(f"The module does not belong to the project: {path}", path)


# ── Resolution ──────────────────────────────────────────────────


class ModuleImportError(EverythingError):
    """Neither the chain-qualified nor the base module could be loaded."""

    def __init__(self, path: str, external: bool):
        kind = "external" if external else "in-project"
        super().__init__(f"Could not import the {kind} module: {path}")
        self.path = path
        self.external = external


# ── State ───────────────────────────────────────────────────────


class StateError(EverythingError):
    """The requested change conflicts with the current manifest."""


class AlreadyRegisteredError(StateError):
    def __init__(self, path: str):
        super().__init__(f"The module is already added to the full deployment: {path}")
        self.path = path


class NotRegisteredError(StateError):
    def __init__(self, path: str):
        super().__init__(f"The module is not added to the full deployment: {path}")
        self.path = path


# ── Journal / artifacts ─────────────────────────────────────────


class DeploymentDataError(EverythingError):
    """The engine's persisted deployment output is missing or unreadable."""


class NotDeployedError(DeploymentDataError):
    def __init__(self, contract_id: str, deployment_id: str):
        super().__init__(
            f"Contract '{contract_id}' is not deployed in deployment '{deployment_id}'"
        )
        self.contract_id = contract_id
        self.deployment_id = deployment_id


class CorruptedContractError(DeploymentDataError):
    def __init__(self, contract_id: str, reason: str):
        super().__init__(f"Corrupted contract data for '{contract_id}': {reason}")
        self.contract_id = contract_id
