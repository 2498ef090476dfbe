"""
Manifest models — the persisted, ordered list of registered modules.

The manifest lives at ignition/deploy-everything.json and is meant to
be committed alongside the project. Order matters: it is the order in
which modules are deployed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModuleDescriptor(BaseModel):
    """A registered module: where it lives and who owns it.

    ``filename`` is root-relative for project modules and a
    package-style path (``package/dir/file.py``) for external ones.
    Descriptors are never edited in place; remove + add is a rename.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    external: bool = False

    @property
    def key(self) -> tuple[str, bool]:
        """Identity key: at most one descriptor per key in a manifest."""
        return (self.filename, self.external)

    @property
    def kind(self) -> str:
        return "external" if self.external else "in-project"


class Manifest(BaseModel):
    """Root manifest document — serialized under a ``contents`` key."""

    contents: list[ModuleDescriptor] = Field(default_factory=list)

    def find(self, key: tuple[str, bool]) -> ModuleDescriptor | None:
        """Look up a descriptor by identity key."""
        for descriptor in self.contents:
            if descriptor.key == key:
                return descriptor
        return None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, tuple) and self.find(key) is not None

    def __len__(self) -> int:
        return len(self.contents)


class ModuleListing(BaseModel):
    """A manifest entry together with the result ids its module declares.

    ``module_results`` is empty when the module cannot currently be
    resolved; listing never fails because of one broken entry.
    """

    descriptor: ModuleDescriptor
    module_results: list[str] = Field(default_factory=list)

    @property
    def filename(self) -> str:
        return self.descriptor.filename

    @property
    def external(self) -> bool:
        return self.descriptor.external

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "external": self.external,
            "module_results": list(self.module_results),
        }
