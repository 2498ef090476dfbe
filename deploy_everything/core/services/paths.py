"""
Path normalization — decides whether a module path belongs to the project.

A path is project-owned when, once resolved against the project root,
it sits strictly below that root. Owned paths are returned relative to
the root; anything else is returned as the resolved absolute path.
These functions only read the current directory (for a relative root)
and never raise.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class NormalizedPath:
    """Outcome of normalizing a path against the project root."""

    path: str
    owned: bool


def project_prefix(root: str | Path) -> str:
    """Return the absolute project root without trailing separators."""
    prefix = os.path.abspath(str(root))
    while prefix.endswith(os.sep):
        prefix = prefix[: -len(os.sep)]
    return prefix


def remove_project_prefix(file: str, root: str | Path) -> NormalizedPath:
    """Strip the project prefix from an absolute path, if it has one."""
    prefix = project_prefix(root) + os.sep
    if file.startswith(prefix):
        return NormalizedPath(path=file[len(prefix):], owned=True)
    return NormalizedPath(path=file, owned=False)


def normalize(raw_path: str, root: str | Path) -> NormalizedPath:
    """Resolve ``raw_path`` against ``root`` and classify it.

    A relative root is taken from the current directory. Relative paths
    are joined to the root, ``..`` segments are collapsed
    lexically (symlinks are not followed), then the root prefix is
    stripped when present.

    Examples (root ``/work/app``):
        ``ignition/modules/Lock.py``      → (``ignition/modules/Lock.py``, True)
        ``/work/app/ignition/Lock.py``    → (``ignition/Lock.py``, True)
        ``../other/Lock.py``              → (``/work/other/Lock.py``, False)
    """
    prefix = project_prefix(root)
    resolved = os.path.normpath(os.path.join(prefix or os.sep, raw_path))
    return remove_project_prefix(resolved, prefix)
