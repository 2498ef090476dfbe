"""
Manifest persistence — atomic read/write for the module manifest.

The manifest is stored as JSON in ignition/deploy-everything.json.
Writes are atomic (write to temp file, then rename) so a crash
mid-write leaves the previous manifest intact.

A missing or unreadable manifest is not an error: it simply means no
module has been registered yet.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from deploy_everything.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

# Default manifest path (relative to project root)
DEFAULT_MANIFEST_DIR = "ignition"
DEFAULT_MANIFEST_FILE = "deploy-everything.json"


def default_manifest_path(project_root: Path) -> Path:
    """Get the default manifest path for a project."""
    return project_root / DEFAULT_MANIFEST_DIR / DEFAULT_MANIFEST_FILE


def load_manifest(path: Path) -> Manifest:
    """Load the module manifest from a JSON file.

    Args:
        path: Path to the manifest JSON file.

    Returns:
        Manifest model. If the file doesn't exist or cannot be parsed,
        returns an empty manifest.
    """
    if not path.is_file():
        logger.info("No manifest at %s — starting empty", path)
        return Manifest()

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read manifest %s: %s — starting empty", path, e)
        return Manifest()
    except json.JSONDecodeError as e:
        logger.warning("Corrupt manifest %s: %s — starting empty", path, e)
        return Manifest()

    if not isinstance(data, dict):
        logger.warning("Manifest %s is not a JSON object — starting empty", path)
        return Manifest()

    # An explicit null/missing contents is the same as no modules
    if data.get("contents") is None:
        data = {**data, "contents": []}

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid manifest %s: %s — starting empty", path, e)
        return Manifest()

    logger.debug("Loaded manifest from %s (%d modules)", path, len(manifest))
    return manifest


def save_manifest(manifest: Manifest, path: Path) -> None:
    """Save the module manifest to a JSON file (atomic write).

    Args:
        manifest: The manifest to save.
        path: Target path for the manifest file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    data = manifest.model_dump(mode="json")
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    # Atomic write: temp file in same directory, then rename
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".deploy-everything_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
        logger.debug("Manifest saved to %s (%d modules)", path, len(manifest))
    except Exception as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save manifest to %s: %s", path, e)
        raise
