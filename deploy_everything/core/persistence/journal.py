"""
Deployment journal layout — where an engine persists deployment output.

    ignition/deployments/<deployment_id>/deployed_addresses.json
    ignition/deployments/<deployment_id>/artifacts/<contract_id>.json

The journal belongs to the deployment engine. The core only reads it
(inspection); the mock engine is the one writer shipped here.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

DEPLOYMENTS_DIR = ("ignition", "deployments")
ADDRESSES_FILE = "deployed_addresses.json"
ARTIFACTS_DIR = "artifacts"


def default_deployment_id(chain_id: int) -> str:
    """Canonical deployment id for a chain, e.g. ``chain-31337``."""
    return f"chain-{chain_id}"


def deployment_dir(project_root: Path, deployment_id: str) -> Path:
    return project_root.joinpath(*DEPLOYMENTS_DIR, deployment_id)


def addresses_path(project_root: Path, deployment_id: str) -> Path:
    return deployment_dir(project_root, deployment_id) / ADDRESSES_FILE


def artifact_path(project_root: Path, deployment_id: str, contract_id: str) -> Path:
    return deployment_dir(project_root, deployment_id) / ARTIFACTS_DIR / f"{contract_id}.json"


def read_json_object(path: Path) -> dict[str, Any]:
    """Read a JSON file that must contain an object.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it is not valid JSON or not an object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object in {path}, got {type(data).__name__}")
    return data


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
