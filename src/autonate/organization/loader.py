"""
Load and export organization documents.

The built-in organization ships alongside this module. Exporting writes
the same document as the deployment manifest the deploy stage submits.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml

from .schema import Organization

logger = logging.getLogger(__name__)

_BUILTIN_DIR = Path(__file__).parent / "builtins"
BUILTIN_ORGANIZATION = _BUILTIN_DIR / "autonate-liberation.yaml"


def load_organization(path: Optional[Path] = None) -> Organization:
    """Parse and validate an organization YAML file.

    Args:
        path: Document to load (defaults to the built-in organization).

    Returns:
        Validated Organization.

    Raises:
        ValueError: If the YAML is invalid or fails validation.
    """
    source = Path(path) if path else BUILTIN_ORGANIZATION
    try:
        raw = yaml.safe_load(source.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a YAML mapping, got {type(raw).__name__}")
    return Organization(**raw)


def dump_organization(org: Organization) -> str:
    """Serialize an organization to YAML text."""
    data = org.model_dump(mode="json", exclude_none=True)
    return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def export_manifest(org: Organization, path: Path) -> Path:
    """Write the organization as a deployment manifest.

    Args:
        org: Validated organization.
        path: Output file (parent directories are created).

    Returns:
        The written path.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_organization(org), encoding="utf-8")
    logger.info("Deployment manifest written to %s", target)
    return target
