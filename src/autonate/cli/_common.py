"""Shared utilities for all CLI command modules.

Provides the Rich console instance and the config bootstrap used by
every command that talks to Compute3.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

import click
from pydantic import ValidationError
from rich.console import Console

from ..config import DeploymentConfig, load_config

console = Console()

ENVIRONMENTS = click.Choice(["staging", "production"])


def snapshot_environ() -> Dict[str, str]:
    """Copy the process environment once for the whole run."""
    return dict(os.environ)


def build_config(
    environ: Dict[str, str],
    env: Optional[str] = None,
    manifest: Optional[str] = None,
    build_root: Optional[str] = None,
    workspace: Optional[str] = None,
    endpoint: Optional[str] = None,
) -> DeploymentConfig:
    """Build the frozen config from the snapshot plus CLI overrides.

    Raises:
        click.UsageError: If the resulting config does not validate.
    """
    try:
        return load_config(
            environ,
            environment=env,
            manifest_path=Path(manifest) if manifest else None,
            build_root=Path(build_root) if build_root else None,
            workspace=workspace,
            endpoint=endpoint,
        )
    except ValidationError as exc:
        raise click.UsageError(f"Invalid deployment configuration: {exc}") from exc
