"""
Deployment configuration.

A DeploymentConfig is built once at startup from an explicit environment
mapping and then handed to every component. Nothing downstream reads
os.environ again, so a run always sees one consistent snapshot.
"""

from __future__ import annotations

import time
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ENDPOINT = "https://launch.comput3.ai"
DEFAULT_WORKSPACE = "autonate-liberation"
DEFAULT_MANIFEST = "compute3-deploy.yaml"


class Environment(str, Enum):
    """Target environment tag."""

    STAGING = "staging"
    PRODUCTION = "production"


class DeploymentConfig(BaseModel):
    """Credentials and topology for one deployment run. Immutable."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(description="Compute3 platform credential")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Platform API base URL")
    workspace: str = Field(default=DEFAULT_WORKSPACE, description="Compute3 workspace")
    environment: Environment = Field(default=Environment.PRODUCTION)
    platform_domain: str = Field(default="compute3.ai")
    image_namespace: str = Field(
        default="autonate",
        description="Local image namespace (<namespace>/<agent>:<tag>)",
    )
    manifest_path: Path = Field(default=Path(DEFAULT_MANIFEST))
    build_root: Path = Field(default=Path("."))
    poll_interval: float = Field(default=5.0, gt=0, description="Seconds between status polls")
    ready_timeout: float = Field(default=300.0, gt=0, description="Readiness wait budget in seconds")
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the endpoint so paths can be appended directly."""
        return v.rstrip("/")

    @property
    def registry(self) -> str:
        """Container registry host for this workspace."""
        return f"{self.workspace}.{self.platform_domain}"

    @property
    def agents_base_url(self) -> str:
        """Base URL of the deployed agent endpoints."""
        return f"https://{self.registry}"


def load_config(environ: Mapping[str, str], **overrides: Any) -> DeploymentConfig:
    """Build a DeploymentConfig from an environment snapshot.

    Overrides with a value of None are ignored so CLI options can be
    forwarded unconditionally.

    Args:
        environ: Environment mapping (normally a copy of os.environ).
        **overrides: Field values that win over the environment.

    Returns:
        A frozen DeploymentConfig.
    """
    values: dict[str, Any] = {
        "api_key": environ.get("COMPUTE3_API_KEY", ""),
        "endpoint": environ.get("COMPUTE3_ENDPOINT") or DEFAULT_ENDPOINT,
        "workspace": environ.get("COMPUTE3_WORKSPACE") or DEFAULT_WORKSPACE,
        "environment": environ.get("AUTONATE_ENV") or Environment.PRODUCTION,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return DeploymentConfig(**values)


def new_deployment_id(now: Optional[float] = None) -> str:
    """Return a run-scoped deployment identifier.

    Args:
        now: Epoch seconds (defaults to the current time).

    Returns:
        ``autonate-<epoch milliseconds>``.
    """
    ts = time.time() if now is None else now
    return f"autonate-{int(ts * 1000)}"
