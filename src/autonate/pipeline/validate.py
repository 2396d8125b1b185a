"""
Environment validation: credentials present, platform reachable.

Credentials are checked for presence only, never format. All missing
names are collected before failing so one run reports the full list.
The reachability check is a single attempt with no retry.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence, Tuple

from ..config import DeploymentConfig
from ..errors import ConfigurationError, ConnectivityError
from ..platform import Compute3Client, succeeded

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS: Tuple[str, ...] = (
    "COMPUTE3_API_KEY",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "DIALPAD_API_KEY",
    "DATABASE_URL",
    "WEATHER_API_KEY",
)


def missing_variables(
    environ: Mapping[str, str],
    required: Sequence[str] = REQUIRED_ENV_VARS,
) -> List[str]:
    """Return every required name that is unset or empty, in order."""
    return [name for name in required if not environ.get(name)]


class EnvironmentValidator:
    """Check credentials and ping the platform.

    Args:
        config: Deployment configuration.
        environ: Environment snapshot taken at startup.
        client: Platform client used for the health request.
        required: Names of the variables that must be present.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        environ: Mapping[str, str],
        client: Compute3Client,
        required: Sequence[str] = REQUIRED_ENV_VARS,
    ) -> None:
        self._config = config
        self._environ = environ
        self._client = client
        self._required = tuple(required)

    def check_credentials(self) -> None:
        """Raise ConfigurationError naming all missing variables."""
        missing = missing_variables(self._environ, self._required)
        if missing:
            raise ConfigurationError(missing)

    def check_connectivity(self) -> None:
        """Raise ConnectivityError unless GET /health succeeds."""
        resp = self._client.health()
        if not succeeded(resp):
            raise ConnectivityError(
                f"Failed to connect to Compute3 at {self._config.endpoint} "
                f"(HTTP {resp.status_code})",
                details={"endpoint": self._config.endpoint, "status_code": resp.status_code},
            )

    def validate(self) -> None:
        """Run both checks, credentials first."""
        logger.info("Validating environment...")
        self.check_credentials()
        self.check_connectivity()
        logger.info("Environment validated")
