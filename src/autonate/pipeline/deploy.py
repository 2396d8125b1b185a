"""
Organization deploy stage and readiness wait.

The manifest is submitted as opaque YAML bytes; this driver never
parses it. After the platform accepts it, a single-threaded loop polls
the organization status until every agent reports ``ready`` or the
timeout elapses. Re-polling here waits for convergence; it is not an
error retry.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from ..config import DeploymentConfig
from ..errors import ConnectivityError, DeploymentError, ReadinessTimeoutError
from ..platform import Compute3Client, succeeded

logger = logging.getLogger(__name__)

READY = "ready"


def count_ready(status: Any) -> Tuple[int, int]:
    """Count ready agents in a status payload.

    Args:
        status: Decoded ``/organizations/<id>/status`` body.

    Returns:
        (ready, total). Malformed payloads count as (0, 0).
    """
    if not isinstance(status, dict):
        return 0, 0
    agents = status.get("agents")
    if not isinstance(agents, list):
        return 0, 0
    ready = sum(
        1 for a in agents if isinstance(a, dict) and a.get("status") == READY
    )
    return ready, len(agents)


class OrganizationDeployer:
    """Submit the organization manifest and wait for readiness.

    Args:
        config: Deployment configuration.
        client: Platform client.
        clock: Monotonic clock in seconds (injectable for tests).
        sleep: Sleep function (injectable for tests).
    """

    def __init__(
        self,
        config: DeploymentConfig,
        client: Compute3Client,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._client = client
        self._clock = clock
        self._sleep = sleep

    def read_manifest(self, path: Optional[Path] = None) -> bytes:
        """Read the manifest file as raw bytes."""
        manifest_path = Path(path or self._config.manifest_path)
        try:
            return manifest_path.read_bytes()
        except OSError as exc:
            raise DeploymentError(f"cannot read manifest {manifest_path}: {exc}") from exc

    def submit(self, manifest: bytes) -> str:
        """POST the manifest and return the server-assigned deployment id.

        Raises:
            DeploymentError: If the platform rejects the manifest or the
                response carries no id.
        """
        logger.info("Deploying organization to Compute3...")
        resp = self._client.create_organization(manifest)
        if not succeeded(resp):
            raise DeploymentError(resp.text, status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DeploymentError(
                f"unreadable response: {resp.text}", status_code=resp.status_code,
            ) from exc

        server_id = payload.get("id") if isinstance(payload, dict) else None
        if not server_id:
            raise DeploymentError(
                f"response missing deployment id: {resp.text}",
                status_code=resp.status_code,
            )

        logger.info("Organization deployed: %s", server_id)
        return str(server_id)

    def poll_status(self, server_id: str) -> Tuple[int, int]:
        """Fetch one status snapshot.

        A transport failure, non-2xx or undecodable response counts as
        nothing ready yet.
        """
        try:
            resp = self._client.organization_status(server_id)
        except ConnectivityError as exc:
            logger.warning("Status poll failed: %s", exc)
            return 0, 0
        if not succeeded(resp):
            logger.warning("Status poll returned HTTP %d", resp.status_code)
            return 0, 0
        try:
            return count_ready(resp.json())
        except ValueError:
            logger.warning("Status poll returned a non-JSON body")
            return 0, 0

    def wait_until_ready(self, server_id: str) -> None:
        """Block until every agent reports ready.

        An empty agent list never counts as ready.

        Raises:
            ReadinessTimeoutError: If ``ready_timeout`` seconds pass first.
        """
        logger.info("Waiting for agents to be ready...")
        timeout = self._config.ready_timeout
        start = self._clock()
        ready = total = 0

        while self._clock() - start < timeout:
            ready, total = self.poll_status(server_id)
            if self._clock() - start >= timeout:
                break
            if total and ready == total:
                logger.info("All agents are ready!")
                return

            logger.info("  Agents ready: %d/%d", ready, total)
            self._sleep(self._config.poll_interval)

        raise ReadinessTimeoutError(timeout, ready, total)

    def deploy(self) -> str:
        """Read, submit and wait. Returns the server deployment id."""
        server_id = self.submit(self.read_manifest())
        self.wait_until_ready(server_id)
        return server_id
