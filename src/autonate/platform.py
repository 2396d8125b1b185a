"""
Compute3 platform HTTP client.

Thin wrapper over requests that adds the Bearer credential and a
request timeout to every call. Status codes are left to the caller:
each pipeline stage decides what a non-2xx response means for it.
Transport failures (DNS, refused connections, timeouts) surface as
ConnectivityError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import DeploymentConfig
from .errors import ConnectivityError

logger = logging.getLogger(__name__)


def succeeded(resp: requests.Response) -> bool:
    """True only for 2xx; ``Response.ok`` also accepts 3xx."""
    return 200 <= resp.status_code < 300


class Compute3Client:
    """Authenticated client for the platform API and agent endpoints.

    Args:
        config: The run's deployment configuration.
    """

    def __init__(self, config: DeploymentConfig) -> None:
        self._config = config

    def _request(
        self,
        method: str,
        url: str,
        *,
        data: Optional[bytes] = None,
        json: Optional[Dict[str, Any]] = None,
        content_type: Optional[str] = None,
    ) -> requests.Response:
        """Make an authenticated request.

        Args:
            method: HTTP method.
            url: Absolute URL.
            data: Raw request body.
            json: JSON request body.
            content_type: Explicit Content-Type header.

        Returns:
            The requests.Response, whatever its status.

        Raises:
            ConnectivityError: If the request could not be completed.
        """
        headers = {"Authorization": f"Bearer {self._config.api_key}"}
        if content_type:
            headers["Content-Type"] = content_type

        logger.debug("%s %s", method, url)
        try:
            return requests.request(
                method,
                url,
                headers=headers,
                data=data,
                json=json,
                timeout=self._config.request_timeout,
            )
        except requests.RequestException as exc:
            raise ConnectivityError(
                f"{method} {url} failed: {exc}", details={"url": url},
            ) from exc

    # ------------------------------------------------------------------
    # Platform API
    # ------------------------------------------------------------------

    def health(self) -> requests.Response:
        """GET /health on the platform API."""
        return self._request("GET", f"{self._config.endpoint}/health")

    def create_organization(self, manifest: bytes) -> requests.Response:
        """POST the organization manifest as YAML."""
        return self._request(
            "POST",
            f"{self._config.endpoint}/organizations",
            data=manifest,
            content_type="application/yaml",
        )

    def organization_status(self, deployment_id: str) -> requests.Response:
        """GET the per-agent status of a deployed organization."""
        return self._request(
            "GET", f"{self._config.endpoint}/organizations/{deployment_id}/status",
        )

    # ------------------------------------------------------------------
    # Agent endpoints
    # ------------------------------------------------------------------

    def agent_health(self, agent_id: str) -> requests.Response:
        """GET /agents/<id>/health on the workspace host."""
        return self._request(
            "GET", f"{self._config.agents_base_url}/agents/{agent_id}/health",
        )

    def agent_action(
        self, agent_id: str, action: str, payload: Dict[str, Any],
    ) -> requests.Response:
        """POST a JSON payload to /agents/<id>/<action>."""
        return self._request(
            "POST",
            f"{self._config.agents_base_url}/agents/{agent_id}/{action}",
            json=payload,
        )
