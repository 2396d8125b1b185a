"""Post-deploy health checks: one request per agent, fail-fast."""

from __future__ import annotations

import logging
from typing import Sequence

from ..errors import AgentUnhealthyError
from ..platform import Compute3Client, succeeded

logger = logging.getLogger(__name__)


class DeploymentVerifier:
    """Check each agent's health endpoint in order.

    Args:
        client: Platform client.
    """

    def __init__(self, client: Compute3Client) -> None:
        self._client = client

    def verify(self, agents: Sequence[str]) -> None:
        """Raise AgentUnhealthyError for the first unhealthy agent.

        Agents after the failing one are not checked.
        """
        logger.info("Verifying deployment...")
        for agent_id in agents:
            resp = self._client.agent_health(agent_id)
            if not succeeded(resp):
                raise AgentUnhealthyError(agent_id, status_code=resp.status_code)
            logger.info("  %s is healthy", agent_id)
        logger.info("All agents verified")
