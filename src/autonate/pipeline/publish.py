"""
Registry publish stage.

Logs in to ``<workspace>.<platform domain>`` once with the platform
token, then re-tags and pushes each agent image in builder order.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..config import DeploymentConfig
from ..docker import DockerCLI, failure_reason
from ..errors import PublishError
from .build import local_tag

logger = logging.getLogger(__name__)

_TOKEN_USER = "_token"


def remote_tag(config: DeploymentConfig, agent_id: str, deployment_id: str) -> str:
    """Registry image reference: ``<registry>/<agent>:<deployment id>``."""
    return f"{config.registry}/{agent_id}:{deployment_id}"


class RegistryPublisher:
    """Push built images to the workspace registry.

    Args:
        config: Deployment configuration.
        docker: Docker CLI wrapper.
    """

    def __init__(self, config: DeploymentConfig, docker: DockerCLI) -> None:
        self._config = config
        self._docker = docker

    def login(self) -> None:
        """Authenticate against the registry with the platform token."""
        proc = self._docker.login(self._config.registry, _TOKEN_USER, self._config.api_key)
        if proc.returncode != 0:
            raise PublishError(None, failure_reason(proc))

    def publish(self, agents: Sequence[str], deployment_id: str) -> List[str]:
        """Tag and push every agent image.

        Returns:
            The remote references that were pushed.

        Raises:
            PublishError: On login failure or the first failing tag/push.
        """
        logger.info("Pushing containers to %s...", self._config.registry)
        self.login()

        pushed: List[str] = []
        for agent_id in agents:
            source = local_tag(self._config, agent_id, deployment_id)
            target = remote_tag(self._config, agent_id, deployment_id)

            proc = self._docker.tag(source, target)
            if proc.returncode != 0:
                raise PublishError(agent_id, failure_reason(proc))

            proc = self._docker.push(target)
            if proc.returncode != 0:
                raise PublishError(agent_id, failure_reason(proc))

            logger.info("  Pushed %s", target)
            pushed.append(target)

        logger.info("All containers pushed to registry")
        return pushed
