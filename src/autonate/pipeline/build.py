"""
Container build stage.

One build context per agent under ``<build_root>/docker/<agent>/``.
The first failing build aborts the stage; there is no partial success.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from ..config import DeploymentConfig
from ..docker import DockerCLI, failure_reason, render_dockerfile
from ..errors import BuildError

logger = logging.getLogger(__name__)


def local_tag(config: DeploymentConfig, agent_id: str, deployment_id: str) -> str:
    """Local image reference: ``<namespace>/<agent>:<deployment id>``."""
    return f"{config.image_namespace}/{agent_id}:{deployment_id}"


class ContainerBuilder:
    """Write per-agent Dockerfiles and build the images.

    Args:
        config: Deployment configuration.
        docker: Docker CLI wrapper.
    """

    def __init__(self, config: DeploymentConfig, docker: DockerCLI) -> None:
        self._config = config
        self._docker = docker

    def context_dir(self, agent_id: str) -> Path:
        """Build context directory for one agent."""
        return Path(self._config.build_root) / "docker" / agent_id

    def write_dockerfile(self, agent_id: str) -> Path:
        """Render and write the agent's Dockerfile.

        Returns:
            Path to the written Dockerfile.
        """
        ctx = self.context_dir(agent_id)
        ctx.mkdir(parents=True, exist_ok=True)
        path = ctx / "Dockerfile"
        path.write_text(render_dockerfile(agent_id), encoding="utf-8")
        return path

    def build(self, agents: Sequence[str], deployment_id: str) -> List[str]:
        """Build every agent image in order.

        Args:
            agents: Agent identifiers.
            deployment_id: Tag applied to every image.

        Returns:
            The local image tags that were built.

        Raises:
            BuildError: On the first failing build.
        """
        logger.info("Building agent containers...")
        built: List[str] = []
        for agent_id in agents:
            logger.info("  Building %s...", agent_id)
            try:
                self.write_dockerfile(agent_id)
            except OSError as exc:
                raise BuildError(agent_id, f"cannot write Dockerfile: {exc}") from exc

            tag = local_tag(self._config, agent_id, deployment_id)
            proc = self._docker.build(tag, str(self.context_dir(agent_id)))
            if proc.returncode != 0:
                raise BuildError(agent_id, failure_reason(proc))
            built.append(tag)

        logger.info("All %d agent containers built", len(built))
        return built
