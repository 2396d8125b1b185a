"""
Deployment pipeline: validate, build, publish, deploy, wait, verify, test.

Strictly sequential. Every stage either completes or raises; the first
failure stops the run, triggers the rollback hook once, and is re-raised
for the caller to turn into a non-zero exit status.

Flow:
  1. Validate credentials + ping the platform
  2. Build one image per agent
  3. Push images to the workspace registry
  4. Submit the organization manifest
  5. Poll until every agent is ready
  6. Health-check each agent
  7. Run liberation smoke tests
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from ..agents import AGENT_IDS
from ..config import DeploymentConfig, Environment, new_deployment_id
from ..docker import DockerCLI
from ..platform import Compute3Client
from .base import Stage
from .build import ContainerBuilder
from .deploy import OrganizationDeployer
from .publish import RegistryPublisher
from .rollback import Rollback
from .smoke import DEFAULT_SMOKE_TESTS, SmokeTest, SmokeTestRunner
from .validate import EnvironmentValidator
from .verify import DeploymentVerifier

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DeploymentResult(BaseModel):
    """Outcome of one pipeline run."""

    deployment_id: str
    environment: Environment
    agents: List[str]
    server_deployment_id: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    smoke_tests_passed: List[str] = Field(default_factory=list)
    stages_completed: List[Stage] = Field(default_factory=list)
    started_at: str = Field(default_factory=_now)
    finished_at: Optional[str] = None
    status: str = "running"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return self.model_dump(mode="json")


class AutonateDeployer:
    """Drive one deployment attempt end to end.

    Args:
        config: Frozen deployment configuration.
        environ: Environment snapshot for credential validation.
        agents: Ordered agent roster shared by every stage.
        smoke_tests: Functional checks for the final stage.
        client: Platform client (built from config if omitted).
        docker: Docker CLI wrapper.
        rollback: Failure hook.
        deployer: Organization deployer (override to inject a fake clock).
        deployment_id: Fixed id, mostly for tests.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        environ: Mapping[str, str],
        agents: Sequence[str] = AGENT_IDS,
        smoke_tests: Sequence[SmokeTest] = DEFAULT_SMOKE_TESTS,
        client: Optional[Compute3Client] = None,
        docker: Optional[DockerCLI] = None,
        rollback: Optional[Rollback] = None,
        deployer: Optional[OrganizationDeployer] = None,
        deployment_id: Optional[str] = None,
    ) -> None:
        self._config = config
        self._agents = tuple(agents)
        self._client = client or Compute3Client(config)
        self._docker = docker or DockerCLI()
        self._rollback = rollback or Rollback()
        self.deployment_id = deployment_id or new_deployment_id()

        self.validator = EnvironmentValidator(config, environ, self._client)
        self.builder = ContainerBuilder(config, self._docker)
        self.publisher = RegistryPublisher(config, self._docker)
        self.deployer = deployer or OrganizationDeployer(config, self._client)
        self.verifier = DeploymentVerifier(self._client)
        self.smoke = SmokeTestRunner(self._client, smoke_tests)

        self.stage: Stage = Stage.VALIDATE

    @property
    def agents(self) -> tuple:
        """The agent roster for this run."""
        return self._agents

    def _complete(self, result: DeploymentResult) -> None:
        result.stages_completed.append(self.stage)
        logger.debug("Stage complete: %s", self.stage.value)

    def deploy(self) -> DeploymentResult:
        """Run every stage in order.

        Returns:
            DeploymentResult describing the successful run.

        Raises:
            AutonateError: The first stage failure, after rollback.
        """
        logger.info(
            "Starting Autonate Liberation Organization deployment %s (%s)",
            self.deployment_id, self._config.environment.value,
        )
        result = DeploymentResult(
            deployment_id=self.deployment_id,
            environment=self._config.environment,
            agents=list(self._agents),
        )

        try:
            self.stage = Stage.VALIDATE
            self.validator.validate()
            self._complete(result)

            self.stage = Stage.BUILD
            self.builder.build(self._agents, self.deployment_id)
            self._complete(result)

            self.stage = Stage.PUBLISH
            result.images = self.publisher.publish(self._agents, self.deployment_id)
            self._complete(result)

            self.stage = Stage.DEPLOY
            server_id = self.deployer.submit(self.deployer.read_manifest())
            result.server_deployment_id = server_id
            self._complete(result)

            self.stage = Stage.WAIT
            self.deployer.wait_until_ready(server_id)
            self._complete(result)

            self.stage = Stage.VERIFY
            self.verifier.verify(self._agents)
            self._complete(result)

            self.stage = Stage.SMOKE_TEST
            result.smoke_tests_passed = self.smoke.run()
            self._complete(result)

        except Exception as exc:
            result.status = "failed"
            result.finished_at = _now()
            logger.error("Deployment failed at %s: %s", self.stage.value, exc)
            self._rollback(
                self.deployment_id,
                self.stage,
                exc,
                server_deployment_id=result.server_deployment_id,
            )
            raise

        result.status = "deployed"
        result.finished_at = _now()
        logger.info("Autonate Liberation Organization deployed successfully!")
        logger.info("Coordinators are now free to take breaks!")
        return result
