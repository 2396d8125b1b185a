"""Tests for the end-to-end deployment pipeline.

Docker and HTTP are mocked. Each failure scenario checks that later
stages never run and that rollback fires exactly once.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from autonate.agents import AGENT_IDS
from autonate.docker import DockerCLI
from autonate.errors import (
    AgentUnhealthyError,
    AutonateError,
    BuildError,
    ConfigurationError,
    ConnectivityError,
    DeploymentError,
    PublishError,
    ReadinessTimeoutError,
    SmokeTestError,
)
from autonate.pipeline import AutonateDeployer, OrganizationDeployer, Stage
from autonate.platform import Compute3Client

from conftest import completed, make_response

DEPLOY_ID = "autonate-1700000000000"


class Harness:
    """Wire a deployer with mocked collaborators."""

    def __init__(self, config, environ, fake_clock):
        self.client = MagicMock(spec=Compute3Client)
        self.client.health.return_value = make_response(200)
        self.client.create_organization.return_value = make_response(201, {"id": "org-42"})
        self.client.organization_status.return_value = make_response(
            200, {"agents": [{"status": "ready"} for _ in AGENT_IDS]},
        )
        self.client.agent_health.return_value = make_response(200)
        self.client.agent_action.return_value = make_response(200, {"ok": True})

        self.docker = MagicMock(spec=DockerCLI)
        for name in ("build", "login", "tag", "push"):
            getattr(self.docker, name).return_value = completed()

        self.rollback = MagicMock()
        self.pipeline = AutonateDeployer(
            config,
            environ,
            client=self.client,
            docker=self.docker,
            rollback=self.rollback,
            deployer=OrganizationDeployer(
                config, self.client, clock=fake_clock, sleep=fake_clock.sleep,
            ),
            deployment_id=DEPLOY_ID,
        )

    def calls(self) -> dict:
        """Which downstream operations ran at all."""
        return {
            "build": self.docker.build.called,
            "publish": self.docker.login.called,
            "deploy": self.client.create_organization.called,
            "wait": self.client.organization_status.called,
            "verify": self.client.agent_health.called,
            "smoke": self.client.agent_action.called,
        }


@pytest.fixture()
def harness(config, full_environ, fake_clock) -> Harness:
    return Harness(config, full_environ, fake_clock)


class TestHappyPath:
    """All seven stages run in order."""

    def test_successful_deploy(self, harness):
        result = harness.pipeline.deploy()

        assert result.status == "deployed"
        assert result.deployment_id == DEPLOY_ID
        assert result.server_deployment_id == "org-42"
        assert result.stages_completed == list(Stage)
        assert result.agents == list(AGENT_IDS)
        assert len(result.images) == len(AGENT_IDS)
        assert result.smoke_tests_passed == ["wellness monitoring"]
        assert result.finished_at is not None
        harness.rollback.assert_not_called()

    def test_every_stage_shares_the_roster(self, harness):
        harness.pipeline.deploy()
        assert [c.args[0] for c in harness.docker.build.call_args_list] == [
            f"autonate/{a}:{DEPLOY_ID}" for a in AGENT_IDS
        ]
        assert [c.args[0] for c in harness.client.agent_health.call_args_list] == list(AGENT_IDS)

    def test_result_serializes(self, harness):
        data = harness.pipeline.deploy().to_dict()
        assert data["environment"] == "production"
        assert data["stages_completed"][0] == "validate"


class TestFailureAbortsPipeline:
    """Any stage failure stops later stages and rolls back once."""

    def _fail(self, harness, exc_type, stage):
        with pytest.raises(exc_type):
            harness.pipeline.deploy()
        harness.rollback.assert_called_once()
        args, kwargs = harness.rollback.call_args
        assert args[0] == DEPLOY_ID
        assert args[1] == stage
        assert isinstance(args[2], exc_type)
        assert harness.pipeline.stage == stage
        return harness.calls()

    def test_missing_credentials(self, config, full_environ, fake_clock):
        del full_environ["DIALPAD_API_KEY"]
        harness = Harness(config, full_environ, fake_clock)

        calls = self._fail(harness, ConfigurationError, Stage.VALIDATE)

        assert not any(calls.values())
        harness.client.health.assert_not_called()

    def test_platform_unreachable(self, harness):
        harness.client.health.return_value = make_response(503)
        calls = self._fail(harness, ConnectivityError, Stage.VALIDATE)
        assert not any(calls.values())

    def test_build_failure(self, harness):
        harness.docker.build.return_value = completed(1)
        calls = self._fail(harness, BuildError, Stage.BUILD)
        assert harness.docker.build.call_count == 1
        assert not any(v for k, v in calls.items() if k != "build")

    def test_publish_failure(self, harness):
        harness.docker.push.return_value = completed(1)
        calls = self._fail(harness, PublishError, Stage.PUBLISH)
        assert calls["build"] and calls["publish"]
        assert not (calls["deploy"] or calls["wait"] or calls["verify"] or calls["smoke"])

    def test_deploy_rejected_with_quota_exceeded(self, harness):
        harness.client.create_organization.return_value = make_response(
            402, text="quota exceeded",
        )

        with pytest.raises(DeploymentError) as excinfo:
            harness.pipeline.deploy()

        assert "quota exceeded" in str(excinfo.value)
        harness.client.organization_status.assert_not_called()
        harness.client.agent_health.assert_not_called()
        harness.rollback.assert_called_once()
        assert harness.rollback.call_args.args[1] == Stage.DEPLOY

    def test_readiness_timeout(self, harness):
        harness.client.organization_status.return_value = make_response(
            200, {"agents": [{"status": "pending"}]},
        )
        calls = self._fail(harness, ReadinessTimeoutError, Stage.WAIT)
        assert not (calls["verify"] or calls["smoke"])
        assert harness.rollback.call_args.kwargs["server_deployment_id"] == "org-42"

    def test_unhealthy_agent(self, harness):
        harness.client.agent_health.return_value = make_response(500)
        calls = self._fail(harness, AgentUnhealthyError, Stage.VERIFY)
        assert not calls["smoke"]
        assert harness.client.agent_health.call_count == 1

    def test_smoke_test_failure(self, harness):
        harness.client.agent_action.return_value = make_response(500)
        self._fail(harness, SmokeTestError, Stage.SMOKE_TEST)

    def test_unexpected_error_also_rolls_back(self, harness):
        harness.docker.build.side_effect = RuntimeError("disk on fire")
        with pytest.raises(RuntimeError, match="disk on fire"):
            harness.pipeline.deploy()
        harness.rollback.assert_called_once()

    def test_all_stage_errors_share_base(self):
        for exc_type in (
            ConfigurationError, ConnectivityError, BuildError, PublishError,
            DeploymentError, ReadinessTimeoutError, AgentUnhealthyError, SmokeTestError,
        ):
            assert issubclass(exc_type, AutonateError)
