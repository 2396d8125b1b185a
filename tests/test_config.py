"""Tests for DeploymentConfig loading and deployment ids."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from autonate.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_WORKSPACE,
    DeploymentConfig,
    Environment,
    load_config,
    new_deployment_id,
)


class TestLoadConfig:
    """load_config builds a frozen config from an environ snapshot."""

    def test_defaults(self):
        cfg = load_config({"COMPUTE3_API_KEY": "k"})
        assert cfg.api_key == "k"
        assert cfg.endpoint == DEFAULT_ENDPOINT
        assert cfg.workspace == DEFAULT_WORKSPACE
        assert cfg.environment == Environment.PRODUCTION
        assert cfg.poll_interval == 5.0
        assert cfg.ready_timeout == 300.0
        assert cfg.manifest_path == Path("compute3-deploy.yaml")

    def test_environment_variables_are_read(self):
        cfg = load_config({
            "COMPUTE3_API_KEY": "k",
            "COMPUTE3_ENDPOINT": "https://api.example.test/",
            "COMPUTE3_WORKSPACE": "ws",
            "AUTONATE_ENV": "staging",
        })
        assert cfg.endpoint == "https://api.example.test"
        assert cfg.workspace == "ws"
        assert cfg.environment == Environment.STAGING

    def test_overrides_win_and_none_is_ignored(self):
        cfg = load_config(
            {"COMPUTE3_API_KEY": "k", "COMPUTE3_WORKSPACE": "from-env"},
            workspace="from-cli",
            endpoint=None,
        )
        assert cfg.workspace == "from-cli"
        assert cfg.endpoint == DEFAULT_ENDPOINT

    def test_missing_key_is_empty_not_an_error(self):
        """Presence is the validator's job, not the config's."""
        cfg = load_config({})
        assert cfg.api_key == ""

    def test_invalid_environment_rejected(self):
        with pytest.raises(ValidationError):
            load_config({"AUTONATE_ENV": "qa"})

    def test_config_is_frozen(self):
        cfg = load_config({"COMPUTE3_API_KEY": "k"})
        with pytest.raises(ValidationError):
            cfg.workspace = "other"

    def test_derived_registry_and_agent_url(self):
        cfg = DeploymentConfig(api_key="k", workspace="autonate-liberation")
        assert cfg.registry == "autonate-liberation.compute3.ai"
        assert cfg.agents_base_url == "https://autonate-liberation.compute3.ai"


class TestDeploymentId:
    """Deployment ids are timestamp derived."""

    def test_format_uses_milliseconds(self):
        assert new_deployment_id(1700000000.123) == "autonate-1700000000123"

    def test_default_uses_current_time(self):
        ident = new_deployment_id()
        assert ident.startswith("autonate-")
        assert ident.split("-", 1)[1].isdigit()
