"""Tests for the environment validation stage."""

from __future__ import annotations

import itertools
from unittest.mock import MagicMock

import pytest

from autonate.errors import ConfigurationError, ConnectivityError
from autonate.pipeline.validate import (
    REQUIRED_ENV_VARS,
    EnvironmentValidator,
    missing_variables,
)
from autonate.platform import Compute3Client

from conftest import make_response


def _validator(config, environ, health_status=200):
    client = MagicMock(spec=Compute3Client)
    client.health.return_value = make_response(health_status)
    return EnvironmentValidator(config, environ, client), client


class TestMissingVariables:
    """missing_variables reports exactly the absent names."""

    def test_required_names_are_a_tuple_of_str(self):
        assert isinstance(REQUIRED_ENV_VARS, tuple)
        assert all(isinstance(n, str) for n in REQUIRED_ENV_VARS)

    def test_nothing_missing(self, full_environ):
        assert missing_variables(full_environ) == []

    def test_empty_value_counts_as_missing(self, full_environ):
        full_environ["DATABASE_URL"] = ""
        assert missing_variables(full_environ) == ["DATABASE_URL"]

    @pytest.mark.parametrize(
        "subset",
        [
            list(combo)
            for size in (1, 2, 3, len(REQUIRED_ENV_VARS))
            for combo in itertools.islice(
                itertools.combinations(REQUIRED_ENV_VARS, size), 3,
            )
        ],
    )
    def test_reported_list_equals_removed_subset(self, full_environ, subset):
        for name in subset:
            del full_environ[name]
        assert missing_variables(full_environ) == subset


class TestEnvironmentValidator:
    """validate() checks credentials first, then requests /health once."""

    def test_success(self, config, full_environ):
        validator, client = _validator(config, full_environ)
        validator.validate()
        client.health.assert_called_once()

    def test_missing_credentials_collects_all(self, config, full_environ):
        del full_environ["OPENAI_API_KEY"]
        del full_environ["WEATHER_API_KEY"]
        validator, client = _validator(config, full_environ)

        with pytest.raises(ConfigurationError) as excinfo:
            validator.validate()

        assert excinfo.value.missing == ["OPENAI_API_KEY", "WEATHER_API_KEY"]
        assert "OPENAI_API_KEY, WEATHER_API_KEY" in str(excinfo.value)
        client.health.assert_not_called()

    def test_unhealthy_platform(self, config, full_environ):
        validator, client = _validator(config, full_environ, health_status=503)
        with pytest.raises(ConnectivityError, match="Failed to connect"):
            validator.validate()
        client.health.assert_called_once()

    def test_transport_failure_propagates(self, config, full_environ):
        validator, client = _validator(config, full_environ)
        client.health.side_effect = ConnectivityError("refused")
        with pytest.raises(ConnectivityError):
            validator.validate()

    def test_not_modified_is_not_healthy(self, config, full_environ):
        validator, client = _validator(config, full_environ, health_status=304)
        with pytest.raises(ConnectivityError, match="HTTP 304"):
            validator.validate()
