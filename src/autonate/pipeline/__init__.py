"""
Deployment pipeline stages for the Autonate Liberation Organization.

Each stage is a small class with a single entry point; AutonateDeployer
chains them in order and owns failure handling.
"""

from .base import Stage
from .build import ContainerBuilder
from .deploy import OrganizationDeployer
from .publish import RegistryPublisher
from .rollback import Rollback
from .runner import AutonateDeployer, DeploymentResult
from .smoke import DEFAULT_SMOKE_TESTS, SmokeTest, SmokeTestRunner
from .validate import REQUIRED_ENV_VARS, EnvironmentValidator, missing_variables
from .verify import DeploymentVerifier

__all__ = [
    "AutonateDeployer",
    "ContainerBuilder",
    "DEFAULT_SMOKE_TESTS",
    "DeploymentResult",
    "DeploymentVerifier",
    "EnvironmentValidator",
    "OrganizationDeployer",
    "REQUIRED_ENV_VARS",
    "RegistryPublisher",
    "Rollback",
    "SmokeTest",
    "SmokeTestRunner",
    "Stage",
    "missing_variables",
]
