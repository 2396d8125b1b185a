"""
Error hierarchy for the deployment driver.

Every pipeline stage raises exactly one kind of AutonateError. None of
them are retried: the deployer rolls back and re-raises, and the CLI
turns any of them into a non-zero exit status.

    AutonateError
        ├── ConfigurationError     - required credentials missing
        ├── ConnectivityError      - platform unreachable
        ├── BuildError             - docker build failed for an agent
        ├── PublishError           - registry login/tag/push failed
        ├── DeploymentError        - platform rejected the manifest
        ├── ReadinessTimeoutError  - agents never all reported ready
        ├── AgentUnhealthyError    - an agent health check failed
        └── SmokeTestError         - a functional check failed
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class AutonateError(Exception):
    """Base class for every deployment failure.

    Attributes:
        message: Human-readable description.
        details: Extra structured context for JSON output.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(AutonateError):
    """One or more required environment variables are absent."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing: List[str] = list(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}",
            details={"missing": self.missing},
        )


class ConnectivityError(AutonateError):
    """The Compute3 platform could not be reached."""


class BuildError(AutonateError):
    """Building the container image for one agent failed."""

    def __init__(self, agent: str, reason: str = "") -> None:
        self.agent = agent
        msg = f"Build failed for agent {agent}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, details={"agent": agent})


class PublishError(AutonateError):
    """Registry login, tag or push failed.

    ``agent`` is None when the failure happened during registry login.
    """

    def __init__(self, agent: Optional[str], reason: str = "") -> None:
        self.agent = agent
        target = f"agent {agent}" if agent else "registry login"
        msg = f"Publish failed for {target}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, details={"agent": agent})


class DeploymentError(AutonateError):
    """The platform rejected the organization manifest."""

    def __init__(self, body: str, status_code: Optional[int] = None) -> None:
        self.body = body
        self.status_code = status_code
        super().__init__(
            f"Deployment failed: {body}",
            details={"status_code": status_code, "body": body},
        )


class ReadinessTimeoutError(AutonateError):
    """Agents did not all report ready before the timeout."""

    def __init__(self, timeout: float, ready: int = 0, total: int = 0) -> None:
        self.timeout = timeout
        self.ready = ready
        self.total = total
        super().__init__(
            f"Timeout waiting for agents to be ready "
            f"({ready}/{total} ready after {timeout:.0f}s)",
            details={"timeout": timeout, "ready": ready, "total": total},
        )


class AgentUnhealthyError(AutonateError):
    """A deployed agent failed its health check."""

    def __init__(self, agent: str, status_code: Optional[int] = None) -> None:
        self.agent = agent
        self.status_code = status_code
        super().__init__(
            f"Agent {agent} health check failed",
            details={"agent": agent, "status_code": status_code},
        )


class SmokeTestError(AutonateError):
    """A post-deployment functional check failed."""

    def __init__(self, test: str, status_code: Optional[int] = None, body: str = "") -> None:
        self.test = test
        self.status_code = status_code
        super().__init__(
            f"Smoke test '{test}' failed",
            details={"test": test, "status_code": status_code, "body": body},
        )
