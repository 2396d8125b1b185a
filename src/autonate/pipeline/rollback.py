"""
Rollback hook invoked when any pipeline stage fails.

The hook always records which deployment failed and how far it got.
Remote cleanup is delegated to an optional teardown callback; none is
wired by default, so nothing on the platform is deleted implicitly.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Set

from .base import Stage

logger = logging.getLogger(__name__)

Teardown = Callable[[str, Stage, Optional[str]], None]


class Rollback:
    """Idempotent failure handler.

    Args:
        teardown: Optional cleanup callback receiving
            (deployment_id, stage, server_deployment_id).
    """

    def __init__(self, teardown: Optional[Teardown] = None) -> None:
        self._teardown = teardown
        self._handled: Set[str] = set()

    def handled(self, deployment_id: str) -> bool:
        """Whether rollback already ran for this deployment."""
        return deployment_id in self._handled

    def __call__(
        self,
        deployment_id: str,
        stage: Stage,
        error: Optional[BaseException] = None,
        server_deployment_id: Optional[str] = None,
    ) -> None:
        """Roll back one failed deployment.

        Repeat calls for the same deployment id are no-ops. Errors from
        the teardown callback are logged and swallowed so the original
        failure is the one that propagates.
        """
        if deployment_id in self._handled:
            logger.debug("Rollback already handled for %s", deployment_id)
            return
        self._handled.add(deployment_id)

        logger.error(
            "Rolling back deployment %s (failed at stage: %s): %s",
            deployment_id, stage.value, error,
        )

        if self._teardown is None:
            return

        try:
            self._teardown(deployment_id, stage, server_deployment_id)
        except Exception as exc:
            logger.error("Teardown for %s failed: %s", deployment_id, exc)
