"""
Liberation smoke tests.

Functional requests against live agents after deployment. Each test is
one POST; the first non-2xx response stops the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import SmokeTestError
from ..platform import Compute3Client, succeeded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmokeTest:
    """One functional check.

    Attributes:
        name: Display name.
        agent: Target agent id.
        action: Action path segment (``/agents/<agent>/<action>``).
        payload: JSON body.
    """

    name: str
    agent: str
    action: str
    payload: Dict[str, Any] = field(default_factory=dict)


DEFAULT_SMOKE_TESTS: Tuple[SmokeTest, ...] = (
    SmokeTest(
        name="wellness monitoring",
        agent="wellness-guardian",
        action="check",
        payload={"coordinators": ["Mike", "Sarah", "John"]},
    ),
)


class SmokeTestRunner:
    """Run smoke tests sequentially.

    Args:
        client: Platform client.
        tests: Tests to run, in order.
    """

    def __init__(
        self,
        client: Compute3Client,
        tests: Sequence[SmokeTest] = DEFAULT_SMOKE_TESTS,
    ) -> None:
        self._client = client
        self._tests = tuple(tests)

    def run(self) -> List[str]:
        """Run every test.

        Returns:
            Names of the tests that passed.

        Raises:
            SmokeTestError: On the first failing test.
        """
        logger.info("Running liberation tests...")
        passed: List[str] = []
        for test in self._tests:
            logger.info("  Testing %s...", test.name)
            resp = self._client.agent_action(test.agent, test.action, test.payload)
            if not succeeded(resp):
                raise SmokeTestError(test.name, status_code=resp.status_code, body=resp.text)
            passed.append(test.name)
        logger.info("All %d liberation tests passed", len(passed))
        return passed
