"""
The fixed roster of deployable agents.

Every pipeline stage iterates this one tuple, so build, publish,
verify and the organization document always agree on order.
"""

from __future__ import annotations

from typing import Tuple

AGENT_IDS: Tuple[str, ...] = (
    "autonate-prime",
    "wellness-guardian",
    "route-oracle",
    "customer-empath",
    "carrier-vettor",
    "narrative-artist",
)
