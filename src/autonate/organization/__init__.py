"""
The Autonate Liberation Organization: agents, teams and workflows.

A multi-agent auto transport coordinator that liberates coordinators
while delighting customers.
"""

from .loader import BUILTIN_ORGANIZATION, export_manifest, load_organization
from .schema import AgentDefinition, Character, Organization, Team, Workflow, WorkflowStep

__all__ = [
    "AgentDefinition",
    "BUILTIN_ORGANIZATION",
    "Character",
    "Organization",
    "Team",
    "Workflow",
    "WorkflowStep",
    "export_manifest",
    "load_organization",
]
