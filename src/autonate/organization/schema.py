"""
Pydantic models for the Autonate Liberation Organization document.

The organization declares its agents (each with a character persona),
the teams they form, and the workflows that chain them together.
Workflows here are data only: triggers, actions and input/output labels
are interpreted by the agent runtime on Compute3, never by this package.

Secrets never live in the document. Settings name the environment
variables that hold them.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

_ID_RE = re.compile(r"^[a-z0-9][a-z0-9\-]*[a-z0-9]$")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class AgentRole(str, Enum):
    """Role of an agent within the organization."""

    ORCHESTRATOR = "orchestrator"
    SPECIALIST = "specialist"


class ModelProvider(str, Enum):
    """LLM vendor backing an agent."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------

class Character(BaseModel):
    """Persona handed to the agent runtime."""

    name: str
    username: str
    bio: List[str] = Field(default_factory=list)
    system: str = Field(description="System prompt")
    message_examples: List[List[Dict[str, Any]]] = Field(default_factory=list)
    style: Dict[str, List[str]] = Field(default_factory=dict)


class AgentDefinition(BaseModel):
    """One deployable agent."""

    id: str = Field(description="Stable identifier, also the image name")
    name: str
    role: AgentRole = AgentRole.SPECIALIST
    character: Character
    plugins: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    model_provider: ModelProvider = ModelProvider.ANTHROPIC
    model: str

    @field_validator("id")
    @classmethod
    def id_must_be_clean(cls, v: str) -> str:
        """Agent ids become image names and URL segments."""
        if not _ID_RE.match(v):
            raise ValueError(
                f"agent id must be lowercase alphanumeric with hyphens: got '{v}'"
            )
        return v


class Team(BaseModel):
    """A named grouping of agents."""

    name: str
    description: str = ""
    agents: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------------

class WorkflowStep(BaseModel):
    """One step: an agent performs an action on labelled inputs."""

    agent: str
    action: str
    input: List[str] = Field(default_factory=list)
    output: Optional[str] = None
    condition: Optional[str] = None

    @field_validator("input", mode="before")
    @classmethod
    def normalize_input(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept a single label or a list of labels."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class Workflow(BaseModel):
    """Ordered steps fired by a named trigger."""

    name: str
    trigger: str
    interval: Optional[str] = Field(
        default=None, description="Schedule for periodic triggers (e.g. '15m')",
    )
    steps: List[WorkflowStep] = Field(default_factory=list)

    @property
    def agents(self) -> List[str]:
        """Agents involved, in first-appearance order."""
        seen: List[str] = []
        for step in self.steps:
            if step.agent not in seen:
                seen.append(step.agent)
        return seen


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Compute3Settings(BaseModel):
    endpoint: str = "https://launch.comput3.ai"
    workspace: str = "autonate-liberation"
    api_key_env: str = "COMPUTE3_API_KEY"


class DialpadSettings(BaseModel):
    api_key_env: str = "DIALPAD_API_KEY"
    phone_number_env: str = "DIALPAD_PHONE_NUMBER"


class DatabaseSettings(BaseModel):
    type: str = "postgres"
    url_env: str = "DATABASE_URL"


class MonitoringSettings(BaseModel):
    liberation_metrics: bool = True
    coordinator_wellness: bool = True
    customer_satisfaction: bool = True


class OrganizationSettings(BaseModel):
    """Integration settings for the deployed organization."""

    compute3: Compute3Settings = Field(default_factory=Compute3Settings)
    dialpad: DialpadSettings = Field(default_factory=DialpadSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)


# ---------------------------------------------------------------------------
# Top-level organization
# ---------------------------------------------------------------------------

class Organization(BaseModel):
    """The complete multi-agent organization."""

    name: str
    slug: str
    description: str
    mission: str = ""
    teams: List[Team] = Field(default_factory=list)
    agents: List[AgentDefinition]
    workflows: List[Workflow] = Field(default_factory=list)
    settings: OrganizationSettings = Field(default_factory=OrganizationSettings)

    @field_validator("slug")
    @classmethod
    def slug_must_be_clean(cls, v: str) -> str:
        """Ensure slug is filesystem/URL safe."""
        if not _ID_RE.match(v):
            raise ValueError(
                f"slug must be lowercase alphanumeric with hyphens: got '{v}'"
            )
        return v

    @model_validator(mode="after")
    def references_must_resolve(self) -> "Organization":
        """Every team member and workflow agent must be declared."""
        ids = [a.id for a in self.agents]
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        if dupes:
            raise ValueError(f"duplicate agent ids: {dupes}")

        known = set(ids)
        for team in self.teams:
            unknown = [a for a in team.agents if a not in known]
            if unknown:
                raise ValueError(f"team '{team.name}' references unknown agents: {unknown}")
        for wf in self.workflows:
            unknown = [s.agent for s in wf.steps if s.agent not in known]
            if unknown:
                raise ValueError(
                    f"workflow '{wf.name}' references unknown agents: {unknown}"
                )
        return self

    @property
    def agent_ids(self) -> List[str]:
        """Agent ids in declaration order."""
        return [a.id for a in self.agents]

    @property
    def orchestrator(self) -> Optional[AgentDefinition]:
        """The coordinating agent, if one is declared."""
        for agent in self.agents:
            if agent.role == AgentRole.ORCHESTRATOR:
                return agent
        return None

    def get_agent(self, agent_id: str) -> Optional[AgentDefinition]:
        """Look up an agent by id."""
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    def teams_for(self, agent_id: str) -> List[str]:
        """Names of the teams an agent belongs to."""
        return [t.name for t in self.teams if agent_id in t.agents]
