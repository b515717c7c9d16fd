"""Agent management service models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Agent(BaseModel):
    """Agent record as returned by the agent management service."""

    id: str = Field(..., description="Agent identifier")
    active: bool = Field(..., description="False once the agent has been unenrolled")
    status: Optional[str] = Field(default=None, description="Raw agent status")
    policy_id: Optional[str] = Field(default=None, description="Assigned policy")

    model_config = ConfigDict(extra="ignore")


class AgentPage(BaseModel):
    """One page of an agent listing."""

    agents: List[Agent] = Field(default_factory=list)
    total: Optional[int] = Field(default=None, ge=0, description="Matching agents across all pages, when reported")
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, alias="perPage")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
