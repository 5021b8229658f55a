from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class GlobalConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    default_target: str = Field("develop", alias="defaultTarget", description="Target branch used when neither the call nor the repo names one")


class RepoConfig(BaseModel):
    """Per-repository settings read from .pr-mcp.json at the repository root."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    reviewers: List[str] = Field(default_factory=list, description="Default reviewers, in order")
    target_branch: Optional[str] = Field(None, alias="targetBranch", description="Overrides the default target branch")
    custom_prompt: Optional[str] = Field(None, alias="customPrompt", description="Extra instructions added to the PR description prompt")
    draft: bool = Field(False, description="Create PRs as drafts by default")
    ticket_pattern: Optional[str] = Field(None, alias="ticketPattern", description="Overrides the ticket extraction regex")
    title_prefix: Optional[str] = Field(None, alias="titlePrefix", description="Prefix for every generated title")
    exclude_files: List[str] = Field(default_factory=list, alias="excludeFiles", description="Shown to the agent only, not applied")
