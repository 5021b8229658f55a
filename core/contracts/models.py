from pathlib import Path
from typing import List

from pydantic import BaseModel, computed_field


class ChangeContext(BaseModel):
    """Git facts gathered for a single tool call. Never cached."""

    repository_root: Path
    current_branch: str = ""  # empty on a detached HEAD
    requested_target: str
    resolved_target: str
    commits: str = ""
    commit_messages: str = ""
    diff_stat: str = ""
    diff: str = ""

    @property
    def commit_list(self) -> List[str]:
        return [line for line in self.commits.splitlines() if line.strip()]

    @computed_field
    @property
    def commit_count(self) -> int:
        return len(self.commit_list)


class ToolResult(BaseModel):
    text: str
    is_error: bool = False
