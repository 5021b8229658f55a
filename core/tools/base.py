from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from config.logic import load_repo_config_file, resolve_target_branch_name
from config.models import GlobalConfig, RepoConfig
from core.contracts.models import ChangeContext
from core.git_context import build_change_context, locate_repository


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="ignore")

    working_directory: Optional[str] = Field(
        None, description="Working directory path (default: current directory)"
    )


class BranchArguments(ToolArguments):
    target_branch: Optional[str] = Field(
        None, description="Target branch to compare against (default: repo config, user config, then develop)"
    )


@dataclass
class Workspace:
    """Everything a tool knows about the repository for one invocation."""

    change: ChangeContext
    repo_config: Optional[RepoConfig]
    config_file: Optional[Path]


class BaseTool:
    name: str
    description: str = ""
    arguments_model: Type[ToolArguments] = ToolArguments
    required_arguments: Tuple[str, ...] = ()

    @classmethod
    def input_schema(cls) -> Dict[str, Any]:
        schema = cls.arguments_model.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        if cls.required_arguments:
            schema["required"] = list(cls.required_arguments)
        return schema

    def parse(self, arguments: Optional[Mapping[str, Any]]) -> Any:
        return self.arguments_model.model_validate(dict(arguments or {}))

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        raise NotImplementedError


def open_workspace(
    working_directory: Optional[str],
    target_branch: Optional[str],
    global_config: GlobalConfig,
) -> Workspace:
    """
    Locates the repository, reads its config fresh and gathers the change
    context against the effective target branch.
    """
    root = locate_repository(working_directory or None)
    loaded = load_repo_config_file(root)
    config_file, repo_config = loaded if loaded else (None, None)
    target = resolve_target_branch_name(target_branch, repo_config, global_config)
    change = build_change_context(working_directory, target, repo_root=root)
    return Workspace(change=change, repo_config=repo_config, config_file=config_file)


def split_reviewers(reviewers: Optional[str]) -> list:
    if not reviewers:
        return []
    return [r.strip() for r in reviewers.split(",") if r.strip()]


def join_reviewers(reviewers: Iterable[str], separator: str = ",") -> str:
    return separator.join(reviewers)
