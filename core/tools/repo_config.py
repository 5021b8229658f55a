import json
from typing import Any, Mapping

from config.logic import load_repo_config_file
from config.models import GlobalConfig
from core.formatter.jinja_formatter import render
from core.git_context import locate_repository
from core.registry import tool_registry
from core.tools.base import BaseTool, ToolArguments


@tool_registry.register("get_repo_config")
class GetRepoConfigTool(BaseTool):
    description = (
        "Get the PR MCP configuration for the current repository (.pr-mcp.json). "
        "Returns reviewers, target branch, custom prompts, etc."
    )
    arguments_model = ToolArguments

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        args = self.parse(arguments)
        root = locate_repository(args.working_directory or None)

        loaded = load_repo_config_file(root)
        if loaded is None:
            return render("repo_config_missing.j2", repo_root=root)

        path, repo_config = loaded
        raw = repo_config.model_dump(by_alias=True, exclude_unset=True)
        return render(
            "repo_config.j2",
            config_file=path,
            raw_json=json.dumps(raw, indent=2, ensure_ascii=False),
            repo_config=repo_config,
        )
