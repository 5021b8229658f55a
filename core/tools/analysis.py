from typing import Any, Mapping

from pydantic import Field

from config.models import GlobalConfig
from core.formatter.jinja_formatter import render
from core.registry import tool_registry
from core.title import format_commit_checklist, generate_title
from core.tools.base import BaseTool, BranchArguments, open_workspace
from utils.errors import PRMCPException


@tool_registry.register("analyze_changes")
class AnalyzeChangesTool(BaseTool):
    description = (
        "Analyze git changes between current branch and target branch. Returns commits, "
        "changed files, and diff. Use this first to understand what changed before "
        "generating PR description."
    )
    arguments_model = BranchArguments

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        args = self.parse(arguments)
        ws = open_workspace(args.working_directory, args.target_branch, global_config)

        if not ws.change.commit_count:
            return render("no_commits.j2", ctx=ws.change)

        return render(
            "analyze_changes.j2",
            ctx=ws.change,
            title=generate_title(ws.change.current_branch, ws.repo_config),
            repo_config=ws.repo_config,
            config_file=ws.config_file.name if ws.config_file else "",
        )


class DescriptionArguments(BranchArguments):
    include_diff: bool = Field(True, description="Include full diff in context (default: true)")


@tool_registry.register("generate_pr_description")
class GeneratePRDescriptionTool(BaseTool):
    description = (
        "Generate a PR description based on git changes. The AI (you) should analyze the "
        "changes and create a well-structured description with Summary, Changes, and "
        "Testing sections."
    )
    arguments_model = DescriptionArguments

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        args = self.parse(arguments)
        ws = open_workspace(args.working_directory, args.target_branch, global_config)
        ctx = ws.change

        if not ctx.commit_count:
            raise PRMCPException(
                f"No commits found between '{ctx.current_branch}' and '{ctx.requested_target}'"
            )

        return render(
            "pr_description.j2",
            ctx=ctx,
            title=generate_title(ctx.current_branch, ws.repo_config),
            include_diff=args.include_diff,
            repo_config=ws.repo_config,
            checklist=format_commit_checklist(ctx.commits),
        )
