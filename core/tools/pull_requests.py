from typing import Any, Mapping, Optional, Union

from pydantic import Field

from config.models import GlobalConfig
from core.formatter.jinja_formatter import render
from core.git_context import locate_repository
from core.registry import tool_registry
from core.title import generate_title
from core.tools.base import (
    BaseTool,
    BranchArguments,
    ToolArguments,
    join_reviewers,
    open_workspace,
    split_reviewers,
)
from utils import gh, git
from utils.errors import MissingArgumentError, PRMCPException
from utils.logger import logger


class CreatePRArguments(BranchArguments):
    description: Optional[str] = Field(None, description="PR description/body (required)")
    title: Optional[str] = Field(None, description="PR title (auto-generated from branch if not provided)")
    reviewers: Optional[str] = Field(None, description="Comma-separated GitHub usernames for review")
    draft: Optional[bool] = Field(None, description="Create as draft PR (default: repo config, else false)")


@tool_registry.register("create_pr")
class CreatePRTool(BaseTool):
    description = "Create a GitHub Pull Request. Pushes branch and creates PR using GitHub CLI."
    arguments_model = CreatePRArguments
    required_arguments = ("description",)

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        args = self.parse(arguments)
        if not args.description:
            raise MissingArgumentError("PR description is required")

        ws = open_workspace(args.working_directory, args.target_branch, global_config)
        ctx = ws.change
        if not ctx.current_branch:
            raise PRMCPException("Cannot create a PR from a detached HEAD; check out a branch first")

        repo_config = ws.repo_config
        title = args.title or generate_title(ctx.current_branch, repo_config)
        reviewers = join_reviewers(split_reviewers(args.reviewers))
        if not reviewers and repo_config:
            reviewers = join_reviewers(repo_config.reviewers)
        draft = args.draft if args.draft is not None else bool(repo_config and repo_config.draft)

        pushed = git.push_branch(ctx.current_branch, ctx.repository_root)
        url = gh.create_pull_request(
            base=ctx.requested_target,
            head=ctx.current_branch,
            title=title,
            body=args.description,
            cwd=ctx.repository_root,
            reviewers=reviewers or None,
            draft=draft,
        )
        logger.success(f"Created PR: {url}")

        return render(
            "pr_created.j2",
            title=title,
            url=url,
            target=ctx.requested_target,
            reviewers=reviewers,
            draft=draft,
            pushed=pushed,
        )


class PreviewPRArguments(BranchArguments):
    title: Optional[str] = Field(None, description="PR title (auto-generated if not provided)")
    description: Optional[str] = Field(None, description="PR description to preview")
    reviewers: Optional[str] = Field(None, description="Reviewers to add")


@tool_registry.register("preview_pr")
class PreviewPRTool(BaseTool):
    description = "Preview PR details without creating. Shows title, description preview, and settings."
    arguments_model = PreviewPRArguments

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        args = self.parse(arguments)
        ws = open_workspace(args.working_directory, args.target_branch, global_config)
        repo_config = ws.repo_config

        reviewers = split_reviewers(args.reviewers)
        if not reviewers and repo_config:
            reviewers = repo_config.reviewers

        return render(
            "pr_preview.j2",
            ctx=ws.change,
            title=args.title or generate_title(ws.change.current_branch, repo_config),
            reviewers=join_reviewers(reviewers, ", "),
            draft=bool(repo_config and repo_config.draft),
            description=args.description,
        )


class UpdatePRArguments(ToolArguments):
    pr_number: Optional[Union[int, str]] = Field(
        None, description="PR number to update, or omit to update PR for current branch"
    )
    title: Optional[str] = Field(None, description="New PR title")
    description: Optional[str] = Field(None, description="New PR description/body")
    reviewers: Optional[str] = Field(None, description="Comma-separated GitHub usernames to add as reviewers")


@tool_registry.register("update_pr")
class UpdatePRTool(BaseTool):
    description = "Update an existing GitHub Pull Request. Can update title, description, and reviewers."
    arguments_model = UpdatePRArguments

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        args = self.parse(arguments)
        reviewers = join_reviewers(split_reviewers(args.reviewers))
        changes = [
            label
            for label, value in (("title", args.title), ("description", args.description), ("reviewers", reviewers))
            if value
        ]
        if not changes:
            raise MissingArgumentError("No updates specified (provide title, description, or reviewers)")

        root = locate_repository(args.working_directory or None)

        number = str(args.pr_number) if args.pr_number else None
        if not number:
            branch = git.get_current_branch_name(root)
            if not branch:
                raise PRMCPException("Cannot find a PR for a detached HEAD; pass pr_number")
            number = gh.find_pull_request_number(branch, root)
            if not number:
                raise PRMCPException(f"No PR found for branch '{branch}'")

        gh.edit_pull_request(
            number,
            cwd=root,
            title=args.title,
            body=args.description,
            reviewers=reviewers or None,
        )
        return render("pr_updated.j2", number=number, changes=changes)
