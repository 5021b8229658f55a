import json
from typing import List, Optional

from utils.errors import ExternalCommandError
from utils.git import PathLike, run_checked
from utils.logger import logger


def create_pull_request(
    *,
    base: str,
    head: str,
    title: str,
    body: str,
    cwd: PathLike,
    reviewers: Optional[str] = None,
    draft: bool = False,
) -> str:
    """
    Creates a pull request with the GitHub CLI.

    Returns:
        The URL printed by `gh pr create`.

    Raises:
        ExternalCommandError: If gh fails.
    """
    args: List[str] = [
        "gh", "pr", "create",
        "--base", base,
        "--head", head,
        "--title", title,
        "--body", body,
    ]
    if reviewers:
        args += ["--reviewer", reviewers]
    if draft:
        args.append("--draft")

    logger.info(f"Creating PR {head} -> {base}")
    return run_checked(args, cwd=cwd)


def find_pull_request_number(branch: str, cwd: PathLike) -> Optional[str]:
    """
    Looks up the open pull request whose head is branch.

    Returns:
        The PR number as a string, or None if there is no such PR.
    """
    output = run_checked(
        ["gh", "pr", "list", "--head", branch, "--json", "number", "--limit", "1"],
        cwd=cwd,
    )
    try:
        prs = json.loads(output or "[]")
    except json.JSONDecodeError as e:
        raise ExternalCommandError(["gh", "pr", "list"], f"unexpected output: {e}") from e
    if not prs:
        return None
    return str(prs[0]["number"])


def edit_pull_request(
    number: str,
    *,
    cwd: PathLike,
    title: Optional[str] = None,
    body: Optional[str] = None,
    reviewers: Optional[str] = None,
) -> None:
    """Edits title, body and reviewers of an existing pull request."""
    args: List[str] = ["gh", "pr", "edit", str(number)]
    if title:
        args += ["--title", title]
    if body:
        args += ["--body", body]
    if reviewers:
        args += ["--add-reviewer", reviewers]

    logger.info(f"Updating PR #{number}")
    run_checked(args, cwd=cwd)
