from pathlib import Path
from typing import Optional, Union

from core.contracts.models import ChangeContext
from utils import git
from utils.errors import NotARepositoryError, TargetBranchNotFoundError
from utils.logger import logger

MAX_DIFF_SIZE = 80000
TRUNCATION_MARKER = "\n\n... [diff truncated]"


def locate_repository(working_directory: Optional[Union[str, Path]] = None) -> Path:
    """
    Finds the repository enclosing working_directory.

    Raises:
        NotARepositoryError: If no .git entry is found up to the filesystem root.
    """
    root = git.find_git_root(working_directory)
    if root is None:
        raise NotARepositoryError()
    return root


def resolve_target(target_branch: str, repo_root: Path) -> str:
    """
    Resolves the ref to compare against. A local branch wins over
    origin/<name>.

    Raises:
        TargetBranchNotFoundError: If neither form exists.
    """
    if git.ref_exists(target_branch, repo_root):
        return target_branch

    remote_ref = f"origin/{target_branch}"
    if git.ref_exists(remote_ref, repo_root):
        logger.debug(f"Local branch '{target_branch}' missing, using {remote_ref}")
        return remote_ref

    raise TargetBranchNotFoundError(target_branch)


def truncate_diff(diff: str, limit: int = MAX_DIFF_SIZE) -> str:
    # limit counts characters of the decoded diff, not encoded bytes.
    if len(diff) <= limit:
        return diff
    return diff[:limit] + TRUNCATION_MARKER


def build_change_context(
    working_directory: Optional[Union[str, Path]],
    target_branch: str,
    repo_root: Optional[Path] = None,
) -> ChangeContext:
    """
    Gathers branch, commits, messages, stat and diff against the target.

    Args:
        working_directory: Any directory inside the repository.
        target_branch: Branch name requested by the caller.
        repo_root: Already located repository root, if the caller has one.

    Returns:
        A fresh ChangeContext.

    Raises:
        NotARepositoryError: If working_directory is outside any repository.
        TargetBranchNotFoundError: If the target cannot be resolved.
    """
    root = repo_root or locate_repository(working_directory)
    resolved = resolve_target(target_branch, root)
    logger.info(f"Collecting changes in {root} against {resolved}")

    context = ChangeContext(
        repository_root=root,
        current_branch=git.get_current_branch_name(root),
        requested_target=target_branch,
        resolved_target=resolved,
        commits=git.get_commit_log(resolved, root),
        commit_messages=git.get_commit_messages(resolved, root),
        diff_stat=git.get_diff_stat(resolved, root),
        diff=truncate_diff(git.get_diff(resolved, root)),
    )
    logger.debug(f"Found {context.commit_count} commits on '{context.current_branch}'")
    return context
