"""
PR title derivation from branch names.
"""
import re
from typing import Optional

from config.models import RepoConfig
from utils.errors import ConfigError

DEFAULT_TICKET_PATTERN = r"[^\W\d_]+-[0-9]+"
BRANCH_TYPE_PREFIX = re.compile(
    r"^(feature|fix|hotfix|bugfix|chore|refactor|docs|test|ci)s?/", re.IGNORECASE
)
FALLBACK_TITLE = "Pull Request"


def _match_ticket(branch_name: Optional[str], pattern: Optional[str]) -> Optional[str]:
    """Returns the ticket text exactly as it appears in the branch name."""
    if not branch_name:
        return None
    try:
        regex = re.compile(pattern or DEFAULT_TICKET_PATTERN, re.IGNORECASE)
    except re.error as e:
        raise ConfigError(f"Invalid ticketPattern '{pattern}': {e}") from e
    match = regex.search(branch_name)
    return match.group(0) if match else None


def extract_ticket(branch_name: Optional[str], pattern: Optional[str] = None) -> Optional[str]:
    """
    Extracts a tracker key such as TK-1234 from a branch name.

    Args:
        branch_name: The branch to inspect.
        pattern: Regular expression overriding the default ticket pattern.

    Returns:
        The upper-cased first match, or None.

    Raises:
        ConfigError: If pattern is not a valid regular expression.
    """
    matched = _match_ticket(branch_name, pattern)
    return matched.upper() if matched else None


def _describe(branch_name: str, matched_ticket: Optional[str]) -> str:
    desc = BRANCH_TYPE_PREFIX.sub("", branch_name, count=1)
    if matched_ticket:
        # Remove the text as matched; upper() may change its length (ß -> SS).
        desc = re.sub(re.escape(matched_ticket) + "-?", "", desc, count=1, flags=re.IGNORECASE)
    desc = re.sub(r"[-_]", " ", desc)
    return re.sub(r"\s+", " ", desc).strip()


def generate_title(branch_name: Optional[str], repo_config: Optional[RepoConfig] = None) -> str:
    """
    Builds a PR title: optional prefix, optional [TICKET], then the branch
    name with its type prefix and separators cleaned up.

    >>> generate_title("feature/TK-42-add-login")
    '[TK-42] add login'
    """
    repo_config = repo_config or RepoConfig()
    branch_name = branch_name or ""
    matched_ticket = _match_ticket(branch_name, repo_config.ticket_pattern)

    parts = []
    prefix = (repo_config.title_prefix or "").strip()
    if prefix:
        parts.append(prefix)
    if matched_ticket:
        parts.append(f"[{matched_ticket.upper()}]")
    parts.append(_describe(branch_name, matched_ticket) or FALLBACK_TITLE)
    return " ".join(parts)


def format_commit_checklist(commits: Optional[str]) -> str:
    """Turns a one-line commit log into a markdown checklist."""
    if not commits:
        return ""
    return "\n".join(f"- [ ] {line}" for line in commits.splitlines() if line.strip())
