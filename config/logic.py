import json
from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from config.loader import load_config
from config.models import GlobalConfig, RepoConfig
from utils.errors import ConfigError
from utils.logger import logger

USER_CONFIG_DIR = Path.home() / ".pr-mcp"
USER_CONFIG_PATH = USER_CONFIG_DIR / "mcp-config.json"
REPO_CONFIG_FILENAMES = (".pr-mcp.json", ".pr-mcp.yaml", ".pr-mcp.yml")
FALLBACK_TARGET = "develop"


def load_global_config(path: Optional[Path] = None) -> GlobalConfig:
    """
    Loads the user-level configuration, falling back to defaults.
    """
    path = path or USER_CONFIG_PATH
    if not path.is_file():
        return GlobalConfig()

    try:
        return GlobalConfig(**load_config(path))
    except (ConfigError, ValidationError) as e:
        logger.warning(f"Could not load or parse config at {path}: {e}")
        return GlobalConfig()


def save_global_config(config: GlobalConfig, path: Optional[Path] = None) -> Path:
    """
    Writes the user-level configuration. Only configuration tooling calls this.
    """
    path = path or USER_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(by_alias=True), f, indent=2)
    logger.info(f"Saved configuration to: {path}")
    return path


def find_repo_config(repo_root: Path) -> Optional[Path]:
    """
    Finds the repository configuration file in the repository root.
    """
    for filename in REPO_CONFIG_FILENAMES:
        candidate = repo_root / filename
        if candidate.is_file():
            return candidate
    return None


def load_repo_config_file(repo_root: Path) -> Optional[Tuple[Path, RepoConfig]]:
    """
    Loads the repository configuration together with the file it came from.

    A missing file is not an error. A malformed one is logged and ignored.
    """
    path = find_repo_config(repo_root)
    if path is None:
        return None

    logger.debug(f"Loading repository configuration from: {path}")
    try:
        return path, RepoConfig(**load_config(path))
    except (ConfigError, ValidationError) as e:
        logger.warning(f"Could not load or parse config at {path}: {e}")
        return None


def load_repo_config(repo_root: Path) -> Optional[RepoConfig]:
    loaded = load_repo_config_file(repo_root)
    return loaded[1] if loaded else None


def resolve_target_branch_name(
    requested: Optional[str],
    repo_config: Optional[RepoConfig],
    global_config: Optional[GlobalConfig],
) -> str:
    """
    Picks the target branch: explicit argument, then repository config,
    then user config, then "develop".
    """
    if requested:
        return requested
    if repo_config and repo_config.target_branch:
        return repo_config.target_branch
    if global_config and global_config.default_target:
        return global_config.default_target
    return FALLBACK_TARGET
