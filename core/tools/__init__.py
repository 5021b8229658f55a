# Importing the tool modules registers them in tool_registry.
from core.tools import analysis, pull_requests, repo_config  # noqa: F401
