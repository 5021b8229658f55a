from typing import Any, Mapping, Optional

from pydantic import ValidationError

import core.tools  # noqa: F401  registers the tools
from config.logic import load_global_config
from config.models import GlobalConfig
from core.contracts.models import ToolResult
from core.contracts.tool import Tool
from core.registry import tool_registry
from utils.errors import PRMCPException
from utils.logger import logger


def _error(message: str) -> ToolResult:
    return ToolResult(text=f"Error: {message}", is_error=True)


def _describe_validation_error(name: str, error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
        for err in error.errors()
    )
    return f"Invalid arguments for {name}: {problems}"


def dispatch(
    name: str,
    arguments: Optional[Mapping[str, Any]] = None,
    global_config: Optional[GlobalConfig] = None,
) -> ToolResult:
    """
    Runs a registered tool and converts every failure into an error result.

    Args:
        name: The tool name.
        arguments: The tool arguments as received from the client.
        global_config: User configuration; read from disk when omitted.

    Returns:
        The tool output, or "Error: <message>" with is_error set.
    """
    logger.info(f"Tool call: {name}")
    if name not in tool_registry:
        return _error(f"Unknown tool: {name}")

    try:
        config = global_config or load_global_config()
        tool: Tool = tool_registry.create(name)
        return ToolResult(text=tool.run(arguments or {}, config))
    except ValidationError as e:
        logger.warning(f"Rejected arguments for {name}: {e}")
        return _error(_describe_validation_error(name, e))
    except PRMCPException as e:
        logger.error(f"{name} failed: {e}")
        return _error(str(e))
    except Exception as e:
        logger.opt(exception=e).error(f"Unexpected error in {name}: {e}")
        return _error(f"Unexpected failure in {name}: {e}")
