import asyncio
from typing import Any, Dict, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

import core.tools  # noqa: F401  registers the tools
from core.dispatcher import dispatch
from core.registry import tool_registry
from utils.logger import logger

SERVER_NAME = "pr-mcp"
VERSION = "1.0.0"


def tool_definitions() -> List[types.Tool]:
    definitions = []
    for name in tool_registry:
        tool_cls = tool_registry.get(name)
        definitions.append(
            types.Tool(
                name=name,
                description=tool_cls.description,
                inputSchema=tool_cls.input_schema(),
            )
        )
    return definitions


def create_server() -> Server:
    server = Server(SERVER_NAME, version=VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return tool_definitions()

    # Argument errors are reported by dispatch, in the same "Error: ..." form as every other failure.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        # git and gh are blocking; keep the event loop free for the transport.
        result = await asyncio.to_thread(dispatch, name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.text)],
            isError=result.is_error,
        )

    return server


async def serve() -> None:
    """Runs the server over stdio until the client disconnects."""
    server = create_server()
    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"PR MCP Server v{VERSION} running...")
        await server.run(read_stream, write_stream, server.create_initialization_options())
