from typing import Any, Dict, Mapping, Protocol, Type

from pydantic import BaseModel

from config.models import GlobalConfig


class Tool(Protocol):
    """A protocol for tools exposed to MCP clients."""

    name: str
    description: str
    arguments_model: Type[BaseModel]

    @classmethod
    def input_schema(cls) -> Dict[str, Any]:
        """JSON schema of the tool arguments."""
        ...

    def run(self, arguments: Mapping[str, Any], global_config: GlobalConfig) -> str:
        """Runs the tool and returns the response text."""
        ...
