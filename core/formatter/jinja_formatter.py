from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from core.contracts.formatter import Formatter
from utils.errors import FormatterError


class Jinja2Formatter(Formatter):
    def __init__(self, template_dir: Optional[str] = None):
        if template_dir is None:
            # Default template directory relative to this file
            template_dir = str(Path(__file__).parent / "templates")

        self.template_dir = template_dir
        try:
            self.env = Environment(
                loader=FileSystemLoader(self.template_dir),
                trim_blocks=True,
                lstrip_blocks=True,
                undefined=StrictUndefined,
            )
        except Exception as e:
            raise FormatterError(f"Failed to initialize Jinja2 environment: {e}") from e

    def render(self, template_name: str, **values: Any) -> str:
        try:
            template = self.env.get_template(template_name)
            return template.render(**values).strip()
        except Exception as e:
            raise FormatterError(f"Failed to render template {template_name}: {e}") from e


_default_formatter: Optional[Jinja2Formatter] = None


def render(template_name: str, **values: Any) -> str:
    """Renders one of the bundled response templates."""
    global _default_formatter
    if _default_formatter is None:
        _default_formatter = Jinja2Formatter()
    return _default_formatter.render(template_name, **values)
