import asyncio
import sys
from typing import Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.logic import USER_CONFIG_DIR, USER_CONFIG_PATH, load_global_config, load_repo_config, save_global_config
from core.dispatcher import dispatch
from core.git_context import locate_repository
from core.registry import tool_registry
from core.server import VERSION, serve as serve_stdio
from core.title import generate_title
from utils.errors import PRMCPException
from utils.logger import setup_logger, logger

# stdout belongs to the MCP transport when serving.
console = Console(stderr=True)
out = Console()


def parse_tool_arguments(pairs: Tuple[str, ...]) -> dict:
    """Turns ("key=value", ...) into a dict, converting true/false to booleans."""
    arguments = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--arg")
        if value.lower() in ("true", "false"):
            arguments[key] = value.lower() == "true"
        else:
            arguments[key] = value
    return arguments


@click.group(invoke_without_command=True)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "--log-file/--no-log-file",
    default=True,
    help=f"Also write logs to {USER_CONFIG_DIR / 'pr-mcp.log'}",
)
@click.version_option(VERSION, prog_name="pr-mcp")
@click.pass_context
def cli(ctx, verbose: bool, log_file: bool):
    """
    MCP server exposing git/GitHub pull-request tools to AI agents.

    Runs 'serve' when no subcommand is given.
    """
    setup_logger(
        log_level="DEBUG" if verbose else "INFO",
        log_file=str(USER_CONFIG_DIR / "pr-mcp.log") if log_file else None,
    )
    ctx.obj = {'verbose': verbose}

    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command("serve")
def serve():
    """
    Run the MCP server over stdio.
    """
    try:
        asyncio.run(serve_stdio())
    except KeyboardInterrupt:
        logger.info("Server stopped.")


@cli.command("tools")
def list_tools():
    """
    List the tools the server exposes.
    """
    table = Table(title="pr-mcp tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    for name in tool_registry:
        table.add_row(name, tool_registry.get(name).description)
    out.print(table)


@cli.command("call")
@click.argument("name")
@click.option("-a", "--arg", "pairs", multiple=True, help="Tool argument as key=value, repeatable")
def call(name: str, pairs: Tuple[str, ...]):
    """
    Run a single tool locally and print its result.
    """
    result = dispatch(name, parse_tool_arguments(pairs))
    style = "red" if result.is_error else "cyan"
    out.print(Panel(Text(result.text), title=f"[bold {style}]{name}[/bold {style}]", border_style=style, expand=False))
    if result.is_error:
        sys.exit(1)


@cli.command("title")
@click.argument("branch")
@click.option(
    "-C", "--directory",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Repository whose .pr-mcp.json should be honoured",
)
def title(branch: str, directory: str):
    """
    Print the PR title generated for BRANCH.
    """
    try:
        repo_config = None
        try:
            repo_config = load_repo_config(locate_repository(directory))
        except PRMCPException:
            logger.debug("Not in a repository, using default title settings.")
        out.print(generate_title(branch, repo_config), markup=False, highlight=False)
    except PRMCPException as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


@cli.command("set-target")
@click.argument("branch")
def set_target(branch: str):
    """
    Save BRANCH as the default target branch in the user configuration.
    """
    config = load_global_config()
    config.default_target = branch
    path = save_global_config(config)
    out.print(f"[bold green]✅ Default target set to '{escape(branch)}'[/bold green] ({escape(str(path))})")


@cli.command("show-config")
def show_config():
    """
    Show the user configuration.
    """
    config = load_global_config()
    source = USER_CONFIG_PATH if USER_CONFIG_PATH.is_file() else "defaults"
    out.print(Panel(
        Text(config.model_dump_json(by_alias=True, indent=2)),
        title=f"[bold cyan]{source}[/bold cyan]",
        border_style="cyan",
        expand=False,
    ))


if __name__ == "__main__":
    cli()
