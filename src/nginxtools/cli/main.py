"""CLI entry points for NGINX Tools.

Implements click-based CLI
"""

import asyncio
import json
import sys
from pathlib import Path

import click
import pyfiglet
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from nginxtools import __version__
from nginxtools.core.config import ServerConfig, load_config
from nginxtools.core.exceptions import (
    ConfigurationError,
    NginxToolsException,
    format_error_for_user,
)
from nginxtools.core.factory import create_context, create_tool_registry
from nginxtools.core.logger import NginxToolsLogger
from nginxtools.core.tool_protocol import ToolCall
from nginxtools.tools.report import provenance

# Load .env file from current directory or parent directories
load_dotenv()

console = Console()
# stdout belongs to the MCP transport while serving
err_console = Console(stderr=True)


def print_logo() -> None:
    """Print NGINX Tools banner."""
    logo_text = pyfiglet.figlet_format("NGINX TOOLS", font="small")
    console.print(logo_text, style="bold green")


def _load(project_dir: str | None) -> tuple[ServerConfig, NginxToolsLogger]:
    """Load config and logger, exiting with a readable message on bad config."""
    try:
        config = load_config(project_root=None if project_dir is None else _path(project_dir))
    except ConfigurationError as e:
        err_console.print(f"[red]{format_error_for_user(e)}[/red]")
        sys.exit(2)
    return config, NginxToolsLogger()


def _path(value: str) -> Path:
    return Path(value).expanduser().resolve()


def _parse_args(pairs: tuple[str, ...]) -> dict[str, object]:
    """Parse key=value pairs; values are JSON-decoded when possible."""
    arguments: dict[str, object] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="--arg")
        key, raw = pair.split("=", 1)
        try:
            arguments[key] = json.loads(raw)
        except json.JSONDecodeError:
            arguments[key] = raw
    return arguments


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="nginxtools")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """NGINX Tools.

    Inspect and control an NGINX reverse proxy under Docker Compose, as an
    MCP server or from the command line.
    """
    if ctx.invoked_subcommand is None:
        print_logo()
        console.print("[bold]Available Commands:[/bold]\n")
        console.print("  [green]nginxtools serve[/green]  - Run the MCP server over stdio")
        console.print("  [green]nginxtools tools[/green]  - List available tools")
        console.print("  [green]nginxtools call[/green]   - Run one tool and print its report")
        console.print("  [green]nginxtools exec[/green]   - Run a command through the cascade\n")
        console.print("[dim]Run 'nginxtools --help' for more information[/dim]\n")


@cli.command()
@click.option("--project-dir", "-d", default=None, help="Docker Compose project directory")
def serve(project_dir: str | None) -> None:
    """Run the MCP server over stdio."""
    from nginxtools.server import run_stdio

    config, logger = _load(project_dir)
    err_console.print(f"[green]✅ NGINX Tools MCP server started ({config.base_url})[/green]")
    try:
        run_stdio(config, logger)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.error("MCP server error", error=str(e))
        err_console.print(f"[red]❌ NGINX Tools MCP server error: {e}[/red]")
        sys.exit(1)


@cli.command(name="tools")
@click.option("--project-dir", "-d", default=None, help="Docker Compose project directory")
def list_tools(project_dir: str | None) -> None:
    """List available tools."""
    config, logger = _load(project_dir)
    registry = create_tool_registry(create_context(config, logger))

    table = Table(title="NGINX Tools")
    table.add_column("Tool", style="green")
    table.add_column("Description")
    table.add_column("Read-only", justify="center")
    for definition in registry.get_definitions():
        table.add_row(
            definition.name,
            definition.description,
            "✓" if definition.safety["read_only"] else "",
        )
    console.print(table)


@cli.command()
@click.argument("name")
@click.option("--arg", "-a", "args", multiple=True, help="Tool argument as key=value")
@click.option("--project-dir", "-d", default=None, help="Docker Compose project directory")
def call(name: str, args: tuple[str, ...], project_dir: str | None) -> None:
    """Run tool NAME once and print its report."""
    arguments = _parse_args(args)
    config, logger = _load(project_dir)
    registry = create_tool_registry(create_context(config, logger))

    try:
        result = asyncio.run(registry.execute(ToolCall(name=name, arguments=arguments)))
    except NginxToolsException as e:
        err_console.print(f"[red]{format_error_for_user(e)}[/red]")
        sys.exit(1)

    console.print(result.text, markup=False, highlight=False)
    if not result.success:
        sys.exit(1)


@cli.command(name="exec", context_settings={"ignore_unknown_options": True})
@click.argument("argv", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option("--project-dir", "-d", default=None, help="Working directory for the command")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
def exec_command(argv: tuple[str, ...], project_dir: str | None, as_json: bool) -> None:
    """Run ARGV through the execution cascade and show provenance."""
    config, logger = _load(project_dir)
    executor = create_context(config, logger).executor
    result = asyncio.run(executor.execute(list(argv)))

    if as_json:
        console.print_json(data=result.to_dict())
    else:
        if result.stdout:
            console.print(result.stdout.rstrip(), markup=False, highlight=False)
        if result.stderr:
            err_console.print(result.stderr.rstrip(), markup=False, highlight=False)
        status = "[green]succeeded[/green]" if result.succeeded else "[red]failed[/red]"
        err_console.print(f"{status} (exit code {result.exit_code}, {result.duration_ms}ms)")
        err_console.print(provenance(result), markup=False, highlight=False)

    sys.exit(result.exit_code)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
