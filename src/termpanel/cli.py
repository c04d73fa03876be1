"""CLI entry point for termpanel. Uses Click for argument parsing."""

import asyncio
import sys

import click
import httpx
from rich.console import Console

from termpanel import config
from termpanel.client import ControlClient

console = Console()
err_console = Console(stderr=True)


def _show(status: dict) -> None:
    state = status.get("state", "?")
    color = {"idle": "green", "starting": "yellow", "running": "blue"}.get(state, "white")
    console.print(
        f"[bold {color}]{state}[/] job={status.get('job_id')} "
        f"visible={status.get('visible')} output={status.get('has_output')}"
    )


def _call(ctx: click.Context, action: str, *args: str) -> None:
    client: ControlClient = ctx.obj["client"]
    try:
        status = getattr(client, action)(*args)
    except httpx.HTTPStatusError as e:
        err_console.print(f"[red]{action} failed:[/] {e.response.status_code} {e.response.text}")
        sys.exit(1)
    except httpx.HTTPError as e:
        err_console.print(f"[red]cannot reach termpanel at {client.base_url}:[/] {e}")
        sys.exit(1)
    _show(status)


@click.group(invoke_without_command=True)
@click.option("--url", default=None, help="Control server URL")
@click.pass_context
def main(ctx, url):
    """Run shell commands in a reusable tmux panel."""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("client", ControlClient(base_url=url))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command("serve")
@click.option("--host-type", type=click.Choice(["auto", "tmux"]), default="auto", help="Panel host")
@click.option("--socket", "socket_path", default=None, help="tmux socket path")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="JSON file with option overrides")
@click.option("--bind", default=config.SERVER_HOST, help="Address to listen on")
@click.option("--port", default=config.SERVER_PORT, type=int, help="Port to listen on")
def serve_cmd(host_type, socket_path, config_path, bind, port):
    """Start the daemon owning the panel session."""
    from termpanel.web.app import serve

    try:
        asyncio.run(serve(host_type, socket_path, config_path, bind, port))
    except KeyboardInterrupt:
        click.echo("\nServer stopped")
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@main.command("run")
@click.argument("command", nargs=-1, required=True)
@click.pass_context
def run_cmd(ctx, command):
    """Run COMMAND (a full shell command line) in the panel."""
    _call(ctx, "run", " ".join(command))


@main.command("toggle")
@click.pass_context
def toggle_cmd(ctx):
    """Show the panel if hidden, hide it otherwise."""
    _call(ctx, "toggle")


@main.command("open")
@click.pass_context
def open_cmd(ctx):
    """Show the panel with the last output."""
    _call(ctx, "open")


@main.command("close")
@click.pass_context
def close_cmd(ctx):
    """Hide the panel; output is kept."""
    _call(ctx, "close")


@main.command("status")
@click.pass_context
def status_cmd(ctx):
    """Print the session state."""
    _call(ctx, "status")


if __name__ == "__main__":
    main()
