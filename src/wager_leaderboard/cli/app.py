from typing import Annotated

import typer
from rich.table import Table

from wager_leaderboard.cli._logging import configure_logging
from wager_leaderboard.cli._output import JsonLeaderboardRenderer, RichLeaderboardRenderer, console, print_error
from wager_leaderboard.cli._server import create_leaderboard_app
from wager_leaderboard.cli.factory import build_pipelines
from wager_leaderboard.config import Settings, SettingsError, create_config, load_settings

app = typer.Typer(name="wlb", help="Wager leaderboard: fetch, rank and show sheet-backed leaderboards")

_NameArg = Annotated[str, typer.Argument(help="Name of the configured leaderboard")]


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only log warnings and errors")] = False,
    config_path: Annotated[str, typer.Option("--config", help="YAML configuration file")] = "wlb.yaml",
) -> None:
    """Wager leaderboard: fetch, rank and show sheet-backed leaderboards."""
    configure_logging(verbose=verbose, quiet=quiet)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()
    try:
        ctx.obj = load_settings(create_config(yaml_path=config_path))
    except SettingsError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from exc


def _settings(ctx: typer.Context) -> Settings:
    settings = ctx.obj
    assert isinstance(settings, Settings)
    return settings


@app.command("sources")
def sources_cmd(ctx: typer.Context) -> None:
    """List the configured leaderboards."""
    settings = _settings(ctx)
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Name")
    table.add_column("Title")
    table.add_column("Shape")
    table.add_column("Relays", justify="right")
    for source in settings.sources.values():
        table.add_row(source.name, source.title, source.shape, str(len(source.relays)))
    console.print(table)


@app.command("show")
def show_cmd(
    ctx: typer.Context,
    name: _NameArg,
    json_output: Annotated[bool, typer.Option("--json", help="Print the ranked result as JSON")] = False,
) -> None:
    """Fetch one leaderboard, rank it and print it."""
    settings = _settings(ctx)
    try:
        source = settings.source(name)
    except SettingsError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from exc

    renderer = JsonLeaderboardRenderer(source) if json_output else RichLeaderboardRenderer(source)
    with build_pipelines(settings) as pipelines:
        pipelines[name].run_and_render(renderer)


@app.command("serve")
def serve_cmd(
    ctx: typer.Context,
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Port to listen on")] = 8000,
) -> None:
    """Serve leaderboards as JSON; each request triggers a fresh run."""
    settings = _settings(ctx)
    with build_pipelines(settings) as pipelines:
        flask_app = create_leaderboard_app(settings, pipelines)
        console.print(f"Serving {len(pipelines)} leaderboards on http://{host}:{port}/")
        flask_app.run(host=host, port=port, threaded=True)
