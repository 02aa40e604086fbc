"""CLI commands implementation."""

import click
import clicycle

from launcher import __version__
from launcher.interfaces.cli.settings import get_value, list_settings, set_value
from launcher.startup import AppContext, startup_checks

# Configure clicycle
clicycle.configure(app_name="launcher")


def _context(ctx: click.Context) -> AppContext:
    """The startup context, created on first use when main did not pass one."""
    root = ctx.find_root()
    if root.obj is None:
        root.obj = startup_checks()
        root.call_on_close(root.obj.close)
    return root.obj


@click.group()
@click.version_option(version=__version__, prog_name="launcher")
def cli():
    """Launcher - settings, usage history and legacy migration."""
    pass


@cli.command()
@click.pass_context
def migrate(ctx: click.Context):
    """Show the outcome of the legacy settings migration."""
    result = _context(ctx).migration

    clicycle.header("Settings Migration")
    if result.status == "skipped":
        clicycle.info(f"Skipped: {result.reason}")
        return

    clicycle.success("Legacy settings migrated")
    clicycle.info(f"Core settings: {result.core_keys}")
    clicycle.info(
        f"Plugins: {result.plugins_migrated} migrated, {result.plugins_skipped} skipped"
    )
    clicycle.info(f"Query histories: {result.query_histories}")
    clicycle.info(f"Favorite results: {result.favorite_results}")
    clicycle.info(f"Clipboard favorites: {result.clipboard_favorites}")
    for path in result.archived:
        clicycle.info(f"Archived {path.name}")


@cli.command()
@click.option("--limit", "-n", type=int, default=10, help="Number of queries to show")
@click.pass_context
def history(ctx: click.Context, limit: int):
    """Show the most recent queries, newest first."""
    histories = _context(ctx).manager.get_latest_query_history(limit)
    if not histories:
        clicycle.info("No query history")
        return

    clicycle.header("Query History")
    for entry in histories:
        clicycle.info(entry.query)


@cli.group()
def settings():
    """View and modify launcher settings."""
    pass


@settings.command(name="list")
@click.pass_context
def list_settings_command(ctx: click.Context):
    """List all settings."""
    list_settings(_context(ctx).manager)


@settings.command(name="get")
@click.argument("setting_name")
@click.pass_context
def get_value_command(ctx: click.Context, setting_name: str):
    """Get a specific setting value."""
    get_value(_context(ctx).manager, setting_name)


@settings.command(name="set")
@click.argument("setting_name")
@click.argument("setting_value")
@click.pass_context
def set_value_command(ctx: click.Context, setting_name: str, setting_value: str):
    """Set a setting value."""
    set_value(_context(ctx).manager, setting_name, setting_value)
