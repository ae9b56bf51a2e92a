"""help command — describe the /lgtm commands."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lgtm_core.help import plugin_help

console = Console()


@click.command("help")
@click.option("--repo", default=None, help="GitHub repository (owner/name) to describe permissions for.")
@click.pass_context
def help_cmd(ctx, repo: str | None):
    """Show the /lgtm commands and who may use them."""
    config = ctx.obj.get("config") if ctx.obj else None
    info = plugin_help(config, repo)

    console.print(f"\n{escape(info.description)}\n")

    table = Table(title="Commands", show_header=True, header_style="bold cyan")
    table.add_column("Usage", style="bold")
    table.add_column("Description", max_width=40)
    table.add_column("Who can use", max_width=40)
    table.add_column("Examples")

    for command in info.commands:
        table.add_row(
            escape(command.usage),
            escape(command.description),
            escape(command.who_can_use),
            escape("\n".join(command.examples)),
        )

    console.print(table)
