"""Terminal front end for browsing the Pokédex.

Usage:
    pokedex list --search char
    pokedex list --favorites-only
    pokedex show 25
    pokedex favorite 25
"""

from __future__ import annotations

import asyncio
from typing import Any

import click
import httpx
from rich.console import Console
from rich.table import Table

from pokedex.controller import ViewState
from pokedex.main import configure_logging, lifespan
from pokedex.session import PokedexSession
from pokedex.settings import AppSettings

console = Console()


def render_banner(state: ViewState) -> None:
    if state.banner is None:
        return
    console.print(f"[bold red]{state.banner.message}[/bold red]")
    if state.banner.detail:
        console.print(f"[dim]{state.banner.detail}[/dim]")


def render_notifications(state: ViewState) -> None:
    for notification in state.notifications:
        report = notification.report
        console.print(f"[yellow]⚠ {report.message}[/yellow]")
        if report.detail:
            console.print(f"[dim]  {report.detail}[/dim]")


def render_list(state: ViewState) -> None:
    table = Table(title="PokéDex")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("★", justify="center")

    for entry in state.entries:
        star = "[yellow]★[/yellow]" if entry.id in state.favorite_ids else ""
        table.add_row(str(entry.id), entry.name.capitalize(), star)

    console.print(table)
    console.print(f"[dim]{state.summary}[/dim]")


def render_detail(state: ViewState) -> None:
    if state.selected is None:
        console.print("[yellow]No Pokémon selected[/yellow]")
        return

    detail = state.detail
    marker = " [yellow]★[/yellow]" if state.is_selected_favorite else ""
    console.print(
        f"[bold cyan]#{state.selected.id} {state.selected.name.capitalize()}[/bold cyan]{marker}"
    )
    if detail is None:
        return
    if detail.types:
        console.print(f"  Types: {', '.join(detail.types)}")
    if detail.abilities:
        console.print(f"  Abilities: {', '.join(detail.abilities)}")
    if detail.height is not None:
        console.print(f"  Height: {detail.height}")
    if detail.weight is not None:
        console.print(f"  Weight: {detail.weight}")
    if detail.base_experience is not None:
        console.print(f"  Base experience: {detail.base_experience}")


def _settings_from(ctx: click.Context) -> AppSettings:
    return ctx.obj["settings"]


def _transport_from(ctx: click.Context) -> httpx.AsyncBaseTransport | None:
    return ctx.obj.get("transport")


async def _with_session(ctx: click.Context, action: Any) -> int:
    """Open a session, bail out on load failure, then run ``action``."""

    async with lifespan(_settings_from(ctx), transport=_transport_from(ctx)) as session:
        state = session.controller.view()
        if state.banner is not None:
            render_banner(state)
            return 1
        return await action(session)


@click.group()
@click.option("--base-url", default=None, help="Override POKEDEX_API_BASE_URL")
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def main(ctx: click.Context, base_url: str | None, log_level: str | None) -> None:
    """Browse the Pokédex catalog and manage favorites."""

    ctx.ensure_object(dict)
    overrides: dict[str, Any] = {}
    if base_url:
        overrides["api_base_url"] = base_url
    if log_level:
        overrides["log_level"] = log_level
    settings = AppSettings(**overrides)
    ctx.obj["settings"] = settings
    configure_logging(settings)


@main.command("list")
@click.option("--search", "search_term", default="", help="Case-insensitive name filter")
@click.option("--favorites-only", is_flag=True, help="Only show favorited Pokémon")
@click.pass_context
def list_command(ctx: click.Context, search_term: str, favorites_only: bool) -> None:
    """List the catalog, optionally filtered."""

    async def action(session: PokedexSession) -> int:
        session.controller.set_favorites_only(favorites_only)
        render_list(session.controller.set_search_term(search_term))
        return 0

    ctx.exit(asyncio.run(_with_session(ctx, action)))


@main.command("show")
@click.argument("pokemon_id", type=click.IntRange(min=1))
@click.pass_context
def show_command(ctx: click.Context, pokemon_id: int) -> None:
    """Show details for one Pokémon."""

    async def action(session: PokedexSession) -> int:
        state = await session.controller.select(pokemon_id)
        render_detail(state)
        render_notifications(state)
        return 1 if state.selected is None or state.notifications else 0

    ctx.exit(asyncio.run(_with_session(ctx, action)))


@main.command("favorite")
@click.argument("pokemon_id", type=click.IntRange(min=1))
@click.pass_context
def favorite_command(ctx: click.Context, pokemon_id: int) -> None:
    """Toggle a Pokémon in or out of favorites."""

    async def action(session: PokedexSession) -> int:
        state = await session.controller.toggle_favorite(pokemon_id)
        if state.notifications:
            render_notifications(state)
            return 1
        if pokemon_id in state.favorite_ids:
            console.print(f"[green]✓ Added #{pokemon_id} to favorites[/green]")
        else:
            console.print(f"[green]✓ Removed #{pokemon_id} from favorites[/green]")
        return 0

    ctx.exit(asyncio.run(_with_session(ctx, action)))


if __name__ == "__main__":
    main()
