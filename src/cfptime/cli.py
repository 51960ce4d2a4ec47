from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from enum import Enum
from typing import Awaitable, Callable, List, Optional, TypeVar

import structlog
import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .client import CFPTime
from .config import DEFAULT_BASE_URL, ClientConfig
from .errors import CFPTimeError
from .models import Conference

T = TypeVar("T")

app = typer.Typer(add_completion=False, help="cfptime - browse calls for papers from api.cfptime.org")
console = Console()
err_console = Console(stderr=True)


def make_client(config: ClientConfig) -> CFPTime:
    return CFPTime(config)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=err_console.file),
    )


def _run(ctx: typer.Context, call: Callable[[CFPTime], Awaitable[T]]) -> T:
    """Open a client for the duration of one call and map API errors to exit code 1."""

    async def runner() -> T:
        async with make_client(ctx.obj) as cfptime:
            return await call(cfptime)

    try:
        return asyncio.run(runner())
    except CFPTimeError as exc:
        err_console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1)


class SortOrder(str, Enum):
    server = "server"
    deadline = "deadline"
    start = "start"


def sort_conferences(items: List[Conference], order: SortOrder) -> List[Conference]:
    """Sort by a date column; "server" keeps the API order. Unparseable dates go last."""
    if order == SortOrder.server:
        return list(items)
    getter = Conference.deadline_date if order == SortOrder.deadline else Conference.start_date

    def key(c: Conference) -> date:
        try:
            return getter(c)
        except ValueError:
            return date.max

    return sorted(items, key=key)


def filter_by_country(items: List[Conference], country: Optional[str]) -> List[Conference]:
    if not country:
        return list(items)
    ctry = country.lower()
    return [c for c in items if ctry in c.country.lower()]


# ------------------------------- Rendering -------------------------------
def _location(c: Conference) -> str:
    return ", ".join(part for part in (c.city, c.province, c.country) if part)


def render_list(confs: List[Conference], title: str) -> None:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("CFP deadline", style="red", no_wrap=True)
    table.add_column("Starts", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Location", style="magenta")
    table.add_column("Website", style="blue", overflow="fold")

    for c in confs:
        table.add_row(str(c.id), c.cfp_deadline, c.conf_start_date, c.name, _location(c), c.website)

    console.print(table)


def render_detail(c: Conference) -> None:
    days = f"{c.number_of_days} day" + ("s" if c.number_of_days != 1 else "")
    lines = [
        f"[cyan]Starts:[/] {c.conf_start_date} ({days})",
        f"[red]CFP deadline:[/] {c.cfp_deadline}",
        f"[magenta]Location:[/] {_location(c)}",
        f"[blue]Website:[/] {c.website}",
    ]
    if c.twitter:
        lines.append(f"[blue]Twitter:[/] {c.twitter}")
    if c.cfp_details:
        lines.append(f"\n[bold]CFP details[/]\n{c.cfp_details}")
    if c.speaker_benefits:
        lines.append(f"\n[bold]Speaker benefits[/]\n{c.speaker_benefits}")
    if c.code_of_conduct:
        lines.append(f"\n[bold]Code of conduct[/]\n{c.code_of_conduct}")
    console.print(Panel("\n".join(lines), title=f"[bold]#{c.id} {c.name}", border_style="bright_blue"))


def _print_json(data: object) -> None:
    # Plain print keeps the output machine-readable (no rich markup or wrapping)
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _show_list(
    confs: List[Conference], title: str, country: Optional[str], order: SortOrder, as_json: bool
) -> None:
    confs = sort_conferences(filter_by_country(confs, country), order)
    if as_json:
        _print_json([c.to_dict() for c in confs])
        return
    if not confs:
        console.print("[yellow]No conferences matched your filters.[/]")
        raise typer.Exit(code=0)
    render_list(confs, title)


def _show_one(conf: Conference, as_json: bool) -> None:
    if as_json:
        _print_json(conf.to_dict())
    else:
        render_detail(conf)


# --------------------------------- CLI ----------------------------------
CountryOption = typer.Option(None, "--country", "-c", help="Filter by country")
JsonOption = typer.Option(False, "--json", help="Print raw JSON records instead of a table")
SortOption = typer.Option(SortOrder.server, "--sort", "-s", help="Order: server, deadline or start")


@app.callback()
def main_callback(
    ctx: typer.Context,
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="API root URL"),
    timeout: float = typer.Option(30.0, "--timeout", help="Per-request timeout in seconds"),
    retries: int = typer.Option(3, "--retries", help="Retries for transient failures"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and retries"),
) -> None:
    _configure_logging(verbose)
    config = ClientConfig(base_url=base_url, timeout=timeout, max_retries=retries)
    try:
        config.validate()
    except ValueError as exc:
        err_console.print(f"[red]Invalid option:[/] {exc}")
        raise typer.Exit(code=2)
    ctx.obj = config


@app.command("cfps")
def cmd_cfps(
    ctx: typer.Context,
    country: Optional[str] = CountryOption,
    order: SortOrder = SortOption,
    as_json: bool = JsonOption,
) -> None:
    """List open calls for papers."""
    confs = _run(ctx, lambda api: api.get_cfps())
    _show_list(confs, "Open Calls for Papers", country, order, as_json)


@app.command("cfp")
def cmd_cfp(
    ctx: typer.Context,
    cfp_id: int = typer.Argument(..., help="CFP id"),
    as_json: bool = JsonOption,
) -> None:
    """Show one call for papers."""
    _show_one(_run(ctx, lambda api: api.get_cfp(cfp_id)), as_json)


@app.command("conferences")
def cmd_conferences(
    ctx: typer.Context,
    country: Optional[str] = CountryOption,
    order: SortOrder = SortOption,
    as_json: bool = JsonOption,
) -> None:
    """List all conferences."""
    confs = _run(ctx, lambda api: api.get_conferences())
    _show_list(confs, "Conferences", country, order, as_json)


@app.command("conference")
def cmd_conference(
    ctx: typer.Context,
    conference_id: int = typer.Argument(..., help="Conference id"),
    as_json: bool = JsonOption,
) -> None:
    """Show one conference."""
    _show_one(_run(ctx, lambda api: api.get_conference(conference_id)), as_json)


@app.command("upcoming")
def cmd_upcoming(
    ctx: typer.Context,
    country: Optional[str] = CountryOption,
    order: SortOrder = SortOption,
    as_json: bool = JsonOption,
) -> None:
    """List upcoming conferences."""
    confs = _run(ctx, lambda api: api.get_upcoming())
    _show_list(confs, "Upcoming Conferences", country, order, as_json)


def main() -> None:  # entry point
    app()


if __name__ == "__main__":
    main()
