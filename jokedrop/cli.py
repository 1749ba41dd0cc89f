"""Joke Drop CLI — run the API and administer moderation from a terminal."""

import sys

import click
from rich.console import Console
from rich.table import Table

from jokedrop import __version__
from jokedrop.config import Settings
from jokedrop.errors import JokeDropError

console = Console()


def _services():
    from jokedrop.services import build_services

    try:
        return build_services(Settings.from_env())
    except JokeDropError as e:
        _fail(e)


def _fail(error: JokeDropError) -> None:
    console.print(f"[red]Error:[/] {error.message}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """Joke Drop — jokes, followers and a moderation queue.

    Storage and behaviour are configured through JOKEDROP_* environment
    variables (see jokedrop.config).
    """


# ── Serve ────────────────────────────────────────────────────────────


@main.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=10000, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    console.print(f"\n[bold blue]Joke Drop[/] — serving on http://{host}:{port}\n")
    uvicorn.run("web.backend.app.main:app", host=host, port=port, reload=reload)


# ── Accounts ─────────────────────────────────────────────────────────


@main.command(name="grant-role")
@click.argument("email")
@click.argument("role", type=click.Choice(["member", "moderator", "admin"]))
def grant_role(email: str, role: str):
    """Set the role of an existing account."""
    services = _services()
    try:
        account = services.accounts.set_role(email, role)
    except JokeDropError as e:
        _fail(e)
    console.print(f"  [green]v[/] {account.email} is now [cyan]{account.role.value}[/]")


@main.command()
@click.argument("seed_path", type=click.Path(exists=True, dir_okay=False))
def seed(seed_path: str):
    """Load accounts, follows and jokes from a YAML seed file."""
    from jokedrop.seed import apply_seed, load_seed

    services = _services()
    try:
        summary = apply_seed(services, load_seed(seed_path))
    except JokeDropError as e:
        _fail(e)
    console.print(
        f"  [green]v[/] {summary.accounts_created} accounts created "
        f"({summary.accounts_skipped} already existed), "
        f"{summary.follows} follows, {summary.jokes} jokes"
    )


# ── Moderation ───────────────────────────────────────────────────────


@main.command()
def queue():
    """List jokes waiting for a moderation decision."""
    services = _services()
    pending = services.pipeline.pending_queue()

    if not pending:
        console.print("[yellow]Moderation queue is empty.[/]")
        return

    table = Table(title=f"Pending jokes ({len(pending)})")
    table.add_column("ID", style="dim")
    table.add_column("Author", style="cyan")
    table.add_column("Submitted")
    table.add_column("Joke")

    for j in pending:
        table.add_row(j.id, j.author, j.created_at[:19], j.body[:60])

    console.print(table)


@main.command()
@click.argument("joke_id")
@click.argument("decision", type=click.Choice(["approve", "reject"]))
@click.option("--as", "moderator", default="cli", help="Identity recorded as the moderator")
def moderate(joke_id: str, decision: str, moderator: str):
    """Approve or reject a joke."""
    services = _services()
    try:
        joke = services.pipeline.moderate(joke_id, decision, moderator=moderator)
    except JokeDropError as e:
        _fail(e)
    services.audit.log_event(
        actor=moderator,
        action="moderate",
        resource_type="joke",
        resource_id=joke.id,
        details={"decision": decision, "status": joke.status.value, "author": joke.author},
    )
    console.print(f"  [green]v[/] Joke {joke.id} is now [cyan]{joke.status.value}[/]")


@main.command()
@click.option("--size", "-n", default=None, type=int, help="Number of jokes to show")
def trending(size: int | None):
    """Show the trending sample of approved jokes."""
    services = _services()
    try:
        results = services.pipeline.trending(size if size is not None else services.settings.trending_size)
    except JokeDropError as e:
        _fail(e)

    if not results:
        console.print("[yellow]No approved jokes yet.[/]")
        return

    table = Table(title=f"Trending ({services.pipeline.policy.value})")
    table.add_column("By", style="cyan")
    table.add_column("Joke")
    for t in results:
        table.add_row(t.name, t.body[:80])
    console.print(table)


@main.command()
@click.option("--actor", default=None, help="Only events by this identity")
@click.option("--action", default=None, help="Only this action (register, follow, moderate, ...)")
@click.option("--limit", default=50, type=int, help="Maximum number of events")
def audit(actor: str | None, action: str | None, limit: int):
    """Show the audit trail, newest first."""
    services = _services()
    events = services.audit.get_events(actor=actor, action=action, limit=limit)

    if not events:
        console.print("[yellow]No audit events.[/]")
        return

    table = Table(title=f"Audit trail ({len(events)} events)")
    table.add_column("Time", style="dim")
    table.add_column("Actor", style="cyan")
    table.add_column("Action")
    table.add_column("Resource")
    for e in events:
        table.add_row(e.timestamp[:19], e.actor, e.action, f"{e.resource_type}:{e.resource_id}")
    console.print(table)


if __name__ == "__main__":
    main()
