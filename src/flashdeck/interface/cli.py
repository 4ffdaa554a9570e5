"""flashdeck CLI: review loop, collection commands, server and config."""

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from flashdeck.application.aggregate import format_average
from flashdeck.application.config import AppConfig, resolve_config
from flashdeck.application.factory import open_session
from flashdeck.application.session import ReviewSession
from flashdeck.domain.errors import FlashdeckError
from flashdeck.infrastructure.view import TerminalViewPort

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashdeck: weighted flashcard review.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage flashdeck configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_LEVELS = {0: logging.WARNING, 1: logging.INFO}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context, **overrides: Any) -> AppConfig:
    """Resolve config with the command's overrides plus the global ones."""
    merged = dict(ctx.obj or {})
    merged.update(overrides)
    return resolve_config(merged)


def _run(config: AppConfig, body: Callable[[ReviewSession], Awaitable[T]], view=None) -> T:
    """Open a session, run body against it, and turn domain errors into exit code 1."""

    async def run() -> T:
        session = await open_session(config, view=view)
        try:
            return await body(session)
        finally:
            await session.aclose()

    try:
        return asyncio.run(run())
    except FlashdeckError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    backend: Annotated[
        str | None, typer.Option(help="Storage backend: file, memory, http.")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory for the file backend.")
    ] = None,
    password: Annotated[
        str | None, typer.Option("--password", "-p", help="Key file password (http backend).")
    ] = None,
):
    """Global settings for flashdeck."""
    logging.getLogger().setLevel(_LEVELS.get(verbose, logging.DEBUG))
    ctx.obj = {
        "verbose": verbose,
        "backend": backend,
        "data_dir": data_dir,
        "password": password,
    }


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

_PROMPT = "[f]lip [c]orrect [i]ncorrect [e]dit [r]emove [q]uit"


async def _prompt_and_add(session: ReviewSession, front="", back="", tags_text="") -> None:
    front = typer.prompt("Front", default=front or None)
    back = typer.prompt("Back", default=back or None)
    tags_text = typer.prompt("Tags (comma separated)", default=tags_text, show_default=False)
    await session.add_card(front, back, tags_text)


async def _review_loop(session: ReviewSession) -> None:
    await session.start()
    while True:
        typer.echo(f"Average: {session.average_text()}")
        if session.current_index is None:
            return
        choice = typer.prompt(_PROMPT, default="f").strip().lower()[:1]
        if choice == "f":
            await session.flip()
        elif choice == "c":
            await session.mark_correct()
        elif choice == "i":
            await session.mark_incorrect()
        elif choice == "e":
            form = await session.edit_current()
            await _prompt_and_add(session, form.front, form.back, form.tags_text)
        elif choice == "r":
            removed = await session.remove_current()
            typer.secho(f"Removed '{removed.front}'.", fg="yellow")
        elif choice == "q":
            return


@app.command()
def review(
    ctx: typer.Context,
    tag: Annotated[str | None, typer.Option(help="Only review cards with this tag.")] = None,
    transition: Annotated[
        str | None, typer.Option(help="Transition style: fade or instant.")
    ] = None,
):
    """[bold green]Review[/bold green] cards interactively, weakest first."""
    config = _config(ctx, tag=tag, transition=transition)
    _run(config, _review_loop, view=TerminalViewPort())


# ---------------------------------------------------------------------------
# Collection commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    front: Annotated[str, typer.Argument(help="Front text.")],
    back: Annotated[str, typer.Argument(help="Back text.")],
    tags: Annotated[str, typer.Option(help="Comma separated tags.")] = "",
    replace: Annotated[
        bool, typer.Option("--replace", help="Replace cards with the same front.")
    ] = False,
):
    """Add a card."""

    async def body(session: ReviewSession) -> int:
        await session.start()
        return await session.add_card(front, back, tags, replace=replace)

    index = _run(_config(ctx), body)
    typer.secho(f"Added card #{index}.", fg="green")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    tag: Annotated[str | None, typer.Option(help="Only list cards with this tag.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List cards with their scores."""

    async def body(session: ReviewSession):
        await session.start()
        return session.listing(), session.average()

    rows, average = _run(_config(ctx, tag=tag), body)
    if json_output:
        typer.echo(
            json.dumps(
                [{"index": r.index, "front": r.front, "back": r.back, "score": r.score} for r in rows],
                indent=2,
                ensure_ascii=False,
            )
        )
        return
    for r in rows:
        typer.echo(f"[{r.index}] {r.front} ⇄ {r.back}  ({r.score})")
    if not rows:
        typer.secho("No cards.", fg="yellow")
        return
    typer.echo(f"Average: {format_average(average)}")


@app.command()
def tags(ctx: typer.Context):
    """List every tag in use."""

    async def body(session: ReviewSession) -> list[str]:
        await session.start()
        return session.tags()

    for t in _run(_config(ctx), body):
        typer.echo(t)


@app.command()
def stats(
    ctx: typer.Context,
    tag: Annotated[str | None, typer.Option(help="Restrict to this tag.")] = None,
):
    """Show the average score (each score capped at 5)."""

    async def body(session: ReviewSession) -> tuple[int, str]:
        await session.start()
        return len(session.listing()), session.average_text()

    count, average = _run(_config(ctx, tag=tag), body)
    typer.echo(f"Cards: {count}  Average: {average}")


@app.command()
def remove(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Index shown by 'flashdeck list'.")],
):
    """Remove the card at INDEX."""

    async def body(session: ReviewSession):
        await session.start()
        await session.show_card(index)
        return await session.remove_current()

    try:
        card = _run(_config(ctx), body)
    except IndexError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
    typer.secho(f"Removed '{card.front}'.", fg="yellow")


@app.command()
def edit(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Index shown by 'flashdeck list'.")],
):
    """Edit the card at INDEX. The card is removed until the edit is submitted."""

    async def body(session: ReviewSession):
        await session.start()
        await session.show_card(index)
        form = await session.edit_current()
        await _prompt_and_add(session, form.front, form.back, form.tags_text)

    try:
        _run(_config(ctx), body)
    except IndexError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
    typer.secho("Saved.", fg="green")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8777,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the review server."""
    import uvicorn

    uvicorn.run("flashdeck.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = config.model_dump(mode="json")
    if d.get("password"):
        d["password"] = "***"
    typer.echo(json.dumps(d, indent=2))
