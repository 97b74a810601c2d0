"""CLI command for playing Spider Solitaire in the terminal."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from spiderdeck.playtest.session import STORE_KINDS, PlaytestSession, SessionConfig
from spiderdeck.simulation.schema import Level

logger = logging.getLogger(__name__)

DEFAULT_SAVE_PATHS = {
    "json": "spider_save.json",
    "sqlite": "data/spider.db",
    "none": "",
}


@click.command()
@click.option(
    "-l", "--level",
    type=click.Choice([lv.value for lv in Level]),
    default=Level.BEGINNER.value,
    help="Difficulty: 1, 2 or 4 suits",
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducible deals")
@click.option(
    "--store",
    type=click.Choice(list(STORE_KINDS)),
    default="json",
    help="Where the game is autosaved",
)
@click.option("--save-path", type=click.Path(), default=None, help="Save file or database path")
@click.option("--continue/--new", "resume", default=True, help="Resume the saved game if there is one")
@click.option("--help-text/--no-help-text", default=True, help="Print the command list at start")
@click.option("--show-time/--hide-time", default=True, help="Show the game clock")
@click.option("--debug", is_flag=True, help="Show face-down cards")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    level: str,
    seed: int | None,
    store: str,
    save_path: str | None,
    resume: bool,
    help_text: bool,
    show_time: bool,
    debug: bool,
    verbose: bool,
):
    """Play Spider Solitaire in the terminal."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SessionConfig(
        level=Level(level),
        seed=seed,
        store=store,
        save_path=Path(save_path or DEFAULT_SAVE_PATHS[store] or "."),
        resume=resume,
        show_help=help_text,
        show_time=show_time,
        debug=debug,
    )
    session = PlaytestSession(config)

    try:
        summary = session.run(output_fn=click.echo)
    except KeyboardInterrupt:
        click.echo("\n\nGame interrupted.")
        return

    if summary.won:
        click.echo(f"\nWon in {summary.moves} moves with {summary.score} points.")
    elif config.store != "none":
        click.echo(f"\nGame saved to {config.save_path}")
    click.echo("\nThanks for playing!")


if __name__ == "__main__":
    main()
