"""
Seed script for Spotlight.

Generates deterministic pseudo-random games and inserts them through
GameModel, so every row goes through the same validation and SQL path as
application writes.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import datetime
from typing import List

import typer

from spotlight.config import get_settings
from spotlight.data import Game, new_models, validate_game
from spotlight.infrastructure import create_pool
from spotlight.utils.logging import configure_logging, get_logger
from spotlight.validator import Validator

app = typer.Typer(help="Generate synthetic games and insert them into Postgres.")
log = get_logger(__name__)

GENRES = [
    "action",
    "adventure",
    "platformer",
    "puzzle",
    "racing",
    "rpg",
    "shooter",
    "simulation",
    "sports",
    "strategy",
]
TITLE_WORDS = [
    "Ancient",
    "Crystal",
    "Dragon",
    "Echo",
    "Frontier",
    "Galaxy",
    "Harbor",
    "Iron",
    "Legend",
    "Shadow",
    "Star",
    "Thunder",
]


def _generate_games(count: int, seed: int) -> List[Game]:
    rng = random.Random(seed)
    current_year = datetime.now().year
    games: List[Game] = []
    for i in range(count):
        words = rng.sample(TITLE_WORDS, k=2)
        games.append(
            Game(
                title=f"{words[0]} {words[1]} {i + 1}",
                year=rng.randint(1980, current_year),
                genres=rng.sample(GENRES, k=rng.randint(1, 3)),
            )
        )
    return games


@app.command()
def main(
    count: int = typer.Option(
        100,
        "--count",
        "-n",
        help="Number of games to insert.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
) -> None:
    """
    Insert synthetic games via GameModel.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    start = time.perf_counter()

    games = _generate_games(count, seed)
    for game in games:
        v = Validator()
        validate_game(v, game)
        if not v.valid():
            typer.echo(f"Generated game failed validation: {v.errors}", err=True)
            raise typer.Exit(code=1)

    typer.echo(f"Inserting {count:,} games (seed={seed})...")
    with create_pool(settings, dsn=dsn) as pool:
        models = new_models(pool, timeout=settings.query_timeout_seconds)
        for game in games:
            models.games.insert(game)

    duration = time.perf_counter() - start
    log.info("Seeding complete", extra={"rows": count, "duration_seconds": round(duration, 2)})
    typer.echo(f"Inserted {count:,} games in {duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
