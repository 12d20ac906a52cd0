from __future__ import annotations

import json
import sys
from typing import List, NoReturn, Optional
from uuid import UUID

import typer

from spotlight.config import get_settings
from spotlight.data import Filters, Game, ModelError, new_models, validate_filters, validate_game
from spotlight.infrastructure import create_pool, get_sync_connection
from spotlight.migrate import apply_migrations
from spotlight.utils.logging import configure_logging
from spotlight.validator import Validator

app = typer.Typer(help="Spotlight game catalog CLI.")


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"timeout={settings.query_timeout_seconds}s env={settings.app_env}"
    )


@app.command()
def migrate() -> None:
    """
    Apply pending SQL migrations.
    """
    with get_sync_connection() as conn:
        applied = apply_migrations(conn)
    if applied:
        typer.echo("Applied: " + ", ".join(applied))
    else:
        typer.echo("Schema is up to date.")


@app.command("list-games")
def list_games(
    title: str = typer.Option("", "--title", "-t", help="Full-text title query."),
    genres: Optional[List[str]] = typer.Option(
        None, "--genre", "-g", help="Require this genre (repeatable)."
    ),
    page: int = typer.Option(1, "--page", "-p"),
    page_size: Optional[int] = typer.Option(
        None, "--page-size", help="Rows per page (default from settings)."
    ),
    sort: str = typer.Option("id", "--sort", "-s", help="Sort field; prefix '-' for descending."),
) -> None:
    """
    List games matching optional title and genre filters.
    """
    settings = get_settings()
    filters = Filters(page=page, page_size=page_size or settings.default_page_size, sort=sort)
    v = Validator()
    validate_filters(v, filters)
    if not v.valid():
        _echo_json({"error": v.errors})
        raise typer.Exit(code=1)

    with create_pool(settings) as pool:
        models = new_models(pool, timeout=settings.query_timeout_seconds)
        games, metadata = models.games.get_all(title, genres or [], filters)

    _echo_json(
        {
            "games": [game.model_dump(mode="json") for game in games],
            "metadata": metadata.model_dump(),
        }
    )


def _require_valid(game: Game) -> None:
    v = Validator()
    validate_game(v, game)
    if not v.valid():
        _echo_json({"error": v.errors})
        raise typer.Exit(code=1)


@app.command("create-game")
def create_game(
    title: str = typer.Option(..., "--title", "-t"),
    year: int = typer.Option(..., "--year", "-y"),
    genres: List[str] = typer.Option(..., "--genre", "-g", help="Genre (repeatable)."),
) -> None:
    """
    Add a game to the catalog.
    """
    game = Game(title=title, year=year, genres=genres)
    _require_valid(game)

    settings = get_settings()
    with create_pool(settings) as pool:
        models = new_models(pool, timeout=settings.query_timeout_seconds)
        models.games.insert(game)
    _echo_json({"game": game.model_dump(mode="json")})


@app.command("update-game")
def update_game(
    game_id: int = typer.Argument(..., help="Game id."),
    version: UUID = typer.Option(..., "--version", "-v", help="Version last read by the caller."),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    year: Optional[int] = typer.Option(None, "--year", "-y"),
    genres: Optional[List[str]] = typer.Option(
        None, "--genre", "-g", help="Replace genres (repeatable)."
    ),
) -> None:
    """
    Change a game's fields if it still carries the given version.
    """
    settings = get_settings()
    with create_pool(settings) as pool:
        models = new_models(pool, timeout=settings.query_timeout_seconds)
        try:
            game = models.games.get(game_id)
        except ModelError as exc:
            _fail(f"Game {game_id}: {exc}")

        if title is not None:
            game.title = title
        if year is not None:
            game.year = year
        if genres:
            game.genres = genres
        game.version = version
        _require_valid(game)

        try:
            models.games.update(game)
        except ModelError as exc:
            _fail(f"Game {game_id}: {exc}; re-read it and retry")
    _echo_json({"game": game.model_dump(mode="json")})


@app.command("show-game")
def show_game(game_id: int = typer.Argument(..., help="Game id.")) -> None:
    """
    Show a single game.
    """
    settings = get_settings()
    with create_pool(settings) as pool:
        models = new_models(pool, timeout=settings.query_timeout_seconds)
        try:
            game = models.games.get(game_id)
        except ModelError as exc:
            _fail(f"Game {game_id}: {exc}")
    _echo_json({"game": game.model_dump(mode="json")})


@app.command("delete-game")
def delete_game(game_id: int = typer.Argument(..., help="Game id.")) -> None:
    """
    Permanently delete a game.
    """
    settings = get_settings()
    with create_pool(settings) as pool:
        models = new_models(pool, timeout=settings.query_timeout_seconds)
        try:
            models.games.delete(game_id)
        except ModelError as exc:
            _fail(f"Game {game_id}: {exc}")
    typer.echo(f"Game {game_id} deleted.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
