"""CLI tool for inspecting configuration and the knowledge store."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from config import ConfigLoader
from game import EntityKind, EntityResolver, GameEngine, StoreUnavailableError
from game.engine import list_profiles

logger = logging.getLogger(__name__)


class AdminCLI:
    def __init__(self, config_dir: Path | None = None):
        self._config_loader = ConfigLoader(config_dir)
        self._config_dir = config_dir
        self._engine: GameEngine | None = None

    def _ensure_initialized(self) -> GameEngine:
        if self._engine is None:
            self._engine = GameEngine(config_dir=self._config_dir)
        return self._engine

    def show_config(self) -> None:
        game_config = self._config_loader.load_game_config()

        print("\n=== Store Configuration ===")
        print(f"Backend: {game_config.store.backend}")
        print(f"Path: {game_config.store.path}")

        print("\n=== Game Configuration ===")
        print(f"Rounds to win: {game_config.game.rounds_to_win}")
        print(f"Default difficulty: {game_config.game.default_difficulty}")
        print(f"Resolver limit: {game_config.game.resolver_limit}")
        print(f"Computer picks among top {game_config.game.top_k} "
              f"of {game_config.game.candidate_pool_size} candidates")

        print("\n=== Sessions ===")
        print(f"Idle timeout: {game_config.sessions.idle_timeout_seconds}s")

        print("\n=== Difficulty Profiles ===")
        for profile in list_profiles(game_config):
            print(f"  {profile.name}:")
            print(f"      max billing order: {profile.max_billing_order}")
            print(f"      min year: {profile.min_year}")
            print(f"      min votes (knowledge): {profile.min_relevance_for_knowledge}")
            print(f"      min votes (round start): {profile.min_relevance_for_round_start}")
            print(f"      min filmography (round start): {profile.min_filmography_size_for_round_start}")

    def check_store(self) -> bool:
        engine = self._ensure_initialized()
        store = engine.store

        print("\n=== Round Start Check ===")
        healthy = True
        for profile in engine.list_profiles():
            movie = store.random_movie(profile.min_relevance_for_round_start, profile.min_year)
            actor = store.random_actor(
                profile.min_relevance_for_round_start,
                profile.min_year,
                profile.max_billing_order,
                profile.min_filmography_size_for_round_start,
            )
            status = "READY" if movie or actor else "NOT READY"
            healthy = healthy and (movie is not None or actor is not None)
            print(f"  [{status}] {profile.name}")
            print(f"      sample movie: {movie.label if movie else '-'}")
            print(f"      sample actor: {actor.display_name if actor else '-'}")
        return healthy

    def resolve(self, kind: str, text: str, limit: int) -> None:
        engine = self._ensure_initialized()
        hits = EntityResolver(engine.store).resolve(EntityKind(kind), text, limit)

        if not hits:
            print(f"No {kind} matches {text!r}.")
            return

        print(f"\n=== {kind.title()} matches for {text!r} ===")
        for i, entity in enumerate(hits, 1):
            print(f"  {i}. {entity.label} [{entity.id}] popularity={entity.popularity}")

    def show_cast(self, movie_id: str, difficulty: str | None) -> None:
        engine = self._ensure_initialized()
        profile = engine.get_profile(difficulty)
        cast = engine.store.actors_for_movie(movie_id, profile.max_billing_order)

        print(f"\n=== Cast of {movie_id} known on {profile.name} ===")
        if not cast:
            print("No credits found.")
        for credit in cast:
            print(f"  {credit.billing:>3}. {credit.entity.label} [{credit.entity.id}]")

    def show_filmography(self, actor_id: str, difficulty: str | None) -> None:
        engine = self._ensure_initialized()
        profile = engine.get_profile(difficulty)
        movies = engine.store.movies_for_actor(actor_id, profile.max_billing_order)

        print(f"\n=== Filmography of {actor_id} (billing <= {profile.max_billing_order}) ===")
        if not movies:
            print("No credits found.")
        for credit in movies:
            print(f"  {credit.entity.label} [{credit.entity.id}] billed #{credit.billing}")

    def close(self) -> None:
        if self._engine is not None:
            self._engine.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Movie / Actor admin utilities"
    )
    parser.add_argument("--config-dir", type=Path, help="Directory containing game.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("config", help="Show current configuration")
    subparsers.add_parser("check-store", help="Check every difficulty can open a round")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve free text to entities")
    resolve_parser.add_argument("kind", choices=[k.value for k in EntityKind])
    resolve_parser.add_argument("text")
    resolve_parser.add_argument("--limit", type=int, default=5)

    cast_parser = subparsers.add_parser("cast", help="Show the known cast of a movie")
    cast_parser.add_argument("movie_id")
    cast_parser.add_argument("--difficulty", choices=["easy", "medium", "hard"])

    films_parser = subparsers.add_parser("filmography", help="Show the movies of an actor")
    films_parser.add_argument("actor_id")
    films_parser.add_argument("--difficulty", choices=["easy", "medium", "hard"])

    args = parser.parse_args(argv)

    config = ConfigLoader(args.config_dir).load_game_config()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.observability.log_level,
        format=config.observability.log_format,
    )

    if not args.command:
        parser.print_help()
        return 0

    cli = AdminCLI(config_dir=args.config_dir)

    try:
        if args.command == "config":
            cli.show_config()
        elif args.command == "check-store":
            return 0 if cli.check_store() else 1
        elif args.command == "resolve":
            cli.resolve(args.kind, args.text, args.limit)
        elif args.command == "cast":
            cli.show_cast(args.movie_id, args.difficulty)
        elif args.command == "filmography":
            cli.show_filmography(args.actor_id, args.difficulty)
    except StoreUnavailableError as e:
        print(f"\n[ERROR] Knowledge store unavailable: {e}")
        logger.exception("Store failure during %s", args.command)
        return 2
    finally:
        cli.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
