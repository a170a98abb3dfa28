"""CLI entry point for the alumni recommendation engine."""

import argparse
import asyncio
import logging
import sqlite3
import sys

import yaml
from pydantic import ValidationError

from alumni_recs.core.config import Settings
from alumni_recs.core.db import init_db
from alumni_recs.core.schemas import RecommendationBundle, ScoredRecommendation
from alumni_recs.pipeline.recommender import RecommendationEngine, export_results_json
from alumni_recs.store.seed import SeedData, seed_db
from alumni_recs.store.sqlite import SQLiteStore

KINDS = ("users", "jobs", "events", "all")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Alumni network recommendations - connections, jobs, and events",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- init-db subcommand ---
    subparsers.add_parser("init-db", parents=[common], help="Create the database tables")

    # --- seed subcommand ---
    seed_parser = subparsers.add_parser(
        "seed",
        parents=[common],
        help="Load profiles, posts, and events from a YAML seed file",
    )
    seed_parser.add_argument(
        "--data",
        required=True,
        help="Path to seed YAML file",
    )

    # --- recommend subcommand ---
    recommend_parser = subparsers.add_parser(
        "recommend",
        parents=[common],
        help="Print recommendations for a user",
    )
    recommend_parser.add_argument(
        "--user-id",
        required=True,
        help="User to recommend for",
    )
    recommend_parser.add_argument(
        "--kind",
        default="all",
        choices=KINDS,
        help="Which recommendations to produce (default: all)",
    )
    recommend_parser.add_argument(
        "--limit",
        type=int,
        help="Max results per kind (default: from settings)",
    )
    recommend_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    recommend_parser.add_argument(
        "--explain",
        action="store_true",
        help="Show the full score breakdown for recommended users",
    )

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)
    return args


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str) -> Settings:
    """Load settings, exiting with an error message on failure."""
    try:
        return Settings.from_yaml(path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_init_db(settings: Settings) -> None:
    """Handle init-db subcommand."""
    conn = init_db(settings.database.path)
    conn.close()
    print(f"Database ready at {settings.database.path}")


def cmd_seed(settings: Settings, data_path: str) -> None:
    """Handle seed subcommand."""
    data = SeedData.from_yaml(data_path)
    conn = init_db(settings.database.path)
    try:
        profiles, posts, events = seed_db(conn, data)
    finally:
        conn.close()
    print(f"Seeded {settings.database.path}: {profiles} profiles, "
          f"{posts} new posts, {events} new events")


async def recommend(
    conn: sqlite3.Connection,
    settings: Settings,
    user_id: str,
    kind: str,
    limit: int | None,
) -> tuple[RecommendationEngine, RecommendationBundle]:
    """Build an engine for user_id and run the requested queries."""
    engine = RecommendationEngine(SQLiteStore(conn), settings.scoring)
    await engine.initialize(user_id)

    limits = settings.limits
    users_limit = limits.users if limit is None else limit
    jobs_limit = limits.jobs if limit is None else limit
    events_limit = limits.events if limit is None else limit

    if kind == "all":
        bundle = await engine.get_all_recommendations(users_limit, jobs_limit, events_limit)
    elif kind == "users":
        bundle = RecommendationBundle(users=await engine.get_recommended_users(users_limit))
    elif kind == "jobs":
        bundle = RecommendationBundle(jobs=await engine.get_recommended_jobs(jobs_limit))
    else:
        bundle = RecommendationBundle(events=await engine.get_recommended_events(events_limit))
    return engine, bundle


def print_bundle(
    engine: RecommendationEngine,
    bundle: RecommendationBundle,
    kind: str,
    explain: bool,
) -> None:
    """Print a human-readable summary of the requested recommendations."""
    if kind in ("users", "all"):
        _print_users(engine, bundle, explain)
    if kind in ("jobs", "all"):
        _print_jobs(bundle)
    if kind in ("events", "all"):
        _print_events(bundle)


def _print_users(engine: RecommendationEngine, bundle: RecommendationBundle, explain: bool) -> None:
    print(f"\nConnections ({len(bundle.users)}):")
    for rec in bundle.users:
        user = rec.item
        print(f"  [{rec.score:3d}] {user.display_name} ({user.role}){_reasons(rec)}")
        if explain:
            _, breakdown = engine.explain_user(user)
            print(f"        breakdown: {', '.join(breakdown) or '-'}")


def _print_jobs(bundle: RecommendationBundle) -> None:
    print(f"\nJobs & internships ({len(bundle.jobs)}):")
    for rec in bundle.jobs:
        job = rec.item
        where = f" @ {job.company}" if job.company else ""
        print(f"  [{rec.score:3d}] {job.title}{where} [{job.kind}]{_reasons(rec)}")


def _print_events(bundle: RecommendationBundle) -> None:
    print(f"\nEvents ({len(bundle.events)}):")
    for rec in bundle.events:
        event = rec.item
        print(f"  [{rec.score:3d}] {event.title} on {event.event_date:%Y-%m-%d}{_reasons(rec)}")


def _reasons(rec: ScoredRecommendation) -> str:  # type: ignore[type-arg]
    return f" - {', '.join(rec.reasons)}" if rec.reasons else ""


def cmd_recommend(settings: Settings, args: argparse.Namespace) -> None:
    """Handle recommend subcommand."""
    conn = init_db(settings.database.path)
    try:
        engine, bundle = asyncio.run(
            recommend(conn, settings, args.user_id, args.kind, args.limit),
        )
    finally:
        conn.close()

    if engine.actor is None:
        print(f"Error: no profile found for user '{args.user_id}'", file=sys.stderr)
        sys.exit(1)

    if args.export == "json":
        print(export_results_json(bundle))
    else:
        print(f"Recommendations for {engine.actor.display_name} ({engine.actor.role})")
        print_bundle(engine, bundle, args.kind, args.explain)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)
    settings = load_settings(args.config)

    if args.command == "init-db":
        cmd_init_db(settings)
    elif args.command == "seed":
        try:
            cmd_seed(settings, args.data)
        except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        cmd_recommend(settings, args)


if __name__ == "__main__":
    main()
