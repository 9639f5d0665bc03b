import argparse
import random
import signal
import sqlite3
import sys
from pathlib import Path

from loguru import logger
from rich.console import Console

from config import DrillConfig, get_settings
from engine import DrillEngine
from facts import FACT_COUNT
from log import configure_logging
from models import NextActionKind
from profiles import ProfileStore
from storage import (
    InMemoryProfileDirectoryRepository,
    InMemoryProfileRepository,
    get_directory_repo,
    get_legacy_repo,
    get_profile_repo,
    init_schema,
)
from ui import TutorUI, theme_ids


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Times Tables Tutor")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database path (default: TIMES_TUTOR_DB_PATH or data/tutor.db)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level for stderr (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Play subcommand (also the default)
    play_parser = subparsers.add_parser("play", help="Practice multiplication facts")
    play_parser.add_argument(
        "--profile",
        "-p",
        type=str,
        default=None,
        help="Profile name (prompted for when omitted)",
    )
    play_parser.add_argument(
        "--theme",
        "-t",
        choices=theme_ids(),
        default=None,
        help="Colour theme, saved with the profile",
    )

    subparsers.add_parser("profiles", help="List known profiles")

    reset_parser = subparsers.add_parser("reset", help="Reset a profile's progress")
    reset_parser.add_argument("name", type=str, help="Profile to reset")

    # Simulate subcommand
    sim_parser = subparsers.add_parser("simulate", help="Run learner simulation")
    sim_parser.add_argument(
        "--sessions",
        "-n",
        type=int,
        default=50,
        help="Number of sessions to simulate (default: 50)",
    )
    sim_parser.add_argument(
        "--accuracy",
        "-a",
        type=float,
        default=0.6,
        help="Chance of answering an unpractised fact correctly 0.0-1.0 (default: 0.6)",
    )
    sim_parser.add_argument(
        "--learning-rate",
        "-l",
        type=float,
        default=0.3,
        help="Learner improvement per correct answer 0.0-1.0 (default: 0.3)",
    )
    sim_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="simulation_results.json",
        help="Output JSON file path (default: simulation_results.json)",
    )
    sim_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    sim_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print a line per simulated session",
    )

    return parser


def open_store(db_path: Path, config: DrillConfig | None = None) -> ProfileStore:
    """Open the profile store on a SQLite database, migrating legacy data.

    If the database cannot be created the store falls back to memory, so the
    drill still runs but nothing is saved.
    """
    try:
        init_schema(db_path)
    except (sqlite3.Error, OSError) as e:
        logger.warning(f"Database {db_path} unavailable, progress will not be saved: {e}")
        return ProfileStore(
            profiles=InMemoryProfileRepository(),
            directory=InMemoryProfileDirectoryRepository(),
            config=config,
        )
    return ProfileStore(
        profiles=get_profile_repo(db_path),
        directory=get_directory_repo(db_path),
        legacy=get_legacy_repo(db_path),
        config=config,
    )


def handle_quit(ui: TutorUI, engine: DrillEngine) -> None:
    """Print quit message, save state, and exit."""
    ui.show_quit_message()
    engine.persist()
    sys.exit(0)


def create_sigint_handler(ui: TutorUI, engine: DrillEngine):
    """Create a SIGINT handler that saves state before exiting."""

    def sigint_handler(signum, frame):
        handle_quit(ui, engine)

    return sigint_handler


def play_session(ui: TutorUI, engine: DrillEngine) -> bool:
    """Run one session. Returns True if the user quit part-way."""
    action = engine.start_session()

    while action is not None and action.kind == NextActionKind.SHOW_QUESTION:
        ui.clear_screen()
        answer = ui.ask_answer(
            action.question, engine.get_live_stats(), engine.current_tip
        )
        if answer is None:
            return True

        result = engine.submit_answer(answer)
        if result is None:
            continue

        engine.open_modal()
        ui.show_feedback(result)
        if result.achievement is not None:
            ui.show_achievement(result.achievement)
        ui.wait_for_continue()
        engine.close_modal()

        action = engine.advance()

    if action is not None and action.session_end is not None:
        ui.clear_screen()
        ui.show_summary(action.session_end)
        if action.achievement is not None:
            ui.show_achievement(action.achievement)
    return False


def run_interactive(
    db_path: Path,
    profile_name: str | None = None,
    theme: str | None = None,
    seed: int | None = None,
) -> None:
    """Run the interactive drill."""
    ui = TutorUI(Console(), theme)

    ui.clear_screen()
    store = open_store(db_path)

    name = profile_name or ui.ask_profile_name(store.recent())
    if name is None:
        ui.show_quit_message()
        return

    engine = DrillEngine.open(store, name, rng=random.Random(seed))
    if theme is not None:
        engine.set_theme(theme)
    ui.set_theme(engine.profile.theme)

    signal.signal(signal.SIGINT, create_sigint_handler(ui, engine))

    profile = engine.profile
    ui.show_welcome(
        profile_name=profile.name,
        games_played=profile.total_games_played,
        achievements=profile.achievements,
        next_level=engine.next_level_progress(),
        best=profile.best,
        previous=profile.previous,
    )

    while True:
        quit_early = play_session(ui, engine)
        if quit_early or not ui.ask_play_again():
            break

    ui.show_quit_message()
    engine.persist()


def show_profiles(db_path: Path) -> None:
    """List every stored profile with its headline numbers."""
    ui = TutorUI(Console())
    store = open_store(db_path)

    rows = []
    for name in store.list_names():
        profile = store.load(name)
        rows.append(
            {
                "name": profile.name,
                "games": profile.total_games_played,
                "achievements": profile.achievements,
                "mastered": sum(1 for s in profile.fact_stats.values() if s.is_mastered),
                "total": FACT_COUNT,
            }
        )
    ui.show_profiles(rows)


def reset_profile(db_path: Path, name: str) -> None:
    ui = TutorUI(Console())
    store = open_store(db_path)
    if not store.exists(name):
        ui.show_error(f"No profile named {name!r}")
        return
    engine = DrillEngine(store.load(name), store)
    engine.reset_progress()
    ui.show_info(f"Progress for {name} has been reset.")


def run_simulation(args) -> None:
    """Run the simulation subcommand."""
    from simulate import run_simulation_and_report, SimulatedLearnerConfig

    config = SimulatedLearnerConfig(
        base_accuracy=args.accuracy,
        learning_rate=args.learning_rate,
    )

    console = Console()
    console.print("=" * 40, style="bold blue")
    console.print("    Learner Simulator", style="bold blue")
    console.print("=" * 40, style="bold blue")
    console.print()
    console.print(f"Simulating {args.sessions} sessions...")
    if args.seed is not None:
        console.print(f"Random seed: {args.seed}")
    console.print()

    run_simulation_and_report(
        config=config,
        sessions=args.sessions,
        output_path=Path(args.output),
        seed=args.seed,
        verbose=args.verbose,
        console=console,
    )


def main():
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args()
    settings = get_settings()

    configure_logging(args.log_level or settings.log_level, settings.log_file)
    db_path = args.db or settings.db_path
    logger.debug(f"Using database {db_path}")

    if args.command == "simulate":
        run_simulation(args)
    elif args.command == "profiles":
        show_profiles(db_path)
    elif args.command == "reset":
        reset_profile(db_path, args.name)
    elif args.command == "play":
        run_interactive(db_path, args.profile, args.theme, settings.seed)
    else:
        # Default to interactive mode
        run_interactive(db_path, seed=settings.seed)


if __name__ == "__main__":
    main()
