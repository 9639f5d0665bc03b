from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from facts import Fact
from models import (
    AchievementEvent,
    AttemptResult,
    BestRecords,
    LiveStats,
    SessionEndEvent,
    SessionSummary,
)
from session import parse_answer
from ui.components import (
    AchievementBanner,
    FeedbackPanel,
    ProfileTable,
    QuestionPanel,
    SummaryPanel,
    WelcomeScreen,
)
from ui.styles import get_palette

QUIT_INPUTS = {"q", "quit"}


class TutorUI:
    """Main UI orchestrator for the Times Tables Tutor application."""

    def __init__(self, console: Console | None = None, theme: str | None = None):
        self.console = console or Console()
        self.palette = get_palette(theme)

    def set_theme(self, theme: str | None) -> None:
        self.palette = get_palette(theme)

    def ask_profile_name(self, recent: list[str]) -> str | None:
        """Ask which profile to play as.

        Recent profiles can be picked by number. Returns None if the user
        quits.
        """
        if recent:
            self.console.print(Text("Recent players:", style=f"bold {self.palette['primary']}"))
            for i, name in enumerate(recent, 1):
                self.console.print(f"  {i}. {name}")
            self.console.print()

        while True:
            user_input = self.console.input(
                Text("Who's playing? ", style=f"bold {self.palette['muted']}")
            ).strip()

            if user_input.lower() in QUIT_INPUTS:
                return None

            if user_input.isdigit() and 1 <= int(user_input) <= len(recent):
                return recent[int(user_input) - 1]

            if user_input:
                return user_input

            self.console.print(
                Text("Please type a name (or 'q' to quit)\n", style=self.palette["error"])
            )

    def show_welcome(
        self,
        profile_name: str,
        games_played: int,
        achievements: list[int],
        next_level: tuple[int, int, int] | None,
        best: BestRecords,
        previous: SessionSummary,
    ) -> None:
        """Display the welcome screen and wait for user to press Enter."""
        welcome = WelcomeScreen(
            profile_name=profile_name,
            games_played=games_played,
            achievements=achievements,
            next_level=next_level,
            best=best,
            previous=previous,
            palette=self.palette,
        )
        self.console.print(welcome)
        self.console.print()
        self.console.input(Text("Press Enter to start...", style=f"bold {self.palette['muted']}"))

    def ask_answer(self, fact: Fact, stats: LiveStats, tip: str) -> int | None:
        """Display a question and read a numeric answer.

        Empty or non-numeric input is rejected here and the user is asked
        again; it never reaches the engine. Returns None if the user quits.
        """
        self.console.print(QuestionPanel(fact, stats, tip, self.palette))
        self.console.print()

        while True:
            user_input = self.console.input(
                Text("Your answer: ", style=f"bold {self.palette['muted']}")
            )

            if user_input.strip().lower() in QUIT_INPUTS:
                return None

            value = parse_answer(user_input)
            if value is not None:
                return value

            self.console.print(
                Text("Please type a number (or 'q' to quit)\n", style=self.palette["error"])
            )

    def show_feedback(self, result: AttemptResult) -> None:
        self.console.print(FeedbackPanel(result, self.palette))
        self.console.print()

    def show_achievement(self, event: AchievementEvent) -> None:
        self.console.print(AchievementBanner(event, self.palette))
        self.console.print()

    def show_summary(self, event: SessionEndEvent) -> None:
        self.console.print(SummaryPanel(event, self.palette))
        self.console.print()

    def show_profiles(self, rows: list[dict]) -> None:
        if not rows:
            self.show_info("No profiles yet. Start playing to create one!")
            return
        self.console.print(ProfileTable(rows, self.palette))

    def ask_play_again(self) -> bool:
        user_input = self.console.input(
            Text("Play again? [Y/n] ", style=f"bold {self.palette['muted']}")
        ).strip().lower()
        return user_input not in {"n", "no", *QUIT_INPUTS}

    def wait_for_continue(self) -> None:
        """Wait for user to press Enter to continue."""
        self.console.input(
            Text("Press Enter to continue...", style=f"bold {self.palette['muted']}")
        )

    def show_error(self, message: str) -> None:
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=self.palette["error"]),
                title="Error",
                border_style=self.palette["error"],
            )
        )

    def show_info(self, message: str) -> None:
        self.console.print(Text(message, style=self.palette["info"]))

    def show_quit_message(self) -> None:
        self.console.print()
        self.console.print(
            Text("👋 Goodbye! Your progress has been saved.", style=self.palette["muted"])
        )

    def clear_screen(self) -> None:
        self.console.clear()
