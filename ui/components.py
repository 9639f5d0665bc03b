from rich import box
from rich.align import Align
from rich.columns import Columns
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
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
from ui.styles import create_achievement_header, get_accuracy_style

MAX_MISSED_SHOWN = 10


def format_percent(value: float | None) -> str:
    return f"{round(value or 0)}%"


def format_seconds(value: int | None) -> str:
    return f"{value}s" if value is not None else "-"


class QuestionPanel:
    """A styled panel showing the current fact and live session stats."""

    def __init__(
        self,
        fact: Fact,
        stats: LiveStats,
        tip: str,
        palette: dict[str, str],
    ):
        self.fact = fact
        self.stats = stats
        self.tip = tip
        self.palette = palette

    def render(self) -> Panel:
        p = self.palette
        content = Text()
        content.append(
            f"Question {self.stats.question_number} / {self.stats.total_questions}\n",
            Style(color=p["muted"]),
        )
        content.append(self._create_progress_bar(), Style(color=p["muted"]))
        content.append("\n\n")

        content.append(f"  {self.fact.a}", Style(color=p["accent"], bold=True))
        content.append("  ×  ", Style(color=p["text"]))
        content.append(f"{self.fact.b}", Style(color=p["accent"], bold=True))
        content.append("  =  ?\n\n", Style(color=p["text"]))

        content.append("Accuracy ", Style(color=p["muted"]))
        content.append(
            format_percent(self.stats.percent),
            get_accuracy_style(self.stats.percent, p),
        )
        content.append("   Streak ", Style(color=p["muted"]))
        content.append(f"{self.stats.streak}", Style(color=p["primary"], bold=True))
        content.append("   Avg time ", Style(color=p["muted"]))
        content.append(f"{self.stats.avg_time_sec}s", Style(color=p["info"]))

        if self.tip:
            content.append("\n\n")
            content.append(self.tip, Style(color=p["muted"], italic=True))

        return Panel(
            Align.left(content),
            title="Times Tables Tutor",
            subtitle="Type your answer (or 'q' to quit)",
            border_style=p["primary"],
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _create_progress_bar(self) -> str:
        width = 20
        total = self.stats.total_questions or 1
        filled = int(width * (self.stats.question_number - 1) / total)
        return "█" * filled + "░" * (width - filled)

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for the result of one answer."""

    def __init__(self, result: AttemptResult, palette: dict[str, str]):
        self.result = result
        self.palette = palette

    def render(self) -> Panel:
        p = self.palette
        color = p["success"] if self.result.is_correct else p["error"]
        content = Text()
        content.append("✓ " if self.result.is_correct else "✗ ", Style(color=color, bold=True))
        content.append(self.result.message + "\n", Style(color=color, bold=True))

        if not self.result.is_correct:
            content.append(
                f"You answered: {self.result.user_value}\n", Style(color=p["muted"])
            )
        content.append("\n")
        content.append(f"{self.result.fact} = ", Style(color=p["text"]))
        content.append(str(self.result.correct_answer), Style(color=p["success"], bold=True))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=color,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class RecordsTable:
    """Best-ever and previous-session records side by side."""

    def __init__(
        self,
        best: BestRecords,
        previous: SessionSummary,
        palette: dict[str, str],
    ):
        self.best = best
        self.previous = previous
        self.palette = palette

    def render(self) -> Table:
        p = self.palette
        table = Table(
            show_header=True,
            header_style=Style(color=p["primary"], bold=True),
            border_style=p["muted"],
            box=box.ROUNDED,
        )
        table.add_column("")
        table.add_column("Best", justify="center")
        table.add_column("Previous", justify="center")

        table.add_row(
            Text("Streak", style=Style(color=p["muted"])),
            Text(str(self.best.best_streak), style=Style(color=p["accent"], bold=True)),
            str(self.previous.max_streak),
        )
        table.add_row(
            Text("Accuracy", style=Style(color=p["muted"])),
            Text(format_percent(self.best.best_percent), style=Style(color=p["accent"], bold=True)),
            format_percent(self.previous.percent),
        )
        table.add_row(
            Text("Avg time", style=Style(color=p["muted"])),
            Text(
                format_seconds(self.best.best_avg_time_sec),
                style=Style(color=p["accent"], bold=True),
            ),
            format_seconds(self.previous.avg_time_sec),
        )
        return table

    def __rich__(self) -> Table:
        return self.render()


class SummaryPanel:
    """End-of-session report with score, missed facts and records."""

    def __init__(self, event: SessionEndEvent, palette: dict[str, str]):
        self.event = event
        self.palette = palette

    def render(self) -> Panel:
        p = self.palette
        summary = self.event.summary

        content = Text()
        content.append("Session Complete!\n\n", Style(color=p["primary"], bold=True))
        content.append("Score: ", Style(color=p["muted"]))
        content.append(
            f"{self.event.correct_count} / {self.event.asked_count} ",
            Style(color=p["text"], bold=True),
        )
        content.append(
            f"({format_percent(summary.percent)})\n",
            get_accuracy_style(summary.percent, p),
        )
        content.append("Average time: ", Style(color=p["muted"]))
        content.append(f"{format_seconds(summary.avg_time_sec)}\n", Style(color=p["info"]))
        content.append("Longest streak: ", Style(color=p["muted"]))
        content.append(f"{summary.max_streak}\n\n", Style(color=p["accent"], bold=True))

        content.append("Practice these:\n", Style(color=p["primary"], bold=True))
        if self.event.missed:
            for fact in self.event.missed[:MAX_MISSED_SHOWN]:
                content.append(f"  {fact} = {fact.answer}\n", Style(color=p["text"]))
        else:
            content.append(
                "  No misses this time. Amazing! 🌟\n", Style(color=p["success"])
            )

        records = RecordsTable(self.event.best, self.event.previous, p)
        return Panel(
            Columns(
                [Align.left(content), Align.center(records.render())],
                align="center",
                padding=(0, 3),
            ),
            title="Session Summary",
            border_style=p["accent"],
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class AchievementBanner:
    def __init__(self, event: AchievementEvent, palette: dict[str, str]):
        self.event = event
        self.palette = palette

    def render(self) -> Panel:
        p = self.palette
        content = Text()
        content.append(create_achievement_header(self.event.level, p))
        content.append("\n\n")
        content.append(self.event.message, Style(color=p["text"]))
        content.append("\n\nEvery fact starts fresh for the next level. 🚀", Style(color=p["muted"]))
        return Panel(
            Align.center(content),
            title="Achievement",
            border_style=p["accent"],
            box=box.DOUBLE,
            padding=(1, 4),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen with the profile's standing."""

    def __init__(
        self,
        profile_name: str,
        games_played: int,
        achievements: list[int],
        next_level: tuple[int, int, int] | None,
        best: BestRecords,
        previous: SessionSummary,
        palette: dict[str, str],
    ):
        self.profile_name = profile_name
        self.games_played = games_played
        self.achievements = achievements
        self.next_level = next_level
        self.best = best
        self.previous = previous
        self.palette = palette

    def render(self) -> Panel:
        p = self.palette
        banner = Text()
        banner.append("╔══════════════════════════════╗\n", Style(color=p["primary"]))
        banner.append("║     ", Style(color=p["primary"]))
        banner.append("Times Tables Tutor", Style(color=p["accent"], bold=True))
        banner.append("       ║\n", Style(color=p["primary"]))
        banner.append("╚══════════════════════════════╝\n\n", Style(color=p["primary"]))
        banner.append(f"Hi {self.profile_name}! ", Style(color=p["text"], bold=True))
        banner.append("Ready to practice?\n\n", Style(color=p["text"]))
        banner.append("Type 'q' at any time to save and quit.\n", Style(color=p["muted"]))

        stats = Table(show_header=False, border_style=p["muted"], box=box.ROUNDED)
        stats.add_column("Label", justify="center")
        stats.add_column("Value", justify="center")
        stats.add_row(
            Text("Games played", style=Style(color=p["muted"])),
            Text(str(self.games_played), style=Style(color=p["accent"], bold=True)),
        )
        levels = ", ".join(str(lvl) for lvl in self.achievements) or "none yet"
        stats.add_row(
            Text("Levels", style=Style(color=p["muted"])),
            Text(levels, style=Style(color=p["accent"], bold=True)),
        )
        if self.next_level is not None:
            level, done, total = self.next_level
            stats.add_row(
                Text(f"Level {level}", style=Style(color=p["muted"])),
                Text(f"{done} / {total} facts", style=Style(color=p["info"])),
            )

        records = RecordsTable(self.best, self.previous, p)
        return Panel(
            Columns(
                [Align.center(banner), Align.center(stats), Align.center(records.render())],
                align="center",
                padding=(1, 3),
            ),
            border_style=p["primary"],
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ProfileTable:
    """Known profiles with their headline numbers."""

    def __init__(self, rows: list[dict], palette: dict[str, str]):
        self.rows = rows
        self.palette = palette

    def render(self) -> Table:
        p = self.palette
        table = Table(
            show_header=True,
            header_style=Style(color=p["primary"], bold=True),
            border_style=p["muted"],
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )
        table.add_column("Profile", style=Style(color=p["accent"], bold=True))
        table.add_column("Games", justify="right")
        table.add_column("Levels", justify="center")
        table.add_column("Mastered", justify="right")

        for row in self.rows:
            levels = ", ".join(str(lvl) for lvl in row.get("achievements", [])) or "-"
            table.add_row(
                row.get("name", ""),
                str(row.get("games", 0)),
                levels,
                f"{row.get('mastered', 0)} / {row.get('total', 0)}",
            )
        return table

    def __rich__(self) -> Table:
        return self.render()
