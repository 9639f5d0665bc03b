"""Times Tables Tutor UI Module - terminal interface for multiplication drills."""

from ui.app import TutorUI
from ui.components import (
    QuestionPanel,
    FeedbackPanel,
    SummaryPanel,
    RecordsTable,
    AchievementBanner,
    WelcomeScreen,
    ProfileTable,
)
from ui.styles import (
    DEFAULT_THEME_ID,
    PALETTES,
    create_achievement_header,
    get_accuracy_style,
    get_palette,
    theme_ids,
)

__all__ = [
    "TutorUI",
    "QuestionPanel",
    "FeedbackPanel",
    "SummaryPanel",
    "RecordsTable",
    "AchievementBanner",
    "WelcomeScreen",
    "ProfileTable",
    "DEFAULT_THEME_ID",
    "PALETTES",
    "create_achievement_header",
    "get_accuracy_style",
    "get_palette",
    "theme_ids",
]
