from rich.style import Style
from rich.text import Text

DEFAULT_THEME_ID = "classic"

# Named colours per theme id; every palette defines the same roles
PALETTES: dict[str, dict[str, str]] = {
    "classic": {
        "primary": "#8E44AD",
        "accent": "#F1C40F",
        "success": "#27AE60",
        "error": "#C0392B",
        "info": "#3498DB",
        "muted": "#7F8C8D",
        "text": "#FFFFFF",
    },
    "ocean": {
        "primary": "#1F77B4",
        "accent": "#17BECF",
        "success": "#2CA02C",
        "error": "#D62728",
        "info": "#AEC7E8",
        "muted": "#7F7F7F",
        "text": "#FFFFFF",
    },
    "forest": {
        "primary": "#2E7D32",
        "accent": "#FFB300",
        "success": "#66BB6A",
        "error": "#E53935",
        "info": "#4FC3F7",
        "muted": "#8D8D8D",
        "text": "#FFFFFF",
    },
}


def theme_ids() -> list[str]:
    return list(PALETTES)


def get_palette(theme_id: str | None) -> dict[str, str]:
    """Get the palette for a theme id, falling back to the default theme."""
    return PALETTES.get(theme_id or DEFAULT_THEME_ID, PALETTES[DEFAULT_THEME_ID])


def get_accuracy_style(percent: float, palette: dict[str, str]) -> Style:
    """Get color style based on session accuracy."""
    if percent >= 80:
        return Style(color=palette["success"], bold=True)
    elif percent >= 50:
        return Style(color=palette["accent"])
    else:
        return Style(color=palette["error"])


def create_achievement_header(level: int, palette: dict[str, str]) -> Text:
    header = Text()
    header.append("🏆 ", Style(color=palette["accent"]))
    header.append(f"Level {level} Achieved!", Style(color=palette["primary"], bold=True))
    return header
