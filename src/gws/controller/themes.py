"""Theme names selectable from the Settings view. Colors belong to the renderer."""

THEME_NAMES = (
    "Default",
    "Dracula",
    "Catppuccin Mocha",
    "Solarized Light",
)


def theme_index(name: str) -> int:
    """Index of a theme by name; unknown names fall back to the default."""
    try:
        return THEME_NAMES.index(name)
    except ValueError:
        return 0
