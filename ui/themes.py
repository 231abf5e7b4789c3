# ui/themes.py

from models.enums import Theme

THEMES = {
    Theme.LIGHT: {
        "name": "Light",
        "background": "#ffffff",
        "text": "#24292f",
        "empty": "#ebedf0",
        "completed": "#40c463",
        "missed": "#f85149",
    },
    Theme.DARK: {
        "name": "Dark",
        "background": "#0d1117",
        "text": "#c9d1d9",
        "empty": "#161b22",
        "completed": "#26a641",
        "missed": "#da3633",
    },
}

DEFAULT_THEME = Theme.LIGHT


def get_theme(theme_name: str):
    try:
        return THEMES[Theme(theme_name)]
    except ValueError:
        return THEMES[DEFAULT_THEME]


def toggle_theme(theme: Theme) -> Theme:
    return Theme.DARK if theme == Theme.LIGHT else Theme.LIGHT
