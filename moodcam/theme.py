"""
Overlay colour themes and the persisted theme preference.
"""
from __future__ import annotations
import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_THEME = "dark"

# BGR colours, alpha for the translucent text box
THEMES: dict[str, dict] = {
    "dark": {
        "box": (0, 0, 0),
        "box_alpha": 0.5,
        "text": (255, 255, 255),
        "moods": {"happy": (80, 200, 80), "sad": (220, 140, 60), "stressed": (60, 60, 230)},
    },
    "light": {
        "box": (255, 255, 255),
        "box_alpha": 0.6,
        "text": (20, 20, 20),
        "moods": {"happy": (40, 140, 40), "sad": (170, 90, 20), "stressed": (30, 30, 190)},
    },
}

def palette(theme: str) -> dict:
    return THEMES.get(theme, THEMES[DEFAULT_THEME])

def toggle_theme(theme: str) -> str:
    return "light" if theme == "dark" else "dark"

def load_theme(path: str) -> str:
    """Return the saved theme, or the default if missing or unreadable."""
    if not os.path.exists(path):
        return DEFAULT_THEME
    try:
        with open(path, "r", encoding="utf-8") as f:
            theme = json.load(f).get("theme")
    except Exception:
        logger.warning(f"[theme] could not read {path}; using {DEFAULT_THEME}")
        return DEFAULT_THEME
    return theme if theme in THEMES else DEFAULT_THEME

def save_theme(path: str, theme: str) -> str:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme!r}")
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"theme": theme}, f)
    return path
