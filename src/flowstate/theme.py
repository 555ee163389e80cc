"""Theme preference, stored independently of task state."""

import json
import logging

from .ports import KeyValueStore

logger = logging.getLogger(__name__)

THEME_KEY = "flow_theme"
THEMES = ("dark", "light")
DEFAULT_THEME = "dark"


def load_theme(store: KeyValueStore) -> str:
    """Saved theme, or the default if none (or an unknown one) is stored."""
    try:
        raw = store.get(THEME_KEY)
        theme = json.loads(raw) if raw is not None else DEFAULT_THEME
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read theme preference: {e}")
        return DEFAULT_THEME
    return theme if theme in THEMES else DEFAULT_THEME


def toggle_theme(store: KeyValueStore) -> str:
    """Switch between dark and light, persist, and return the new theme."""
    new_theme = "light" if load_theme(store) == "dark" else "dark"
    store.set(THEME_KEY, json.dumps(new_theme))
    return new_theme
