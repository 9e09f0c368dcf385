from typing import NamedTuple


__all__ = ("Theme", "THEMES", "next_theme_index")


class Theme(NamedTuple):
    name: str
    start: str  # hex color, top leading corner
    end: str  # hex color, bottom trailing corner

    @property
    def accent(self) -> int:
        """Start color as an integer, for surfaces that take a single color"""
        return int(self.start.lstrip("#"), 16)


THEMES: tuple[Theme, ...] = (
    Theme("purple-blue", "#AF52DE", "#007AFF"),
    Theme("orange-pink", "#FF9500", "#FF2D55"),
    Theme("green-yellow", "#34C759", "#FFCC00"),
    Theme("red-purple", "#FF3B30", "#AF52DE"),
)


def next_theme_index(index: int) -> int:
    return (index + 1) % len(THEMES)
