from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from shared.joke_screen import THEMES, JokeState


__all__ = ("build_screen",)


TITLE = "Random Dad Joke"
LOADING_MESSAGE = "Fetching a joke..."


def build_card(state: JokeState) -> Panel:
    theme = THEMES[state.theme_index]
    if state.is_loading:
        body = Text(LOADING_MESSAGE, style="italic")
        border = theme.end
    elif state.joke is not None:
        body = Text(state.joke.text, style="bold")
        border = theme.start
    else:
        # Placeholder card, grey like an empty slot
        body = Text(state.placeholder, style="bold")
        border = "grey50"
    return Panel(
        Align.center(body),
        title=Text(TITLE, style=f"bold {theme.start}"),
        subtitle=Text(theme.name, style=theme.end),
        border_style=border,
        padding=(2, 4),
    )


def build_actions(state: JokeState) -> Text:
    actions = Text()
    actions.append("[enter] new joke  ")
    if state.copied:
        actions.append("[c] Copied!  ", style="bold green")
    else:
        actions.append("[c] Copy  ")
    actions.append("[t] theme  ")
    if state.can_retry:
        actions.append("[r] Retry  ", style="bold red")
    actions.append("[q] quit", style="dim")
    return actions


def build_screen(state: JokeState) -> Group:
    return Group(build_card(state), Align.center(build_actions(state)))
