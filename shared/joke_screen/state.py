import asyncio
from dataclasses import dataclass, replace
import threading
from typing import Callable

from shared.apis.dadjokes import Dadjoke, FetchError
from shared.logger import logger
from .themes import next_theme_index


__all__ = (
    "PLACEHOLDER_MESSAGE",
    "JokeState",
    "FetchStarted",
    "FetchFinished",
    "CopyStarted",
    "CopyReset",
    "ThemeCycled",
    "Action",
    "reduce",
    "JokeStore",
)


PLACEHOLDER_MESSAGE = "Tap to fetch a joke!"


@dataclass(frozen=True)
class JokeState:
    joke: Dadjoke | None = None
    error_message: str | None = None
    is_loading: bool = False
    generation: int = 0
    copied: bool = False
    copy_generation: int = 0
    theme_index: int = 0

    @property
    def placeholder(self) -> str:
        return self.error_message if self.error_message is not None else PLACEHOLDER_MESSAGE

    @property
    def can_retry(self) -> bool:
        return self.error_message is not None and not self.is_loading


@dataclass(frozen=True)
class FetchStarted:
    generation: int


@dataclass(frozen=True)
class FetchFinished:
    generation: int
    result: Dadjoke | FetchError


@dataclass(frozen=True)
class CopyStarted:
    copy_generation: int


@dataclass(frozen=True)
class CopyReset:
    copy_generation: int


@dataclass(frozen=True)
class ThemeCycled:
    pass


Action = FetchStarted | FetchFinished | CopyStarted | CopyReset | ThemeCycled


def reduce(state: JokeState, action: Action) -> JokeState:
    match action:
        case FetchStarted(generation=generation):
            return replace(state, is_loading=True, error_message=None, generation=generation)
        case FetchFinished(generation=generation) if generation != state.generation:
            # Stale completion of a superseded fetch
            return state
        case FetchFinished(result=FetchError() as error):
            return replace(state, is_loading=False, joke=None, error_message=error.message)
        case FetchFinished(result=joke):
            return replace(state, is_loading=False, joke=joke, error_message=None)
        case CopyStarted(copy_generation=copy_generation):
            return replace(state, copied=True, copy_generation=copy_generation)
        case CopyReset(copy_generation=copy_generation) if copy_generation == state.copy_generation:
            return replace(state, copied=False)
        case CopyReset():
            return state
        case ThemeCycled():
            return replace(state, theme_index=next_theme_index(state.theme_index))
    raise TypeError(f"Unknown action: {action!r}")


class JokeStore:
    """Holds the screen state; the only way to change it is dispatch.

    Dispatches coming from a thread other than the one that created the store are
    handed over to the owning event loop before they are applied.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, state: JokeState | None = None) -> None:
        self._state = state if state is not None else JokeState()
        self._loop = loop
        self._owner = threading.get_ident()
        self._listeners: list[Callable[[JokeState], None]] = []

    @property
    def state(self) -> JokeState:
        return self._state

    def subscribe(self, listener: Callable[[JokeState], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> None:
        if threading.get_ident() != self._owner:
            if self._loop is None:
                raise RuntimeError("JokeStore was dispatched to from another thread without an owning loop")
            self._loop.call_soon_threadsafe(self._apply, action)
            return
        self._apply(action)

    def _apply(self, action: Action) -> None:
        new_state = reduce(self._state, action)
        if new_state is self._state:
            logger.debug("Dropped %s, state unchanged", action)
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
