import asyncio
from typing import Awaitable, Callable

from shared.apis.dadjokes import ENDPOINT, Dadjoke, FetchError, fetch_joke
from shared.apis.exceptions import UnexpectedError
from shared.logger import logger
from .state import CopyReset, CopyStarted, FetchFinished, FetchStarted, JokeState, JokeStore, ThemeCycled


__all__ = ("COPIED_DURATION", "JokeController")


COPIED_DURATION = 1.5  # seconds the "Copied!" acknowledgement stays up


class JokeController:
    """Drives a JokeStore: fetches, copying, sharing and theme changes.

    Every fetch gets a new generation. Starting a fetch cancels the one in flight and
    the store ignores completions whose generation is not the latest, so the screen
    only ever shows the result of the most recent request.
    """

    def __init__(
        self,
        store: JokeStore,
        *,
        endpoint: str = ENDPOINT,
        fetch: Callable[[str], Awaitable[Dadjoke | FetchError]] = fetch_joke,
        clipboard: Callable[[str], None] | None = None,
        share: Callable[[str], Awaitable[None]] | None = None,
        copied_duration: float = COPIED_DURATION,
    ) -> None:
        self.store = store
        self.endpoint = endpoint
        self._fetch = fetch
        self._clipboard = clipboard
        self._share = share
        self.copied_duration = copied_duration

        self._generation = store.state.generation
        self._task: asyncio.Task | None = None
        self._copy_generation = store.state.copy_generation
        self._copy_reset: asyncio.TimerHandle | None = None

    @property
    def state(self) -> JokeState:
        return self.store.state

    def refresh(self) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._generation += 1
        generation = self._generation
        self.store.dispatch(FetchStarted(generation))
        self._task = loop.create_task(self._run(generation))
        return self._task

    def retry(self) -> asyncio.Task:
        return self.refresh()

    async def _run(self, generation: int) -> None:
        logger.debug("Fetching joke #%d from %s", generation, self.endpoint)
        try:
            result = await self._fetch(self.endpoint)
        except asyncio.CancelledError:
            logger.debug("Fetch #%d cancelled", generation)
            raise
        except Exception:
            logger.exception("Fetch #%d failed unexpectedly", generation)
            result = FetchError.from_exception(UnexpectedError())
        if isinstance(result, FetchError):
            logger.debug("Fetch #%d failed: %s", generation, result.message)
        self.store.dispatch(FetchFinished(generation, result))

    def copy(self) -> bool:
        """Copies the current joke to the clipboard; False when there was nothing to copy"""
        joke = self.state.joke
        if joke is None or self._clipboard is None:
            return False
        try:
            self._clipboard(joke.text)
        except Exception as e:
            logger.warning("Copying to the clipboard failed: %s", e)
            return False

        self._copy_generation += 1
        copy_generation = self._copy_generation
        self.store.dispatch(CopyStarted(copy_generation))
        if self._copy_reset is not None:
            self._copy_reset.cancel()
        loop = asyncio.get_running_loop()
        self._copy_reset = loop.call_later(self.copied_duration, self.store.dispatch, CopyReset(copy_generation))
        return True

    async def share(self) -> str | None:
        """Hands the current joke to the share target; returns the shared text"""
        joke = self.state.joke
        if joke is None or self._share is None:
            return None
        try:
            await self._share(joke.text)
        except Exception as e:
            logger.warning("Sharing joke %s failed: %s", joke.id, e)
            raise
        return joke.text

    def change_theme(self) -> None:
        self.store.dispatch(ThemeCycled())

    async def close(self) -> None:
        if self._copy_reset is not None:
            self._copy_reset.cancel()
            self._copy_reset = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
