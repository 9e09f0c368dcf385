import asyncio
from functools import partial
import os
import sys
import threading
from typing import Callable

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import aiohttp
from dotenv import load_dotenv
import pyperclip
from rich.console import Console

from shared.apis.dadjokes import ENDPOINT, fetch_joke
from shared.joke_screen import JokeController, JokeState, JokeStore
from shared.logger import logger, setup_logger
from shared.util.environment import dadjoke_endpoint, dadjoke_timeout, log_level
from Terminal.screen import build_screen


COMMANDS = {
    "": "new",
    "n": "new",
    "c": "copy",
    "t": "theme",
    "r": "retry",
    "q": "quit",
}


class JokeApp:
    def __init__(
        self,
        console: Console,
        *,
        endpoint: str = ENDPOINT,
        timeout: aiohttp.ClientTimeout | None = None,
        clipboard: Callable[[str], None] = pyperclip.copy,
        read_line: Callable[[], str] = input,
    ) -> None:
        self.console = console
        self.endpoint = endpoint
        self.timeout = timeout
        self.clipboard = clipboard
        self.read_line = read_line
        self.reader: threading.Thread | None = None

    def render(self, state: JokeState) -> None:
        self.console.clear()
        self.console.print(build_screen(state))

    def _read_command(self) -> str:
        try:
            return self.read_line().strip().lower()
        except EOFError:
            return "q"

    def handle(self, controller: JokeController, command: str) -> bool:
        """Runs one key command; returns False when the app should quit"""
        match COMMANDS.get(command):
            case "new":
                controller.refresh()
            case "copy":
                if not controller.copy():
                    logger.debug("Nothing copied")
            case "theme":
                controller.change_theme()
            case "retry":
                if controller.state.can_retry:
                    controller.retry()
            case "quit":
                return False
            case _:
                logger.debug("Unknown command %r", command)
        return True

    def _start_reader(self, loop: asyncio.AbstractEventLoop, commands: asyncio.Queue) -> threading.Thread:
        """Reads commands on a daemon thread so a pending input() never holds up exit"""

        def read_forever() -> None:
            while True:
                command = self._read_command()
                try:
                    loop.call_soon_threadsafe(commands.put_nowait, command)
                except RuntimeError:
                    # The app already exited and closed its loop
                    return
                if command == "q":
                    return

        reader = threading.Thread(target=read_forever, name="dadjoke-stdin", daemon=True)
        reader.start()
        return reader

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        commands: asyncio.Queue[str] = asyncio.Queue()
        store = JokeStore(loop)
        controller = JokeController(
            store,
            endpoint=self.endpoint,
            fetch=partial(fetch_joke, timeout=self.timeout),
            clipboard=self.clipboard,
        )
        unsubscribe = store.subscribe(self.render)
        self.render(store.state)
        controller.refresh()
        self.reader = self._start_reader(loop, commands)
        try:
            while True:
                command = await commands.get()
                if not self.handle(controller, command):
                    break
        finally:
            unsubscribe()
            await controller.close()


def main() -> None:
    load_dotenv()
    setup_logger(log_level(), sys.stderr)
    app = JokeApp(Console(), endpoint=dadjoke_endpoint(), timeout=dadjoke_timeout())
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
