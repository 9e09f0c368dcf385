import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import discord
from discord import app_commands
from discord.ext import commands
from dotenv import load_dotenv

from shared.apis.exceptions import APIRequestError
from shared.logger import logger, setup_logger
from shared.util.environment import dadjoke_endpoint, dadjoke_timeout, log_level


class Bot(commands.Bot):
    def __init__(self) -> None:
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=commands.when_mentioned_or(os.environ.get("GLOBAL_PREFIX", "!")),
            case_insensitive=True,
            strip_after_prefix=True,
            intents=intents,
        )
        self.dadjoke_endpoint = dadjoke_endpoint()
        self.dadjoke_timeout = dadjoke_timeout()

    async def on_ready(self):
        logger.info("Logged on as %s", self.user)

    async def on_message(self, message: discord.Message):
        if message.author == self.user or message.author.bot:
            return
        await self.process_commands(message)

    async def setup_hook(self) -> None:
        for filename in os.listdir(f"{os.path.realpath(os.path.dirname(__file__))}/cogs"):
            if filename.endswith(".py") and not filename.startswith("_"):
                await self.load_extension(f"Discord.cogs.{filename[:-3]}")
        await self.tree.sync()

    async def on_command_error(self, context: commands.Context, error: commands.CommandError) -> None:
        original = getattr(error, "original", error)
        if isinstance(error, commands.CommandOnCooldown):
            await context.send("Slow down a bit and try again later")
        elif isinstance(error, commands.MissingRequiredArgument):
            await context.send("Some arguments to the command are missing")
        elif isinstance(original, APIRequestError):
            await context.send(original.message)
        elif (
            isinstance(error, commands.CheckFailure)
            or isinstance(error, app_commands.CheckFailure)
            or isinstance(error, commands.CommandNotFound)
        ):
            pass
        else:
            await context.send("An unexpected error occured")
            await super().on_command_error(context, error)


def main() -> None:
    load_dotenv()
    setup_logger(log_level())
    bot = Bot()
    bot.run(token=os.environ["DISCORD_TOKEN"], log_handler=None)


if __name__ == "__main__":
    main()
