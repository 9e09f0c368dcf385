import asyncio
from functools import partial
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from shared.apis.dadjokes import fetch_joke, FetchError
from shared.joke_screen import THEMES, JokeController, JokeState, JokeStore
from shared.logger import logger

if TYPE_CHECKING:
    from Discord.discordbot import Bot


TITLE = "Random Dad Joke"
LOADING_MESSAGE = "Fetching a joke..."
CARD_TIMEOUT = 600  # seconds the buttons stay usable


def build_embed(state: JokeState) -> discord.Embed:
    theme = THEMES[state.theme_index]
    if state.is_loading:
        embed = discord.Embed(title=TITLE, description=LOADING_MESSAGE, color=theme.accent)
    elif state.joke is not None:
        embed = discord.Embed(title=TITLE, description=state.joke.text, color=theme.accent)
        embed.set_footer(text=f"{theme.name} • {state.joke.id}")
    else:
        embed = discord.Embed(title=TITLE, description=state.placeholder, color=discord.Color.light_grey())
    return embed


class JokeCard(discord.ui.View):
    """Ephemeral joke card for one user; sharing posts the joke to the channel"""

    def __init__(self, owner_id: int, channel: discord.abc.Messageable, controller_options: dict) -> None:
        super().__init__(timeout=CARD_TIMEOUT)
        self.owner_id = owner_id
        self.channel = channel
        self.interaction: discord.Interaction | None = None
        self.store = JokeStore(asyncio.get_running_loop())
        self.controller = JokeController(self.store, share=self._post_to_channel, **controller_options)
        self._redraw_lock = asyncio.Lock()
        self._redraws: set[asyncio.Task] = set()
        self.store.subscribe(self._on_state)
        self._sync_buttons(self.store.state)

    async def _post_to_channel(self, text: str) -> None:
        await self.channel.send(text, allowed_mentions=discord.AllowedMentions.none())

    def _sync_buttons(self, state: JokeState) -> None:
        self.share_button.disabled = state.joke is None or state.is_loading
        self.retry_button.disabled = not state.can_retry

    def _on_state(self, state: JokeState) -> None:
        self._sync_buttons(state)
        if self.interaction is None:
            return
        task = asyncio.get_running_loop().create_task(self._redraw())
        self._redraws.add(task)
        task.add_done_callback(self._redraws.discard)

    async def _redraw(self) -> None:
        assert self.interaction is not None
        async with self._redraw_lock:
            try:
                await self.interaction.edit_original_response(embed=build_embed(self.store.state), view=self)
            except discord.HTTPException as e:
                logger.warning("Failed to redraw joke card: %s", e)

    async def start(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(embed=build_embed(self.store.state), view=self, ephemeral=True)
        self.interaction = interaction
        self.controller.refresh()

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return interaction.user.id == self.owner_id

    async def on_timeout(self) -> None:
        await self.controller.close()
        for item in self.children:
            if isinstance(item, discord.ui.Button):
                item.disabled = True
        if self.interaction is not None:
            try:
                await self.interaction.edit_original_response(view=self)
            except discord.HTTPException as e:
                logger.debug("Could not disable expired joke card: %s", e)

    @discord.ui.button(label="New joke", style=discord.ButtonStyle.primary)
    async def new_button(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await interaction.response.defer()
        self.controller.refresh()

    @discord.ui.button(label="Share", style=discord.ButtonStyle.success)
    async def share_button(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await interaction.response.defer()
        try:
            shared = await self.controller.share()
        except discord.HTTPException:
            await interaction.followup.send("Couldn't share the joke in this channel", ephemeral=True)
            return
        if shared is None:
            await interaction.followup.send("There is no joke to share yet", ephemeral=True)

    @discord.ui.button(emoji="🎨", style=discord.ButtonStyle.secondary)
    async def theme_button(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await interaction.response.defer()
        self.controller.change_theme()

    @discord.ui.button(label="Retry", style=discord.ButtonStyle.danger)
    async def retry_button(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await interaction.response.defer()
        if self.controller.state.can_retry:
            self.controller.retry()


class Jokes(commands.Cog):
    def __init__(self, bot: "Bot") -> None:
        self.bot = bot

    @app_commands.command(name="dadjoke", description="Shows a random dad joke card only you can see")
    async def dadjoke_card(self, interaction: discord.Interaction) -> None:
        channel = interaction.channel
        if not isinstance(channel, discord.abc.Messageable):
            await interaction.response.send_message("Jokes can't be shown here", ephemeral=True)
            return
        card = JokeCard(
            interaction.user.id,
            channel,
            {"endpoint": self.bot.dadjoke_endpoint, "fetch": partial(fetch_joke, timeout=self.bot.dadjoke_timeout)},
        )
        await card.start(interaction)

    @commands.command(aliases=("joke",))
    async def dadjoke(self, ctx: commands.Context):
        """Tells a random dadjoke"""
        result = await fetch_joke(self.bot.dadjoke_endpoint, timeout=self.bot.dadjoke_timeout)
        if isinstance(result, FetchError):
            await ctx.send(result.message)
            return
        await ctx.send(result.text)


async def setup(bot: "Bot") -> None:
    await bot.add_cog(Jokes(bot))
