import asyncio

import discord

from shared.apis.dadjokes import FetchError
from shared.apis.exceptions import FetchErrorKind
from shared.joke_screen import THEMES, FetchFinished, FetchStarted, JokeState
from Discord.cogs.jokes import JokeCard, build_embed


class FakeChannel:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, content: str, **kwargs) -> None:
        self.sent.append(content)


def test_embed_for_joke_uses_theme_color(chicken):
    embed = build_embed(JokeState(joke=chicken, theme_index=2))

    assert embed.description == chicken.text
    assert embed.color == discord.Color(THEMES[2].accent)
    assert chicken.id in embed.footer.text


def test_embed_for_loading():
    assert build_embed(JokeState(is_loading=True)).description == "Fetching a joke..."


def test_embed_for_error_is_placeholder():
    embed = build_embed(JokeState(error_message="The URL provided is incorrect."))

    assert embed.description == "The URL provided is incorrect."
    assert embed.color == discord.Color.light_grey()


async def test_buttons_follow_state(chicken):
    card = JokeCard(1, FakeChannel(), {})
    assert card.share_button.disabled
    assert card.retry_button.disabled

    card.store.dispatch(FetchStarted(1))
    card.store.dispatch(FetchFinished(1, FetchError(FetchErrorKind.DECODE, "The JSON data could not be parsed.")))
    assert not card.retry_button.disabled
    assert card.share_button.disabled

    card.store.dispatch(FetchStarted(2))
    card.store.dispatch(FetchFinished(2, chicken))
    assert card.retry_button.disabled
    assert not card.share_button.disabled
    card.stop()


async def test_share_posts_joke_to_channel(chicken):
    channel = FakeChannel()
    card = JokeCard(1, channel, {})
    card.store.dispatch(FetchStarted(1))
    card.store.dispatch(FetchFinished(1, chicken))

    assert await card.controller.share() == chicken.text
    assert channel.sent == [chicken.text]
    card.stop()
    await asyncio.sleep(0)


class FakeResponse:
    def __init__(self) -> None:
        self.deferred = False

    async def defer(self) -> None:
        self.deferred = True


class FakeFollowup:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, content: str, **kwargs) -> None:
        self.sent.append(content)


class FakeInteraction:
    def __init__(self, user_id: int = 1) -> None:
        self.user = discord.Object(id=user_id)
        self.response = FakeResponse()
        self.followup = FakeFollowup()
        self.edits: list[dict] = []

    async def edit_original_response(self, **kwargs) -> None:
        self.edits.append(kwargs)


async def settle() -> None:
    for _ in range(20):
        await asyncio.sleep(0)


async def test_retry_button_refetches_after_failure(chicken):
    results = [FetchError(FetchErrorKind.TRANSPORT, "Connection refused"), chicken]
    endpoints = []

    async def fetch(endpoint):
        endpoints.append(endpoint)
        return results.pop(0)

    card = JokeCard(1, FakeChannel(), {"endpoint": "https://jokes.test/", "fetch": fetch})
    await card.controller.refresh()
    assert card.store.state.error_message == "Connection refused"
    assert not card.retry_button.disabled

    interaction = FakeInteraction()
    await card.retry_button.callback(interaction)
    await settle()

    assert interaction.response.deferred
    assert endpoints == ["https://jokes.test/", "https://jokes.test/"]
    assert card.store.state.joke == chicken
    assert card.store.state.error_message is None
    assert card.retry_button.disabled
    card.stop()


async def test_retry_button_without_error_does_not_fetch(chicken):
    calls = []

    async def fetch(endpoint):
        calls.append(endpoint)
        return chicken

    card = JokeCard(1, FakeChannel(), {"fetch": fetch})

    await card.retry_button.callback(FakeInteraction())
    await settle()

    assert calls == []
    card.stop()


async def test_new_button_fetches_and_redraws(chicken):
    async def fetch(endpoint):
        return chicken

    card = JokeCard(1, FakeChannel(), {"fetch": fetch})
    interaction = FakeInteraction()
    card.interaction = interaction

    await card.new_button.callback(interaction)
    await settle()

    assert card.store.state.joke == chicken
    assert interaction.edits
    assert interaction.edits[-1]["embed"].description == chicken.text
    card.stop()


async def test_only_the_owner_can_press_buttons():
    card = JokeCard(1, FakeChannel(), {})

    assert await card.interaction_check(FakeInteraction(user_id=1))
    assert not await card.interaction_check(FakeInteraction(user_id=2))
    card.stop()


async def test_timeout_disables_buttons_and_cancels_fetch():
    pending = asyncio.Event()

    async def fetch(endpoint):
        await pending.wait()

    card = JokeCard(1, FakeChannel(), {"fetch": fetch})
    interaction = FakeInteraction()
    card.interaction = interaction
    task = card.controller.refresh()
    await settle()

    await card.on_timeout()

    assert task.cancelled()
    assert all(item.disabled for item in card.children if isinstance(item, discord.ui.Button))
    assert interaction.edits[-1]["view"] is card
    card.stop()
