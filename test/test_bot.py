"""Tests for the Telegram handlers using mocked updates."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import MINT, FakeRunner

import telegram_deploy_bot as bot
from launcher.models.deployment import Target
from launcher.templates import TemplateCatalog

TEMPLATES = TemplateCatalog.from_dict({
    "metaplex": [{"id": "cat", "name": "Cat", "description": "cat coin",
                  "params": {"name": "Cat Coin", "symbol": "CAT", "tokens": 5, "uri": "u"}}],
    "evm": [],
})


def _context(services):
    return SimpleNamespace(application=SimpleNamespace(bot_data={"services": services}))


def _update(user_id=1, text=None, data=None):
    chat = MagicMock()
    chat.id = 100
    chat.send_message = AsyncMock()
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_chat = chat
    update.message.text = text
    if data is None:
        update.callback_query = None
    else:
        update.callback_query = MagicMock()
        update.callback_query.data = data
        update.callback_query.answer = AsyncMock()
        update.callback_query.edit_message_text = AsyncMock()
    return update


def _sent(update):
    return [call.args[0] for call in update.effective_chat.send_message.call_args_list]


@pytest.fixture
def services(settings):
    services = bot.BotServices.create(settings, TEMPLATES)
    runner = FakeRunner([f"Mint: {MINT}"])
    services.metaplex.runner = runner
    services.evm.runner = runner
    return services


async def test_denied_user_gets_refusal_and_nothing_else(make_settings):
    services = bot.BotServices.create(make_settings(allowed_users=frozenset({2})), TEMPLATES)
    update = _update(user_id=1, data="metaplex_custom")

    await bot.button_callback(update, _context(services))

    assert _sent(update) == [bot.ACCESS_DENIED_TEXT]
    assert services.sessions.get(1) is None


async def test_custom_flow_through_handlers(services):
    context = _context(services)

    update = _update(data="metaplex_custom")
    await bot.button_callback(update, context)
    assert _sent(update) == ["Enter the token name:"]

    for answer in ["Moon Cat", "MCAT", "1000", "https://x/m.json"]:
        await bot.text_message(_update(text=answer), context)

    last = _update(text="devnet")
    await bot.text_message(last, context)
    assert _sent(last)[0].startswith("Metaplex parameters:")
    markup = last.effective_chat.send_message.call_args.kwargs["reply_markup"]
    assert markup.inline_keyboard[0][0].callback_data == "confirm_metaplex_custom"

    confirm = _update(data="confirm_metaplex_custom")
    await bot.button_callback(confirm, context)
    messages = _sent(confirm)
    assert messages[0].startswith("⏳")
    assert messages[-1].startswith("✅ Solana token deployed")
    assert services.sessions.get(1) is None

    history = _update(data="my_deploys")
    await bot.button_callback(history, context)
    assert "Moon Cat (MCAT)" in _sent(history)[0]
    assert "METAPLEX" in _sent(history)[0]


async def test_confirm_custom_without_session(services):
    update = _update(data="confirm_evm_custom")
    await bot.button_callback(update, _context(services))
    assert "No finished custom session" in _sent(update)[0]


async def test_template_confirm_deploys(services):
    update = _update(data="confirm_metaplex_cat")
    await bot.button_callback(update, _context(services))
    assert _sent(update)[-1].startswith("✅")
    assert "Cat Coin (CAT)" in services.history.list(1)[0].summary


async def test_cancel_clears_session(services):
    services.sessions.start(1, Target.EVM)
    update = _update(text="/cancel")
    await bot.cancel(update, _context(services))
    assert services.sessions.get(1) is None
    assert _sent(update) == ["Session reset."]


async def test_empty_history(services):
    update = _update(data="my_deploys")
    await bot.button_callback(update, _context(services))
    assert "No deploys yet" in _sent(update)[0]


class GatedRunner(FakeRunner):
    """Holds every process open until release is set"""

    def __init__(self, results=None):
        super().__init__(results)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def run(self, command, timeout, label="command"):
        self.started.set()
        await self.release.wait()
        return await super().run(command, timeout, label)


async def _fill_metaplex_session(context):
    await bot.button_callback(_update(data="metaplex_custom"), context)
    for answer in ["Moon Cat", "MCAT", "1000", "https://x/m.json", "devnet"]:
        await bot.text_message(_update(text=answer), context)


@pytest.fixture
def gated_services(settings):
    services = bot.BotServices.create(settings, TEMPLATES)
    services.metaplex.runner = GatedRunner([f"Mint: {MINT}"])
    return services


async def test_second_deploy_tap_does_not_mint_again(gated_services):
    context = _context(gated_services)
    runner = gated_services.metaplex.runner
    await _fill_metaplex_session(context)

    first = asyncio.create_task(bot.button_callback(_update(data="confirm_metaplex_custom"), context))
    await runner.started.wait()

    second = _update(data="confirm_metaplex_custom")
    await bot.button_callback(second, context)
    assert "No finished custom session" in _sent(second)[0]

    runner.release.set()
    await first
    assert len(runner.calls) == 1
    assert len(gated_services.history.list(1)) == 1


async def test_flow_started_during_deploy_survives_it(gated_services):
    context = _context(gated_services)
    runner = gated_services.metaplex.runner
    await _fill_metaplex_session(context)

    deploy = asyncio.create_task(bot.button_callback(_update(data="confirm_metaplex_custom"), context))
    await runner.started.wait()

    await bot.button_callback(_update(data="evm_custom"), context)
    await bot.text_message(_update(text="Base Token"), context)

    runner.release.set()
    await deploy
    session = gated_services.sessions.get(1)
    assert session is not None
    assert session.target is Target.EVM
    assert session.collected == {"name": "Base Token"}
