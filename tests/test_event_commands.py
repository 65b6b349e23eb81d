# test_event_commands.py

import pytest
from unittest.mock import AsyncMock, MagicMock

from event_commands import EventCommands
from help_commands import HelpCommands


@pytest.fixture
def bot(context):
    bot = MagicMock()
    bot.user.name = "DBE"
    bot.context = context
    bot.event_manager = context.event_manager
    return bot


@pytest.fixture
def event_commands(bot):
    return EventCommands(bot)


@pytest.fixture
def mock_interaction():
    interaction = AsyncMock()
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    interaction.guild.id = 1
    interaction.guild.owner_id = 42
    interaction.channel.id = 10
    interaction.user.id = 42
    interaction.user.guild_permissions.administrator = False
    return interaction


async def initialize(context, store, lang="enEN"):
    await store.create_config("1", "10", lang)
    await context.load_server_configs()


def sent_embed(mock):
    return mock.call_args.kwargs["embed"]


@pytest.mark.asyncio
async def test_new_event_requires_initialization(event_commands, mock_interaction):
    await event_commands.new_event.callback(
        event_commands, mock_interaction, "24/12/2030", "18:00", "Party", "Fun"
    )
    embed = sent_embed(mock_interaction.response.send_message)
    assert "not initialized" in embed.title


@pytest.mark.asyncio
async def test_new_event_wrong_channel(event_commands, mock_interaction, context, store):
    await initialize(context, store)
    mock_interaction.channel.id = 11

    await event_commands.new_event.callback(
        event_commands, mock_interaction, "24/12/2030", "18:00", "Party", "Fun"
    )
    embed = sent_embed(mock_interaction.response.send_message)
    assert "<#10>" in embed.description


@pytest.mark.asyncio
async def test_new_event_bad_date_format(event_commands, mock_interaction, context, store, chat):
    await initialize(context, store)

    await event_commands.new_event.callback(
        event_commands, mock_interaction, "2030-12-24", "18:00", "Party", "Fun"
    )
    embed = sent_embed(mock_interaction.response.send_message)
    assert "Error in the command" in embed.title
    assert chat.sent == []


@pytest.mark.asyncio
async def test_new_event_success(event_commands, mock_interaction, context, store, chat):
    await initialize(context, store)

    await event_commands.new_event.callback(
        event_commands, mock_interaction, "24/12/2030", "18:00", "Party", "Fun"
    )

    mock_interaction.response.defer.assert_awaited_once_with(ephemeral=True)
    embed = sent_embed(mock_interaction.followup.send)
    assert "**Party**" in embed.description
    assert len(chat.sent) == 1
    assert len(store.events) == 1


@pytest.mark.asyncio
async def test_new_event_in_the_past(event_commands, mock_interaction, context, store, chat):
    await initialize(context, store, lang="frFR")

    await event_commands.new_event.callback(
        event_commands, mock_interaction, "01/01/2020", "10:00", "Party", "Fun"
    )
    embed = sent_embed(mock_interaction.followup.send)
    assert "Date invalide" in embed.title
    assert chat.sent == []


@pytest.mark.asyncio
async def test_delete_event_permission_denied(event_commands, mock_interaction, store, chat):
    event = store.add_event(authorID="7")
    chat.add_message(event.channel_id, event.message_id)

    await event_commands.delete_event.callback(event_commands, mock_interaction, event.message_id)

    embed = sent_embed(mock_interaction.followup.send)
    assert "Permission denied" in embed.title
    assert event.id in store.events


@pytest.mark.asyncio
async def test_delete_event_by_author(event_commands, mock_interaction, store, chat):
    event = store.add_event(authorID="42")
    chat.add_message(event.channel_id, event.message_id)

    await event_commands.delete_event.callback(event_commands, mock_interaction, f" {event.message_id} ")

    embed = sent_embed(mock_interaction.followup.send)
    assert "Event deleted" in embed.title
    assert store.events == {}


@pytest.mark.asyncio
async def test_delete_event_not_found(event_commands, mock_interaction):
    await event_commands.delete_event.callback(event_commands, mock_interaction, "123")

    embed = sent_embed(mock_interaction.followup.send)
    assert "not found" in embed.title


@pytest.mark.asyncio
async def test_init_without_admin_role(event_commands, mock_interaction):
    mock_interaction.guild.owner_id = 5

    await event_commands.init_server.callback(event_commands, mock_interaction, "enEN")

    mock_interaction.response.send_message.assert_awaited_with(
        "You do not have the necessary permissions.", ephemeral=True
    )


@pytest.mark.asyncio
async def test_init_bad_lang(event_commands, mock_interaction, store):
    await event_commands.init_server.callback(event_commands, mock_interaction, "deDE")

    embed = sent_embed(mock_interaction.response.send_message)
    assert "- frFR" in embed.description
    assert store.configs == {}


@pytest.mark.asyncio
async def test_init_creates_then_updates_config(event_commands, mock_interaction, context, store):
    await event_commands.init_server.callback(event_commands, mock_interaction, "enEN")

    assert "Initialization successful" in sent_embed(mock_interaction.followup.send).title
    assert context.get_server_config(1).channel_id == "10"

    mock_interaction.channel.id = 20
    await event_commands.init_server.callback(event_commands, mock_interaction, "frFR")

    assert "Configuration de DBE" in sent_embed(mock_interaction.followup.send).title
    assert context.get_server_config(1).channel_id == "20"
    assert context.lang_for_server(1) == "frFR"


@pytest.mark.asyncio
async def test_help_uses_server_language(bot, mock_interaction, context, store):
    await initialize(context, store, lang="frFR")
    help_commands = HelpCommands(bot)

    await help_commands.helpme.callback(help_commands, mock_interaction)

    embed = sent_embed(mock_interaction.response.send_message)
    assert "Commandes DBE" in embed.title
    assert "✅" in embed.description
