# DBE_Bot.py

import asyncio
import logging

import discord
import uvicorn
from discord.ext import commands

from api.models.schemas import ReactionSignal
from api.utils.api_client import EventStoreClient, ServerConfigClient
from api.utils.discord_utils import DiscordChatBinding
from api.utils.embeds import create_notice_embed
from bot_rest_api import app
from common import (
    bot_token, call_timeout, default_lang, event_timezone, is_privileged,
    reaction_emoji_delete, reaction_emoji_invalid, reaction_emoji_valid,
    server_id, store_token, store_url,
)
from config import BOT_CONFIG
from errors import DBEError, NotFoundError, PermissionDeniedError, StoreUnavailableError
from event_manager import EventManager
from i18n import get_text
from rsvp_manager import RSVPManager
from rsvp_sync_manager import EventSyncManager
from shared_states import BotContext, bot_ready, set_bot_context
from utils import setup_logging

# Configure logging
logger = logging.getLogger(__name__)

# Initialize Discord bot with intents
intents = discord.Intents.default()
intents.members = True
intents.guilds = True
intents.reactions = True


class DBEBot(commands.Bot):
    """
    Discord bot that owns the event engine.

    The context (store clients, server configs, chat binding and managers) is
    built once in ``on_ready``; reaction events are processed only after the
    startup reconciliation pass has run.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.context = None
        self.event_manager = None
        self.rsvp_manager = None
        self.sync_manager = None
        self.api_task = None

    async def setup_hook(self):
        """Called when the bot is starting up"""
        logger.info("Setting up bot...")
        for extension in ('event_commands', 'help_commands'):
            try:
                await self.load_extension(extension)
                logger.info(f"Loaded {extension} cog")
            except Exception as e:
                logger.error(f"Failed to load {extension} cog: {e}")
        logger.info("Bot setup completed")

    async def build_context(self):
        """Build the bot context: store clients, server configs, chat binding, managers."""
        store = EventStoreClient(store_url, token=store_token, timeout=call_timeout)
        server_configs = ServerConfigClient(store_url, token=store_token, timeout=call_timeout)

        context = BotContext(
            store,
            server_configs,
            DiscordChatBinding(self, timeout=call_timeout),
            self.user.id,
            emojis={
                "valid": reaction_emoji_valid,
                "invalid": reaction_emoji_invalid,
                "delete": reaction_emoji_delete,
            },
            default_lang=default_lang,
            timezone=event_timezone,
        )
        try:
            await context.load_server_configs()
        except DBEError as e:
            logger.error(f"Could not load the server configs, commands will ask for /dbeinit: {e}")

        context.event_manager = EventManager(context, bot_name=self.user.name)
        context.rsvp_manager = RSVPManager(context, context.event_manager)
        context.sync_manager = EventSyncManager(context, context.event_manager)
        return context

    async def close(self):
        """Called when the bot is shutting down"""
        logger.info("Closing bot and cleaning up resources...")
        if self.api_task and not self.api_task.done():
            self.api_task.cancel()
        if self.context:
            await self.context.close()
        await super().close()
        logger.info("Bot closed successfully")


bot = DBEBot(command_prefix="!", intents=intents)


async def run_startup_reconciliation(context):
    """Run the reconciliation pass once, then open the reaction gate."""
    try:
        await context.sync_manager.reconcile_all()
    except StoreUnavailableError as e:
        logger.error(f"⚠️ Startup reconciliation aborted, continuing without it: {e}")
    except DBEError as e:
        logger.error(f"⚠️ Startup reconciliation failed, continuing without it: {e}")
    finally:
        context.reconciled.set()
        logger.info("Reaction processing enabled")


async def notify_user(context, user_id, lang, path, level='error'):
    embed = create_notice_embed(lang, get_text(lang, path), level=level,
                                bot_name=bot.user.name if bot.user else "DBE")
    try:
        await context.chat.send_direct_message(user_id, embed)
    except DBEError as e:
        logger.warning(f"Could not send a direct message to {user_id}: {e}")


async def process_reaction(context, signal: ReactionSignal, guild_id=None, member=None):
    """
    Route a reaction to the RSVP mutator or to event deletion.

    Reactions on messages that are not events are ignored, except in the
    server's event channel where the user is told the event was not found.
    Other failures are reported to the reacting user by direct message.
    """
    if signal.user_id == context.bot_id:
        return

    is_rsvp = signal.emoji == context.emoji_valid
    is_delete = signal.emoji == context.emoji_delete and signal.direction == "add"
    if not is_rsvp and not is_delete:
        return

    await context.reconciled.wait()
    lang = context.lang_for_server(guild_id)

    try:
        if is_rsvp:
            await context.rsvp_manager.handle_reaction(signal.message_id, signal.user_id, signal.direction)
        else:
            await context.event_manager.delete_event(signal.message_id, signal.user_id, is_privileged(member))
            await notify_user(context, signal.user_id, lang, 'delete.success', level='success')
    except NotFoundError:
        logger.debug(f"Reaction {signal.emoji} on message {signal.message_id} is not on an event")
        config = context.get_server_config(guild_id)
        if config is not None and config.channel_id == signal.channel_id:
            await notify_user(context, signal.user_id, lang, 'system.notFound')
    except PermissionDeniedError:
        await notify_user(context, signal.user_id, lang, 'system.permissionDenied')
    except DBEError as e:
        logger.error(f"Reaction {signal.emoji} by {signal.user_id} on message {signal.message_id} failed: {e}")
        await notify_user(context, signal.user_id, lang, 'system.unknownError')


def dispatch_reaction(payload: discord.RawReactionActionEvent, direction: str):
    if bot.context is None or payload.user_id == bot.user.id:
        return

    signal = ReactionSignal(
        message_id=payload.message_id,
        channel_id=payload.channel_id,
        user_id=payload.user_id,
        emoji=str(payload.emoji),
        direction=direction,
    )
    logger.debug(f"Raw reaction {direction}: {signal.emoji} by user: {signal.user_id} "
                 f"for message_id: {signal.message_id}")

    # Process the reaction in a background task
    asyncio.create_task(process_reaction(bot.context, signal, guild_id=payload.guild_id, member=payload.member))


@bot.event
async def on_ready():
    logger.info(f"Logged in as {bot.user.name} (ID: {bot.user.id})")
    if bot.context is not None:
        logger.info("Reconnected, the context is already built")
        return

    context = await bot.build_context()
    bot.context = context
    bot.event_manager = context.event_manager
    bot.rsvp_manager = context.rsvp_manager
    bot.sync_manager = context.sync_manager
    set_bot_context(context)
    bot_ready.set()

    await run_startup_reconciliation(context)

    bot.api_task = asyncio.create_task(start_rest_api())

    try:
        if server_id:
            guild = discord.Object(id=int(server_id))
            bot.tree.copy_global_to(guild=guild)
            await bot.tree.sync(guild=guild)
        else:
            await bot.tree.sync()
        logger.info(f"Commands registered after syncing: {[cmd.name for cmd in bot.tree.walk_commands()]}")
    except discord.HTTPException as e:
        logger.error(f"Error syncing commands: {e}")


@bot.event
async def on_raw_reaction_add(payload):
    dispatch_reaction(payload, "add")


@bot.event
async def on_raw_reaction_remove(payload):
    dispatch_reaction(payload, "remove")


async def start_rest_api():
    """Starts the FastAPI server using Uvicorn inside the bot's event loop."""
    config = uvicorn.Config(
        app,
        host=BOT_CONFIG['api_host'],
        port=BOT_CONFIG['api_port'],
        log_level="info",
        lifespan="off",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting REST API server on port {BOT_CONFIG['api_port']}")
    try:
        await server.serve()
    except SystemExit:
        # Uvicorn calls sys.exit() when it cannot bind
        logger.error(f"REST API server could not start on port {BOT_CONFIG['api_port']}")


if __name__ == "__main__":
    setup_logging(BOT_CONFIG['log_level'], BOT_CONFIG['log_file'])
    try:
        bot.run(bot_token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Bot shutdown via KeyboardInterrupt")
