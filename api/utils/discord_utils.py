"""
Discord utility functions for the event engine.

``DiscordChatBinding`` is the chat collaborator used by the managers: every
call is bounded by a timeout and discord.py failures are translated into
NotFoundError / ChatPlatformError. ``get_context`` is the FastAPI dependency
that hands the bot context to the REST routes.
"""

import asyncio
import logging
from typing import Set

import discord
from fastapi import HTTPException

from errors import ChatPlatformError, NotFoundError
from shared_states import bot_ready, get_bot_context

logger = logging.getLogger(__name__)


async def get_context():
    """
    Dependency to get the bot context.

    Waits for the bot to be ready and returns its context.

    Raises:
        HTTPException: If the bot is not ready or the context is missing
    """
    try:
        await asyncio.wait_for(bot_ready.wait(), timeout=30.0)
    except asyncio.TimeoutError:
        logger.error("Timeout waiting for bot to be ready")
        raise HTTPException(status_code=503, detail="Bot is not ready")

    context = get_bot_context()
    if context is None:
        logger.error("Bot context is None in REST API")
        raise HTTPException(status_code=503, detail="Bot is not initialized properly")
    return context


class DiscordChatBinding:
    """Chat collaborator backed by a discord.py client."""

    def __init__(self, bot: discord.Client, timeout: float = 10.0):
        self.bot = bot
        self.timeout = timeout

    async def _call(self, coro, what: str):
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ChatPlatformError(f"{what} timed out after {self.timeout}s") from e
        except discord.NotFound as e:
            raise NotFoundError(f"{what}: not found") from e
        except discord.HTTPException as e:
            raise ChatPlatformError(f"{what} failed: {e}") from e

    async def get_text_channel(self, channel_id):
        channel_id = int(channel_id)
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            channel = await self._call(self.bot.fetch_channel(channel_id), f"Fetching channel {channel_id}")
        if not isinstance(channel, discord.abc.Messageable):
            raise NotFoundError(f"Channel {channel_id} is not a text channel")
        return channel

    async def fetch_message(self, channel_id, message_id) -> discord.Message:
        channel = await self.get_text_channel(channel_id)
        return await self._call(channel.fetch_message(int(message_id)), f"Fetching message {message_id}")

    async def fetch_reactors(self, message: discord.Message, emoji: str) -> Set[str]:
        """Ids of every user who reacted to ``message`` with ``emoji``."""
        for reaction in message.reactions:
            if str(reaction.emoji) == emoji:
                async def collect():
                    return {str(user.id) async for user in reaction.users()}
                return await self._call(collect(), f"Fetching {emoji} reactors of message {message.id}")
        return set()

    async def send_message(self, channel_id, content: discord.Embed) -> str:
        channel = await self.get_text_channel(channel_id)
        message = await self._call(channel.send(embed=content), f"Sending message to channel {channel_id}")
        return str(message.id)

    async def edit_message(self, channel_id, message_id, content: discord.Embed):
        message = await self.fetch_message(channel_id, message_id)
        await self._call(message.edit(embed=content), f"Editing message {message_id}")

    async def delete_message(self, channel_id, message_id):
        message = await self.fetch_message(channel_id, message_id)
        await self._call(message.delete(), f"Deleting message {message_id}")

    async def add_reaction(self, channel_id, message_id, emoji: str):
        message = await self.fetch_message(channel_id, message_id)
        await self._call(message.add_reaction(emoji), f"Adding {emoji} to message {message_id}")

    async def send_direct_message(self, user_id, content: discord.Embed):
        user = self.bot.get_user(int(user_id))
        if user is None:
            user = await self._call(self.bot.fetch_user(int(user_id)), f"Fetching user {user_id}")
        await self._call(user.send(embed=content), f"Sending DM to {user_id}")
