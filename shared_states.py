# shared_states.py

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from utils import utc_now

logger = logging.getLogger(__name__)

# Set once the bot is connected and its context is built
bot_ready = asyncio.Event()

_bot_context = None


class EventLockRegistry:
    """
    One asyncio.Lock per event message id.

    Every read-modify-write of an event's participants (reconciliation,
    reaction handling, deletion) runs inside ``hold(message_id)``, so two
    signals for the same message never interleave. Different events never
    share a lock. An entry only lives while some task holds or waits on it,
    so reactions on ordinary messages leave nothing behind.
    """
    def __init__(self):
        # message id -> [lock, number of tasks holding or waiting]
        self._locks: Dict[str, list] = {}

    @asynccontextmanager
    async def hold(self, message_id):
        key = str(message_id)
        entry = self._locks.get(key)
        if entry is None:
            entry = [asyncio.Lock(), 0]
            self._locks[key] = entry
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    def is_locked(self, message_id) -> bool:
        entry = self._locks.get(str(message_id))
        return entry is not None and entry[0].locked()

    def __len__(self):
        return len(self._locks)


class BotContext:
    """
    Everything the event engine needs, built explicitly at startup.

    Initialization order: the store clients, then the server configs, then the
    chat binding; the managers are constructed from a ready context.
    ``reconciled`` is set after the startup reconciliation pass and gates
    reaction processing.
    """
    def __init__(self, store, server_configs, chat, bot_id, emojis=None,
                 default_lang="enEN", timezone="UTC"):
        self.store = store
        self.server_config_store = server_configs
        self.chat = chat
        self.bot_id = str(bot_id) if bot_id is not None else None
        self.emojis = emojis or {}
        self.default_lang = default_lang
        self.timezone = timezone
        self.locks = EventLockRegistry()
        self.server_configs = {}
        self.reconciled = asyncio.Event()
        # Managers are attached once the context is ready
        self.event_manager = None
        self.rsvp_manager = None
        self.sync_manager = None
        self.start_time = utc_now()

    @property
    def emoji_valid(self):
        return self.emojis.get("valid", "✅")

    @property
    def emoji_invalid(self):
        return self.emojis.get("invalid", "❌")

    @property
    def emoji_delete(self):
        return self.emojis.get("delete", "🗑️")

    async def load_server_configs(self):
        configs = await self.server_config_store.list_configs()
        self.server_configs = {config.server_id: config for config in configs}
        logger.info(f"Loaded {len(self.server_configs)} server config(s)")
        return self.server_configs

    def get_server_config(self, server_id):
        if server_id is None:
            return None
        return self.server_configs.get(str(server_id))

    def lang_for_server(self, server_id) -> str:
        config = self.get_server_config(server_id)
        return config.lang if config else self.default_lang

    async def close(self):
        logger.info("Closing bot context...")
        close = getattr(self.store, "close", None)
        if close:
            await close()
        if self.server_config_store is not self.store:
            close = getattr(self.server_config_store, "close", None)
            if close:
                await close()


def set_bot_context(context: Optional[BotContext]):
    global _bot_context
    _bot_context = context


def get_bot_context() -> Optional[BotContext]:
    return _bot_context
