# conftest.py - in-memory collaborators shared by the engine tests

import itertools
from datetime import datetime, timedelta

import pytest
import pytz

from api.models.schemas import Event, ServerConfig
from errors import ChatPlatformError, NotFoundError, StoreError, StoreUnavailableError
from event_manager import EventManager
from rsvp_manager import RSVPManager
from rsvp_sync_manager import EventSyncManager
from shared_states import BotContext

BOT_ID = "999"
FIXED_NOW = datetime(2030, 1, 1, 12, 0, tzinfo=pytz.utc)


class FakeStore:
    """Event store and server config store backed by dicts."""

    def __init__(self):
        self.events = {}
        self.configs = {}
        self.patch_calls = []
        self.deleted = []
        self.fail_list = False
        self.fail_patch = False
        self.fail_create = False
        self.fail_delete = False
        self.closed = False
        self._ids = itertools.count(1)

    def add_event(self, **fields):
        event_id = str(next(self._ids))
        data = {
            "id": event_id,
            "serverID": "1",
            "channelID": "10",
            "messageID": f"100{event_id}",
            "authorID": "42",
            "title": "Game night",
            "description": "Bring snacks",
            "date": FIXED_NOW + timedelta(days=7),
            "participants": [],
        }
        data.update(fields)
        event = Event.model_validate(data)
        self.events[event_id] = event
        return event

    async def list_events(self):
        if self.fail_list:
            raise StoreUnavailableError("store is down")
        return list(self.events.values())

    async def get_event_by_message_id(self, message_id):
        for event in self.events.values():
            if event.message_id == str(message_id):
                return event
        raise NotFoundError(f"No event bound to message {message_id}")

    async def create_event(self, fields):
        if self.fail_create:
            raise StoreError("create failed")
        event_id = str(next(self._ids))
        event = Event.model_validate({**fields, "id": event_id})
        self.events[event_id] = event
        return event

    async def patch_participants(self, event_id, participants):
        self.patch_calls.append((event_id, set(participants)))
        if self.fail_patch:
            raise StoreError("patch failed")
        event = self.events[event_id].with_participants(participants)
        self.events[event_id] = event
        return event

    async def delete_event(self, event_id):
        if self.fail_delete:
            raise StoreError("delete failed")
        del self.events[event_id]
        self.deleted.append(event_id)

    async def list_configs(self):
        return list(self.configs.values())

    async def create_config(self, server_id, channel_id, lang):
        config = ServerConfig(id=str(len(self.configs) + 1), server_id=str(server_id),
                              channel_id=str(channel_id), lang=lang)
        self.configs[config.server_id] = config
        return config

    async def update_config(self, config_id, channel_id, lang):
        for server_id, config in self.configs.items():
            if config.id == config_id:
                updated = ServerConfig(id=config_id, server_id=server_id, channel_id=str(channel_id), lang=lang)
                self.configs[server_id] = updated
                return updated
        raise NotFoundError(config_id)

    async def close(self):
        self.closed = True


class FakeMessage:
    def __init__(self, message_id, channel_id, embed=None):
        self.id = message_id
        self.channel_id = channel_id
        self.embed = embed
        self.reactors = {}


class FakeChat:
    """Chat binding that keeps messages in memory and records every call."""

    def __init__(self):
        self.messages = {}
        self.edits = []
        self.sent = []
        self.deleted = []
        self.reactions_added = []
        self.direct_messages = []
        self.fail_send = False
        self.fail_edit = False
        self.fail_delete = False
        self.fail_react = False
        self._ids = itertools.count(5000)

    def add_message(self, channel_id, message_id, reactors=None, emoji="✅"):
        message = FakeMessage(str(message_id), str(channel_id))
        message.reactors[emoji] = set(reactors or [])
        self.messages[str(message_id)] = message
        return message

    async def fetch_message(self, channel_id, message_id):
        message = self.messages.get(str(message_id))
        if message is None or message.channel_id != str(channel_id):
            raise NotFoundError(f"Message {message_id} not found")
        return message

    async def fetch_reactors(self, message, emoji):
        return {str(user_id) for user_id in message.reactors.get(emoji, set())}

    async def send_message(self, channel_id, content):
        if self.fail_send:
            raise ChatPlatformError("send failed")
        message_id = str(next(self._ids))
        self.messages[message_id] = FakeMessage(message_id, str(channel_id), content)
        self.sent.append((str(channel_id), message_id, content))
        return message_id

    async def edit_message(self, channel_id, message_id, content):
        if self.fail_edit:
            raise ChatPlatformError("edit failed")
        message = await self.fetch_message(channel_id, message_id)
        message.embed = content
        self.edits.append((str(channel_id), str(message_id), content))

    async def delete_message(self, channel_id, message_id):
        if self.fail_delete:
            raise ChatPlatformError("delete failed")
        await self.fetch_message(channel_id, message_id)
        del self.messages[str(message_id)]
        self.deleted.append(str(message_id))

    async def add_reaction(self, channel_id, message_id, emoji):
        if self.fail_react:
            raise ChatPlatformError("react failed")
        self.reactions_added.append((str(message_id), emoji))

    async def send_direct_message(self, user_id, content):
        self.direct_messages.append((str(user_id), content))


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def chat():
    return FakeChat()


@pytest.fixture
def context(store, chat):
    context = BotContext(store, store, chat, BOT_ID)
    context.event_manager = EventManager(context, clock=lambda: FIXED_NOW)
    context.rsvp_manager = RSVPManager(context, context.event_manager)
    context.sync_manager = EventSyncManager(context, context.event_manager)
    return context


@pytest.fixture
def now():
    return FIXED_NOW
