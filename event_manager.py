# event_manager.py

"""
Event lifecycle: creation, rendering and deletion of events.

The manager owns the binding between a Discord message and its event record.
The store record is the source of truth for participants; the message is only
ever rendered from a record the store has accepted.
"""

import logging

from api.models.schemas import Event, EventCreateRequest
from api.utils.embeds import create_event_embed
from errors import (
    ChatPlatformError, CreationError, DBEError, NotFoundError,
    PermissionDeniedError, StoreError, ValidationError,
)
from utils import is_in_future, utc_now

logger = logging.getLogger(__name__)


class EventManager:
    def __init__(self, context, bot_name="DBE", clock=utc_now):
        self.context = context
        self.bot_name = bot_name
        self.clock = clock

    @property
    def store(self):
        return self.context.store

    @property
    def chat(self):
        return self.context.chat

    def build_embed(self, event: Event):
        return create_event_embed(
            self.context.lang_for_server(event.server_id),
            event.title,
            event.description,
            event.date,
            event.participants,
            image=event.image,
            timezone=self.context.timezone,
            bot_name=self.bot_name,
        )

    async def render(self, event: Event):
        """Re-render the bound message from the event's current state (one edit call)."""
        await self.chat.edit_message(event.channel_id, event.message_id, self.build_embed(event))
        logger.debug(f"Rendered event {event.id} on message {event.message_id} "
                     f"({len(event.participants)} participant(s))")

    async def create_event(self, request: EventCreateRequest) -> Event:
        """
        Post a new event message, persist the event, then add the marker reactions.

        Raises ValidationError when the date is not in the future (nothing is
        sent) and CreationError when sending or persisting fails. If the store
        rejects the event the message that was already sent is deleted.
        """
        if not is_in_future(request.date, self.clock()):
            logger.warning(f"User {request.author_id} tried to create an event in the past ({request.date.isoformat()})")
            raise ValidationError("The event date must be in the future")

        draft = Event(
            serverID=request.server_id,
            channelID=request.channel_id,
            messageID="0",
            authorID=request.author_id,
            title=request.title,
            description=request.description,
            date=request.date,
            image=request.image,
        )

        try:
            message_id = await self.chat.send_message(request.channel_id, self.build_embed(draft))
        except DBEError as e:
            logger.error(f"Could not send the event message in channel {request.channel_id}: {e}")
            raise CreationError(f"Could not send the event message: {e}") from e

        pending = draft.model_copy(update={"message_id": message_id})
        try:
            event = await self.store.create_event(pending.to_store_payload())
        except (StoreError, NotFoundError) as e:
            logger.error(f"Could not persist the event for message {message_id}: {e}")
            try:
                await self.chat.delete_message(request.channel_id, message_id)
            except DBEError as delete_error:
                logger.error(f"Could not delete orphan event message {message_id}: {delete_error}")
            raise CreationError(f"Could not persist the event: {e}") from e

        logger.info(f"Event {event.id} created by {event.author_id} on message {event.message_id}")

        for emoji in (self.context.emoji_valid, self.context.emoji_invalid):
            try:
                await self.chat.add_reaction(event.channel_id, event.message_id, emoji)
            except DBEError as e:
                logger.warning(f"Could not add {emoji} to event message {event.message_id}: {e}")

        return event

    async def delete_event(self, message_id, requesting_user_id, is_privileged: bool) -> Event:
        """
        Delete the event bound to ``message_id``.

        Only the author or a privileged member may delete. The store record is
        deleted first; if that fails the message is kept. Deleting the message
        afterwards is best effort.
        """
        async with self.context.locks.hold(message_id):
            event = await self.store.get_event_by_message_id(message_id)

            is_author = str(requesting_user_id) == event.author_id
            if not is_author and not is_privileged:
                logger.info(f"User {requesting_user_id} is not allowed to delete event {event.id}")
                raise PermissionDeniedError(f"User {requesting_user_id} cannot delete event {event.id}")

            await self.store.delete_event(event.id)
            logger.info(f"Event {event.id} was deleted by {requesting_user_id} "
                        f"({'the author' if is_author else 'an administrator'})")

            try:
                await self.chat.delete_message(event.channel_id, event.message_id)
            except (ChatPlatformError, NotFoundError) as e:
                logger.warning(f"Event {event.id} deleted but its message {event.message_id} could not be: {e}")

        return event
