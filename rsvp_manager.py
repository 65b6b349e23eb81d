# rsvp_manager.py

import logging

from api.models.schemas import Event
from api.utils.rsvp_utils import apply_participant_change, participants_match

logger = logging.getLogger(__name__)


class RSVPManager:
    """
    Applies a single reaction-added / reaction-removed signal to an event.

    The event is re-read from the store under the event's lock, the change is
    applied to a working copy, persisted, and only then rendered. A failed
    store patch raises StoreError and leaves the message as it was.
    """

    def __init__(self, context, event_manager):
        self.context = context
        self.event_manager = event_manager

    async def handle_reaction(self, message_id, user_id, direction: str) -> Event:
        async with self.context.locks.hold(message_id):
            event = await self.context.store.get_event_by_message_id(message_id)

            participants = apply_participant_change(
                event.participants, user_id, direction, bot_id=self.context.bot_id
            )
            if participants_match(participants, event.participants):
                logger.debug(f"RSVP {direction} by {user_id} on event {event.id} changes nothing")
                return event

            updated = await self.context.store.patch_participants(event.id, participants)
            logger.info(f"{user_id} is {'joining' if direction == 'add' else 'leaving'} the event {event.id}")

            await self.event_manager.render(updated)
            return updated
