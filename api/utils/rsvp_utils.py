# rsvp_utils.py - participant set helpers shared by the sync and RSVP managers

import logging
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)

RSVP_ADD = "add"
RSVP_REMOVE = "remove"


def resolve_participants(reactor_ids: Iterable, bot_id) -> Set[str]:
    """
    Build the canonical participant set from the users who reacted with the
    "attending" emoji: every id except the bot's own, duplicates collapsed.
    """
    bot_id = str(bot_id) if bot_id is not None else None
    return {str(user_id) for user_id in reactor_ids if str(user_id) != bot_id}


def apply_participant_change(participants: Iterable, user_id, direction: str,
                             bot_id: Optional[str] = None) -> Set[str]:
    """
    Return a new participant set with ``user_id`` added or removed.

    Both directions are idempotent. The bot never becomes a participant.
    """
    updated = {str(p) for p in participants}
    user_id = str(user_id)

    if direction == RSVP_ADD:
        if bot_id is not None and user_id == str(bot_id):
            logger.debug("Ignoring attempt to add the bot as a participant")
        else:
            updated.add(user_id)
    elif direction == RSVP_REMOVE:
        updated.discard(user_id)
    else:
        raise ValueError(f"Unknown RSVP direction: {direction}")

    if bot_id is not None:
        updated.discard(str(bot_id))
    return updated


def participants_match(left: Iterable, right: Iterable) -> bool:
    """Order-independent comparison of two participant collections."""
    return {str(p) for p in left} == {str(p) for p in right}
