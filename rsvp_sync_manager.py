# rsvp_sync_manager.py

"""
Startup RSVP Sync Manager

Reactions toggled while the bot was offline leave no gateway event behind, so
on startup every known event is re-derived from the live reactions on its
message and the store is corrected where the two views disagree.
"""

import logging

from api.models.schemas import Event, ReconciliationReport
from api.utils.rsvp_utils import participants_match, resolve_participants
from errors import DBEError, NotFoundError

logger = logging.getLogger(__name__)


class EventSyncManager:
    """
    Reconciles stored participants with the "attending" reactions.

    Events are processed one at a time in store order. A missing channel or
    message, or any failure while handling one event, is logged and the pass
    moves on to the next event. Only a failure to list the events is raised to
    the caller (StoreUnavailableError).
    """

    def __init__(self, context, event_manager):
        self.context = context
        self.event_manager = event_manager

    async def reconcile_all(self) -> ReconciliationReport:
        logger.info("🚀 Starting event reconciliation")
        events = await self.context.store.list_events()
        report = ReconciliationReport()

        for index, event in enumerate(events, start=1):
            logger.info(f"Checking event {event.id} ({index}/{len(events)})")
            report.checked += 1
            try:
                outcome = await self.reconcile_event(event)
            except NotFoundError as e:
                logger.warning(f"⏩ Skipping event {event.id}: {e}")
                report.skipped += 1
                continue
            except DBEError as e:
                logger.error(f"❌ Could not reconcile event {event.id}: {e}")
                report.failed += 1
                continue

            if outcome is None:
                report.unchanged += 1
            else:
                report.patched += 1
                report.patched_event_ids.append(outcome.id)

        logger.info(f"✅ Reconciliation complete: {report.patched} patched, {report.unchanged} unchanged, "
                    f"{report.skipped} skipped, {report.failed} failed")
        return report

    async def reconcile_event(self, event: Event):
        """
        Reconcile a single event.

        Returns the patched event, or None when the stored participants already
        match the reactions. Raises NotFoundError when the channel or message is
        gone and StoreError / ChatPlatformError on other failures; the message is
        only edited after the store accepted the new participants.
        """
        message = await self.context.chat.fetch_message(event.channel_id, event.message_id)

        async with self.context.locks.hold(event.message_id):
            # Re-read under the lock: a live reaction may have patched the event since listing
            current = await self.context.store.get_event_by_message_id(event.message_id)
            reactors = await self.context.chat.fetch_reactors(message, self.context.emoji_valid)
            resolved = resolve_participants(reactors, self.context.bot_id)

            if participants_match(resolved, current.participants):
                logger.debug(f"Event {current.id} is up to date")
                return None

            logger.info(f"Synchronising event {current.id}: {len(current.participants)} stored, "
                        f"{len(resolved)} reacting")
            updated = await self.context.store.patch_participants(current.id, resolved)

            try:
                await self.event_manager.render(updated)
            except DBEError as e:
                logger.error(f"Event {updated.id} was patched but its message could not be re-rendered: {e}")
            return updated
