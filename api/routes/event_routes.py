"""
FastAPI router for event endpoints.
Lists the stored events and re-runs the reaction reconciliation on demand.
"""

from fastapi import APIRouter, HTTPException, Depends
import logging

from api.utils.discord_utils import get_context
from errors import DBEError, StoreUnavailableError

# Set up logging
logger = logging.getLogger(__name__)

# Create the router
router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("")
async def list_events(context=Depends(get_context)):
    try:
        events = await context.store.list_events()
    except StoreUnavailableError as e:
        logger.error(f"Could not list events: {e}")
        raise HTTPException(status_code=503, detail="Event store is unavailable")

    return [event.model_dump(by_alias=True, mode="json") for event in events]


@router.post("/reconcile")
async def reconcile_events(context=Depends(get_context)):
    """Re-derive every event's participants from the live reactions."""
    if context.sync_manager is None:
        raise HTTPException(status_code=503, detail="Reconciliation is not available yet")

    try:
        report = await context.sync_manager.reconcile_all()
    except StoreUnavailableError as e:
        logger.error(f"Manual reconciliation aborted: {e}")
        raise HTTPException(status_code=503, detail="Event store is unavailable")
    except DBEError as e:
        logger.error(f"Manual reconciliation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Manual reconciliation finished: {report.patched} event(s) patched")
    return report.model_dump()
