# discord bot_rest_api.py - REST API served alongside the bot

import logging

from fastapi import FastAPI

from shared_states import bot_ready, get_bot_context
from utils import utc_now

# Set up logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="DBE Bot API")

from api.routes.event_routes import router as event_router

app.include_router(event_router)


# Health check endpoint
@app.get("/health")
async def health_check():
    context = get_bot_context()
    if context is None or not bot_ready.is_set():
        return {"status": "starting", "message": "Bot REST API is running, bot is not ready"}

    uptime_seconds = (utc_now() - context.start_time).total_seconds()
    return {
        "status": "healthy",
        "message": "Bot REST API is running",
        "reconciled": context.reconciled.is_set(),
        "server_configs": len(context.server_configs),
        "uptime_seconds": round(uptime_seconds),
    }
