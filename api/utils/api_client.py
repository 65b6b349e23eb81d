# api_client.py - HTTP clients for the event backend (events and server configs)

import aiohttp
import asyncio
import logging
from typing import Iterable, List, Optional
from aiohttp import ClientError
from pydantic import ValidationError as SchemaError

from api.models.schemas import Event, ServerConfig
from errors import NotFoundError, StoreError, StoreUnavailableError

# Set up logging
logger = logging.getLogger(__name__)


async def retry_api_call(call, max_retries=3, delay=1):
    """Retry an idempotent store call with exponential backoff."""
    for attempt in range(max_retries):
        try:
            return await call()
        except StoreError as e:
            if attempt == max_retries - 1:
                raise
            logger.warning(f"Store call failed (attempt {attempt + 1}/{max_retries}): {e}")
            await asyncio.sleep(delay * (2 ** attempt))  # Exponential backoff


class BackendClient:
    """
    Thin aiohttp wrapper around the backend REST API.

    Every request is bounded by ``timeout`` seconds. A 404 raises
    NotFoundError; any other failure (non-2xx status, client error, timeout)
    raises StoreError.
    """
    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0,
                 session: Optional[aiohttp.ClientSession] = None, retry_delay: float = 1):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.session = session

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the client's aiohttp session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def parse(self, model, data, what):
        """Validate a backend record; a malformed body is a store failure."""
        try:
            return model.model_validate(data)
        except SchemaError as e:
            raise StoreError(f"Malformed {what} from the store: {e.error_count()} error(s)") from e

    def parse_list(self, model, data, what):
        """Validate a list of records, skipping the malformed ones."""
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(f"Expected a list of {what}, got {type(data).__name__}")
        records = []
        for item in data:
            try:
                records.append(model.model_validate(item))
            except SchemaError as e:
                record_id = item.get('id') if isinstance(item, dict) else None
                logger.error(f"Skipping malformed {what} record {record_id}: {e.error_count()} error(s)")
        return records

    async def request(self, method: str, path: str, json=None, params=None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        session = await self.get_session()
        try:
            async with session.request(method, url, json=json, params=params, headers=self._headers(),
                                       timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
                if response.status == 404:
                    raise NotFoundError(f"{method} {url} returned 404")
                if response.status >= 400:
                    body = await response.text()
                    raise StoreError(f"{method} {url} failed: {response.status} - {body}")
                if response.status == 204:
                    return None
                try:
                    return await response.json()
                except ValueError as e:
                    raise StoreError(f"{method} {url} returned invalid JSON: {e}") from e
        except asyncio.TimeoutError as e:
            raise StoreError(f"{method} {url} timed out after {self.timeout}s") from e
        except ClientError as e:
            raise StoreError(f"{method} {url} failed: {e}") from e


class EventStoreClient(BackendClient):
    """Event Store collaborator: CRUD plus participant patch on event records."""

    async def list_events(self) -> List[Event]:
        try:
            data = await retry_api_call(lambda: self.request("GET", "/events"), delay=self.retry_delay)
        except (StoreError, NotFoundError) as e:
            raise StoreUnavailableError(f"Could not list events: {e}") from e
        try:
            return self.parse_list(Event, data, "event")
        except StoreError as e:
            raise StoreUnavailableError(f"Could not list events: {e}") from e

    async def get_event_by_message_id(self, message_id) -> Event:
        data = await retry_api_call(
            lambda: self.request("GET", "/events", params={"messageID": str(message_id)}),
            delay=self.retry_delay,
        )
        if not data:
            raise NotFoundError(f"No event bound to message {message_id}")
        if len(data) > 1:
            logger.warning(f"{len(data)} events bound to message {message_id}, using the first one")
        return self.parse(Event, data[0], "event")

    async def create_event(self, fields: dict) -> Event:
        data = await self.request("POST", "/events", json=fields)
        return self.parse(Event, data, "event")

    async def patch_participants(self, event_id, participants: Iterable[str]) -> Event:
        payload = {"participants": sorted({str(p) for p in participants})}
        data = await self.request("PUT", f"/events/{event_id}", json=payload)
        return self.parse(Event, data, "event")

    async def delete_event(self, event_id):
        await self.request("DELETE", f"/events/{event_id}")
        logger.debug(f"Deleted event {event_id} from the store")


class ServerConfigClient(BackendClient):
    """Per-server configuration records (command channel and language)."""

    async def list_configs(self) -> List[ServerConfig]:
        data = await retry_api_call(lambda: self.request("GET", "/server-configs"), delay=self.retry_delay)
        return self.parse_list(ServerConfig, data, "server config")

    async def create_config(self, server_id, channel_id, lang) -> ServerConfig:
        payload = {"serverID": str(server_id), "channelID": str(channel_id), "lang": lang}
        data = await self.request("POST", "/server-configs", json=payload)
        return self.parse(ServerConfig, data, "server config")

    async def update_config(self, config_id, channel_id, lang) -> ServerConfig:
        payload = {"channelID": str(channel_id), "lang": lang}
        data = await self.request("PUT", f"/server-configs/{config_id}", json=payload)
        return self.parse(ServerConfig, data, "server config")
