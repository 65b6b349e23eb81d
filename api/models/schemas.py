from datetime import datetime
from typing import List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from utils import parse_iso_datetime


class Event(BaseModel):
    """Event record as stored by the backend (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    server_id: str = Field(..., alias="serverID")
    channel_id: str = Field(..., alias="channelID")
    message_id: str = Field(..., alias="messageID")
    author_id: str = Field(..., alias="authorID")
    title: str
    description: str = ""
    date: datetime
    image: Optional[str] = None
    participants: Set[str] = Field(default_factory=set)

    @field_validator("id", "server_id", "channel_id", "message_id", "author_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value) if value is not None else value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_iso_datetime(value)

    @field_validator("participants", mode="before")
    @classmethod
    def _coerce_participants(cls, value):
        if value is None:
            return set()
        return {str(user_id) for user_id in value}

    @field_validator("image", mode="before")
    @classmethod
    def _blank_image(cls, value):
        return value or None

    @field_serializer("participants")
    def _serialize_participants(self, participants):
        return sorted(participants)

    @field_serializer("date")
    def _serialize_date(self, date):
        return date.isoformat()

    def with_participants(self, participants):
        return self.model_copy(update={"participants": set(participants)})

    def to_store_payload(self):
        return self.model_dump(by_alias=True, exclude={"id"})


class EventCreateRequest(BaseModel):
    author_id: str
    title: str
    description: str = ""
    date: datetime
    image: Optional[str] = None
    server_id: str
    channel_id: str

    @field_validator("author_id", "server_id", "channel_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_iso_datetime(value)


class ServerConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    server_id: str = Field(..., alias="serverID")
    channel_id: str = Field(..., alias="channelID")
    lang: str

    @field_validator("id", "server_id", "channel_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value) if value is not None else value


class ReactionSignal(BaseModel):
    message_id: str
    channel_id: str
    user_id: str
    emoji: str
    direction: Literal["add", "remove"]

    @field_validator("message_id", "channel_id", "user_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value)


class ReconciliationReport(BaseModel):
    checked: int = 0
    unchanged: int = 0
    patched: int = 0
    skipped: int = 0
    failed: int = 0
    patched_event_ids: List[str] = Field(default_factory=list)
