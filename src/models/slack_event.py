"""Slack event models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Intent(str, Enum):
    """Closed set of purposes an inbound event can have."""
    HANDSHAKE = "HANDSHAKE"
    INDEXABLE_MESSAGE = "INDEXABLE_MESSAGE"
    JOIN_BACKFILL = "JOIN_BACKFILL"
    BOT_QUERY = "BOT_QUERY"
    IGNORED = "IGNORED"
    UNRECOGNIZED = "UNRECOGNIZED"


class MessageEvent(BaseModel):
    """A Slack message, either from a live event or a history page."""
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = Field(None, description="Event type, e.g. message")
    channel: Optional[str] = Field(None, description="Channel ID; absent on history pages")
    ts: Optional[str] = Field(None, description="Message timestamp '<seconds>.<fraction>'")
    user: Optional[str] = Field(None, description="Author user ID")
    text: str = Field("", description="Message text")
    subtype: Optional[str] = Field(None, description="Message subtype, e.g. channel_join")


class EventEnvelope(BaseModel):
    """Outer payload delivered to the events webhook."""
    model_config = ConfigDict(extra="allow")

    token: Optional[str] = Field(None, description="Verification token")
    team_id: Optional[str] = Field(None, description="Slack team ID")
    type: Optional[str] = Field(None, description="url_verification or event_callback")
    event: Optional[MessageEvent] = Field(None, description="Inner event for event_callback")
    challenge: Optional[str] = Field(None, description="Handshake challenge")


class Classification(BaseModel):
    """Result of classifying an envelope."""
    intent: Intent
    subtype_key: Optional[str] = Field(None, description="event.type[.subtype] that was matched")
    query: Optional[str] = Field(None, description="Search text for BOT_QUERY")
    challenge: Optional[str] = Field(None, description="Value to echo for HANDSHAKE")
    reason: Optional[str] = Field(None, description="Why the event was ignored or unrecognized")
