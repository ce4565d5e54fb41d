"""Dispatcher outcome model."""

from typing import Optional
from pydantic import BaseModel
from src.models.backfill import BackfillResult
from src.models.reply import ReplyPayload
from src.models.slack_event import Intent


class DispatchOutcome(BaseModel):
    """What handling one envelope did. The webhook caller is acknowledged regardless of error."""
    intent: Optional[Intent] = None
    team_id: Optional[str] = None
    body: Optional[str] = None
    indexed: int = 0
    reply: Optional[ReplyPayload] = None
    backfill: Optional[BackfillResult] = None
    error: Optional[str] = None
