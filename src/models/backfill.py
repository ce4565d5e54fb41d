"""Backfill pass result model."""

from typing import Optional
from pydantic import BaseModel, Field


class BackfillResult(BaseModel):
    """Outcome of one bounded history backfill pass over a channel."""
    team_id: str
    channel: str
    pages_fetched: int = 0
    indexed: int = 0
    skipped: int = 0
    has_more: bool = False
    budget_exhausted: bool = Field(False, description="Stopped with history left because the page budget ran out")
    cancelled: bool = False
    resume_latest: Optional[str] = Field(None, description="Oldest ts seen; pass as latest to continue")
