"""Search index document and hit models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


def make_object_id(channel: str, ts: str) -> str:
    """Deterministic index key for a message; re-indexing overwrites instead of duplicating."""
    return f"{channel}.{ts}"


class IndexDocument(BaseModel):
    """A message as stored in a team's index. Unknown message fields are kept."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    object_id: str = Field(..., alias="objectID")
    channel: str
    ts: str
    user: Optional[str] = None
    text: str = ""

    def to_record(self) -> dict:
        """Plain dict as sent to the index."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SearchHit(BaseModel):
    """The subset of a document returned by a query."""
    model_config = ConfigDict(extra="ignore")

    channel: str
    ts: str
    user: Optional[str] = None
    text: str = ""

    @property
    def seconds(self) -> int:
        """Integer-seconds part of ts."""
        return int(self.ts.split(".")[0])

    @property
    def permalink_id(self) -> str:
        """ts with its separating dot removed, as used in archive links."""
        return self.ts.replace(".", "", 1)
