"""Normalize messages into index documents and submit them."""

import asyncio
from typing import Iterable, Optional
from src.models.index_document import IndexDocument, make_object_id
from src.services.search_index import SearchIndex
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


def build_index_document(message: dict, channel: Optional[str] = None) -> IndexDocument:
    """
    Turn a raw Slack message into an index document.

    The message's own `channel` wins over the one passed in; history pages
    carry no channel so the caller supplies it.
    """
    record = dict(message)
    record_channel = record.get("channel") or channel
    if not record_channel:
        raise ValueError("message has no channel")
    if not record.get("ts"):
        raise ValueError("message has no ts")

    record["channel"] = record_channel
    record["objectID"] = make_object_id(record_channel, record["ts"])
    return IndexDocument.model_validate(record)


class MessageIndexer:
    """Submits documents to a team's index, applying index settings once per team per process."""

    def __init__(self, search_index: SearchIndex):
        self.search_index = search_index
        self._configured: set[str] = set()
        self._locks: dict[str, asyncio.Lock] = {}

    def is_configured(self, team_id: str) -> bool:
        return team_id in self._configured

    async def ensure_settings(self, team_id: str) -> None:
        if team_id in self._configured:
            return

        # Lock only avoids duplicate set_settings calls; applying twice is harmless
        lock = self._locks.setdefault(team_id, asyncio.Lock())
        async with lock:
            if team_id in self._configured:
                return
            await self.search_index.apply_settings(team_id)
            self._configured.add(team_id)
            logger.info("Applied index settings", team_id=team_id)

    async def index_message(self, team_id: str, message: dict, channel: Optional[str] = None) -> IndexDocument:
        """Index a single live message."""
        document = build_index_document(message, channel)
        await self.ensure_settings(team_id)
        await self.search_index.save_documents(team_id, [document.to_record()])
        logger.info(
            "Indexed message",
            team_id=team_id,
            object_id=document.object_id,
            user=mask_user_id(document.user)
        )
        return document

    async def index_batch(self, team_id: str, channel: str, messages: Iterable[dict]) -> int:
        """Index a page of history. An empty batch is still submitted."""
        documents = [build_index_document(message, channel) for message in messages]
        await self.ensure_settings(team_id)
        await self.search_index.save_documents(team_id, [doc.to_record() for doc in documents])
        logger.debug("Indexed batch", team_id=team_id, channel=channel, count=len(documents))
        return len(documents)
