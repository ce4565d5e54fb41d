"""Bounded, resumable channel history backfill."""

import asyncio
from typing import Optional
from src.models.backfill import BackfillResult
from src.models.team_credential import TeamCredential
from src.services.event_classifier import match_mention
from src.services.message_indexer import MessageIndexer
from src.services.slack_client import SlackChatClient
from src.utils.config import BridgeConfig
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)


def is_indexable_history_message(message: dict, bot_user_id: Optional[str]) -> bool:
    """Skip the bot's own messages, subtyped messages and queries addressed to the bot."""
    if bot_user_id and message.get("user") == bot_user_id:
        return False
    if message.get("subtype") is not None:
        return False
    if match_mention(message.get("text"), bot_user_id) is not None:
        return False
    return True


def oldest_ts(messages: list[dict]) -> Optional[str]:
    stamps = [m["ts"] for m in messages if m.get("ts")]
    if not stamps:
        return None
    return min(stamps, key=float)


class HistoryBackfill:
    """
    Walks a channel's history backwards, one page per call, for at most
    `page_budget` pages per pass.

    Each page is filtered and submitted as one batch before the next page is
    fetched, so a failure part way leaves earlier pages indexed. Because
    documents are keyed by channel and ts, running a pass again, or resuming
    from `resume_latest`, never creates duplicates.
    """

    def __init__(
        self,
        indexer: MessageIndexer,
        page_budget: Optional[int] = None,
        page_size: Optional[int] = None
    ):
        self.indexer = indexer
        self.page_budget = BridgeConfig.BACKFILL_PAGE_BUDGET if page_budget is None else page_budget
        self.page_size = page_size or BridgeConfig.BACKFILL_PAGE_SIZE

    async def backfill(
        self,
        credential: TeamCredential,
        user_client: SlackChatClient,
        channel: str,
        latest: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> BackfillResult:
        """Run one pass. `user_client` must use the team's user token."""
        result = BackfillResult(team_id=credential.team_id, channel=channel, resume_latest=latest)
        has_more = True

        with log_timing("history_backfill", logger=logger, team_id=credential.team_id, channel=channel):
            while has_more and result.pages_fetched < self.page_budget:
                if cancel_event is not None and cancel_event.is_set():
                    result.cancelled = True
                    break

                messages, has_more = await user_client.fetch_history(
                    channel,
                    latest=result.resume_latest,
                    limit=self.page_size
                )
                result.pages_fetched += 1

                batch = [m for m in messages if is_indexable_history_message(m, credential.bot_user_id)]
                result.indexed += await self.indexer.index_batch(credential.team_id, channel, batch)
                result.skipped += len(messages) - len(batch)

                page_oldest = oldest_ts(messages)
                if page_oldest is None:
                    has_more = False
                else:
                    result.resume_latest = page_oldest

        result.has_more = has_more
        result.budget_exhausted = has_more and not result.cancelled

        if result.has_more:
            logger.warning(
                "Backfill stopped with history remaining",
                team_id=credential.team_id,
                channel=channel,
                pages_fetched=result.pages_fetched,
                page_budget=self.page_budget,
                cancelled=result.cancelled,
                resume_latest=result.resume_latest
            )
        else:
            logger.info(
                "Backfill complete",
                team_id=credential.team_id,
                channel=channel,
                pages_fetched=result.pages_fetched,
                indexed=result.indexed,
                skipped=result.skipped
            )

        return result
