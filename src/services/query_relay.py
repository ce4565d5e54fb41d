"""Turn a search over a team's index into a Slack reply."""

from typing import Optional
from src.models.index_document import SearchHit
from src.models.reply import ReplyAttachment, ReplyPayload
from src.services.search_index import SearchIndex
from src.services.slack_client import SlackChatClient
from src.utils.config import BridgeConfig
from src.utils.logging import get_structured_logger, log_timing, sanitize_message_text

logger = get_structured_logger(__name__)

RESULT_COLOR = "#005500"
RESULTS_TEXT = "Here are some results I found"
NO_HITS_TEXT = 'I am sorry to say that I found no hits for "{query}"'
FOOTER_TEXT = "Powered by Algolia"
FOOTER_ICON = "https://www.algolia.com/static_assets/images/press/downloads/algolia-mark-blue.png"
# Hits without a user (bot posts, integrations) are credited to this name
FALLBACK_AUTHOR = "bot"


def credits_attachment() -> ReplyAttachment:
    return ReplyAttachment(text="", footer=FOOTER_TEXT, footer_icon=FOOTER_ICON)


def build_no_hits_reply(query: str) -> ReplyPayload:
    return ReplyPayload(
        text=NO_HITS_TEXT.format(query=query),
        attachments=[credits_attachment()],
    )


def build_result_attachment(hit: SearchHit, channel_name: str, author_name: str, team_url: str) -> ReplyAttachment:
    """One result row linking back to the archived message."""
    return ReplyAttachment(
        color=RESULT_COLOR,
        author_name=author_name,
        title=f"#{channel_name}",
        title_link=f"{team_url}archives/{channel_name}/p{hit.permalink_id}",
        text=hit.text,
        ts=hit.seconds,
    )


def build_results_reply(attachments: list[ReplyAttachment]) -> ReplyPayload:
    return ReplyPayload(
        text=RESULTS_TEXT,
        unfurl_links=False,
        unfurl_media=False,
        attachments=[*attachments, credits_attachment()],
    )


class QueryRelay:
    """Searches a team's index and enriches each hit with channel, author and team context."""

    def __init__(self, search_index: SearchIndex, hits_per_page: Optional[int] = None):
        self.search_index = search_index
        self.hits_per_page = hits_per_page or BridgeConfig.SEARCH_HITS_PER_PAGE

    async def relay(self, team_id: str, client: SlackChatClient, query_text: str) -> ReplyPayload:
        """Build the reply for a query; hits keep the index's ranking order."""
        with log_timing("query_relay", logger=logger, team_id=team_id):
            hits = await self.search_index.search(team_id, query_text, self.hits_per_page)

            logger.info(
                "Search executed",
                team_id=team_id,
                hit_count=len(hits),
                query=sanitize_message_text(query_text)
            )

            if not hits:
                return build_no_hits_reply(query_text)

            # Lookups are per hit on purpose: at most five hits, and names stay fresh
            team_url = await client.team_url()
            attachments = []
            for hit in hits:
                channel_name = await client.channel_name(hit.channel)
                author_name = await client.user_real_name(hit.user) if hit.user else FALLBACK_AUTHOR
                attachments.append(build_result_attachment(hit, channel_name, author_name, team_url))

            return build_results_reply(attachments)
