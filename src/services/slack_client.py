"""Thin async wrapper over the Slack Web API calls the bridge needs."""

from typing import Optional
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient
from src.models.reply import ReplyPayload
from src.utils.errors import ConfigurationError, UpstreamError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class SlackChatClient:
    """Chat API operations, each raising UpstreamError on failure."""

    def __init__(self, client: AsyncWebClient):
        self._client = client

    async def _call(self, operation: str, method, **kwargs):
        try:
            return await method(**kwargs)
        except SlackClientError as e:
            logger.warning("Slack API call failed", operation=operation, error=str(e))
            raise UpstreamError("slack", operation, str(e))

    async def post_message(self, channel: str, reply: ReplyPayload) -> None:
        await self._call(
            "chat.postMessage",
            self._client.chat_postMessage,
            channel=channel,
            **reply.to_message_kwargs()
        )

    async def fetch_history(
        self,
        channel: str,
        latest: Optional[str] = None,
        limit: int = 100
    ) -> tuple[list[dict], bool]:
        """
        Fetch one page of channel history, newest first.

        `latest` bounds the page to messages strictly older than that ts.
        Returns (messages, has_more).
        """
        kwargs = {"channel": channel, "limit": limit}
        if latest:
            kwargs["latest"] = latest
        response = await self._call("conversations.history", self._client.conversations_history, **kwargs)
        return list(response.get("messages") or []), bool(response.get("has_more"))

    @staticmethod
    def _require_field(operation: str, field: str, value) -> str:
        if not value:
            raise UpstreamError("slack", operation, f"response missing {field}")
        return value

    async def channel_name(self, channel: str) -> str:
        response = await self._call("conversations.info", self._client.conversations_info, channel=channel)
        return self._require_field("conversations.info", "channel.name", (response.get("channel") or {}).get("name"))

    async def user_real_name(self, user: str) -> str:
        """Display name for a user; real_name is not always populated at the top level."""
        response = await self._call("users.info", self._client.users_info, user=user)
        info = response.get("user") or {}
        name = info.get("real_name") or (info.get("profile") or {}).get("real_name") or info.get("name")
        return self._require_field("users.info", "user.real_name", name)

    async def team_url(self) -> str:
        """Workspace URL with trailing slash, e.g. https://acme.slack.com/."""
        response = await self._call("auth.test", self._client.auth_test)
        return self._require_field("auth.test", "url", response.get("url"))

    async def bot_user_id(self) -> str:
        """User ID the current token authenticates as."""
        response = await self._call("auth.test", self._client.auth_test)
        return self._require_field("auth.test", "user_id", response.get("user_id"))


def create_slack_client(token: Optional[str]) -> SlackChatClient:
    """Build a client for one team token. A missing token is fatal for the event."""
    if not token:
        raise ConfigurationError("Missing API token")
    return SlackChatClient(AsyncWebClient(token=token))
