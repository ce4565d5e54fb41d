"""Reply payload models posted back to Slack."""

from typing import Optional
from pydantic import BaseModel, Field


class ReplyAttachment(BaseModel):
    """A legacy message attachment; result rows and the credits footer share this shape."""
    color: Optional[str] = None
    author_name: Optional[str] = None
    title: Optional[str] = None
    title_link: Optional[str] = None
    text: str = ""
    ts: Optional[int] = None
    footer: Optional[str] = None
    footer_icon: Optional[str] = None


class ReplyPayload(BaseModel):
    """Arguments for chat.postMessage, minus the channel."""
    text: str
    attachments: list[ReplyAttachment] = Field(default_factory=list)
    unfurl_links: Optional[bool] = None
    unfurl_media: Optional[bool] = None

    def to_message_kwargs(self) -> dict:
        return self.model_dump(exclude_none=True)
