"""Team credential model - one row per installed workspace."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TeamCredential(BaseModel):
    """Tokens and bot identity for a single Slack team."""
    model_config = ConfigDict(frozen=True)

    team_id: str = Field(..., description="Slack team ID")
    bot_access_token: str = Field(..., description="Bot token used for chat calls")
    user_access_token: Optional[str] = Field(None, description="User token used for channel history; bot-only installs have none")
    bot_user_id: Optional[str] = Field(None, description="User ID of the installed bot; resolved via auth.test when absent")
