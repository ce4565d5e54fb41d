"""Per-team credential lookup backed by a Supabase table."""

from typing import Optional
from pydantic import ValidationError
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.models.team_credential import TeamCredential
from src.utils.config import BridgeConfig, get_supabase_credentials
from src.utils.errors import ConfigurationError, UpstreamError
import logging

logger = logging.getLogger(__name__)


def create_supabase_client() -> Client:
    """Build a Supabase client from environment credentials."""
    url, key = get_supabase_credentials()

    # Service-role access; no user session to refresh or persist
    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )

    client = create_client(url, key, options)
    logger.info("Supabase client initialized", extra={"url": url})
    return client


class SupabaseClient:
    """Async context manager around a lazily created Supabase client."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client

    async def __aenter__(self) -> Client:
        if self.client is None:
            self.client = create_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


class CredentialStore:
    """Read-only team_id -> TeamCredential lookup.

    Rows are never written by the bridge; the install flow owns the table.
    """

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None):
        self._client = client
        self.table = table or BridgeConfig.SLACK_TEAMS_TABLE

    async def get(self, team_id: str) -> Optional[TeamCredential]:
        """Return the team's credential, or None when no record exists."""
        if not team_id:
            return None

        async with SupabaseClient(self._client) as client:
            self._client = client
            try:
                result = (
                    client.table(self.table)
                    .select("team_id, bot_access_token, user_access_token, bot_user_id")
                    .eq("team_id", team_id)
                    .limit(1)
                    .execute()
                )
            except Exception as e:
                raise UpstreamError("supabase", "credential lookup", str(e))

        if not result.data:
            return None
        try:
            return TeamCredential.model_validate(result.data[0])
        except ValidationError as e:
            raise ConfigurationError(f"Invalid credential record for team {team_id}: {e.error_count()} field error(s)")
