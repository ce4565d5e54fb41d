"""Environment-driven settings for the search bridge."""

import os
from src.utils.errors import ConfigurationError


class BridgeConfig:
    """Tunable limits read once from the environment."""

    # One pass has to finish inside Slack's 3 second webhook window
    BACKFILL_PAGE_BUDGET = int(os.environ.get("BACKFILL_PAGE_BUDGET", "5"))
    BACKFILL_PAGE_SIZE = int(os.environ.get("BACKFILL_PAGE_SIZE", "100"))
    SEARCH_HITS_PER_PAGE = int(os.environ.get("SEARCH_HITS_PER_PAGE", "5"))
    SLACK_TEAMS_TABLE = os.environ.get("SLACK_TEAMS_TABLE", "slack_teams")
    ALGOLIA_INDEX_PREFIX = os.environ.get("ALGOLIA_INDEX_PREFIX", "")


def _require(name: str) -> str:
    # strip() drops trailing newlines pasted into hosted env settings
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigurationError(f"{name} not set")
    return value


def get_algolia_credentials() -> tuple[str, str]:
    """Return (app_id, api_key) for the Algolia client."""
    return _require("ALGOLIA_APP_ID"), _require("ALGOLIA_API_KEY")


def get_supabase_credentials() -> tuple[str, str]:
    """Return (url, service_role_key) for the credential store."""
    return _require("SUPABASE_URL"), _require("SUPABASE_SERVICE_ROLE_KEY")
