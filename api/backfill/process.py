"""Run one more history backfill pass for a channel (manual or cron)."""

import json
import logging
from typing import Optional
from src.services.event_dispatcher import get_event_dispatcher
from src.services.slack_verifier import get_verification_token, tokens_match
from src.utils.errors import BridgeError, UnknownTeamError
from src.utils.event_loop import run_sync
from src.utils.logging import correlation_context
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = logging.getLogger(__name__)


def _json(status: int, payload: dict) -> dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload)
    }


async def run_backfill_pass(team_id: str, channel: str, latest: Optional[str] = None) -> dict:
    """Resume a channel backfill from `latest` with the normal per-pass page budget."""
    dispatcher = get_event_dispatcher()
    credential = await dispatcher.resolve_credential(team_id)
    user_client = dispatcher.client_factory(credential.user_access_token)
    result = await dispatcher.backfill.backfill(credential, user_client, channel, latest=latest)
    return result.model_dump()


def handler(request):
    """
    Process one backfill pass.

    Query params: team_id, channel, optional latest (resume marker from a
    previous pass). The caller authenticates with the x-backfill-token header,
    which must equal the Slack verification token.
    """
    headers = {k.lower(): v for k, v in (request.get("headers") or {}).items()}
    query_params = request.get("query", {}) or {}

    try:
        if not tokens_match(get_verification_token(), headers.get("x-backfill-token")):
            return _json(403, {"error": "invalid backfill token"})

        team_id = query_params.get("team_id")
        channel = query_params.get("channel")
        if not team_id or not channel:
            return _json(400, {"error": "team_id and channel are required"})

        with correlation_context():
            result = run_sync(run_backfill_pass(team_id, channel, query_params.get("latest")))

        return _json(200, {"ok": True, "result": result})

    except UnknownTeamError as e:
        logger.warning(f"Backfill requested for unknown team: {e.team_id}")
        return _json(404, {"error": str(e)})
    except BridgeError as e:
        logger.error(f"Backfill pass failed: {e}", exc_info=True)
        return _json(502, {"error": str(e)})
