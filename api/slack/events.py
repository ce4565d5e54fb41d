"""Slack events webhook endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler
import json
import logging

from src.services.event_dispatcher import get_event_dispatcher
from src.services.slack_verifier import verify_slack_request
from src.utils.errors import VerificationError
from src.utils.event_loop import run_sync
from src.utils.logging import correlation_context
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
_logger = logging.getLogger(__name__)


def _response(status: int, body: str, content_type: str = "application/json") -> dict:
    return {"statusCode": status, "headers": {"Content-Type": content_type}, "body": body}


def process_request(raw_body: str) -> dict:
    """
    Handle one webhook POST body and return a Vercel-style response dict.

    Only a bad verification token is rejected; every business failure is
    acknowledged with 200 so Slack does not retry.
    """
    try:
        body = json.loads(raw_body) if raw_body else {}
    except json.JSONDecodeError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    try:
        verify_slack_request(body)
    except VerificationError as e:
        return _response(403, str(e), content_type="text/plain")

    with correlation_context(body.get("event_id")) as correlation_id:
        outcome = run_sync(get_event_dispatcher().dispatch(body))
        _logger.info(
            f"Slack event handled: intent={outcome.intent.value if outcome.intent else None}, "
            f"indexed={outcome.indexed}, error={outcome.error}",
            extra={"correlation_id": correlation_id}
        )

    # The handshake expects the challenge echoed as the bare body
    if outcome.body is not None:
        return _response(200, outcome.body, content_type="text/plain")

    return _response(200, json.dumps({"ok": True}))


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for Slack events."""

    def _write(self, response: dict) -> None:
        self.send_response(response["statusCode"])
        for name, value in response["headers"].items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(response["body"].encode('utf-8'))

    def do_POST(self):
        """Handle POST request from Slack."""
        try:
            content_length = int(self.headers.get('Content-Length', 0))
            raw_body = self.rfile.read(content_length).decode('utf-8') if content_length > 0 else ""
            self._write(process_request(raw_body))
        except Exception as e:
            _logger.error(f"Error processing Slack event: {e}", exc_info=True)
            self._write(_response(500, json.dumps({"error": "internal server error"})))

    def do_GET(self):
        """Handle GET request (health check)."""
        self._write(_response(200, json.dumps({"status": "ok", "endpoint": "slack/events"})))
