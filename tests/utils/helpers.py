"""Test helper functions."""

import json
from typing import Dict, Any, Optional


def create_slack_event(
    text: str = "Test message",
    channel: str = "C123456",
    user: str = "U123456",
    subtype: Optional[str] = None,
    ts: str = "1512085950.000216",
    team_id: str = "T123456",
    token: str = "test-verification-token"
) -> Dict[str, Any]:
    """Create an event_callback envelope for testing."""
    event = {
        "type": "message",
        "channel": channel,
        "user": user,
        "text": text,
        "ts": ts
    }
    if subtype is not None:
        event["subtype"] = subtype

    return {
        "token": token,
        "team_id": team_id,
        "type": "event_callback",
        "event": event
    }


def create_vercel_request(
    method: str = "GET",
    path: str = "/api/backfill/process",
    query: Dict[str, str] = None,
    headers: Dict[str, str] = None,
    body: Dict[str, Any] = None
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    return {
        "method": method,
        "path": path,
        "headers": headers or {},
        "body": json.dumps(body) if body is not None else "",
        "query": query or {}
    }
