"""Custom assertion helpers."""

from typing import Any, Dict
import json


def assert_credits_attachment(attachment: Dict[str, Any]) -> None:
    """Assert that an attachment is the trailing credits footer."""
    assert attachment["text"] == ""
    assert attachment["footer"] == "Powered by Algolia"
    assert attachment["footer_icon"].startswith("https://")
    assert "title" not in attachment


def assert_valid_response(response: Dict[str, Any], expected_status: int = 200) -> None:
    """Assert that a Vercel function response is valid."""
    assert 'statusCode' in response
    assert response['statusCode'] == expected_status
    assert 'headers' in response
    assert 'body' in response

    if 'application/json' in response.get('headers', {}).get('Content-Type', ''):
        try:
            json.loads(response['body'])
        except json.JSONDecodeError:
            assert False, "Response body is not valid JSON"
