"""Tests for Slack verification-token checks."""

import pytest
from src.services.slack_verifier import (
    should_bypass_verification,
    tokens_match,
    verify_slack_request,
)
from src.utils.errors import ConfigurationError, VerificationError


def test_tokens_match():
    assert tokens_match("secret", "secret") is True
    assert tokens_match("secret", "Secret") is False
    assert tokens_match("secret", None) is False
    assert tokens_match("", "") is False


def test_verify_slack_request_valid():
    verify_slack_request({"token": "test-verification-token", "type": "event_callback"})


def test_verify_slack_request_mismatch_message():
    with pytest.raises(VerificationError) as excinfo:
        verify_slack_request({"token": "wrong-token"})

    assert str(excinfo.value) == "Invalid Slack verification token received: wrong-token"


def test_verify_slack_request_missing_token():
    with pytest.raises(VerificationError) as excinfo:
        verify_slack_request({"type": "url_verification", "challenge": "abc123"})

    assert str(excinfo.value) == "Invalid Slack verification token received: "


def test_verify_slack_request_without_configured_token(monkeypatch):
    monkeypatch.delenv("SLACK_VERIFICATION_TOKEN", raising=False)

    with pytest.raises(ConfigurationError):
        verify_slack_request({"token": "anything"})


def test_should_bypass_verification_dev(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "development")

    assert should_bypass_verification() is True


def test_should_bypass_verification_flag(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "production")
    monkeypatch.setenv("SLACK_BYPASS_VERIFY", "true")

    assert should_bypass_verification() is True


def test_verify_slack_request_with_bypass(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "development")

    verify_slack_request({"token": "wrong-token"})
