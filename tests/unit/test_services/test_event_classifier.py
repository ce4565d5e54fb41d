"""Tests for envelope classification."""

import pytest
from src.models.slack_event import EventEnvelope, Intent
from src.services.event_classifier import classify, match_mention, subtype_key
from tests.fixtures.slack_events import (
    slack_channel_join_event,
    slack_reaction_event,
    slack_url_verification_challenge,
)
from tests.utils.helpers import create_slack_event

BOT = "UBOT0001"


def _classify(body: dict):
    return classify(EventEnvelope.model_validate(body), BOT)


@pytest.mark.unit
def test_url_verification_is_handshake():
    result = _classify(slack_url_verification_challenge("abc123"))

    assert result.intent == Intent.HANDSHAKE
    assert result.challenge == "abc123"


@pytest.mark.unit
def test_non_callback_envelope_is_unrecognized():
    result = _classify({"type": "app_rate_limited", "team_id": "T123456"})

    assert result.intent == Intent.UNRECOGNIZED


@pytest.mark.unit
def test_mention_with_space_is_bot_query():
    result = _classify(create_slack_event(text=f"<@{BOT}> foo"))

    assert result.intent == Intent.BOT_QUERY
    assert result.query == "foo"


@pytest.mark.unit
def test_mention_with_colon_is_bot_query():
    result = _classify(create_slack_event(text=f"<@{BOT}>: foo"))

    assert result.intent == Intent.BOT_QUERY
    assert result.query == "foo"


@pytest.mark.unit
def test_mention_without_space_is_indexable():
    result = _classify(create_slack_event(text=f"<@{BOT}>foo"))

    assert result.intent == Intent.INDEXABLE_MESSAGE
    assert result.query is None


@pytest.mark.unit
def test_mention_of_another_user_is_indexable():
    result = _classify(create_slack_event(text="<@U999999> can you look at this"))

    assert result.intent == Intent.INDEXABLE_MESSAGE


@pytest.mark.unit
def test_query_keeps_everything_after_the_mention():
    result = _classify(create_slack_event(text=f"<@{BOT}> release notes: q3 2017"))

    assert result.query == "release notes: q3 2017"


@pytest.mark.unit
def test_plain_message_is_indexable():
    result = _classify(create_slack_event(text="lunch at noon?"))

    assert result.intent == Intent.INDEXABLE_MESSAGE
    assert result.subtype_key == "message"


@pytest.mark.unit
@pytest.mark.parametrize("text", ["hello", f"<@{BOT}> foo", f"<@{BOT}>: foo", ""])
def test_own_message_is_ignored_regardless_of_text(text):
    result = _classify(create_slack_event(user=BOT, text=text))

    assert result.intent == Intent.IGNORED


@pytest.mark.unit
@pytest.mark.parametrize("subtype", ["bot_message", "message_changed", "channel_topic"])
def test_own_message_is_ignored_regardless_of_subtype(subtype):
    result = _classify(create_slack_event(user=BOT, subtype=subtype))

    assert result.intent == Intent.IGNORED


@pytest.mark.unit
def test_bot_join_triggers_backfill():
    result = _classify(slack_channel_join_event(user=BOT))

    assert result.intent == Intent.JOIN_BACKFILL
    assert result.subtype_key == "message.channel_join"


@pytest.mark.unit
def test_other_user_join_is_ignored():
    result = _classify(slack_channel_join_event(user="U123456"))

    assert result.intent == Intent.IGNORED


@pytest.mark.unit
def test_other_subtypes_are_unrecognized():
    result = _classify(create_slack_event(subtype="message_changed"))

    assert result.intent == Intent.UNRECOGNIZED
    assert result.subtype_key == "message.message_changed"


@pytest.mark.unit
def test_other_event_types_are_unrecognized():
    result = _classify(slack_reaction_event())

    assert result.intent == Intent.UNRECOGNIZED
    assert result.subtype_key == "reaction_added"


@pytest.mark.unit
def test_subtype_key():
    assert subtype_key("message", None) == "message"
    assert subtype_key("message", "channel_join") == "message.channel_join"


@pytest.mark.unit
def test_match_mention_escapes_bot_id():
    assert match_mention("<@U.B> hi", "U.B") == "hi"
    assert match_mention("<@UXB> hi", "U.B") is None
    assert match_mention(None, "U.B") is None
