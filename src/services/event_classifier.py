"""Rule-based classification of webhook envelopes into intents."""

import re
from typing import Optional
from src.models.slack_event import Classification, EventEnvelope, Intent


def mention_pattern(bot_user_id: str) -> re.Pattern:
    """`<@BOT>` with an optional colon, one space, then the query text."""
    return re.compile(r"<@" + re.escape(bot_user_id) + r">:? (.*)")


def match_mention(text: Optional[str], bot_user_id: Optional[str]) -> Optional[str]:
    """Return the query following a mention of the bot, or None."""
    if not text or not bot_user_id:
        return None
    match = mention_pattern(bot_user_id).search(text)
    return match.group(1) if match else None


def subtype_key(event_type: Optional[str], subtype: Optional[str]) -> str:
    key = event_type or ""
    if subtype is not None:
        key = f"{key}.{subtype}"
    return key


def classify(envelope: EventEnvelope, bot_user_id: Optional[str]) -> Classification:
    """
    Decide what an envelope is for.

    Rules run in order; a message authored by the bot is ignored before the
    mention pattern is tried so the bot never answers or indexes itself.
    """
    if envelope.type == "url_verification":
        return Classification(intent=Intent.HANDSHAKE, challenge=envelope.challenge or "")

    if envelope.type != "event_callback" or envelope.event is None:
        return Classification(intent=Intent.UNRECOGNIZED, reason=f"envelope type {envelope.type!r}")

    event = envelope.event
    key = subtype_key(event.type, event.subtype)

    if key == "message.channel_join":
        if bot_user_id and event.user == bot_user_id:
            return Classification(intent=Intent.JOIN_BACKFILL, subtype_key=key)
        return Classification(intent=Intent.IGNORED, subtype_key=key, reason="join by another user")

    # Anything else the bot authored, whatever its subtype
    if bot_user_id and event.user == bot_user_id:
        return Classification(intent=Intent.IGNORED, subtype_key=key, reason="own message")

    if key == "message":
        query = match_mention(event.text, bot_user_id)
        if query is not None:
            return Classification(intent=Intent.BOT_QUERY, subtype_key=key, query=query)

        return Classification(intent=Intent.INDEXABLE_MESSAGE, subtype_key=key)

    return Classification(intent=Intent.UNRECOGNIZED, subtype_key=key, reason=f"event {key!r}")
