"""Route a verified webhook envelope to indexing, backfill or query handling."""

from typing import Callable, Optional
from pydantic import ValidationError
from src.models.dispatch import DispatchOutcome
from src.models.slack_event import EventEnvelope, Intent
from src.models.team_credential import TeamCredential
from src.services.credential_store import CredentialStore
from src.services.event_classifier import classify
from src.services.history_backfill import HistoryBackfill
from src.services.message_indexer import MessageIndexer
from src.services.query_relay import QueryRelay
from src.services.search_index import SearchIndex, create_search_index
from src.services.slack_client import SlackChatClient, create_slack_client
from src.utils.errors import BridgeError, UnknownTeamError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


class EventDispatcher:
    """
    Handles one envelope end to end within the inbound request.

    Business failures are logged and reported on the outcome rather than
    raised, so the webhook caller always gets an acknowledgement and does not
    redeliver.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        search_index: SearchIndex,
        client_factory: Callable[[Optional[str]], SlackChatClient] = create_slack_client,
        indexer: Optional[MessageIndexer] = None,
        backfill: Optional[HistoryBackfill] = None,
        relay: Optional[QueryRelay] = None
    ):
        self.credential_store = credential_store
        self.client_factory = client_factory
        self.indexer = indexer or MessageIndexer(search_index)
        self.backfill = backfill or HistoryBackfill(self.indexer)
        self.relay = relay or QueryRelay(search_index)

    async def resolve_credential(self, team_id: Optional[str]) -> TeamCredential:
        """Look up the team, filling in the bot identity from auth.test when the record lacks it."""
        credential = await self.credential_store.get(team_id or "")
        if credential is None:
            raise UnknownTeamError(team_id or "")

        if not credential.bot_user_id:
            bot_client = self.client_factory(credential.bot_access_token)
            credential = credential.model_copy(update={"bot_user_id": await bot_client.bot_user_id()})
        return credential

    async def dispatch(self, body: dict) -> DispatchOutcome:
        try:
            envelope = EventEnvelope.model_validate(body)
        except ValidationError as e:
            logger.warning("Malformed envelope", error=str(e))
            return DispatchOutcome(intent=Intent.UNRECOGNIZED, error="malformed envelope")

        # Handshake and foreign envelope types need no team lookup
        if envelope.type != "event_callback":
            classification = classify(envelope, None)
            if classification.intent == Intent.HANDSHAKE:
                return DispatchOutcome(intent=Intent.HANDSHAKE, body=classification.challenge)
            logger.info("Unrecognized envelope", reason=classification.reason)
            return DispatchOutcome(intent=Intent.UNRECOGNIZED)

        try:
            return await self._dispatch_callback(envelope)
        except UnknownTeamError as e:
            # Redelivery cannot fix a missing install record
            logger.warning("Dropping event for unknown team", team_id=e.team_id)
            return DispatchOutcome(team_id=envelope.team_id, error=str(e))
        except BridgeError as e:
            logger.error(
                "Team resolution failed",
                team_id=envelope.team_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return DispatchOutcome(team_id=envelope.team_id, error=str(e))

    async def _dispatch_callback(self, envelope: EventEnvelope) -> DispatchOutcome:
        credential = await self.resolve_credential(envelope.team_id)
        classification = classify(envelope, credential.bot_user_id)
        event = envelope.event
        outcome = DispatchOutcome(intent=classification.intent, team_id=credential.team_id)

        logger.info(
            "Event classified",
            team_id=credential.team_id,
            intent=classification.intent.value,
            subtype_key=classification.subtype_key,
            channel=event.channel if event else None,
            user=mask_user_id(event.user) if event else None
        )

        try:
            if classification.intent == Intent.JOIN_BACKFILL:
                user_client = self.client_factory(credential.user_access_token)
                outcome.backfill = await self.backfill.backfill(credential, user_client, event.channel)
                outcome.indexed = outcome.backfill.indexed

            elif classification.intent == Intent.INDEXABLE_MESSAGE:
                await self.indexer.index_message(credential.team_id, event.model_dump(exclude_none=True))
                outcome.indexed = 1

            elif classification.intent == Intent.BOT_QUERY:
                bot_client = self.client_factory(credential.bot_access_token)
                await self.indexer.ensure_settings(credential.team_id)
                outcome.reply = await self.relay.relay(credential.team_id, bot_client, classification.query)
                await bot_client.post_message(event.channel, outcome.reply)

            elif classification.intent == Intent.UNRECOGNIZED:
                logger.info("Unexpected event", team_id=credential.team_id, reason=classification.reason)

        except (BridgeError, ValueError) as e:
            # Partial work stays; upserts make a later redelivery safe
            logger.error(
                "Event handling aborted",
                team_id=credential.team_id,
                intent=classification.intent.value,
                error=str(e),
                error_type=type(e).__name__
            )
            outcome.error = str(e)

        return outcome


_event_dispatcher: Optional[EventDispatcher] = None


def get_event_dispatcher() -> EventDispatcher:
    """Get or create the process-wide dispatcher; its indexer remembers which teams are configured."""
    global _event_dispatcher
    if _event_dispatcher is None:
        _event_dispatcher = EventDispatcher(CredentialStore(), create_search_index())
    return _event_dispatcher
