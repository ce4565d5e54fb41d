"""Per-team Algolia index operations."""

from typing import Optional
from algoliasearch.http.exceptions import AlgoliaException
from algoliasearch.search.client import SearchClient
from src.models.index_document import SearchHit
from src.utils.config import BridgeConfig, get_algolia_credentials
from src.utils.errors import UpstreamError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

INDEX_SETTINGS = {
    "searchableAttributes": ["text", "attachments.text"],
    "customRanking": ["desc(ts)"],
}

RETRIEVED_ATTRIBUTES = ["channel", "ts", "user", "text"]


class SearchIndex:
    """Settings, upserts and queries against one index per team."""

    def __init__(self, client: SearchClient, prefix: Optional[str] = None):
        self._client = client
        self.prefix = BridgeConfig.ALGOLIA_INDEX_PREFIX if prefix is None else prefix

    def index_name(self, team_id: str) -> str:
        return f"{self.prefix}{team_id}"

    async def apply_settings(self, team_id: str) -> None:
        try:
            await self._client.set_settings(
                index_name=self.index_name(team_id),
                index_settings=INDEX_SETTINGS,
            )
        except AlgoliaException as e:
            raise UpstreamError("algolia", "set_settings", str(e))

    async def save_documents(self, team_id: str, records: list[dict]) -> None:
        """Upsert records keyed by objectID."""
        try:
            await self._client.save_objects(
                index_name=self.index_name(team_id),
                objects=records,
            )
        except AlgoliaException as e:
            raise UpstreamError("algolia", "save_objects", str(e))

    async def search(self, team_id: str, query: str, hits_per_page: int) -> list[SearchHit]:
        """Run a query and return hits in the index's ranking order."""
        try:
            response = await self._client.search_single_index(
                index_name=self.index_name(team_id),
                search_params={
                    "query": query,
                    "attributesToRetrieve": RETRIEVED_ATTRIBUTES,
                    "hitsPerPage": hits_per_page,
                },
            )
        except AlgoliaException as e:
            raise UpstreamError("algolia", "search", str(e))

        hits = response.to_dict().get("hits") or []
        return [SearchHit.model_validate(hit) for hit in hits]


def create_search_index() -> SearchIndex:
    """Build the index wrapper from environment credentials."""
    app_id, api_key = get_algolia_credentials()
    return SearchIndex(SearchClient(app_id, api_key))
