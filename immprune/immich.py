"""Immich catalog client.

Pages through POST /api/search/metadata, 1000 assets per page, starting at
page 1 and stopping at the first short page. Requests are sequential and
never retried: any failure aborts the whole fetch and no partial catalog is
returned.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from immprune.assets import RemoteAsset
from immprune.errors import RemoteFetchError, RemoteParseError

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000
SEARCH_PATH = "/api/search/metadata"
DEFAULT_TIMEOUT = 60.0
USER_AGENT = "immprune/0.1"


class ImmichClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "x-api-key": api_key,
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    @property
    def search_url(self) -> str:
        return self.base_url + SEARCH_PATH

    def _page_body(self, page: int, only_videos: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {"page": page, "size": PAGE_SIZE, "withExif": True}
        if only_videos:
            body["type"] = "VIDEO"
        return body

    def fetch_page(self, page: int, only_videos: bool = False) -> List[Dict[str, Any]]:
        """Return the raw asset records of one search page."""
        try:
            r = self.session.post(
                self.search_url,
                json=self._page_body(page, only_videos),
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            raise RemoteFetchError(f"page {page}: {e}") from e
        try:
            data = r.json()
        except ValueError as e:
            raise RemoteParseError(f"page {page}: response is not JSON") from e
        return _extract_assets(data, page)

    def get_all_assets(self, only_videos: bool = False) -> List[RemoteAsset]:
        all_assets: List[RemoteAsset] = []
        page = 1
        while True:
            records = self.fetch_page(page, only_videos=only_videos)
            all_assets.extend(RemoteAsset.from_json(rec) for rec in records)
            logger.debug("Immich page %d: %d assets", page, len(records))
            if len(records) < PAGE_SIZE:
                break
            page += 1
        logger.info("Fetched %d Immich assets in %d pages", len(all_assets), page)
        return all_assets


def _extract_assets(data: Any, page: int) -> List[Dict[str, Any]]:
    # Immich nests the page as {"assets": {"items": [...], "nextPage": ...}};
    # older servers answered {"assets": [...]}
    if not isinstance(data, dict):
        raise RemoteParseError(f"page {page}: expected a JSON object")
    assets = data.get("assets")
    if isinstance(assets, dict):
        assets = assets.get("items")
    if assets is None:
        return []
    if not isinstance(assets, list) or not all(isinstance(a, dict) for a in assets):
        raise RemoteParseError(f"page {page}: 'assets' is not a list of objects")
    return assets
