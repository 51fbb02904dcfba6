"""SoundCloud v2 API client: owner lookup, track pagination and track details"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from .. import config
from ..config import PAGE_SIZE, SOUNDCLOUD_API_URL, USER_AGENT, HTTP_TIMEOUT_SECONDS
from ..models import Owner, Track
from ..utils.logging import get_logger

logger = get_logger(__name__)


class SoundCloudAPI:
    """
    Thin async wrapper around the undocumented api-v2 endpoints.

    The client_id is never stored on the instance; every call takes it as
    an argument so callers decide which credential is in play.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.cleanup()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create shared aiohttp session"""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=HTTP_TIMEOUT_SECONDS)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={'User-Agent': USER_AGENT}
            )
            self._owns_session = True
        return self._session

    async def cleanup(self):
        """Close the session if we created it"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get_text(self, url: str) -> str:
        """GET a page or script body as text"""
        session = await self._get_session()
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.text()

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document, raising aiohttp.ClientResponseError on HTTP errors"""
        session = await self._get_session()
        async with session.get(url, params=params) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def resolve(self, url: str, client_id: str) -> Dict[str, Any]:
        """Look up any soundcloud.com URL through /resolve"""
        return await self.get_json(
            f"{SOUNDCLOUD_API_URL}/resolve",
            params={'url': url, 'client_id': client_id}
        )

    async def resolve_user(self, user_url: str, client_id: str) -> Owner:
        """Fetch the account behind a profile URL"""
        logger.info("👤 Fetching user information...")
        data = await self.resolve(user_url, client_id)
        if not isinstance(data, dict):
            raise ValueError(f"unexpected resolve response for {user_url}")
        return Owner.from_api(data)

    async def fetch_all_tracks(self, user_id: int, client_id: str) -> List[Track]:
        """
        Walk the user's track collection following next_href.

        HTTP errors propagate: a partial listing would silently under-report
        the archive.
        """
        tracks: List[Track] = []
        next_url: Optional[str] = f"{SOUNDCLOUD_API_URL}/users/{user_id}/tracks"
        params = {
            'client_id': client_id,
            'limit': PAGE_SIZE,
            'linked_partitioning': 1,
        }
        page = 0

        while next_url:
            page += 1
            data = await self.get_json(next_url, params=params)
            collection = (data or {}).get('collection') or []
            tracks.extend(Track.from_api(item) for item in collection if isinstance(item, dict))
            logger.info(f"📄 Page {page}: {len(collection)} tracks ({len(tracks)} total)")

            next_url = (data or {}).get('next_href')
            # next_href already carries limit and the cursor
            params = {'client_id': client_id}
            if next_url:
                await asyncio.sleep(config.PAGE_DELAY_SECONDS)

        return tracks

    async def get_track_details(self, track_id: Any, client_id: str) -> Optional[Track]:
        """Fetch the full track record; None when it cannot be retrieved"""
        try:
            data = await self.get_json(
                f"{SOUNDCLOUD_API_URL}/tracks/{track_id}",
                params={'client_id': client_id}
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"⚠️  Could not get detailed track info for {track_id}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"⚠️  Unexpected detail payload for track {track_id}")
            return None
        return Track.from_api(data)
