"""Resolve a downloadable media URL for a track"""

import asyncio
from typing import Optional

import aiohttp

from ..models import Track
from ..utils.logging import get_logger
from .soundcloud_api import SoundCloudAPI

logger = get_logger(__name__)


class StreamResolver:
    """
    Media URL resolution with ordered fallbacks:

    1. the track's stream_url endpoint
    2. progressive transcodings, in listed order
    3. the download_url of downloadable tracks (no request needed)

    Resolved URLs are signed and expire, so they are meant to be used
    shortly after a run.
    """

    def __init__(self, api: SoundCloudAPI):
        self.api = api

    async def get_stream_url(self, track: Track, client_id: str) -> Optional[str]:
        """Resolved media URL, or None when nothing is currently resolvable"""
        try:
            if track.stream_url:
                url = await self._resolve_location(track.stream_url, client_id)
                if url:
                    return url

            for transcoding in track.transcodings:
                if not transcoding.is_progressive or not transcoding.url:
                    continue
                try:
                    url = await self._resolve_location(transcoding.url, client_id)
                except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                    logger.debug(f"Transcoding failed for track {track.id}: {e}")
                    continue
                if url:
                    return url

            if track.downloadable and track.download_url:
                return f"{track.download_url}?client_id={client_id}"

            return None

        except Exception as e:
            logger.warning(f"⚠️  Could not get stream URL for track {track.id}: {e}")
            return None

    async def _resolve_location(self, location: str, client_id: str) -> Optional[str]:
        data = await self.api.get_json(location, params={'client_id': client_id})
        if isinstance(data, dict) and data.get('url'):
            return data['url']
        return None
