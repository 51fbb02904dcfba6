"""Discovery of the SoundCloud client_id embedded in the web player's bundles"""

import asyncio
import re
from typing import List, Optional
from urllib.parse import urljoin

import aiohttp
from bs4 import BeautifulSoup

from ..config import CLIENT_ID_PROBE_URL, FALLBACK_CLIENT_IDS, SOUNDCLOUD_USER_URL
from ..utils.errors import CredentialUnavailable
from ..utils.logging import get_logger
from .soundcloud_api import SoundCloudAPI

logger = get_logger(__name__)

# Bundle name fragments, in the order their scripts are scanned
SCRIPT_NAME_FRAGMENTS = ["app", "vendor", "main"]

# Token patterns, in priority order
CLIENT_ID_PATTERNS = [
    re.compile(r'client_id:"([a-zA-Z0-9]+)"'),
    re.compile(r'clientId:"([a-zA-Z0-9]+)"'),
    re.compile(r'"client_id":"([a-zA-Z0-9]+)"'),
    re.compile(r'"clientId":"([a-zA-Z0-9]+)"'),
    re.compile(r'client_id=([a-zA-Z0-9]+)'),
]


def find_script_urls(html: str, page_url: str) -> List[str]:
    """
    Collect candidate bundle URLs from the profile page.

    Named bundles (app, vendor, main) come first, then any crossorigin
    script. Relative URLs are made absolute; duplicates keep their first
    position.
    """
    soup = BeautifulSoup(html, 'html.parser')
    scripts = soup.find_all('script', src=True)
    urls = []

    for fragment in SCRIPT_NAME_FRAGMENTS:
        name_pattern = re.compile(rf'{fragment}[^"]*\.js$')
        urls.extend(tag['src'] for tag in scripts if name_pattern.search(tag['src']))

    urls.extend(tag['src'] for tag in soup.find_all('script', src=True, crossorigin=True))

    absolute = [urljoin(page_url, src.strip()) for src in urls if src.strip()]
    return list(dict.fromkeys(absolute))


def find_client_id(script: str) -> Optional[str]:
    """First client_id match across the patterns, or None"""
    for pattern in CLIENT_ID_PATTERNS:
        match = pattern.search(script)
        if match:
            return match.group(1)
    return None


class ClientIdResolver:
    """Find a working client_id: scrape the bundles, then try known fallbacks"""

    def __init__(self, api: SoundCloudAPI, user_url: str = SOUNDCLOUD_USER_URL,
                 fallback_ids: Optional[List[str]] = None):
        self.api = api
        self.user_url = user_url
        self.fallback_ids = FALLBACK_CLIENT_IDS if fallback_ids is None else fallback_ids

    async def resolve(self) -> str:
        """
        Returns:
            A client_id string

        Raises:
            CredentialUnavailable: when neither scraping nor fallbacks work
        """
        logger.info("🔑 Extracting client ID...")

        client_id = await self._scrape_client_id()
        if client_id:
            logger.info("✅ Client ID extracted successfully")
            return client_id

        logger.warning("⚠️  Could not extract client ID from scripts, trying fallback IDs...")
        client_id = await self._probe_fallbacks()
        if client_id:
            logger.info("✅ Using fallback client ID")
            return client_id

        raise CredentialUnavailable("Could not extract or find working client ID")

    async def _scrape_client_id(self) -> Optional[str]:
        try:
            html = await self.api.get_text(self.user_url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"⚠️  Could not load profile page {self.user_url}: {e}")
            return None

        script_urls = find_script_urls(html, self.user_url)
        logger.debug(f"Found {len(script_urls)} candidate scripts")

        for script_url in script_urls:
            script_name = script_url.rsplit('/', 1)[-1]
            logger.debug(f"🔍 Checking: {script_name}")
            try:
                script = await self.api.get_text(script_url)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.warning(f"⚠️  Failed to fetch {script_name}: {e}")
                continue

            client_id = find_client_id(script)
            if client_id:
                return client_id

        return None

    async def _probe_fallbacks(self) -> Optional[str]:
        for candidate in self.fallback_ids:
            try:
                await self.api.resolve(CLIENT_ID_PROBE_URL, candidate)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.debug(f"Fallback client ID rejected: {e}")
                continue
            return candidate
        return None
