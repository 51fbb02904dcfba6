"""Shared test configuration and fixtures for the Nerdland episode archive tests"""

import re
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from faker import Faker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nerdland_episodes.database import EpisodeStore

# Initialize faker for test data generation
fake = Faker()

API = "https://api-v2.soundcloud.com"
USER_URL = "https://soundcloud.com/test-user"
CLIENT_ID = "testClientId123"


def with_query(url: str) -> re.Pattern:
    """Regex matching a URL with any query string appended"""
    return re.compile(rf"^{re.escape(url)}(\?.*)?$")


def api_url(path: str) -> re.Pattern:
    """Regex matching an api-v2 path with any query string"""
    return with_query(API + path)


# ===== Configuration Fixtures =====

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def no_page_delay(monkeypatch):
    """Pagination sleeps between pages; not in tests"""
    monkeypatch.setattr('nerdland_episodes.config.PAGE_DELAY_SECONDS', 0)


class SteppingClock:
    """Returns strictly increasing timestamps"""

    def __init__(self):
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return f"2024-01-01T00:00:{self.calls:02d}.000Z"


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def store_path(temp_dir):
    return temp_dir / "episodes.json"


@pytest.fixture
def store(store_path, clock):
    """Episode store backed by a temp file"""
    return EpisodeStore(store_path, clock=clock)


# ===== Payload Factories =====

def create_track_payload(
    track_id: int = None,
    title: str = None,
    created_at: str = None,
    streamable: bool = True,
    description: Optional[str] = None,
    **kwargs
) -> Dict[str, Any]:
    """Factory for SoundCloud track payloads"""
    track_id = track_id if track_id is not None else fake.random_int(1000, 999999)
    payload = {
        'id': track_id,
        'title': title or f"#{fake.random_int(1, 300)} {fake.catch_phrase()}",
        'description': description if description is not None else fake.paragraph(),
        'duration': kwargs.get('duration', fake.random_int(30, 180) * 60 * 1000),
        'created_at': created_at or fake.date_time_this_decade().strftime('%Y-%m-%dT%H:%M:%SZ'),
        'permalink_url': kwargs.get('permalink_url', f"https://soundcloud.com/test-user/track-{track_id}"),
        'streamable': streamable,
    }
    for key in ('stream_url', 'media', 'downloadable', 'download_url'):
        if key in kwargs:
            payload[key] = kwargs[key]
    return payload


def create_transcodings(*protocols: str) -> Dict[str, Any]:
    """Media block with one transcoding per protocol"""
    return {
        'transcodings': [
            {
                'url': f"{API}/media/soundcloud:tracks:1/{index}/stream/{protocol}",
                'format': {'protocol': protocol, 'mime_type': 'audio/mpeg'},
            }
            for index, protocol in enumerate(protocols)
        ]
    }


def page(tracks: List[Dict[str, Any]], next_href: Optional[str] = None) -> Dict[str, Any]:
    return {'collection': tracks, 'next_href': next_href}
