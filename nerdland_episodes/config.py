"""Configuration and constants for the Nerdland episode archive"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Directories
BASE_DIR = Path.cwd()
EPISODES_JSON = Path(os.getenv("EPISODES_JSON", str(BASE_DIR / "episodes.json")))
LOG_FILE = os.getenv("LOG_FILE", "nerdland_episodes.log")

# SoundCloud endpoints
SOUNDCLOUD_BASE_URL = "https://soundcloud.com"
SOUNDCLOUD_API_URL = "https://api-v2.soundcloud.com"
SOUNDCLOUD_USER_URL = os.getenv("SOUNDCLOUD_USER_URL", f"{SOUNDCLOUD_BASE_URL}/lieven-scheire")

# Public page used to probe whether a client_id still works
CLIENT_ID_PROBE_URL = f"{SOUNDCLOUD_BASE_URL}/discover"

# Known client_ids that worked in the past, tried when none can be scraped
FALLBACK_CLIENT_IDS = [
    "iZIs9mchVcX5lhVkN0b1WACJxt3kz3eh",
    "c9AadRMEwQKfnCLDJ8GBqvQvjQTdV0dP",
]

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Pagination
PAGE_SIZE = 200
PAGE_DELAY_SECONDS = 1.0

# Total per-request timeout; unset means requests never time out
_http_timeout = os.getenv("HTTP_TIMEOUT_SECONDS")
HTTP_TIMEOUT_SECONDS = float(_http_timeout) if _http_timeout else None

# Only process the first N tracks (handy while testing)
_scrape_limit = os.getenv("SCRAPE_LIMIT")
SCRAPE_LIMIT = int(_scrape_limit) if _scrape_limit else None
