#!/usr/bin/env python3
"""
Nerdland episode archive
Main entry point - scrape SoundCloud metadata and stream URLs into episodes.json
"""

import asyncio
import sys
from pathlib import Path

# Ensure the package can be imported when run directly
sys.path.insert(0, str(Path(__file__).parent))

from nerdland_episodes.app import EpisodeScraper, log_summary
from nerdland_episodes.config import EPISODES_JSON, SCRAPE_LIMIT
from nerdland_episodes.utils.errors import ScraperError
from nerdland_episodes.utils.logging import setup_logging


def main():
    """Run one scrape and persist the results"""
    logger = setup_logging()

    try:
        episodes = asyncio.run(EpisodeScraper().run(limit=SCRAPE_LIMIT))
    except ScraperError as e:
        logger.error(f"❌ Script failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted, episodes stored so far are kept")
        sys.exit(130)

    log_summary(episodes)
    logger.info(f"🔗 Data saved to {EPISODES_JSON}")
    logger.info("🎉 Scraping completed successfully!")


if __name__ == "__main__":
    main()
