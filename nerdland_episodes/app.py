"""Episode acquisition pipeline: SoundCloud profile -> episodes.json"""

from enum import Enum
from typing import Awaitable, List, Optional, TypeVar

from .config import SOUNDCLOUD_USER_URL
from .database import EpisodeStore
from .fetchers.credentials import ClientIdResolver
from .fetchers.soundcloud_api import SoundCloudAPI
from .fetchers.stream_resolver import StreamResolver
from .models import Episode, Owner, Track
from .processing.description_parser import extract_chapters, extract_show_notes_url
from .utils.errors import PipelineStageError, ScraperError
from .utils.helpers import (
    ProgressTracker, format_duration, new_correlation_id, parse_created_at
)
from .utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class PipelineState(Enum):
    RESOLVING_CREDENTIAL = "resolving credential"
    RESOLVING_OWNER = "resolving owner"
    ENUMERATING = "enumerating tracks"
    PROCESSING_ITEMS = "processing tracks"
    DONE = "done"
    FAILED = "failed"


def sort_newest_first(episodes: List[Episode]) -> List[Episode]:
    return sorted(episodes, key=lambda e: parse_created_at(e.created_at), reverse=True)


class EpisodeScraper:
    """
    Runs one full acquisition pass.

    Credential, owner and enumeration failures abort the run. Everything
    after that is per track: a track that cannot be enriched, resolved or
    parsed degrades or is skipped, and the run carries on.
    """

    def __init__(self, store: Optional[EpisodeStore] = None, api: Optional[SoundCloudAPI] = None,
                 user_url: str = SOUNDCLOUD_USER_URL, credential_resolver: Optional[ClientIdResolver] = None):
        self.store = store if store is not None else EpisodeStore()
        self.api = api if api is not None else SoundCloudAPI()
        self.user_url = user_url
        self.credential_resolver = credential_resolver or ClientIdResolver(self.api, user_url=user_url)
        self.stream_resolver = StreamResolver(self.api)
        self.state = PipelineState.RESOLVING_CREDENTIAL
        self._correlation_id = new_correlation_id()

    async def run(self, limit: Optional[int] = None) -> List[Episode]:
        """
        Scrape all tracks and persist the streamable ones.

        Args:
            limit: Only process the first N enumerated tracks

        Returns:
            Processed episodes, newest first

        Raises:
            ScraperError: when a run-aborting stage fails
        """
        cid = self._correlation_id
        logger.info(f"[{cid}] 🚀 Starting SoundCloud metadata and stream URL scraping...")
        logger.info(f"[{cid}] 📍 Target URL: {self.user_url}")

        try:
            client_id = await self._stage(PipelineState.RESOLVING_CREDENTIAL, self.credential_resolver.resolve())

            owner: Owner = await self._stage(
                PipelineState.RESOLVING_OWNER, self.api.resolve_user(self.user_url, client_id)
            )
            logger.info(f"[{cid}] 👤 User: {owner.username} ({owner.full_name})")

            tracks: List[Track] = await self._stage(
                PipelineState.ENUMERATING, self.api.fetch_all_tracks(owner.id, client_id)
            )
            if limit is not None:
                logger.info(f"[{cid}] 🔢 Limiting to {limit} tracks")
                tracks = tracks[:limit]

            self.state = PipelineState.PROCESSING_ITEMS
            episodes = await self.process_tracks(tracks, client_id)
        finally:
            await self.api.cleanup()

        self.state = PipelineState.DONE
        logger.info(f"[{cid}] ✅ Scraping completed: {len(episodes)} episodes")
        return episodes

    async def _stage(self, state: PipelineState, operation: Awaitable[T]) -> T:
        """Await a fatal stage, tagging any failure with the stage it happened in"""
        self.state = state
        try:
            return await operation
        except ScraperError:
            self.state = PipelineState.FAILED
            logger.error(f"[{self._correlation_id}] 💥 Scraping failed while {state.value}")
            raise
        except Exception as e:
            self.state = PipelineState.FAILED
            logger.error(f"[{self._correlation_id}] 💥 Scraping failed while {state.value}: {e}")
            raise PipelineStageError(state, e) from e

    async def process_tracks(self, tracks: List[Track], client_id: str) -> List[Episode]:
        """Process tracks one at a time; returns stored episodes newest first"""
        logger.info(f"[{self._correlation_id}] 🔄 Processing track data...")
        progress = ProgressTracker(len(tracks), correlation_id=self._correlation_id)
        episodes: List[Episode] = []

        for track in tracks:
            progress.start_item(track.title or str(track.id))
            try:
                episode = await self.process_track(track, client_id)
            except Exception as e:
                logger.error(f"[{self._correlation_id}] ❌ Skipping track {track.id}: {e}", exc_info=True)
                progress.complete_item(success=False)
                continue

            if episode is None:
                progress.complete_item(skipped=True)
                continue

            episodes.append(episode)
            progress.complete_item()

        summary = progress.get_summary()
        logger.info(
            f"[{self._correlation_id}] Processed {summary['completed']} tracks, "
            f"skipped {summary['skipped']}, failed {summary['failed']}"
        )
        return sort_newest_first(episodes)

    async def process_track(self, track: Track, client_id: str) -> Optional[Episode]:
        """
        Enrich, resolve, parse and store one track.

        Returns:
            The stored Episode, or None for tracks that are not streamable
        """
        if track.id is None:
            raise ValueError("track has no id")

        detailed = await self.api.get_track_details(track.id, client_id) or track

        if not detailed.streamable:
            logger.info(f"[{self._correlation_id}] ⚠️  Track {detailed.id} is not streamable, skipping")
            return None

        stream_url = await self.stream_resolver.get_stream_url(detailed, client_id)
        show_notes = extract_show_notes_url(detailed.description)
        if show_notes:
            logger.info(f"[{self._correlation_id}] 📝 Found show notes URL: {show_notes}")
        chapters = extract_chapters(detailed.description)

        episode = Episode(
            id=detailed.id,
            title=detailed.title,
            description=detailed.description,
            duration=detailed.duration,
            duration_formatted=format_duration(detailed.duration),
            created_at=detailed.created_at,
            permalink=detailed.permalink_url,
            stream_url=stream_url,
            show_notes=show_notes,
            chapters=chapters or None,
        )
        self.store.upsert(episode)
        return episode


def log_summary(episodes: List[Episode]):
    """Log an overview of a finished run"""
    logger.info("📋 SUMMARY:")
    logger.info("=" * 50)
    if not episodes:
        logger.info("No episodes found.")
        return

    total = len(episodes)
    total_duration = sum(e.duration or 0 for e in episodes)
    with_notes = sum(1 for e in episodes if e.show_notes)
    with_stream = sum(1 for e in episodes if e.stream_url)

    logger.info(f"📊 Total Episodes: {total}")
    logger.info(f"⏱️  Total Duration: {format_duration(total_duration)}")
    logger.info(f"📊 Average Duration: {format_duration(total_duration / total)}")
    logger.info(f"📝 Episodes with Show Notes: {with_notes}/{total} ({with_notes / total * 100:.1f}%)")
    logger.info(f"🔗 Episodes with Stream URLs: {with_stream}/{total} (for downloading)")

    logger.info("🆕 Latest 5 Episodes:")
    for index, episode in enumerate(episodes[:5], 1):
        download_status = "📥" if episode.stream_url else "❌"
        notes_status = "📝" if episode.show_notes else "⭕"
        logger.info(f"{index}. {episode.title} ({episode.duration_formatted}) {download_status} {notes_status}")
