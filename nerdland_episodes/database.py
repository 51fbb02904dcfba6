"""JSON document store for processed episodes"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .models import Episode
from .config import EPISODES_JSON
from .utils.helpers import parse_created_at, utc_timestamp
from .utils.logging import get_logger

logger = get_logger(__name__)

EPISODES_KEY = "episodes"


class EpisodeStore:
    """
    Episodes persisted in a single JSON document, keyed by track id.

    Every upsert reads the whole collection and rewrites the whole file.
    That is fine for a few hundred episodes and a single writer; there is
    no locking.
    """

    def __init__(self, path: Path = EPISODES_JSON, clock: Callable[[], str] = utc_timestamp):
        self.path = Path(path)
        self._clock = clock
        self._init_store()

    def _init_store(self):
        """Create the document with an empty collection if it does not exist"""
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write({EPISODES_KEY: []})
        logger.info(f"📊 Created episode store at {self.path}")

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            content = f.read()
        if not content.strip():
            return {}
        return json.loads(content)

    def _write(self, document: Dict[str, Any]):
        """Rewrite the full document, swapping it in only once fully written"""
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)

    def _load_collection(self) -> List[Dict[str, Any]]:
        return list(self._read().get(EPISODES_KEY) or [])

    def upsert(self, episode: Union[Episode, Dict[str, Any]]) -> Any:
        """
        Insert a new episode or merge it over the stored one with the same id.

        Keys present on the incoming record overwrite the stored values; keys
        it lacks are left alone. created_date is set on first insert only,
        updated_date on every call.

        Returns:
            The episode id
        """
        record = episode.to_dict() if isinstance(episode, Episode) else dict(episode)
        if record.get('id') is None:
            raise ValueError("cannot upsert an episode without an id")

        # Bookkeeping is owned by the store
        record.pop('created_date', None)
        record.pop('updated_date', None)

        document = self._read()
        episodes = list(document.get(EPISODES_KEY) or [])
        now = self._clock()

        for index, existing in enumerate(episodes):
            if existing.get('id') == record['id']:
                merged = {**existing, **record}
                merged['updated_date'] = now
                episodes[index] = merged
                logger.debug(f"Updated episode {record['id']}")
                break
        else:
            record['created_date'] = now
            record['updated_date'] = now
            episodes.append(record)
            logger.debug(f"Inserted episode {record['id']}")

        document[EPISODES_KEY] = episodes
        self._write(document)
        return record['id']

    def load_episodes(self) -> List[Dict[str, Any]]:
        """All stored episode records, newest first"""
        return sorted(
            self._load_collection(),
            key=lambda e: parse_created_at(e.get('createdAt')),
            reverse=True,
        )

    def get_episode(self, episode_id: Any) -> Optional[Dict[str, Any]]:
        for record in self._load_collection():
            if record.get('id') == episode_id:
                return record
        return None

    def find_by_permalink(self, permalink: str) -> Optional[Dict[str, Any]]:
        for record in self._load_collection():
            if record.get('permalink') == permalink:
                return record
        return None

    def count(self) -> int:
        return len(self._load_collection())
