"""Utility helper functions"""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from .logging import get_logger

logger = get_logger(__name__)

# Sorts undated episodes after everything else
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def format_duration(milliseconds: Optional[float]) -> str:
    """Format a millisecond duration as H:MM:SS or M:SS"""
    if not milliseconds:
        return "Unknown"

    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}:{minutes % 60:02d}:{seconds % 60:02d}"
    return f"{minutes}:{seconds % 60:02d}"


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision, e.g. 2024-01-31T09:15:00.123Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_created_at(value: Optional[str]) -> datetime:
    """Parse a SoundCloud created_at value into an aware datetime for sorting"""
    if not value:
        return _EPOCH
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        logger.debug(f"Unparseable created_at: {value!r}")
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_correlation_id() -> str:
    return str(uuid.uuid4())[:8]


class ProgressTracker:
    """Track progress across sequentially processed items"""

    def __init__(self, total_items: int, correlation_id: Optional[str] = None):
        self.total_items = total_items
        self.completed_items = 0
        self.skipped_items = 0
        self.failed_items = 0
        self.current_item = None
        self.start_time = time.time()
        self.item_start_time = None
        self.correlation_id = correlation_id or new_correlation_id()

    def start_item(self, item_name: str):
        """Mark the start of processing an item"""
        self.current_item = item_name
        self.item_start_time = time.time()
        position = self.completed_items + self.skipped_items + self.failed_items + 1
        logger.info(f"[{self.correlation_id}] 📦 Processing track {position}/{self.total_items}: {item_name}")

    def complete_item(self, success: bool = True, skipped: bool = False):
        """Mark the completion of an item"""
        if skipped:
            self.skipped_items += 1
        elif success:
            self.completed_items += 1
        else:
            self.failed_items += 1

        if self.item_start_time:
            item_duration = time.time() - self.item_start_time
            logger.debug(f"[{self.correlation_id}] {self.current_item} took {item_duration:.1f}s")

        self.current_item = None
        self.item_start_time = None

    def get_summary(self) -> dict:
        """Get progress summary"""
        total_duration = time.time() - self.start_time
        items_processed = self.completed_items + self.skipped_items + self.failed_items

        return {
            'total_items': self.total_items,
            'completed': self.completed_items,
            'skipped': self.skipped_items,
            'failed': self.failed_items,
            'duration_seconds': total_duration,
            'avg_time_per_item': total_duration / items_processed if items_processed > 0 else 0
        }
