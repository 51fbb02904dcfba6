"""Filename generation for downloaded episode audio"""

import re
from typing import Optional, Union

from ..models import Episode

MAX_TITLE_LENGTH = 200


def sanitize_filename(title: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Strip characters that are invalid in filenames and cap the length"""
    sanitized = re.sub(r'[<>:"/\\|?*]', '', title)
    sanitized = re.sub(r'\s+', ' ', sanitized).strip()
    return sanitized[:max_length]


def timestamp_prefix(created_at: Optional[str]) -> str:
    """
    Turn a createdAt value into a filesystem-safe prefix

    Example: 2024-01-15T10:30:00.000Z -> 2024-01-15_10-30-00
    """
    if not created_at:
        return "unknown"
    prefix = created_at.replace('T', '_', 1)
    prefix = prefix.replace(':', '-')
    prefix = re.sub(r'Z$', '', prefix)
    prefix = re.sub(r'\.\d+', '', prefix, count=1)
    return prefix


def create_episode_filename(episode: Union[Episode, dict]) -> str:
    """
    Generate the deterministic local filename for an episode

    Format: <timestamp>_<sanitized title>_<id>.mp3

    Args:
        episode: Episode or stored episode record

    Returns:
        Filename string (without path)
    """
    if isinstance(episode, Episode):
        episode = episode.to_dict()

    title = sanitize_filename(episode.get('title') or '')
    return f"{timestamp_prefix(episode.get('createdAt'))}_{title}_{episode['id']}.mp3"
