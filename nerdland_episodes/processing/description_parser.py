"""
Heuristic extraction of show-notes links and chapter markers from
free-text SoundCloud descriptions.

Each pattern is an independent strategy tried in priority order. Labeled
references ("Show notes: ...", "Meer info op ...") always win over bare
URLs found elsewhere in the text.
"""

import re
from typing import List, Optional
from urllib.parse import urlparse

from ..models import Chapter
from ..utils.logging import get_logger

logger = get_logger(__name__)

MIN_URL_LENGTH = 8

# Labeled references, in priority order
LABELED_PATTERNS = [
    re.compile(
        r'(?:show\s*notes?)[\s:]*(?:(?:op|at|on)[\s:]+)?(\S+(?:\s+\S+)*?)(?:\s|$)',
        re.IGNORECASE,
    ),
    re.compile(
        r'(?:meer\s+info|more\s+info)[\s:]*(?:(?:op|at|on)[\s:]+)?(\S+(?:\s+\S+)*?)(?:\s|$)',
        re.IGNORECASE,
    ),
]

# Bare URLs, in priority order
BARE_URL_PATTERNS = [
    re.compile(r'https?://[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}[^\s<>"]*\b', re.IGNORECASE),
    re.compile(
        r"(?:www\.)?[a-zA-Z0-9-]+\.[a-zA-Z]{2,}(?:/[\w\-._~:/?#\[\]@!$&'()*+,;=%]*)?(?=\s|$)",
        re.ASCII,
    ),
]

TRAILING_PUNCTUATION = re.compile(r'[.,;!?]+$')
DANGLING_WORD = re.compile(r'\s+(?:en|and|of|or|\w{1,3})$')
STOP_WORDS = re.compile(r'^(?:op|met|door|aan|van|in|en|and|or|the|a|an)$', re.IGNORECASE)
HAS_SCHEME = re.compile(r'^https?://', re.IGNORECASE)

CHAPTER_PATTERN = re.compile(r'\((\d{2}):(\d{2}):(\d{2})\)\s*([^\n]+)', re.ASCII)


def clean_description(text: str) -> str:
    """Strip HTML tags and collapse whitespace"""
    text = re.sub(r'<[^>]*>', ' ', text)
    return re.sub(r'\s+', ' ', text).strip()


def _with_scheme(url: str) -> str:
    return url if HAS_SCHEME.match(url) else f"https://{url}"


def _is_valid_url(url: str) -> bool:
    """The host must look like a real domain"""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return False
    if not hostname or any(ch.isspace() for ch in parsed.netloc):
        return False
    return '.' in hostname and len(hostname) > 3


def _from_labeled(text: str) -> Optional[str]:
    for pattern in LABELED_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        candidate = match.group(1).strip()
        candidate = TRAILING_PUNCTUATION.sub('', candidate)
        candidate = DANGLING_WORD.sub('', candidate)

        if len(candidate) < MIN_URL_LENGTH or STOP_WORDS.match(candidate):
            continue

        url = _with_scheme(candidate)
        if _is_valid_url(url):
            return url
    return None


def _from_bare_url(text: str) -> Optional[str]:
    for pattern in BARE_URL_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        candidate = TRAILING_PUNCTUATION.sub('', match.group(0))
        if len(candidate) < MIN_URL_LENGTH:
            continue

        url = _with_scheme(candidate)
        if _is_valid_url(url):
            return url
    return None


def extract_show_notes_url(description: Optional[str]) -> Optional[str]:
    """
    Find the show-notes link in a description.

    Labeled references are tried first; only when none yields a valid URL
    is the first bare URL in the text used.

    Args:
        description: Raw (possibly HTML) description

    Returns:
        Absolute URL or None
    """
    if not description or not isinstance(description, str):
        return None

    text = clean_description(description)
    return _from_labeled(text) or _from_bare_url(text)


def extract_chapters(description: Optional[str]) -> List[Chapter]:
    """
    Parse "(HH:MM:SS) Title" markers from a raw description, in order.

    Digit groups are not range-checked, so (99:99:99) parses too.
    """
    if not description or not isinstance(description, str):
        return []

    return [
        Chapter(start=f"{hh}:{mm}:{ss}", title=title.strip())
        for hh, mm, ss, title in CHAPTER_PATTERN.findall(description)
    ]
