"""Data models for the Nerdland episode archive"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Owner:
    """SoundCloud account whose tracks are archived"""
    id: int
    username: Optional[str] = None
    full_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Owner':
        """Create from a /resolve response"""
        if data.get('id') is None:
            raise ValueError("resolve response carries no user id")
        return cls(
            id=data['id'],
            username=data.get('username'),
            full_name=data.get('full_name'),
        )


@dataclass
class Transcoding:
    """One encoded rendition of a track"""
    url: Optional[str] = None
    protocol: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def is_progressive(self) -> bool:
        return self.protocol == "progressive"

    @classmethod
    def from_api(cls, data: dict) -> 'Transcoding':
        fmt = data.get('format') or {}
        return cls(
            url=data.get('url'),
            protocol=fmt.get('protocol'),
            mime_type=fmt.get('mime_type'),
        )


@dataclass
class Track:
    """Raw SoundCloud track record, every field optional except what we key on"""
    id: Optional[int]
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    created_at: Optional[str] = None
    permalink_url: Optional[str] = None
    streamable: bool = False
    stream_url: Optional[str] = None
    transcodings: List[Transcoding] = field(default_factory=list)
    downloadable: bool = False
    download_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Track':
        """Create from a track payload, tolerating absent keys"""
        media = data.get('media') or {}
        transcodings = [
            Transcoding.from_api(t)
            for t in (media.get('transcodings') or [])
            if isinstance(t, dict)
        ]
        return cls(
            id=data.get('id'),
            title=data.get('title'),
            description=data.get('description'),
            duration=data.get('duration'),
            created_at=data.get('created_at'),
            permalink_url=data.get('permalink_url'),
            streamable=bool(data.get('streamable')),
            stream_url=data.get('stream_url'),
            transcodings=transcodings,
            downloadable=bool(data.get('downloadable')),
            download_url=data.get('download_url'),
        )


@dataclass
class Chapter:
    """Timestamped marker parsed from a description"""
    start: str
    title: str

    def to_dict(self) -> dict:
        return {'start': self.start, 'title': self.title}


@dataclass
class Episode:
    """Processed, persisted episode"""
    id: int
    title: Optional[str]
    description: Optional[str] = None
    duration: Optional[int] = None
    duration_formatted: str = "Unknown"
    created_at: Optional[str] = None
    permalink: Optional[str] = None
    stream_url: Optional[str] = None
    show_notes: Optional[str] = None
    chapters: Optional[List[Chapter]] = None
    created_date: Optional[str] = None
    updated_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the record shape stored in episodes.json"""
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'duration': self.duration,
            'durationFormatted': self.duration_formatted,
            'createdAt': self.created_at,
            'permalink': self.permalink,
            'streamUrl': self.stream_url,
            'showNotes': self.show_notes,
            'chapters': [c.to_dict() for c in self.chapters] if self.chapters else None,
        }
        # Bookkeeping dates belong to the store; only carry them once set
        if self.created_date is not None:
            data['created_date'] = self.created_date
        if self.updated_date is not None:
            data['updated_date'] = self.updated_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Episode':
        """Create from a stored record"""
        chapters = data.get('chapters')
        return cls(
            id=data['id'],
            title=data.get('title'),
            description=data.get('description'),
            duration=data.get('duration'),
            duration_formatted=data.get('durationFormatted', "Unknown"),
            created_at=data.get('createdAt'),
            permalink=data.get('permalink'),
            stream_url=data.get('streamUrl'),
            show_notes=data.get('showNotes'),
            chapters=[Chapter(c['start'], c['title']) for c in chapters] if chapters else None,
            created_date=data.get('created_date'),
            updated_date=data.get('updated_date'),
        )
