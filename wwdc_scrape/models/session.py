"""Session data models for the WWDC scraper."""

from enum import Enum
from typing import Optional, Tuple, Dict, Any
from urllib.parse import urlparse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.exceptions import UnknownTrackError

FIRST_YEAR = 2012
LAST_YEAR = 2017

# Must not occur inside any identifier component.
IDENTIFIER_SEPARATOR = "-"


class Conference(str, Enum):
    """Conferences whose catalogs can be scraped."""
    WWDC = "WWDC"


class Focus(str, Enum):
    """Platforms a session addresses."""
    IOS = "iOS"
    MACOS = "macOS"
    TVOS = "tvOS"
    WATCHOS = "watchOS"

    @classmethod
    def parse_line(cls, line: str) -> Tuple["Focus", ...]:
        """
        Parse a comma-delimited focus line.

        Unknown tokens are dropped; recognized ones keep their order.

        Args:
            line: Focus line such as "iOS, macOS, tvOS"

        Returns:
            Tuple of recognized focuses
        """
        known = {focus.value: focus for focus in cls}
        tokens = (token.strip() for token in line.split(","))
        return tuple(known[token] for token in tokens if token in known)


class Track(str, Enum):
    """Subject-area category grouping sessions on the catalog page."""
    APP_FRAMEWORKS = "App Frameworks"
    SYSTEM_FRAMEWORKS = "System Frameworks"
    DEVELOPER_TOOLS = "Developer Tools"
    FEATURED = "Featured"
    GRAPHICS_AND_GAMES = "Graphics and Games"
    DESIGN = "Design"
    MEDIA = "Media"
    DISTRIBUTION = "Distribution"

    @classmethod
    def from_label(cls, label: str) -> "Track":
        """Map a track label to its member, raising UnknownTrackError otherwise."""
        try:
            return cls(label.strip())
        except ValueError:
            raise UnknownTrackError(label)


def make_identifier(conference: Conference, year: int, number: str) -> str:
    """Join conference, year and item number into a session identifier."""
    return IDENTIFIER_SEPARATOR.join([Conference(conference).value, str(year), number])


def _is_absolute_url(value: str) -> bool:
    parts = urlparse(value)
    return bool(parts.scheme and parts.netloc)


class Session(BaseModel):
    """A single catalog session, fully resolved."""
    conference: Conference = Conference.WWDC
    year: int = Field(..., ge=FIRST_YEAR, le=LAST_YEAR)
    number: str
    title: str
    description: str
    focuses: Tuple[Focus, ...] = ()
    track: Track
    image_url: Optional[str] = None
    download_sd: str
    download_hd: str
    hls_url: Optional[str] = None
    webvtt_url: Optional[str] = None
    duration: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if not v:
            raise ValueError('session number must not be empty')
        return v

    @field_validator('download_sd', 'download_hd')
    @classmethod
    def validate_download_url(cls, v):
        if not _is_absolute_url(v):
            raise ValueError(f'download URL must be absolute: {v!r}')
        return v

    @field_validator('hls_url', 'webvtt_url')
    @classmethod
    def validate_optional_url(cls, v):
        if v is not None and not _is_absolute_url(v):
            raise ValueError(f'URL must be absolute: {v!r}')
        return v

    @property
    def identifier(self) -> str:
        """Composite key used for lookups and deduplication."""
        return make_identifier(self.conference, self.year, self.number)

    def __hash__(self) -> int:
        return hash(self.identifier)

    def to_dict(self) -> Dict[str, Any]:
        """Full record as consumed by the JSON writer."""
        return {
            'description': self.description,
            'download_hd': self.download_hd,
            'download_sd': self.download_sd,
            'duration': self.duration,
            'focus': [focus.value for focus in self.focuses],
            'image': self.image_url,
            'id': self.number,
            'track': self.track.value,
            'title': self.title,
            'year': self.year,
            'hls': self.hls_url,
            'webvtt': self.webvtt_url,
        }
