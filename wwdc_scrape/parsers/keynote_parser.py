"""Parser for keynote event pages, which use a separate template."""

import html
import re
from typing import Any, Dict, Optional
from urllib.parse import urljoin

from ..clients.apple_client import AppleDeveloperClient
from ..core.exceptions import FetchError, ParsingError
from ..core.logging import get_logger, log_skip
from ..models.session import Conference, Focus, Session, Track

logger = get_logger(__name__)

KEYNOTE_NUMBER = "101"
KEYNOTE_TITLE = "Keynote"

# e.g. `var jsonPath = "/apple-events/june-2017/meta/data.json";`
JSON_PATH_PATTERN = re.compile(r'\b[\w.$]+\s*=\s*(["\'])([^"\'\s]+?\.json)\1')

META_TAG_PATTERN = re.compile(r'<meta\b[^>]*>', re.IGNORECASE)
META_ATTR_PATTERN = re.compile(r'([\w:-]+)\s*=\s*(["\'])(.*?)\2', re.DOTALL)


def find_json_path(page_text: str) -> Optional[str]:
    """Path of the metadata document assigned in the page's script."""
    match = JSON_PATH_PATTERN.search(page_text)
    return match.group(2) if match else None


def find_open_graph(page_text: str, prop: str) -> Optional[str]:
    """
    Content of an Open Graph meta tag, scanning the raw page text.

    Attribute order within the tag does not matter.
    """
    for tag in META_TAG_PATTERN.findall(page_text):
        attributes = {name.lower(): value for name, _, value in META_ATTR_PATTERN.findall(tag)}
        if attributes.get('property') == prop and attributes.get('content'):
            return html.unescape(attributes['content'].strip())
    return None


def _require(value: Optional[str], field: str, url: str) -> str:
    if not value:
        raise ParsingError(f"Keynote field missing: {field}", url, "keynote")
    return value


class KeynoteParser:
    """Builds the keynote session from an event page and its JSON metadata."""

    def __init__(self, client: AppleDeveloperClient):
        self.client = client

    def parse(self, year: int, page_url: str) -> Optional[Session]:
        """
        Extract the keynote session for a year.

        Args:
            year: Conference year
            page_url: Event page URL

        Returns:
            Keynote session, or None if any fetch or field fails
        """
        try:
            return self._parse(year, page_url)
        except (FetchError, ParsingError, ValueError) as e:
            logger.debug("Skipping keynote", **log_skip("keynote", str(e), year=year, url=page_url))
            return None

    def _parse(self, year: int, page_url: str) -> Session:
        page_text = self.client.fetch_text(page_url)

        json_path = _require(find_json_path(page_text), "metadata path", page_url)
        metadata_url = urljoin(page_url, json_path)
        metadata = self.client.fetch_json(metadata_url)
        if not isinstance(metadata, dict):
            raise ParsingError("Keynote metadata is not an object", metadata_url, "keynote")

        sources = self._video_sources(metadata)
        hls_url = _require(sources.get('hls'), "video.sources.hls", metadata_url)
        download_url = _require(sources.get('download'), "video.sources.download", metadata_url)
        captions_url = _require(metadata.get('captions'), "captions", metadata_url)

        image_url = _require(find_open_graph(page_text, 'og:image'), "og:image", page_url)
        description = _require(find_open_graph(page_text, 'og:description'), "og:description", page_url)

        return Session(
            conference=Conference.WWDC,
            year=year,
            number=KEYNOTE_NUMBER,
            title=KEYNOTE_TITLE,
            description=description,
            focuses=tuple(Focus),
            track=Track.FEATURED,
            image_url=urljoin(page_url, image_url),
            download_sd=urljoin(metadata_url, download_url),
            download_hd=urljoin(metadata_url, download_url),
            hls_url=urljoin(metadata_url, hls_url),
            webvtt_url=urljoin(metadata_url, captions_url),
        )

    @staticmethod
    def _video_sources(metadata: Dict[str, Any]) -> Dict[str, Any]:
        video = metadata.get('video')
        sources = video.get('sources') if isinstance(video, dict) else None
        return sources if isinstance(sources, dict) else {}
