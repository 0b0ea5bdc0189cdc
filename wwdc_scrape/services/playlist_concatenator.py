"""Caption reconstruction from HLS subtitle playlists."""

from typing import List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from ..clients.apple_client import AppleDeveloperClient
from ..core.exceptions import ContentValidationError, FetchError
from ..core.logging import get_logger, log_skip
from ..models.session import Session

logger = get_logger(__name__)

PLAYLIST_SIGNATURE = "#EXTM3U"
SUBTITLES_PATH = "subtitles/eng/"
MANIFEST_NAME = "prog_index.m3u8"
SEGMENT_EXTENSION = ".webvtt"


def media_base_url(download_url: str) -> str:
    """Directory of a download URL, without query or fragment."""
    parts = urlparse(download_url)
    directory = parts.path.rsplit('/', 1)[0] + '/'
    return urlunparse((parts.scheme, parts.netloc, directory, '', '', ''))


def manifest_url(download_url: str) -> str:
    return urljoin(media_base_url(download_url), SUBTITLES_PATH + MANIFEST_NAME)


def segment_names(manifest_text: str) -> List[str]:
    """Caption segment file names referenced by a manifest, in order."""
    names = (line.strip() for line in manifest_text.splitlines())
    return [name for name in names if name.endswith(SEGMENT_EXTENSION)]


class PlaylistConcatenator:
    """Fetches a subtitle manifest and joins its segments in order."""

    def __init__(self, client: AppleDeveloperClient):
        self.client = client

    def fetch(self, session: Session) -> Optional[str]:
        """
        Concatenate the caption segments of a session.

        Returns:
            Raw concatenated text, or None if the manifest or any segment fails
        """
        try:
            return self._concatenate(session.download_sd)
        except (FetchError, ContentValidationError) as e:
            logger.debug("Playlist concatenation failed",
                         **log_skip("captions", str(e), year=session.year, number=session.number))
            return None

    def _concatenate(self, download_url: str) -> str:
        base_url = urljoin(media_base_url(download_url), SUBTITLES_PATH)
        playlist_url = manifest_url(download_url)

        manifest = self.client.fetch_text(playlist_url)
        tokens = manifest.split()
        if not tokens or tokens[0] != PLAYLIST_SIGNATURE:
            raise ContentValidationError("Subtitle manifest unavailable", playlist_url)

        names = segment_names(manifest)
        logger.debug("Fetching caption segments", url=playlist_url, segments=len(names))

        text = "".join(self.client.fetch_text(urljoin(base_url, name)) for name in names).strip()
        if not text:
            raise ContentValidationError("Caption segments are empty", playlist_url)
        return text
