"""Caption acquisition service."""

from typing import Callable, Dict, Optional

from ..clients.apple_client import AppleDeveloperClient
from ..core.config import CaptionConfig
from ..core.exceptions import FetchError
from ..core.logging import get_logger, log_skip
from ..models.caption import CaptionMethod, CaptionStrategy
from ..models.session import Session
from ..utils.webvtt import SIGNATURE, normalize
from .playlist_concatenator import PlaylistConcatenator

logger = get_logger(__name__)


class DirectDownload:
    """Downloads a session's complete caption file."""

    def __init__(self, client: AppleDeveloperClient):
        self.client = client

    def fetch(self, session: Session) -> Optional[str]:
        """
        Fetch the caption file at the session's WebVTT URL.

        Returns:
            Caption text, or None if missing, unreachable or not WebVTT
        """
        if session.webvtt_url is None:
            logger.debug("No WebVTT URL", year=session.year, number=session.number)
            return None

        try:
            text = self.client.fetch_text(session.webvtt_url)
        except FetchError as e:
            logger.debug("Could not fetch WebVTT",
                         **log_skip("captions", str(e), year=session.year,
                                   number=session.number, url=session.webvtt_url))
            return None

        # Guards against error pages served with a success status.
        if SIGNATURE not in text:
            logger.debug("Received non-WebVTT response",
                         **log_skip("captions", "missing signature", year=session.year,
                                   number=session.number, url=session.webvtt_url))
            return None
        return text


class CaptionService:
    """Acquires normalized caption text for sessions."""

    def __init__(self, client: AppleDeveloperClient, config: Optional[CaptionConfig] = None):
        """
        Initialize the service.

        Args:
            client: HTTP client
            config: Caption configuration holding the default strategy
        """
        self.config = config or CaptionConfig()
        direct = DirectDownload(client)
        playlist = PlaylistConcatenator(client)
        self.methods: Dict[CaptionMethod, Callable[[Session], Optional[str]]] = {
            CaptionMethod.DIRECT: direct.fetch,
            CaptionMethod.PLAYLIST: playlist.fetch,
        }

    def acquire(self, session: Session,
                strategy: Optional[CaptionStrategy] = None) -> Optional[str]:
        """
        Try each method of the strategy in order.

        Args:
            session: Session whose captions are wanted
            strategy: Overrides the configured strategy

        Returns:
            Normalized caption text from the first successful method, or None
        """
        strategy = CaptionStrategy(strategy or self.config.strategy)

        for method in strategy.methods:
            logger.debug("Trying caption method", method=method.value,
                         year=session.year, number=session.number)
            text = self.methods[method](session)
            if text is not None:
                return normalize(text)

        logger.debug("No captions acquired",
                     **log_skip("captions", "all methods failed", year=session.year,
                               number=session.number, strategy=strategy.value))
        return None
