"""Caption acquisition options."""

from enum import Enum
from typing import List


class CaptionMethod(str, Enum):
    """Ways of obtaining a session's caption track."""
    DIRECT = "direct"
    PLAYLIST = "playlist"


class CaptionStrategy(str, Enum):
    """Ordered combination of caption methods."""
    DIRECT = "direct"
    PLAYLIST = "playlist"
    DIRECT_THEN_PLAYLIST = "direct-then-playlist"
    PLAYLIST_THEN_DIRECT = "playlist-then-direct"

    @property
    def methods(self) -> List[CaptionMethod]:
        """Methods to try, in order."""
        return {
            CaptionStrategy.DIRECT: [CaptionMethod.DIRECT],
            CaptionStrategy.PLAYLIST: [CaptionMethod.PLAYLIST],
            CaptionStrategy.DIRECT_THEN_PLAYLIST: [CaptionMethod.DIRECT, CaptionMethod.PLAYLIST],
            CaptionStrategy.PLAYLIST_THEN_DIRECT: [CaptionMethod.PLAYLIST, CaptionMethod.DIRECT],
        }[self]
