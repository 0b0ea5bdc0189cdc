"""Parser for individual WWDC session pages."""

from typing import List, NamedTuple, Optional, Tuple
from bs4 import Tag

from ..models.page import HTMLPage
from ..models.session import Focus
from ..core.logging import get_logger

logger = get_logger(__name__)

TAG_LINE_SEPARATOR = " - "
HD_VIDEO_LABEL = "HD Video"
SD_VIDEO_LABEL = "SD Video"


class SessionDetails(NamedTuple):
    """Description and tags read from a session page."""
    description: str
    focuses: Tuple[Focus, ...]
    track_label: Optional[str]


def _supplement_content_selector(name: str) -> str:
    # Tab buttons share the data-supplement-id; only the content carries "supplement <name>".
    return (
        f'li[data-supplement-id*="{name}"]'
        f':is([class*="supplement {name}"], :not([class]))'
    )


def _supplement_contents(page: HTMLPage, *names: str) -> List[Tag]:
    selector = ", ".join(_supplement_content_selector(name) for name in names)
    return page.soup.select(selector)


def extract_details(page: HTMLPage) -> Optional[SessionDetails]:
    """
    Extract description and tag line from the details supplement.

    The first paragraph is the description. The second is a tag line such as
    "Developer Tools - iOS, macOS" whose last segment lists focuses.

    Args:
        page: Parsed session page

    Returns:
        Session details, or None when the section is missing or malformed
    """
    contents = _supplement_contents(page, "details")
    if not contents:
        logger.debug("Details section not found", url=page.url)
        return None

    paragraphs = contents[0].select("p")
    if len(paragraphs) < 2:
        logger.debug("Details section has fewer than two paragraphs", url=page.url)
        return None

    description = paragraphs[0].get_text()
    tags = paragraphs[1].get_text().split(TAG_LINE_SEPARATOR)
    track_label = tags[0].strip() if len(tags) > 1 else None

    return SessionDetails(description, Focus.parse_line(tags[-1]), track_label)


def extract_resources(page: HTMLPage) -> Optional[Tuple[str, str]]:
    """
    Extract SD and HD download URLs.

    Anchors labelled "SD Video" and "HD Video" are looked up at any depth in
    the resources (or details) section, so layouts that nest them in a video
    list item are handled too.

    Returns:
        (sd_url, hd_url), or None unless both are present
    """
    for content in _supplement_contents(page, "resources", "details"):
        urls = {}
        for anchor in content.select("a[href]"):
            label = anchor.decode_contents().strip()
            if label in (SD_VIDEO_LABEL, HD_VIDEO_LABEL):
                urls[label] = page.resolve(anchor["href"])

        # A single rendition is not enough.
        if SD_VIDEO_LABEL in urls and HD_VIDEO_LABEL in urls:
            return urls[SD_VIDEO_LABEL], urls[HD_VIDEO_LABEL]

    logger.debug("Video resources not found", url=page.url)
    return None


def extract_hls(page: HTMLPage) -> Optional[str]:
    """Streaming manifest URL from the first source of the page's video element."""
    source = page.soup.select_one("video source[src]")
    if source is None:
        return None
    return page.resolve(source["src"])


def extract_captions_url(page: HTMLPage) -> Optional[str]:
    """Caption file URL from the page's video track element, if any."""
    for track in page.soup.select("video track[src]"):
        if track.get("kind", "captions") in ("captions", "subtitles"):
            return page.resolve(track["src"])
    return None
