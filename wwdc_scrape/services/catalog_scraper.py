"""Catalog scraping service for WWDC session pages."""

from typing import Dict, List, Optional
from urllib.parse import urlparse
from bs4 import Tag

from ..clients.apple_client import AppleDeveloperClient
from ..core.config import ScrapeConfig
from ..core.exceptions import FetchError, ParsingError
from ..core.logging import get_logger, log_skip
from ..models.page import HTMLPage
from ..models.session import Conference, Session, Track, make_identifier
from ..parsers.detail_parser import (
    extract_captions_url, extract_details, extract_hls, extract_resources
)
from ..parsers.keynote_parser import KEYNOTE_NUMBER, KeynoteParser

logger = get_logger(__name__)

TRACK_GROUP_SELECTOR = 'li[class*="collection-focus-group"]'


def catalog_path(year: int) -> str:
    """Path of a year's session index on the developer site."""
    return f"/videos/wwdc{year}"


def session_number(href: str) -> str:
    """Item number: the last path segment of a session link."""
    return urlparse(href).path.rstrip('/').split('/')[-1]


def anchor_image_url(anchor: Tag) -> Optional[str]:
    """Image URL when the anchor wraps an image, otherwise None."""
    child = anchor.find(True, recursive=False)
    if child is None or not child.get('src'):
        return None
    return child['src'].strip()


class AnchorPairingCache:
    """
    Image URLs seen on image anchors, waiting for their title anchor.

    An image anchor always precedes the title anchor of the same session, so
    the cache lives for a single track scan only.
    """

    def __init__(self):
        self._images: Dict[str, str] = {}

    def remember(self, identifier: str, image_url: str) -> None:
        self._images[identifier] = image_url

    def consume(self, identifier: str) -> Optional[str]:
        return self._images.pop(identifier, None)

    def __len__(self) -> int:
        return len(self._images)


class CatalogScraper:
    """Walks yearly index pages and resolves every listed session."""

    def __init__(self, client: AppleDeveloperClient, config: Optional[ScrapeConfig] = None,
                 conference: Conference = Conference.WWDC):
        """
        Initialize the scraper.

        Args:
            client: HTTP client for the developer site
            config: Year range and keynote page configuration
            conference: Catalog the sessions belong to
        """
        self.client = client
        self.config = config or ScrapeConfig()
        self.conference = conference
        self.keynote_parser = KeynoteParser(client)

    def scrape(self, year_filter: Optional[int] = None,
               item_filter: Optional[str] = None) -> List[Session]:
        """
        Scrape all sessions in the configured year range.

        Args:
            year_filter: Only scrape this year
            item_filter: Only resolve the session with this number

        Returns:
            Sessions grouped by year, then track, then page order
        """
        sessions: List[Session] = []
        for year in self.config.years:
            if year_filter is not None and year != year_filter:
                continue
            sessions.extend(self.scrape_year(year, item_filter))

        logger.debug("Catalog scrape completed", sessions=len(sessions))
        return sessions

    def scrape_year(self, year: int, item_filter: Optional[str] = None) -> List[Session]:
        """Scrape one year's index page, plus its keynote page when configured."""
        url = self.client.url_for(catalog_path(year))
        try:
            page = self.client.fetch_document(url)
        except FetchError as e:
            logger.debug("Skipping year", **log_skip("year", str(e), year=year, url=url))
            return []

        logger.debug("Scraping year", year=year, url=url)

        sessions: List[Session] = []
        for group in page.soup.select(TRACK_GROUP_SELECTOR):
            sessions.extend(self.scrape_track(page, year, group, item_filter))

        keynote = self._scrape_keynote(year, item_filter)
        if keynote is not None:
            sessions = [s for s in sessions if s.identifier != keynote.identifier]
            sessions.insert(0, keynote)

        return sessions

    def scrape_track(self, page: HTMLPage, year: int, group: Tag,
                     item_filter: Optional[str] = None) -> List[Session]:
        """
        Scrape the sessions of one track group.

        The group's first child holds the track label and its last child the
        session anchors.
        """
        children = group.find_all(True, recursive=False)
        if not children:
            logger.debug("Empty track group", year=year, url=page.url)
            return []

        header, items = children[0], children[-1]
        track_label = header.get_text().strip()
        logger.debug("Scanning sessions in track", year=year, track=track_label)

        sessions: List[Session] = []
        images = AnchorPairingCache()

        for anchor in items.select("a[href]"):
            try:
                number = session_number(anchor["href"])
                image_url = anchor_image_url(anchor)
                link = page.resolve(anchor["href"] if image_url is None else image_url)
            except ValueError as e:
                logger.debug("Skipping anchor",
                             **log_skip("anchor", str(e), year=year, url=anchor["href"]))
                continue

            identifier = make_identifier(self.conference, year, number)
            if image_url is not None:
                images.remember(identifier, link)
                continue

            # Title anchor for the session whose image (if any) was just cached.
            cached_image = images.consume(identifier)

            if item_filter is not None and number != item_filter:
                continue

            session = self.scrape_session(
                year=year,
                number=number,
                title=anchor.get_text().strip(),
                track_label=track_label,
                page_url=link,
                image_url=cached_image
            )

            if session is not None:
                sessions.append(session)

        return sessions

    def scrape_session(self, year: int, number: str, title: str, track_label: str,
                       page_url: str, image_url: Optional[str] = None) -> Optional[Session]:
        """
        Fetch a session page and build the session record.

        Returns:
            The session, or None when any required piece is missing
        """
        try:
            page = self.client.fetch_document(page_url)
        except FetchError as e:
            logger.debug("Skipping session",
                         **log_skip("session", str(e), year=year, number=number, url=page_url))
            return None

        logger.debug("Scraping session", year=year, number=number)

        details = extract_details(page)
        if details is None:
            logger.debug("Skipping session",
                         **log_skip("session", "description not found",
                                   year=year, number=number, url=page_url))
            return None

        resources = extract_resources(page)
        if resources is None:
            logger.debug("Skipping session",
                         **log_skip("session", "video resources not found",
                                   year=year, number=number, url=page_url))
            return None

        sd_url, hd_url = resources
        try:
            return Session(
                conference=self.conference,
                year=year,
                number=number,
                title=title,
                description=details.description,
                focuses=details.focuses,
                track=Track.from_label(track_label or details.track_label or ""),
                image_url=image_url,
                download_sd=sd_url,
                download_hd=hd_url,
                hls_url=extract_hls(page),
                webvtt_url=extract_captions_url(page),
            )
        except (ParsingError, ValueError) as e:
            logger.debug("Skipping session",
                         **log_skip("session", str(e), year=year, number=number, url=page_url))
            return None

    def _scrape_keynote(self, year: int, item_filter: Optional[str]) -> Optional[Session]:
        page_url = self.config.keynote_pages.get(year)
        if page_url is None:
            return None
        if item_filter is not None and item_filter != KEYNOTE_NUMBER:
            return None
        return self.keynote_parser.parse(year, page_url)
