"""Parsed HTML page model."""

from dataclasses import dataclass
from urllib.parse import urljoin
from bs4 import BeautifulSoup


@dataclass
class HTMLPage:
    """A fetched HTML document together with the URL it was served from."""
    url: str
    soup: BeautifulSoup

    @classmethod
    def parse(cls, url: str, html_content: str) -> "HTMLPage":
        return cls(url=url, soup=BeautifulSoup(html_content, 'lxml'))

    def resolve(self, href: str) -> str:
        """Resolve a possibly relative link against the page URL."""
        return urljoin(self.url, href.strip())
