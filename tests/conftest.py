"""Pytest configuration and shared fixtures for WWDC scraper tests."""

import json
import sys
import pytest
from pathlib import Path
from typing import Any, Dict, Tuple, Union

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers

from wwdc_scrape.core.config import APIConfig, ScrapeConfig
from wwdc_scrape.core.logging import setup_logging
from wwdc_scrape.clients.apple_client import AppleDeveloperClient
from wwdc_scrape.models.session import Focus, Session, Track

BASE_URL = "https://developer.apple.com"
MEDIA_DIR = "https://devstreaming-cdn.apple.com/videos/wwdc/2017/102xyz/102"
KEYNOTE_PAGE_URL = "https://www.apple.com/apple-events/june-2017/"
KEYNOTE_JSON_URL = "https://www.apple.com/apple-events/june-2017/meta/data.json"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up logging for all tests."""
    setup_logging(verbose=True)
    yield


class MockResponse:
    """Mock HTTP response that decodes its body the way requests does."""

    def __init__(self, body: Union[str, bytes, Dict[str, Any], list], status_code: int = 200,
                 content_type: str = 'text/html'):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            content_type = 'application/json'
        if isinstance(body, str):
            body = body.encode('utf-8')
        self.content = body
        self.status_code = status_code
        self.headers = CaseInsensitiveDict({'Content-Type': content_type})
        self.encoding = get_encoding_from_headers(self.headers)

    def json(self):
        return json.loads(self.content.decode('utf-8'))

    @property
    def text(self):
        return self.content.decode(self.encoding or 'utf-8', errors='replace')


class FakeSite:
    """URL-keyed responses served in place of the network."""

    def __init__(self):
        self.pages: Dict[str, Tuple[int, Any, str]] = {}
        self.requested = []

    def add(self, url: str, body: Any, status_code: int = 200, content_type: str = 'text/html') -> None:
        self.pages[url] = (status_code, body, content_type)

    def get(self, url: str) -> MockResponse:
        self.requested.append(url)
        if url not in self.pages:
            return MockResponse("Not found", 404)
        status_code, body, content_type = self.pages[url]
        return MockResponse(body, status_code, content_type)



@pytest.fixture
def fake_site(monkeypatch) -> FakeSite:
    """Route every requests.Session.get through a FakeSite."""
    site = FakeSite()

    def mock_get(self, url, **kwargs):
        return site.get(url)

    import requests
    monkeypatch.setattr(requests.Session, 'get', mock_get)
    return site


@pytest.fixture
def client(fake_site) -> AppleDeveloperClient:
    with AppleDeveloperClient(APIConfig(base_url=BASE_URL)) as api_client:
        yield api_client


@pytest.fixture
def scrape_config() -> ScrapeConfig:
    return ScrapeConfig(first_year=2017, last_year=2017)


def detail_page_html(description: str = "Learn about the latest platform updates.",
                     tag_line: str = "Featured - iOS, bogus, macOS",
                     number: str = "102",
                     include_hd: bool = True,
                     include_sd: bool = True,
                     nested_video: bool = True,
                     media_dir: str = MEDIA_DIR) -> str:
    """Session page with a details tab, its content and a video element."""
    links = []
    if include_hd:
        links.append(f'<li><a href="{media_dir}/{number}_hd.mp4?dl=1">HD Video</a></li>')
    if include_sd:
        links.append(f'<li><a href="{media_dir}/{number}_sd.mp4?dl=1">SD Video</a></li>')
    links.append('<li><a href="/videos/play/wwdc2017/102/pdf">Presentation Slides (PDF)</a></li>')
    link_list = "".join(links)
    if nested_video:
        link_list = f'<li class="video"><ul>{link_list}</ul></li>'

    return f"""
    <html>
    <body>
        <video id="video">
            <source src="{media_dir}/hls_vod_mvp.m3u8"></source>
            <track kind="captions" src="{media_dir}/{number}.vtt"></track>
        </video>
        <ul class="supplements">
            <li class="supplement-tab details" data-supplement-id="details"><a href="#details">Details</a></li>
            <li class="supplement details" data-supplement-id="details">
                <p>{description}</p>
                <p>{tag_line}</p>
                <ul class="links small">{link_list}</ul>
            </li>
        </ul>
    </body>
    </html>
    """


def index_page_html(tracks) -> str:
    """
    Catalog index page.

    Args:
        tracks: sequence of (track label, [(number, title, image URL or None)])
    """
    groups = []
    for label, items in tracks:
        anchors = []
        for number, title, image in items:
            href = f"/videos/play/wwdc2017/{number}/"
            if image:
                anchors.append(f'<li><a href="{href}"><img src="{image}" alt=""/></a>'
                               f'<a href="{href}">{title}</a></li>')
            else:
                anchors.append(f'<li><a href="{href}">{title}</a></li>')
        groups.append(
            f'<li class="collection-focus-group">'
            f'<span class="font-bold">{label}</span>'
            f'<ul class="collection-items">{"".join(anchors)}</ul>'
            f'</li>'
        )
    return f'<html><body><ul class="collection">{"".join(groups)}</ul></body></html>'


@pytest.fixture
def sample_session() -> Session:
    return Session(
        year=2017,
        number="102",
        title="Platforms State of the Union",
        description="Learn about the latest platform updates.",
        focuses=(Focus.IOS, Focus.MACOS),
        track=Track.FEATURED,
        image_url="https://devimages.apple.com/102.jpg",
        download_sd=f"{MEDIA_DIR}/102_sd.mp4?dl=1",
        download_hd=f"{MEDIA_DIR}/102_hd.mp4?dl=1",
        hls_url=f"{MEDIA_DIR}/hls_vod_mvp.m3u8",
        webvtt_url=f"{MEDIA_DIR}/102.vtt",
    )


@pytest.fixture
def subtitle_segments() -> Dict[str, str]:
    """Two overlapping caption segments as served by the subtitle playlist."""
    header = "WEBVTT\nX-TIMESTAMP-MAP=MPEGTS:181083,LOCAL:00:00:00.000\n\n"
    return {
        "fileSequence0.webvtt": (
            header
            + "00:00:01.000 --> 00:00:04.000\r\nHello\r\n\r\n"
            + "00:00:58.000 --> 00:01:02.000\nBoundary\n\n"
        ),
        "fileSequence1.webvtt": (
            header
            + "00:00:58.000 --> 00:01:02.000\nBoundary\n\n"
            + "00:01:05.000 --> 00:01:07.000\nGoodbye\n"
        ),
    }


@pytest.fixture
def subtitle_manifest() -> str:
    return (
        "#EXTM3U\n"
        "#EXT-X-TARGETDURATION:60\n"
        "#EXT-X-VERSION:3\n"
        "#EXTINF:60.0,\n"
        "fileSequence0.webvtt\n"
        "#EXTINF:60.0,\n"
        "fileSequence1.webvtt\n"
        "#EXT-X-ENDLIST\n"
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
