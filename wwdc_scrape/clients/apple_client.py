"""HTTP client for the Apple developer site and its media hosts."""

import requests
from typing import Any, Optional
import time

from ..core.config import APIConfig
from ..core.rate_limiter import RateLimiter
from ..core.exceptions import FetchError
from ..core.logging import get_logger, log_api_request
from ..models.page import HTMLPage

logger = get_logger(__name__)


class AppleDeveloperClient:
    """Single-attempt GET client shared by the scraper and caption service."""

    def __init__(self, config: Optional[APIConfig] = None):
        """
        Initialize the client.

        Args:
            config: API configuration
        """
        self.config = config or APIConfig()
        self.rate_limiter = RateLimiter(self.config.rate_limit)
        self.session = requests.Session()

        self.session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/json,text/plain,*/*'
        })

        logger.debug(
            "Apple developer client initialized",
            base_url=self.config.base_url,
            rate_limit=self.config.rate_limit
        )

    def url_for(self, path: str) -> str:
        """Absolute URL of a path on the developer site."""
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def _get(self, url: str) -> requests.Response:
        """
        Issue one GET request. Nothing is retried.

        Raises:
            FetchError: On network errors or non-success responses
        """
        self.rate_limiter.wait_if_needed()
        start_time = time.time()

        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            logger.debug("Request failed", url=url, error=str(e))
            raise FetchError(f"Request failed: {e}", url=url)

        logger.debug(
            "Request completed",
            **log_api_request(url, "GET", time.time() - start_time, response.status_code)
        )

        if response.status_code >= 400:
            raise FetchError(
                f"Request failed: {response.status_code}", url=url, status_code=response.status_code
            )

        return response

    def fetch_text(self, url: str) -> str:
        """Fetch a URL and return the body as text, UTF-8 unless a charset is declared."""
        response = self._get(url)
        if 'charset' not in response.headers.get('Content-Type', '').lower():
            response.encoding = 'utf-8'
        return response.text

    def fetch_json(self, url: str) -> Any:
        """Fetch a URL and decode the body as JSON."""
        response = self._get(url)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON payload: {e}", url=url, status_code=response.status_code)

    def fetch_document(self, url: str) -> HTMLPage:
        """Fetch an HTML page and parse it."""
        return HTMLPage.parse(url, self.fetch_text(url))

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> "AppleDeveloperClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
