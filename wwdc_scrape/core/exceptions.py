"""Custom exceptions for the WWDC scraper."""


class WWDCScraperError(Exception):
    """Base exception for the WWDC scraper."""
    pass


class ConfigurationError(WWDCScraperError):
    """Configuration-related errors."""
    pass


class FetchError(WWDCScraperError):
    """Network errors and non-success responses."""

    def __init__(self, message: str, url: str = None, status_code: int = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParsingError(WWDCScraperError):
    """Document parsing errors."""

    def __init__(self, message: str, document_url: str = None, document_type: str = None):
        super().__init__(message)
        self.document_url = document_url
        self.document_type = document_type


class UnknownTrackError(ParsingError):
    """Track label outside the known set."""

    def __init__(self, label: str, document_url: str = None):
        super().__init__(f"Unknown track label: {label!r}", document_url, "index")
        self.label = label


class ContentValidationError(WWDCScraperError):
    """Fetched content failed a sanity check."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url
