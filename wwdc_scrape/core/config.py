"""Configuration management for the WWDC scraper."""

import yaml
from typing import Dict, Optional
from pathlib import Path
from pydantic import BaseModel, field_validator, model_validator

from .exceptions import ConfigurationError
from ..models.caption import CaptionStrategy
from ..models.session import FIRST_YEAR, LAST_YEAR


class APIConfig(BaseModel):
    """HTTP client configuration settings."""
    base_url: str = "https://developer.apple.com"
    timeout: int = 30
    rate_limit: Optional[float] = None  # requests per second, None disables throttling
    user_agent: str = "wwdc-scrape/1.0"

    @field_validator('rate_limit')
    @classmethod
    def validate_rate_limit(cls, v):
        if v is not None and v <= 0:
            raise ValueError('rate_limit must be positive')
        return v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        return v.rstrip('/')


class ScrapeConfig(BaseModel):
    """Catalog scraping configuration."""
    first_year: int = FIRST_YEAR
    last_year: int = LAST_YEAR
    keynote_pages: Dict[int, str] = {}

    @field_validator('first_year', 'last_year')
    @classmethod
    def validate_supported_year(cls, v):
        if v < FIRST_YEAR or v > LAST_YEAR:
            raise ValueError(f'year must be between {FIRST_YEAR} and {LAST_YEAR}')
        return v

    @model_validator(mode='after')
    def validate_year_order(self):
        if self.first_year > self.last_year:
            raise ValueError('first_year must not be after last_year')
        return self

    @property
    def years(self) -> range:
        return range(self.first_year, self.last_year + 1)


class CaptionConfig(BaseModel):
    """Caption acquisition configuration."""
    strategy: CaptionStrategy = CaptionStrategy.DIRECT_THEN_PLAYLIST


class Settings(BaseModel):
    """Main application settings."""
    api: APIConfig = APIConfig()
    scrape: ScrapeConfig = ScrapeConfig()
    captions: CaptionConfig = CaptionConfig()

    @classmethod
    def default(cls) -> "Settings":
        """Settings with every value at its default."""
        return cls()

    @classmethod
    def load_from_file(cls, config_path: str = "config/settings.yaml") -> "Settings":
        """Load settings from YAML file."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        try:
            return cls(
                api=APIConfig(**config_data.get('api', {})),
                scrape=ScrapeConfig(**config_data.get('scrape', {})),
                captions=CaptionConfig(**config_data.get('captions', {}))
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}")


class RunOptions(BaseModel):
    """Per-run filters supplied on the command line."""
    year: Optional[int] = None
    session: Optional[str] = None
    verbose: bool = False

    @classmethod
    def create(cls, settings: Settings, year: Optional[int] = None,
               session: Optional[str] = None, verbose: bool = False) -> "RunOptions":
        """
        Validate run filters against the configured year range.

        Raises:
            ConfigurationError: On an unsupported year or a session filter without a year
        """
        if year is not None and year not in settings.scrape.years:
            raise ConfigurationError(f"Year not supported: {year}")
        if session is not None and year is None:
            raise ConfigurationError(
                "Session filtering requires year filtering. Use `--year` to select a year."
            )
        return cls(year=year, session=session, verbose=verbose)
