"""Command line interface for the WWDC scraper."""

import argparse
import html
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .clients.apple_client import AppleDeveloperClient
from .core.config import RunOptions, Settings
from .core.exceptions import ConfigurationError
from .core.logging import get_logger, setup_logging
from .models.caption import CaptionStrategy
from .models.session import Session
from .services.caption_service import CaptionService
from .services.catalog_scraper import CatalogScraper

logger = get_logger(__name__)


def session_summary(session: Session) -> Dict[str, Any]:
    """Limited record used by transcript sites; text is HTML-escaped."""
    return {
        'id': session.number,
        'year': session.year,
        'title': html.escape(session.title),
        'description': html.escape(session.description),
        'track': session.track.value,
        'focus': [focus.value for focus in session.focuses],
    }


def write_sessions(sessions: List[Session], output: Path, output_format: str) -> Path:
    """Serialize sessions to JSON (full records) or YAML (summaries)."""
    if output.suffix == '' or output.is_dir():
        output = output / f"sessions.{output_format}"
    output.parent.mkdir(parents=True, exist_ok=True)

    if output_format == 'yaml':
        content = yaml.safe_dump([session_summary(s) for s in sessions],
                                 allow_unicode=True, sort_keys=False)
    else:
        content = json.dumps([s.to_dict() for s in sessions], indent=2, ensure_ascii=False)

    output.write_text(content, encoding='utf-8')
    return output


def caption_path(output: Path, session: Session) -> Path:
    return output / str(session.year) / f"{session.number}.vtt"


def run_meta(args: argparse.Namespace, settings: Settings, options: RunOptions) -> int:
    with AppleDeveloperClient(settings.api) as client:
        sessions = CatalogScraper(client, settings.scrape).scrape(options.year, options.session)

    path = write_sessions(sessions, Path(args.output or '.'), args.format)
    logger.info("Wrote sessions", path=str(path), sessions=len(sessions))
    return 0


def run_webvtt(args: argparse.Namespace, settings: Settings, options: RunOptions) -> int:
    output = Path(args.output or '.')
    strategy = CaptionStrategy(args.strategy) if args.strategy else None

    with AppleDeveloperClient(settings.api) as client:
        sessions = CatalogScraper(client, settings.scrape).scrape(options.year, options.session)
        captions = CaptionService(client, settings.captions)

        for session in sessions:
            text = captions.acquire(session, strategy)
            if text is None:
                continue
            path = caption_path(output, session)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding='utf-8')
            logger.info("Wrote WebVTT", year=session.year, number=session.number, path=str(path))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wwdc-scrape',
        description="Collect public WWDC session information from Apple's developer site."
    )
    parser.add_argument('-v', '--verbose', action='store_true', help="show work along the way")
    parser.add_argument('-y', '--year', type=int, help="filter by year")
    parser.add_argument('-s', '--session', help="filter by session number (requires --year)")
    parser.add_argument('-o', '--output', help="output path")
    parser.add_argument('-c', '--config', help="YAML settings file")

    commands = parser.add_subparsers(dest='command', required=True)

    meta = commands.add_parser('meta', help="collect session information in a file")
    meta.add_argument('-f', '--format', choices=['json', 'yaml'], default='json',
                      help="json (full records) or yaml (summaries for transcript sites)")
    meta.set_defaults(handler=run_meta)

    webvtt = commands.add_parser('webvtt', help="download each session's WebVTT file")
    webvtt.add_argument('--strategy', choices=[s.value for s in CaptionStrategy],
                        help="caption acquisition order (default from settings)")
    webvtt.set_defaults(handler=run_webvtt)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        settings = Settings.load_from_file(args.config) if args.config else Settings.default()
        options = RunOptions.create(settings, args.year, args.session, args.verbose)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error(str(e))
        return 2

    return args.handler(args, settings, options)


if __name__ == '__main__':
    sys.exit(main())
