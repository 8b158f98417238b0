from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from .cache import ResultCache
from .config import ScraperSettings, load_config
from .datasource.http_page import HttpResultDataSource, HttpResultDataSourceConfig
from .parser import ResultParser
from .provider import LottoResultProvider, ProviderResponse


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def build_datasource(settings: ScraperSettings) -> HttpResultDataSource:
    source = settings.source
    if not source.url:
        raise RuntimeError("LOTTO_SOURCE_URL is not configured.")
    return HttpResultDataSource(
        HttpResultDataSourceConfig(
            url=source.url,
            timeout_seconds=source.timeout_seconds,
            user_agent=source.user_agent,
        ),
        parser=ResultParser(max_results=settings.max_results),
    )


def build_provider(settings: ScraperSettings) -> LottoResultProvider:
    return LottoResultProvider(
        build_datasource(settings),
        cache=ResultCache(ttl_seconds=settings.cache_ttl_seconds),
        logger=logging.getLogger("lottoamerica.scraper"),
    )


async def run(args: argparse.Namespace) -> ProviderResponse:
    settings = load_config(args.env_file)
    configure_logging(args.verbose)
    logger = logging.getLogger("lottoamerica.scraper")

    provider = build_provider(settings)
    try:
        response = await provider.get_results(debug=args.debug)
    finally:
        await provider.close()

    logger.info("Scrape finished: state=%s results=%s", response.state.value, len(response.results))
    print(json.dumps(response.to_payload(args.debug), indent=2))
    return response


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the latest Lotto America results once")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with settings")
    parser.add_argument("--debug", action="store_true", help="Print the diagnostics envelope.")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Scrape interrupted by user.")


if __name__ == "__main__":
    main()
