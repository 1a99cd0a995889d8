# koshien_digest/scrapers/gamelist_scraper.py
from typing import Iterable, Optional

import httpx
from loguru import logger

from koshien_digest.config.settings import DEFAULT_GAMELIST_BASE_URL
from koshien_digest.models.enums import FailureKind
from koshien_digest.models.game import GameRecord
from koshien_digest.models.results import FetchResult
from koshien_digest.normalization.normalizer import (
    FeedFormatError,
    decode_games,
    extract_game_list,
    parse_feed_payload,
)
from koshien_digest.normalization.relevance import filter_relevant
from .base_scraper import BaseScraper, ScraperError


class GameListScraper(BaseScraper):
    """Fetches a prefecture's game list and keeps games of tracked teams."""

    source: str = "gamelist"

    def __init__(self, base_url: str = DEFAULT_GAMELIST_BASE_URL, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = base_url.rstrip("/")

    def region_url(self, region_key: str) -> str:
        return f"{self.base_url}/{region_key}.json"

    async def fetch_games_for_region(
        self, region_key: str, tracked_team_names: Iterable[str]
    ) -> FetchResult[GameRecord]:
        """Relevant games for one region, in feed order.

        Never raises: an unreachable or malformed feed only empties this
        region's result.
        """
        url = self.region_url(region_key)
        logger.info(f"Fetching game list for region {region_key}")

        try:
            response = await self._make_request("GET", url)
        except ScraperError as e:
            logger.warning(f"Game list for region {region_key} unavailable: {e}")
            return FetchResult[GameRecord].failed(FailureKind.TRANSPORT, str(e))

        try:
            payload = parse_feed_payload(response.content)
        except FeedFormatError as e:
            logger.warning(f"Could not parse game list for region {region_key}: {e}")
            logger.debug(f"Raw game list content: {response.text[:500]}")
            return FetchResult[GameRecord].failed(FailureKind.PARSE, str(e))

        try:
            entries = extract_game_list(payload)
        except FeedFormatError as e:
            logger.warning(f"Unexpected game list shape for region {region_key}: {e}")
            return FetchResult[GameRecord].failed(FailureKind.SHAPE, str(e))

        games = filter_relevant(decode_games(entries), tracked_team_names)
        logger.info(
            f"Region {region_key}: {len(games)} of {len(entries)} game(s) involve tracked teams"
        )
        return FetchResult[GameRecord](items=games)


def build_gamelist_scraper(
    settings, client: Optional[httpx.AsyncClient] = None
) -> GameListScraper:
    return GameListScraper(
        settings.gamelist_base_url,
        client=client,
        timeout=settings.request_timeout,
        max_attempts=settings.max_attempts,
    )
