# koshien_digest/scrapers/roster_scraper.py
from typing import List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from koshien_digest.models.enums import FailureKind
from koshien_digest.models.results import FetchResult
from koshien_digest.models.team import TrackedTeam
from .base_scraper import BaseScraper, ScraperError


class RosterScraper(BaseScraper):
    """Fetches the tracked team roster from the spreadsheet web app."""

    source: str = "roster"

    def __init__(self, url: str, api_key: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.url = url
        self.api_key = api_key

    async def fetch_tracked_teams(self) -> FetchResult[TrackedTeam]:
        """Fetch the roster. Never raises; failures come back as an empty result."""
        logger.info("Fetching tracked team roster")
        try:
            response = await self._make_request(
                "GET", self.url, params={"key": self.api_key}
            )
        except ScraperError as e:
            logger.error(f"Could not reach the roster source: {e}")
            return FetchResult[TrackedTeam].failed(FailureKind.TRANSPORT, str(e))

        try:
            records = response.json()
        except ValueError as e:
            logger.error(f"Roster response is not valid JSON: {e}")
            return FetchResult[TrackedTeam].failed(FailureKind.PARSE, str(e))

        if not isinstance(records, list):
            logger.error(
                f"Roster response is {type(records).__name__}, expected a JSON array"
            )
            return FetchResult[TrackedTeam].failed(
                FailureKind.SHAPE, "roster is not an array"
            )

        teams = self._parse_records(records)
        logger.info(f"Loaded {len(teams)} tracked team(s) from the roster")
        return FetchResult[TrackedTeam](items=teams)

    def _parse_records(self, records: list) -> List[TrackedTeam]:
        teams: List[TrackedTeam] = []
        for index, record in enumerate(records):
            try:
                teams.append(TrackedTeam.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping roster row {index}: {e.error_count()} invalid field(s)"
                )
                logger.debug(f"Invalid roster row {index}: {record!r} ({e})")
        return teams


def build_roster_scraper(
    settings, client: Optional[httpx.AsyncClient] = None
) -> RosterScraper:
    return RosterScraper(
        str(settings.roster_api_url),
        settings.roster_api_key,
        client=client,
        timeout=settings.request_timeout,
        max_attempts=settings.max_attempts,
    )
