from datetime import date, datetime
from typing import Optional

from loguru import logger

from koshien_digest.config.settings import AppSettings
from koshien_digest.digest.builder import Digest
from koshien_digest.models.enums import RunOutcome
from koshien_digest.models.results import RunReport
from koshien_digest.models.team import group_by_region
from koshien_digest.notifications.slack_client import SlackWebhookClient
from koshien_digest.scrapers.gamelist_scraper import (
    GameListScraper,
    build_gamelist_scraper,
)
from koshien_digest.scrapers.roster_scraper import RosterScraper, build_roster_scraper


def today_in(settings: AppSettings) -> date:
    return datetime.now(settings.tzinfo).date()


async def run_digest(
    settings: AppSettings,
    roster_scraper: Optional[RosterScraper] = None,
    gamelist_scraper: Optional[GameListScraper] = None,
    slack_client: Optional[SlackWebhookClient] = None,
    today: Optional[date] = None,
) -> RunReport:
    """Runs one fetch -> filter -> format -> post cycle.

    Adapters not passed in are built from `settings` and closed on exit;
    injected ones are left open for the caller. Regions are fetched one
    after another. Raises DispatchError if the webhook rejects the digest.
    """
    owned = []
    if roster_scraper is None:
        roster_scraper = build_roster_scraper(settings)
        owned.append(roster_scraper)
    if gamelist_scraper is None:
        gamelist_scraper = build_gamelist_scraper(settings)
        owned.append(gamelist_scraper)
    if slack_client is None and not settings.dry_run:
        slack_client = SlackWebhookClient(
            str(settings.slack_webhook_url), timeout=settings.request_timeout
        )
        owned.append(slack_client)

    try:
        roster = await roster_scraper.fetch_tracked_teams()
        if not roster.items:
            logger.error(
                "No tracked teams loaded; check access to the roster spreadsheet."
            )
            return RunReport(outcome=RunOutcome.NO_TEAMS)

        groups = group_by_region(roster.items)
        logger.info(
            f"Tracking {len(roster.items)} team(s) across {len(groups)} region(s)"
        )

        digest = Digest(settings.region_link_base_url)
        regions = games_added = 0
        for group in groups:
            result = await gamelist_scraper.fetch_games_for_region(
                group.region_key, group.team_names
            )
            if not result.items:
                logger.debug(f"No tracked games in {group.region_name} ({group.region_key})")
                continue
            games_added += digest.add_region(group, result.items)
            regions += 1

        if not digest:
            logger.info("No games involving tracked teams today.")
            return RunReport(outcome=RunOutcome.NO_GAMES)

        text = digest.render(today or today_in(settings))
        report = RunReport(
            outcome=RunOutcome.POSTED, text=text, regions=regions, games=games_added
        )

        if settings.dry_run:
            logger.info("Dry run enabled; digest not posted.")
            return report.model_copy(update={"outcome": RunOutcome.DRY_RUN})

        await slack_client.post_message(text)
        logger.success(f"Posted {games_added} game(s) from {regions} region(s).")
        return report
    finally:
        for resource in owned:
            await resource.close()
