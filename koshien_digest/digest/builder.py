from datetime import date
from typing import List, Set

from loguru import logger

from koshien_digest.config.settings import DEFAULT_REGION_LINK_BASE_URL
from koshien_digest.formatting.message_formatter import (
    format_digest_header,
    format_game_message,
    format_region_header,
)
from koshien_digest.models.game import GameRecord
from koshien_digest.models.team import RegionGroup

BLOCK_SEPARATOR = "\n\n"


class Digest:
    """Ordered text blocks collected over one run, rendered once at the end."""

    def __init__(self, link_base_url: str = DEFAULT_REGION_LINK_BASE_URL):
        self.link_base_url = link_base_url
        self.blocks: List[str] = []

    def __bool__(self) -> bool:
        return bool(self.blocks)

    def add_region(self, group: RegionGroup, games: List[GameRecord]) -> int:
        """Append a region header and one block per distinct game.

        Games are deduplicated by id within the region, first occurrence
        wins. Returns the number of game blocks added; a region without
        games adds nothing, not even its header.
        """
        if not games:
            return 0

        self.blocks.append(
            format_region_header(group.region_key, group.region_name, self.link_base_url)
        )
        tracked_names = set(group.team_names)
        seen: Set[str] = set()
        added = 0
        for game in games:
            if game.id in seen:
                logger.debug(f"Skipping duplicate game {game.id} in region {group.region_key}")
                continue
            seen.add(game.id)
            self.blocks.append(format_game_message(game, tracked_names))
            added += 1
        return added

    def render(self, today: date) -> str:
        return BLOCK_SEPARATOR.join([format_digest_header(today), *self.blocks])
