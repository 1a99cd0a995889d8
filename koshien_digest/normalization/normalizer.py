import json
from typing import Any, Dict, List, Mapping, Tuple, Union

from loguru import logger

from koshien_digest.models.game import GameRecord
from koshien_digest.utils.misc_utils import (
    first_non_empty,
    strip_callback_wrapper,
    to_display_str,
)

# Alternate source keys per side, tried in order; the first non-empty wins
TOP_TEAM_KEYS: Tuple[str, ...] = (
    "top_school_display_name",
    "school_display_name1",
    "team1",
)
BOTTOM_TEAM_KEYS: Tuple[str, ...] = (
    "bottom_school_display_name",
    "school_display_name2",
    "team2",
)

# Canonical scalar field -> candidate source keys
SCALAR_FIELD_SOURCES: Dict[str, Tuple[str, ...]] = {
    "id": ("game_id",),
    "round_name": ("round_name",),
    "month": ("game_date_m",),
    "day": ("game_date_d",),
    "start_time": ("game_time",),
    "stadium_name": ("stadium_name",),
    "top_score_total": ("top_score_sum",),
    "bottom_score_total": ("bottom_score_sum",),
}

# Canonical inning list field -> candidate source keys
INNING_FIELD_SOURCES: Dict[str, Tuple[str, ...]] = {
    "top_scores_by_inning": ("top_score",),
    "bottom_scores_by_inning": ("bottom_score",),
}

GAME_LIST_PATH: Tuple[str, ...] = ("result", "info", "game_list")


class FeedFormatError(Exception):
    """Custom exception for feed payloads that cannot be decoded."""

    pass


def parse_feed_payload(body: Union[str, bytes]) -> Any:
    """Parses a game list response body, unwrapping the callback envelope.

    Raises:
        FeedFormatError: if the body is not valid JSON once unwrapped.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FeedFormatError(f"Feed body is not UTF-8: {e}") from e

    try:
        return json.loads(strip_callback_wrapper(body))
    except json.JSONDecodeError as e:
        raise FeedFormatError(f"Feed body is not valid JSON: {e}") from e


def extract_game_list(payload: Any) -> List[Mapping[str, Any]]:
    """Returns the raw entries found at `result.info.game_list`.

    Raises:
        FeedFormatError: if the path is missing or does not hold a list.
    """
    node = payload
    for key in GAME_LIST_PATH:
        if not isinstance(node, Mapping) or key not in node:
            raise FeedFormatError(f"Missing '{'.'.join(GAME_LIST_PATH)}' in feed")
        node = node[key]

    if not isinstance(node, list):
        raise FeedFormatError(
            f"'{'.'.join(GAME_LIST_PATH)}' is {type(node).__name__}, expected list"
        )

    entries = [entry for entry in node if isinstance(entry, Mapping)]
    if len(entries) != len(node):
        logger.warning(
            f"Skipped {len(node) - len(entries)} game list entries that are not objects."
        )
    return entries


def resolve_team_names(raw: Mapping[str, Any]) -> Tuple[str, str]:
    """Top and bottom display names of a raw entry, empty when unresolved."""
    top = to_display_str(first_non_empty(raw, TOP_TEAM_KEYS))
    bottom = to_display_str(first_non_empty(raw, BOTTOM_TEAM_KEYS))
    return top, bottom


def _decode_innings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [to_display_str(score) for score in value]


def decode_game(raw: Mapping[str, Any]) -> GameRecord:
    """Maps a loosely-typed feed entry into a GameRecord.

    Every field is looked up through its candidate source keys; anything
    absent becomes an empty string (or an empty list for innings).
    """
    fields: Dict[str, Any] = {
        name: to_display_str(first_non_empty(raw, keys))
        for name, keys in SCALAR_FIELD_SOURCES.items()
    }
    fields["top_team_name"], fields["bottom_team_name"] = resolve_team_names(raw)
    for name, keys in INNING_FIELD_SOURCES.items():
        fields[name] = _decode_innings(first_non_empty(raw, keys))
    return GameRecord(**fields)


def decode_games(entries: List[Mapping[str, Any]]) -> List[GameRecord]:
    """Decodes every entry, keeping the feed's order."""
    return [decode_game(entry) for entry in entries]
