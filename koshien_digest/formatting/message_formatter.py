"""Text rendering for the digest posted to the webhook.

Markup follows the webhook's lightweight convention: `*text*` for emphasis
and `<url|label>` for links.
"""
from datetime import date
from typing import Collection, Tuple

from koshien_digest.config.settings import DEFAULT_REGION_LINK_BASE_URL
from koshien_digest.models.game import GameRecord

FULL_WIDTH_SPACE = "　"
DIGEST_TITLE = "【高校野球速報】"


def emphasize(text: str) -> str:
    return f"*{text}*"


def pad_team_names(top: str, bottom: str) -> Tuple[str, str]:
    """Right-pad the shorter name with full-width spaces to the longer length."""
    width = max(len(top), len(bottom))
    return (
        FULL_WIDTH_SPACE * (width - len(top)),
        FULL_WIDTH_SPACE * (width - len(bottom)),
    )


def _team_display(name: str, padding: str, tracked_names: Collection[str]) -> str:
    # Padding stays outside the emphasis markers
    shown = emphasize(name) if name in tracked_names else name
    return f"{shown}{padding}"


def format_game_message(game: GameRecord, tracked_names: Collection[str]) -> str:
    """Three-line block: date/round/stadium, then one score line per side."""
    top_padding, bottom_padding = pad_team_names(game.top_team_name, game.bottom_team_name)
    top_display = _team_display(game.top_team_name, top_padding, tracked_names)
    bottom_display = _team_display(game.bottom_team_name, bottom_padding, tracked_names)

    lines = [
        f"【{game.month}月{game.day}日 {game.start_time}】 {game.round_name} ＠{game.stadium_name}",
        f"{top_display} : {' | '.join(game.top_scores_by_inning)} || {game.top_score_total}",
        f"{bottom_display} : {' | '.join(game.bottom_scores_by_inning)} || {game.bottom_score_total}",
    ]
    return "\n".join(lines).strip()


def format_region_header(
    region_key: str, region_name: str, link_base_url: str = DEFAULT_REGION_LINK_BASE_URL
) -> str:
    return f"<{link_base_url.rstrip('/')}/{region_key}/|{region_name}の試合結果>"


def format_local_date(day: date) -> str:
    # Same shape as ja-JP toLocaleDateString: 2025/7/15
    return f"{day.year}/{day.month}/{day.day}"


def format_digest_header(day: date) -> str:
    return f"{DIGEST_TITLE}{emphasize(format_local_date(day))} の試合結果"
