from typing import Collection, Iterable, List

from koshien_digest.models.game import GameRecord


def is_relevant(game: GameRecord, tracked_names: Collection[str]) -> bool:
    """True iff the top or bottom team name exactly equals a tracked name.

    Matching is case-sensitive with no trimming or partial matches.
    """
    return any(name in tracked_names for name in game.team_names)


def filter_relevant(
    games: Iterable[GameRecord], tracked_names: Iterable[str]
) -> List[GameRecord]:
    names = set(tracked_names)
    return [game for game in games if is_relevant(game, names)]
