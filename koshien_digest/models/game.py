from typing import List

from pydantic import BaseModel, ConfigDict


class GameRecord(BaseModel):
    """Represents a single game from a prefecture's game list feed.

    Scores are kept as the feed's display strings, not numbers.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    round_name: str = ""  # e.g. 1回戦
    month: str = ""
    day: str = ""
    start_time: str = ""  # e.g. 10:00
    stadium_name: str = ""
    top_team_name: str = ""
    bottom_team_name: str = ""
    top_score_total: str = ""
    bottom_score_total: str = ""
    top_scores_by_inning: List[str] = []
    bottom_scores_by_inning: List[str] = []

    @property
    def team_names(self) -> tuple[str, str]:
        return self.top_team_name, self.bottom_team_name
