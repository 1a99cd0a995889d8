# koshien_digest/models/team.py
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TrackedTeam(BaseModel):
    """A school whose games are surveilled, with the prefecture it plays in."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    team_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("teamName", "team_name")
    )
    region_key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("prefectureKey", "regionKey", "region_key"),
    )
    region_name: str = Field(
        "",
        validation_alias=AliasChoices("prefectureName", "regionName", "region_name"),
    )

    @field_validator("team_name", "region_key", "region_name", mode="before")
    @classmethod
    def _coerce_to_str(cls, value: Any) -> Any:
        # Spreadsheet cells come back as numbers for keys like 13
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        return value


class RegionGroup(BaseModel):
    """Tracked teams sharing one region key."""

    region_key: str
    region_name: str
    teams: List[TrackedTeam] = []

    @property
    def team_names(self) -> List[str]:
        return [team.team_name for team in self.teams]


def group_by_region(teams: List[TrackedTeam]) -> List[RegionGroup]:
    """Partition teams by region key, in order of first appearance.

    The region name of a group is the one carried by its first member.
    """
    groups: Dict[str, RegionGroup] = {}
    for team in teams:
        group = groups.get(team.region_key)
        if group is None:
            group = RegionGroup(region_key=team.region_key, region_name=team.region_name)
            groups[team.region_key] = group
        group.teams.append(team)
    return list(groups.values())
