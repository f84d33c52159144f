"""Competition, team and schedule-config models for courtleague."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, PositiveInt


class CompetitionStatus(str, Enum):
    """Lifecycle of a competition. Only REGISTRATION can be scheduled."""
    DRAFT = "DRAFT"
    REGISTRATION = "REGISTRATION"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class CompetitionFormat(str, Enum):
    """Playing format — determines the minimum roster size."""
    INTERMEDIATE_4S = "INTERMEDIATE_4S"
    ADVANCED_6S = "ADVANCED_6S"

    @property
    def required_roster_size(self) -> int:
        return 4 if self is CompetitionFormat.INTERMEDIATE_4S else 6


class CompetitionType(str, Enum):
    LEAGUE = "LEAGUE"
    TOURNAMENT = "TOURNAMENT"


class TeamRef(BaseModel):
    """A registered team as seen by the scheduler (never mutated here)."""
    id: str
    name: str


class Competition(BaseModel):
    """A league or tournament with its registered teams."""
    id: str
    name: str = Field(default="Unnamed Competition")
    format: CompetitionFormat = Field(default=CompetitionFormat.ADVANCED_6S)
    competition_type: CompetitionType = Field(default=CompetitionType.LEAGUE)
    status: CompetitionStatus = Field(default=CompetitionStatus.DRAFT)
    teams: list[TeamRef] = Field(default_factory=list, description="Teams in registration order")

    @property
    def required_roster_size(self) -> int:
        return self.format.required_roster_size

    @property
    def team_ids(self) -> list[str]:
        return [team.id for team in self.teams]

    def team_name(self, team_id: str) -> str:
        for team in self.teams:
            if team.id == team_id:
                return team.name
        raise KeyError(f"Unknown team id: {team_id}")


class ScheduleConfig(BaseModel):
    """Caller-supplied scheduling parameters.

    ``day_of_week`` follows the HTTP contract: 0 = Sunday … 6 = Saturday.
    """
    competition_id: str
    start_date: date
    day_of_week: int = Field(ge=0, le=6)
    number_of_weeks: int = Field(ge=1, le=52)
    court_ids: list[PositiveInt] = Field(min_length=1)
