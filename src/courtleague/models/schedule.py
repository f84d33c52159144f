"""Schedule models — engine output and persisted match records.

Pairing and ScheduledMatch are the plain value types passed between the
pure scheduling stages. CalendarEntry, MatchRecord and ScheduleResult
are what the orchestrator hands back after persisting a schedule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field


class Pairing(NamedTuple):
    """One fixture within a round."""
    home: str
    away: str


@dataclass(frozen=True)
class ScheduledMatch:
    """A pairing placed on a date, a time slot and a court."""
    home_team_id: str
    away_team_id: str
    round_number: int  # 1-based
    date: date
    start_hour: int
    court_id: int

    @property
    def start_time(self) -> datetime:
        return datetime.combine(self.date, time(hour=self.start_hour))

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(hours=1)


class EventType(str, Enum):
    """Calendar entry kinds produced by the scheduler."""
    LEAGUE = "LEAGUE"
    TOURNAMENT = "TOURNAMENT"


class EventStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class CalendarEntry(BaseModel):
    """A calendar event linked to exactly one match."""
    id: str
    title: str
    description: str = ""
    event_type: EventType
    court_id: int
    start_time: datetime
    end_time: datetime
    max_capacity: int = Field(default=2, ge=0)
    current_enrollment: int = Field(default=2, ge=0)
    status: EventStatus = Field(default=EventStatus.SCHEDULED)


class MatchRecord(BaseModel):
    """A persisted match with its linked calendar entry."""
    id: str
    competition_id: str
    event_id: str
    home_team_id: str
    away_team_id: str
    home_team_name: str = ""
    away_team_name: str = ""
    round_number: int = Field(ge=1)
    is_playoff: bool = False
    home_score: int | None = Field(default=None, ge=0)
    away_score: int | None = Field(default=None, ge=0)
    event: CalendarEntry | None = None

    @property
    def is_scored(self) -> bool:
        return self.home_score is not None and self.away_score is not None


class ScheduleResult(BaseModel):
    """Outcome of a successful schedule generation."""
    competition_id: str
    competition_name: str
    weeks: int
    matches: list[MatchRecord] = Field(default_factory=list)

    @property
    def matches_created(self) -> int:
        return len(self.matches)

    def to_dict(self) -> dict:
        """Serialize in the shape the HTTP layer returns."""
        return {
            "competition": {"id": self.competition_id, "name": self.competition_name},
            "matchesCreated": self.matches_created,
            "weeks": self.weeks,
            "matches": [m.model_dump(mode="json") for m in self.matches],
        }
