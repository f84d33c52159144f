"""Model exports for courtleague."""

from courtleague.models.competition import (
    Competition,
    CompetitionFormat,
    CompetitionStatus,
    CompetitionType,
    ScheduleConfig,
    TeamRef,
)
from courtleague.models.schedule import (
    CalendarEntry,
    EventStatus,
    EventType,
    MatchRecord,
    Pairing,
    ScheduledMatch,
    ScheduleResult,
)

__all__ = [
    "CalendarEntry",
    "Competition",
    "CompetitionFormat",
    "CompetitionStatus",
    "CompetitionType",
    "EventStatus",
    "EventType",
    "MatchRecord",
    "Pairing",
    "ScheduleConfig",
    "ScheduleResult",
    "ScheduledMatch",
    "TeamRef",
]
