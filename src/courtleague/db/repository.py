"""Repository layer — the scheduler's view of the league database.

Competition and roster repositories are read-mostly; their write helpers
(save, add_team, add_players, set_status) exist for seeding and commit
immediately unless called with commit=False inside a caller's transaction. CalendarStore and MatchStore only flush, so the caller owns
the transaction and every entry of a schedule commits or rolls back
together.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from courtleague.db.models import (
    CompetitionDB,
    EventDB,
    MatchDB,
    RosterEntryDB,
    ScheduleRunDB,
    TeamDB,
)
from courtleague.models.competition import (
    Competition,
    CompetitionFormat,
    CompetitionStatus,
    CompetitionType,
    TeamRef,
)
from courtleague.models.schedule import CalendarEntry, EventStatus, EventType, MatchRecord

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


class CompetitionRepository:
    """Competition lookups plus the schedule-run guard."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, competition_id: str) -> Competition | None:
        """Competition with its teams in registration order, or None."""
        db_obj = self.session.get(CompetitionDB, competition_id)
        if db_obj is None:
            return None
        teams = self.session.scalars(
            select(TeamDB)
            .where(TeamDB.competition_id == competition_id)
            .order_by(TeamDB.position, TeamDB.name)
        ).all()
        return _db_to_competition(db_obj, teams)

    def get_status(self, competition_id: str) -> CompetitionStatus | None:
        status = self.session.scalar(
            select(CompetitionDB.status).where(CompetitionDB.id == competition_id)
        )
        return CompetitionStatus(status) if status is not None else None

    def save(self, competition: Competition) -> None:
        """Insert or update the competition row (teams are added separately)."""
        self.session.merge(_competition_to_db(competition))
        self.session.commit()

    def set_status(self, competition_id: str, status: CompetitionStatus) -> None:
        db_obj = self.session.get(CompetitionDB, competition_id)
        if db_obj is None:
            raise KeyError(f"Unknown competition: {competition_id}")
        db_obj.status = status.value
        self.session.commit()

    def has_schedule(self, competition_id: str) -> bool:
        if self.session.get(ScheduleRunDB, competition_id) is not None:
            return True
        count = self.session.scalar(
            select(func.count()).select_from(MatchDB).where(MatchDB.competition_id == competition_id)
        )
        return bool(count)

    def mark_scheduled(self, competition_id: str, rounds: int, matches_created: int) -> None:
        """Add the guard row; a second one for the same competition fails on flush."""
        self.session.add(
            ScheduleRunDB(
                competition_id=competition_id,
                rounds=rounds,
                matches_created=matches_created,
            )
        )
        self.session.flush()


class TeamRepository:
    """Team registration for seeding and imports."""

    def __init__(self, session: Session):
        self.session = session

    def add_team(
        self, competition_id: str, name: str, team_id: str | None = None, commit: bool = True
    ) -> TeamRef:
        position = self.session.scalar(
            select(func.count()).select_from(TeamDB).where(TeamDB.competition_id == competition_id)
        )
        db_obj = TeamDB(
            id=team_id or new_id(),
            competition_id=competition_id,
            name=name,
            position=position or 0,
        )
        self.session.add(db_obj)
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return TeamRef(id=db_obj.id, name=db_obj.name)

    def get_by_name(self, competition_id: str, name: str) -> TeamRef | None:
        db_obj = self.session.scalar(
            select(TeamDB).where(TeamDB.competition_id == competition_id, TeamDB.name == name)
        )
        if db_obj is None:
            return None
        return TeamRef(id=db_obj.id, name=db_obj.name)


class TeamRosterRepository:
    """Roster sizes — the only roster detail the scheduler needs."""

    def __init__(self, session: Session):
        self.session = session

    def count_roster_size(self, team_id: str) -> int:
        count = self.session.scalar(
            select(func.count()).select_from(RosterEntryDB).where(RosterEntryDB.team_id == team_id)
        )
        return int(count or 0)

    def player_names(self, team_id: str) -> set[str]:
        return set(
            self.session.scalars(
                select(RosterEntryDB.player_name).where(RosterEntryDB.team_id == team_id)
            )
        )

    def add_players(self, team_id: str, player_names: Iterable[str], commit: bool = True) -> int:
        entries = [RosterEntryDB(team_id=team_id, player_name=name) for name in player_names]
        self.session.add_all(entries)
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return len(entries)


class CalendarStore:
    """Calendar entries. Writes flush only; the caller commits."""

    def __init__(self, session: Session):
        self.session = session

    def create_entries(self, entries: list[CalendarEntry]) -> int:
        self.session.add_all([_event_to_db(entry) for entry in entries])
        self.session.flush()
        return len(entries)


class MatchStore:
    """Match records. Writes flush only; the caller commits."""

    def __init__(self, session: Session):
        self.session = session

    def create_many(self, matches: list[MatchRecord]) -> int:
        self.session.add_all([_match_to_db(match) for match in matches])
        self.session.flush()
        return len(matches)

    def get(self, match_id: str) -> MatchRecord | None:
        db_obj = self.session.get(MatchDB, match_id)
        if db_obj is None:
            return None
        return self._to_record(db_obj)

    def get_competition_id(self, match_id: str) -> str | None:
        return self.session.scalar(select(MatchDB.competition_id).where(MatchDB.id == match_id))

    def update_score(self, match_id: str, home_score: int, away_score: int) -> bool:
        """Overwrite both scores. Returns False if the match does not exist."""
        result = self.session.execute(
            update(MatchDB)
            .where(MatchDB.id == match_id)
            .values(home_score=home_score, away_score=away_score)
        )
        self.session.flush()
        return result.rowcount == 1

    def count_for_competition(self, competition_id: str) -> int:
        count = self.session.scalar(
            select(func.count()).select_from(MatchDB).where(MatchDB.competition_id == competition_id)
        )
        return int(count or 0)

    def list_for_competition(self, competition_id: str) -> list[MatchRecord]:
        """All matches ordered by round, start time, then court."""
        rows = self.session.execute(
            select(MatchDB, EventDB)
            .join(EventDB, MatchDB.event_id == EventDB.id)
            .where(MatchDB.competition_id == competition_id)
            .order_by(MatchDB.round_number, EventDB.start_time, EventDB.court_id)
        ).all()
        names = self._team_names(competition_id)
        return [_db_to_match(match, event, names) for match, event in rows]

    def _team_names(self, competition_id: str) -> dict[str, str]:
        rows = self.session.execute(
            select(TeamDB.id, TeamDB.name).where(TeamDB.competition_id == competition_id)
        ).all()
        return {team_id: name for team_id, name in rows}

    def _to_record(self, db_obj: MatchDB) -> MatchRecord:
        event = self.session.get(EventDB, db_obj.event_id)
        return _db_to_match(db_obj, event, self._team_names(db_obj.competition_id))


# ── Conversion Helpers ──────────────────────────────────────────────────


def _competition_to_db(competition: Competition) -> CompetitionDB:
    return CompetitionDB(
        id=competition.id,
        name=competition.name,
        format=competition.format.value,
        competition_type=competition.competition_type.value,
        status=competition.status.value,
    )


def _db_to_competition(db: CompetitionDB, teams: Iterable[TeamDB]) -> Competition:
    return Competition(
        id=db.id,
        name=db.name,
        format=CompetitionFormat(db.format),
        competition_type=CompetitionType(db.competition_type),
        status=CompetitionStatus(db.status),
        teams=[TeamRef(id=t.id, name=t.name) for t in teams],
    )


def _event_to_db(entry: CalendarEntry) -> EventDB:
    return EventDB(
        id=entry.id,
        title=entry.title,
        description=entry.description,
        event_type=entry.event_type.value,
        court_id=entry.court_id,
        start_time=entry.start_time,
        end_time=entry.end_time,
        max_capacity=entry.max_capacity,
        current_enrollment=entry.current_enrollment,
        status=entry.status.value,
    )


def _db_to_event(db: EventDB) -> CalendarEntry:
    return CalendarEntry(
        id=db.id,
        title=db.title,
        description=db.description or "",
        event_type=EventType(db.event_type),
        court_id=db.court_id,
        start_time=db.start_time,
        end_time=db.end_time,
        max_capacity=db.max_capacity,
        current_enrollment=db.current_enrollment,
        status=EventStatus(db.status),
    )


def _match_to_db(match: MatchRecord) -> MatchDB:
    return MatchDB(
        id=match.id,
        competition_id=match.competition_id,
        event_id=match.event_id,
        home_team_id=match.home_team_id,
        away_team_id=match.away_team_id,
        round_number=match.round_number,
        is_playoff=match.is_playoff,
        home_score=match.home_score,
        away_score=match.away_score,
    )


def _db_to_match(db: MatchDB, event: EventDB | None, names: dict[str, str]) -> MatchRecord:
    return MatchRecord(
        id=db.id,
        competition_id=db.competition_id,
        event_id=db.event_id,
        home_team_id=db.home_team_id,
        away_team_id=db.away_team_id,
        home_team_name=names.get(db.home_team_id, ""),
        away_team_name=names.get(db.away_team_id, ""),
        round_number=db.round_number,
        is_playoff=bool(db.is_playoff),
        home_score=db.home_score,
        away_score=db.away_score,
        event=_db_to_event(event) if event is not None else None,
    )
