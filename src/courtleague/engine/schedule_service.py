"""Schedule service — validates a competition and persists its fixtures.

Generation runs in four steps:
  1. Check preconditions (status, team count, roster sizes, no schedule yet)
  2. Build round-robin pairings for the requested weeks
  3. Date each round and place matches on slots and courts fairly
  4. Write every calendar entry and match in one transaction

Callers for the same competition are serialized by a per-competition
lock, and the schedule_runs primary key rejects a second schedule even
across processes. Transient store failures roll the whole batch back and
are retried a bounded number of times.
"""

from __future__ import annotations

import logging
import threading
import time
import weakref
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from courtleague.config import SchedulingRules
from courtleague.db.models import ScheduleRunDB
from courtleague.db.repository import (
    CalendarStore,
    CompetitionRepository,
    MatchStore,
    TeamRosterRepository,
    new_id,
)
from courtleague.engine.fixture_generator import generate_round_robin
from courtleague.engine.round_dates import calculate_round_dates
from courtleague.engine.slot_assigner import (
    SlotAssignment,
    TimeSlot,
    assign_time_slots_and_courts,
)
from courtleague.errors import (
    NotFoundError,
    SchedulingError,
    StateConflictError,
    TransientStoreError,
    ValidationError,
)
from courtleague.models.competition import (
    Competition,
    CompetitionStatus,
    CompetitionType,
    ScheduleConfig,
)
from courtleague.models.schedule import (
    CalendarEntry,
    EventType,
    MatchRecord,
    ScheduledMatch,
    ScheduleResult,
)

logger = logging.getLogger(__name__)

MATCH_CAPACITY = 2  # two teams, both enrolled


class ScheduleOrchestrator:
    """Generate and read competition schedules."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        rules: SchedulingRules | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the orchestrator.

        Args:
            session_factory: Factory for sessions against the league database.
            rules: Time slots and transaction policy. Defaults if None.
            sleep: Backoff sleep between retries (injectable for tests).
        """
        self.session_factory = session_factory
        self.rules = rules or SchedulingRules()
        self.time_slots = tuple(TimeSlot(hour=s.hour, weight=s.weight) for s in self.rules.time_slots)
        self._sleep = sleep
        # Entries vanish once no caller holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def _lock_for(self, competition_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(competition_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[competition_id] = lock
            return lock

    # ── Public API ──────────────────────────────────────────────────────

    def generate_schedule(self, config: ScheduleConfig) -> ScheduleResult:
        """Generate and persist the full schedule for a competition.

        Raises:
            NotFoundError: Competition does not exist.
            ValidationError: Wrong status, too few teams, or short rosters.
            StateConflictError: A schedule already exists.
            TransientStoreError: Persistence kept failing after retries.
        """
        with self._lock_for(config.competition_id):
            with self.session_factory() as session:
                competition = self._load_and_validate(session, config.competition_id)

            assignment = self.build_assignment(competition, config)
            matches = self._persist_with_retry(competition, assignment)

        rounds = max((m.round_number for m in matches), default=0)
        logger.info(
            f"Scheduled {competition.name}: {len(matches)} matches over {rounds} rounds "
            f"({len(competition.teams)} teams, {len(config.court_ids)} courts)"
        )
        return ScheduleResult(
            competition_id=competition.id,
            competition_name=competition.name,
            weeks=config.number_of_weeks,
            matches=matches,
        )

    def get_schedule(self, competition_id: str) -> list[MatchRecord]:
        """All matches for a competition, by round then start time."""
        with self.session_factory() as session:
            if CompetitionRepository(session).get_status(competition_id) is None:
                raise NotFoundError(f"Competition {competition_id} not found")
            return MatchStore(session).list_for_competition(competition_id)

    def build_assignment(self, competition: Competition, config: ScheduleConfig) -> SlotAssignment:
        """Pure part of generation: pairings, dates and slot placement."""
        rounds = generate_round_robin(competition.team_ids, config.number_of_weeks)
        if rounds.truncated:
            logger.info(
                f"{competition.name}: {config.number_of_weeks} weeks requested, "
                f"one full cycle is {len(rounds)} rounds"
            )
        dates = calculate_round_dates(config.start_date, config.day_of_week, len(rounds))
        return assign_time_slots_and_courts(
            rounds,
            dates,
            config.court_ids,
            time_slots=self.time_slots,
            team_ids=competition.team_ids,
        )

    # ── Preconditions ───────────────────────────────────────────────────

    def _load_and_validate(self, session: Session, competition_id: str) -> Competition:
        competition = CompetitionRepository(session).get_by_id(competition_id)
        if competition is None:
            raise NotFoundError(f"Competition {competition_id} not found")

        if CompetitionRepository(session).has_schedule(competition_id):
            raise StateConflictError(f"Competition \"{competition.name}\" already has a schedule")

        if competition.status is not CompetitionStatus.REGISTRATION:
            raise ValidationError(
                f"Competition must be in REGISTRATION status to generate schedule "
                f"(currently {competition.status.value})"
            )

        if len(competition.teams) < 2:
            raise ValidationError(
                f"Need at least 2 teams to generate schedule, have {len(competition.teams)}"
            )

        required = competition.required_roster_size
        roster_repo = TeamRosterRepository(session)
        short = []
        for team in competition.teams:
            size = roster_repo.count_roster_size(team.id)
            if size < required:
                short.append(f'"{team.name}" has {size}')
        if short:
            raise ValidationError(
                f"Teams need at least {required} players: {', '.join(short)}"
            )

        return competition

    # ── Persistence ─────────────────────────────────────────────────────

    def _persist_with_retry(
        self, competition: Competition, assignment: SlotAssignment
    ) -> list[MatchRecord]:
        policy = self.rules.transaction
        delay = policy.backoff_seconds
        attempt = 1
        while True:
            try:
                return self._persist(competition, assignment)
            except IntegrityError as exc:
                if _is_schedule_run_conflict(exc):
                    raise StateConflictError(
                        f"Competition \"{competition.name}\" already has a schedule"
                    ) from exc
                logger.error(f"Schedule for {competition.name} violates a constraint: {exc.orig}")
                raise SchedulingError(
                    f"Could not save schedule for \"{competition.name}\": {exc.orig}; "
                    f"no matches were created"
                ) from exc
            except OperationalError as exc:
                if attempt == policy.max_attempts:
                    logger.error(
                        f"Schedule for {competition.name} not saved after {attempt} attempts: {exc}"
                    )
                    raise TransientStoreError(
                        f"Could not save schedule for \"{competition.name}\" after "
                        f"{attempt} attempts; no matches were created"
                    ) from exc
                logger.warning(
                    f"Transient store failure saving {competition.name} "
                    f"(attempt {attempt}/{policy.max_attempts}), retrying in {delay:.2f}s"
                )
                self._sleep(delay)
                delay *= 2
                attempt += 1

    def _persist(self, competition: Competition, assignment: SlotAssignment) -> list[MatchRecord]:
        """Write every entry of the schedule in a single transaction."""
        entries: list[CalendarEntry] = []
        records: list[MatchRecord] = []
        for scheduled in assignment.matches:
            entry = build_calendar_entry(competition, scheduled)
            entries.append(entry)
            records.append(build_match_record(competition, scheduled, entry))

        rounds = max((m.round_number for m in assignment.matches), default=0)
        # begin() commits on success and rolls back on any exception
        with self.session_factory.begin() as session:
            CompetitionRepository(session).mark_scheduled(competition.id, rounds, len(records))
            CalendarStore(session).create_entries(entries)
            MatchStore(session).create_many(records)
        return records


def _is_schedule_run_conflict(exc: IntegrityError) -> bool:
    """True when the failed constraint is the one-schedule-per-competition key."""
    return ScheduleRunDB.__tablename__ in str(exc.orig)


def build_calendar_entry(competition: Competition, scheduled: ScheduledMatch) -> CalendarEntry:
    home = competition.team_name(scheduled.home_team_id)
    away = competition.team_name(scheduled.away_team_id)
    event_type = (
        EventType.LEAGUE
        if competition.competition_type is CompetitionType.LEAGUE
        else EventType.TOURNAMENT
    )
    return CalendarEntry(
        id=new_id(),
        title=f"{home} vs {away}",
        description=f"{competition.name} - Round {scheduled.round_number}",
        event_type=event_type,
        court_id=scheduled.court_id,
        start_time=scheduled.start_time,
        end_time=scheduled.end_time,
        max_capacity=MATCH_CAPACITY,
        current_enrollment=MATCH_CAPACITY,
    )


def build_match_record(
    competition: Competition, scheduled: ScheduledMatch, entry: CalendarEntry
) -> MatchRecord:
    return MatchRecord(
        id=new_id(),
        competition_id=competition.id,
        event_id=entry.id,
        home_team_id=scheduled.home_team_id,
        away_team_id=scheduled.away_team_id,
        home_team_name=competition.team_name(scheduled.home_team_id),
        away_team_name=competition.team_name(scheduled.away_team_id),
        round_number=scheduled.round_number,
        event=entry,
    )
