"""Tests for recording match scores."""

from __future__ import annotations

from datetime import date

import pytest

from courtleague.db.repository import CompetitionRepository, MatchStore
from courtleague.engine.schedule_service import ScheduleOrchestrator
from courtleague.engine.score_recorder import MatchScoreRecorder
from courtleague.errors import NotFoundError, StateConflictError, ValidationError
from courtleague.models.competition import CompetitionStatus, ScheduleConfig


@pytest.fixture
def scheduled_match_id(seed, session_factory, db_session) -> str:
    """A match in a scheduled, ACTIVE competition."""
    seed(["A", "B", "C", "D"])
    result = ScheduleOrchestrator(session_factory).generate_schedule(
        ScheduleConfig(
            competition_id="spring-league",
            start_date=date(2026, 10, 19),
            day_of_week=1,
            number_of_weeks=3,
            court_ids=[1, 2],
        )
    )
    CompetitionRepository(db_session).set_status("spring-league", CompetitionStatus.ACTIVE)
    return result.matches[0].id


@pytest.fixture
def recorder(session_factory) -> MatchScoreRecorder:
    return MatchScoreRecorder(session_factory)


def _stored(db_session, match_id: str):
    db_session.expire_all()
    return MatchStore(db_session).get(match_id)


class TestRecordScore:
    def test_records_scores(self, recorder, scheduled_match_id, db_session):
        record = recorder.record_score(scheduled_match_id, 25, 21)
        assert (record.home_score, record.away_score) == (25, 21)
        stored = _stored(db_session, scheduled_match_id)
        assert (stored.home_score, stored.away_score) == (25, 21)
        assert stored.is_scored

    def test_same_score_twice_is_idempotent(self, recorder, scheduled_match_id, db_session):
        recorder.record_score(scheduled_match_id, 25, 21)
        recorder.record_score(scheduled_match_id, 25, 21)
        stored = _stored(db_session, scheduled_match_id)
        assert (stored.home_score, stored.away_score) == (25, 21)

    def test_different_score_overwrites(self, recorder, scheduled_match_id, db_session):
        recorder.record_score(scheduled_match_id, 25, 21)
        recorder.record_score(scheduled_match_id, 19, 25)
        stored = _stored(db_session, scheduled_match_id)
        assert (stored.home_score, stored.away_score) == (19, 25)

    def test_zero_scores_allowed(self, recorder, scheduled_match_id):
        record = recorder.record_score(scheduled_match_id, 0, 0)
        assert record.is_scored

    def test_other_matches_untouched(self, recorder, scheduled_match_id, db_session):
        recorder.record_score(scheduled_match_id, 25, 21)
        others = [
            m for m in MatchStore(db_session).list_for_competition("spring-league")
            if m.id != scheduled_match_id
        ]
        assert len(others) == 5
        assert all(m.home_score is None and m.away_score is None for m in others)

    def test_returns_linked_event(self, recorder, scheduled_match_id):
        record = recorder.record_score(scheduled_match_id, 25, 21)
        assert record.event is not None
        assert record.event.id == record.event_id


class TestRecordScoreErrors:
    def test_unknown_match(self, recorder, session_factory):
        with pytest.raises(NotFoundError):
            recorder.record_score("missing", 1, 0)

    def test_completed_competition_rejected(self, recorder, scheduled_match_id, db_session):
        recorder.record_score(scheduled_match_id, 25, 21)
        CompetitionRepository(db_session).set_status("spring-league", CompetitionStatus.COMPLETED)

        with pytest.raises(StateConflictError, match="active"):
            recorder.record_score(scheduled_match_id, 10, 25)

        stored = _stored(db_session, scheduled_match_id)
        assert (stored.home_score, stored.away_score) == (25, 21)

    def test_registration_competition_rejected(self, recorder, scheduled_match_id, db_session):
        CompetitionRepository(db_session).set_status("spring-league", CompetitionStatus.REGISTRATION)
        with pytest.raises(StateConflictError):
            recorder.record_score(scheduled_match_id, 1, 0)
        assert _stored(db_session, scheduled_match_id).home_score is None

    @pytest.mark.parametrize("home, away", [(-1, 0), (0, -3)])
    def test_negative_scores(self, recorder, scheduled_match_id, home, away):
        with pytest.raises(ValidationError, match="non-negative"):
            recorder.record_score(scheduled_match_id, home, away)

    @pytest.mark.parametrize("home, away", [(1.5, 0), (True, 0), ("3", 1)])
    def test_non_integer_scores(self, recorder, scheduled_match_id, home, away):
        with pytest.raises(ValidationError, match="integer"):
            recorder.record_score(scheduled_match_id, home, away)
