"""Score recorder — writes final scores onto scheduled matches.

Scores can only be recorded while the competition is ACTIVE. Recording
again overwrites the previous values (last write wins). Standings are
derived from these scores elsewhere.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session, sessionmaker

from courtleague.db.repository import CompetitionRepository, MatchStore
from courtleague.errors import NotFoundError, StateConflictError, ValidationError
from courtleague.models.competition import CompetitionStatus
from courtleague.models.schedule import MatchRecord

logger = logging.getLogger(__name__)


def _check_score(label: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"{label} must be non-negative, got {value}")


class MatchScoreRecorder:
    """Status-guarded score updates, one match at a time."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def record_score(self, match_id: str, home_score: int, away_score: int) -> MatchRecord:
        """Overwrite the home and away score of a match.

        Raises:
            ValidationError: A score is negative or not an integer.
            NotFoundError: The match does not exist.
            StateConflictError: The competition is not ACTIVE.
        """
        _check_score("Home score", home_score)
        _check_score("Away score", away_score)

        # Status check and update share one transaction
        with self.session_factory.begin() as session:
            matches = MatchStore(session)
            competition_id = matches.get_competition_id(match_id)
            if competition_id is None:
                raise NotFoundError(f"Match {match_id} not found")

            status = CompetitionRepository(session).get_status(competition_id)
            if status is not CompetitionStatus.ACTIVE:
                current = status.value if status is not None else "missing"
                raise StateConflictError(
                    f"Can only record scores for active competitions (competition is {current})"
                )

            matches.update_score(match_id, home_score, away_score)
            record = matches.get(match_id)

        logger.info(f"Recorded score {home_score}-{away_score} for match {match_id}")
        return record
