"""Shared fixtures: in-memory league database and seeded competitions."""

from __future__ import annotations

import pytest

from courtleague.db.repository import CompetitionRepository, TeamRepository, TeamRosterRepository
from courtleague.db.session import get_engine, get_session_factory, init_db
from courtleague.models.competition import (
    Competition,
    CompetitionFormat,
    CompetitionStatus,
    CompetitionType,
)


@pytest.fixture
def session_factory():
    """Session factory over a fresh in-memory SQLite database."""
    engine = get_engine(":memory:")
    init_db(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


def seed_competition(
    session,
    team_names: list[str],
    competition_id: str = "spring-league",
    name: str = "Spring League",
    status: CompetitionStatus = CompetitionStatus.REGISTRATION,
    fmt: CompetitionFormat = CompetitionFormat.INTERMEDIATE_4S,
    competition_type: CompetitionType = CompetitionType.LEAGUE,
    roster_size: int | None = None,
) -> Competition:
    """Create a competition whose team ids equal the team names."""
    CompetitionRepository(session).save(
        Competition(
            id=competition_id,
            name=name,
            format=fmt,
            competition_type=competition_type,
            status=status,
        )
    )
    team_repo = TeamRepository(session)
    roster_repo = TeamRosterRepository(session)
    size = fmt.required_roster_size if roster_size is None else roster_size
    for team_name in team_names:
        team = team_repo.add_team(competition_id, team_name, team_id=f"{competition_id}:{team_name}")
        roster_repo.add_players(team.id, [f"{team_name} Player {i + 1}" for i in range(size)])
    return CompetitionRepository(session).get_by_id(competition_id)


@pytest.fixture
def seed(db_session):
    """Call as seed(["A", "B", ...], **options) to create a competition."""
    def _seed(team_names: list[str], **options) -> Competition:
        return seed_competition(db_session, team_names, **options)
    return _seed
