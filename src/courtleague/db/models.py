"""SQLAlchemy ORM models for the courtleague database.

Competitions, teams and rosters are owned by other services and only
read by the scheduler. Events and matches are written in bulk when a
schedule is generated; schedule_runs holds one row per scheduled
competition so a second generation is rejected by the primary key.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class CompetitionDB(Base):
    __tablename__ = "competitions"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    format = Column(String(20), nullable=False, default="ADVANCED_6S")
    competition_type = Column(String(20), nullable=False, default="LEAGUE")
    status = Column(String(20), nullable=False, default="DRAFT", index=True)

    def __repr__(self) -> str:
        return f"<CompetitionDB {self.name} ({self.status})>"


class TeamDB(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True)
    competition_id = Column(String(36), ForeignKey("competitions.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    # Registration order drives the pairing rotation
    position = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<TeamDB {self.name}>"


class RosterEntryDB(Base):
    __tablename__ = "team_rosters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(String(36), ForeignKey("teams.id"), nullable=False, index=True)
    player_name = Column(String(100), nullable=False)


class EventDB(Base):
    """Calendar entry — one per scheduled match."""

    __tablename__ = "events"

    id = Column(String(36), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, default="")
    event_type = Column(String(20), nullable=False)
    court_id = Column(Integer, nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    max_capacity = Column(Integer, nullable=False, default=2)
    current_enrollment = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="SCHEDULED")

    def __repr__(self) -> str:
        return f"<EventDB {self.title} @ {self.start_time}>"


class MatchDB(Base):
    __tablename__ = "matches"

    id = Column(String(36), primary_key=True)
    competition_id = Column(String(36), ForeignKey("competitions.id"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, unique=True)
    home_team_id = Column(String(36), ForeignKey("teams.id"), nullable=False)
    away_team_id = Column(String(36), ForeignKey("teams.id"), nullable=False)
    round_number = Column(Integer, nullable=False)
    is_playoff = Column(Boolean, nullable=False, default=False)
    home_score = Column(Integer, nullable=True)
    away_score = Column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<MatchDB R{self.round_number} {self.home_team_id} v {self.away_team_id}>"


class ScheduleRunDB(Base):
    """Guard row: at most one generated schedule per competition."""

    __tablename__ = "schedule_runs"

    competition_id = Column(String(36), ForeignKey("competitions.id"), primary_key=True)
    rounds = Column(Integer, nullable=False)
    matches_created = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
