"""Roster CSV importer — seeds a competition's teams and rosters.

Expects one row per roster entry with a team column and a player
column. Common header variants are detected. Teams are registered in
the order they first appear, which is the order the pairing rotation
uses. Re-importing a file only adds players a team does not have yet.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypedDict

import pandas as pd
from sqlalchemy.orm import Session, sessionmaker

from courtleague.db.repository import CompetitionRepository, TeamRepository, TeamRosterRepository
from courtleague.errors import NotFoundError, ValidationError
from courtleague.models.competition import CompetitionStatus

logger = logging.getLogger(__name__)

TEAM_COLUMNS = ("team", "Team", "Team Name", "team_name")
PLAYER_COLUMNS = ("player", "Player", "Player Name", "player_name", "Name")


class RawTeamRecord(TypedDict):
    name: str
    players: list[str]


def _detect_column(df: pd.DataFrame, candidates: tuple[str, ...]) -> str | None:
    for column in candidates:
        if column in df.columns:
            return column
    return None


def load_roster_csv(source_path: str | Path) -> list[RawTeamRecord]:
    """Read teams and their players from a roster CSV.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no team column can be found.
    """
    path = Path(source_path)
    if not path.exists():
        raise FileNotFoundError(f"Roster CSV not found: {source_path}")

    df = pd.read_csv(path, dtype=str)
    team_col = _detect_column(df, TEAM_COLUMNS)
    player_col = _detect_column(df, PLAYER_COLUMNS)
    if team_col is None:
        raise ValueError(f"No team column in {path.name}; expected one of {', '.join(TEAM_COLUMNS)}")

    teams: dict[str, RawTeamRecord] = {}
    for _, row in df.iterrows():
        team = row.get(team_col)
        if pd.isna(team) or not str(team).strip():
            continue
        name = str(team).strip()
        record = teams.setdefault(name, RawTeamRecord(name=name, players=[]))

        player = row.get(player_col) if player_col else None
        if player is not None and not pd.isna(player) and str(player).strip():
            record["players"].append(str(player).strip())

    return list(teams.values())


def import_rosters(
    session_factory: sessionmaker[Session], competition_id: str, source_path: str | Path
) -> int:
    """Register the CSV's teams (reusing existing names) and add their players.

    Players already on a team's roster are skipped, so importing the same
    file twice leaves the rosters unchanged. The whole import is one
    transaction.

    Returns:
        Number of roster entries added.

    Raises:
        NotFoundError: If the competition does not exist.
        ValidationError: If the competition is no longer in REGISTRATION.
    """
    records = load_roster_csv(source_path)

    added = 0
    with session_factory.begin() as session:
        status = CompetitionRepository(session).get_status(competition_id)
        if status is None:
            raise NotFoundError(f"Competition {competition_id} not found")
        if status is not CompetitionStatus.REGISTRATION:
            raise ValidationError(
                f"Rosters can only be imported during REGISTRATION (currently {status.value})"
            )

        team_repo = TeamRepository(session)
        roster_repo = TeamRosterRepository(session)
        for record in records:
            team = team_repo.get_by_name(competition_id, record["name"])
            if team is None:
                team = team_repo.add_team(competition_id, record["name"], commit=False)
            known = roster_repo.player_names(team.id)
            new_players = [p for p in dict.fromkeys(record["players"]) if p not in known]
            if len(new_players) < len(record["players"]):
                logger.debug(
                    f"{record['name']}: skipped {len(record['players']) - len(new_players)} "
                    f"players already on the roster"
                )
            added += roster_repo.add_players(team.id, new_players, commit=False)

    logger.info(f"Imported {added} roster entries into competition {competition_id}")
    return added
