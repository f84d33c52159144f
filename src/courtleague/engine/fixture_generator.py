"""Fixture generator — single round-robin pairings via the circle method.

Position 0 stays fixed while the rest of the list rotates one step per
round. An odd field is padded with a bye sentinel, so one team sits out
each round. Home/away alternates with round parity to balance home
games over the cycle.

Each round is rebuilt from the original order rather than by mutating a
rotating list, so any single round can be recomputed on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import overload

from courtleague.models.schedule import Pairing

_BYE = object()


def rounds_per_cycle(num_teams: int) -> int:
    """Rounds needed for every team to meet every other team once."""
    n = num_teams if num_teams % 2 == 0 else num_teams + 1
    return n - 1


def expected_match_count(num_teams: int, rounds: int | None = None) -> int:
    """Total matches across the first ``rounds`` rounds of a cycle."""
    cycle = rounds_per_cycle(num_teams)
    played = cycle if rounds is None else min(rounds, cycle)
    return played * (num_teams // 2)


def _padded(team_ids: Sequence[str]) -> list[object]:
    teams: list[object] = list(team_ids)
    if len(teams) % 2 != 0:
        teams.append(_BYE)
    return teams


def _rotated(teams: list[object], rotations: int) -> list[object]:
    """Circle method after ``rotations`` steps: last element moves to slot 1."""
    head, rest = teams[0], teams[1:]
    if not rest:
        return [head]
    shift = rotations % len(rest)
    if shift == 0:
        return [head] + rest
    return [head] + rest[-shift:] + rest[:-shift]


def pairings_for_round(team_ids: Sequence[str], round_index: int) -> tuple[Pairing, ...]:
    """Pairings for a single 0-based round, without building the others.

    Args:
        team_ids: Team identifiers in registration order.
        round_index: 0-based round number.

    Returns:
        Tuple of (home, away) pairings; byes are dropped.

    Raises:
        ValueError: If fewer than 2 teams or a negative round index.
    """
    if len(team_ids) < 2:
        raise ValueError(f"Need at least 2 teams, got {len(team_ids)}")
    if round_index < 0:
        raise ValueError(f"Round index must be >= 0, got {round_index}")

    rotation = _rotated(_padded(team_ids), round_index)
    n = len(rotation)
    swap = round_index % 2 == 1

    pairings: list[Pairing] = []
    for i in range(n // 2):
        first = rotation[i]
        second = rotation[n - 1 - i]
        if first is _BYE or second is _BYE:
            continue
        if swap:
            pairings.append(Pairing(home=second, away=first))  # type: ignore[arg-type]
        else:
            pairings.append(Pairing(home=first, away=second))  # type: ignore[arg-type]
    return tuple(pairings)


class RoundRobinSchedule(Sequence[tuple[Pairing, ...]]):
    """Lazy, finite, restartable sequence of rounds.

    Rounds are computed on access. The length is capped at one full
    cycle (n-1 rounds), even when more rounds are requested.
    """

    def __init__(self, team_ids: Sequence[str], requested_rounds: int):
        if len(team_ids) < 2:
            raise ValueError(f"Need at least 2 teams, got {len(team_ids)}")
        if requested_rounds < 1:
            raise ValueError(f"Need at least 1 round, got {requested_rounds}")
        if len(set(team_ids)) != len(team_ids):
            raise ValueError("Team identifiers must be unique")

        self.team_ids: tuple[str, ...] = tuple(team_ids)
        self.requested_rounds = requested_rounds
        self._length = min(requested_rounds, rounds_per_cycle(len(team_ids)))

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> tuple[Pairing, ...]: ...

    @overload
    def __getitem__(self, index: slice) -> list[tuple[Pairing, ...]]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._length))]
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError(f"Round {index} out of range (0..{self._length - 1})")
        return pairings_for_round(self.team_ids, index)

    @property
    def truncated(self) -> bool:
        """True when fewer rounds were produced than requested."""
        return self._length < self.requested_rounds

    def match_count(self) -> int:
        return sum(len(round_pairings) for round_pairings in self)

    def __repr__(self) -> str:
        return f"<RoundRobinSchedule {len(self.team_ids)} teams, {self._length} rounds>"


def generate_round_robin(team_ids: Sequence[str], rounds: int) -> RoundRobinSchedule:
    """Generate up to ``rounds`` rounds of a single round-robin.

    Args:
        team_ids: Team identifiers in registration order.
        rounds: Requested round count; capped at n-1.

    Returns:
        A RoundRobinSchedule; iterate it or index single rounds.
    """
    return RoundRobinSchedule(team_ids, rounds)
