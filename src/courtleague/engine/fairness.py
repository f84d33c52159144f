"""Fairness statistics over a generated schedule.

Summaries of slot debt and per-team slot counts, used by the CLI report
and by season-length fairness checks.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from courtleague.models.schedule import ScheduledMatch


@dataclass
class DebtSummary:
    """Distribution of slot debt across teams."""
    max_abs: float
    mean: float
    std: float
    spread: float  # max - min

    def __str__(self) -> str:
        return (
            f"max |debt| {self.max_abs:.2f}, mean {self.mean:+.2f}, "
            f"std {self.std:.2f}, spread {self.spread:.2f}"
        )


def summarize_debt(debt: Mapping[str, float]) -> DebtSummary:
    if not debt:
        return DebtSummary(max_abs=0.0, mean=0.0, std=0.0, spread=0.0)
    values = np.fromiter(debt.values(), dtype=np.float64, count=len(debt))
    return DebtSummary(
        max_abs=float(np.max(np.abs(values))),
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        spread=float(np.ptp(values)),
    )


def slot_counts(
    matches: Iterable[ScheduledMatch],
    hours: Sequence[int],
) -> dict[str, dict[int, int]]:
    """How many times each team plays at each slot hour."""
    matches = list(matches)
    teams = sorted({t for m in matches for t in (m.home_team_id, m.away_team_id)})
    team_index = {team: i for i, team in enumerate(teams)}
    hour_index = {hour: j for j, hour in enumerate(hours)}

    counts = np.zeros((len(teams), len(hours)), dtype=np.int64)
    for match in matches:
        j = hour_index.get(match.start_hour)
        if j is None:
            continue
        counts[team_index[match.home_team_id], j] += 1
        counts[team_index[match.away_team_id], j] += 1

    return {
        team: {hour: int(counts[i, j]) for hour, j in hour_index.items()}
        for team, i in team_index.items()
    }
