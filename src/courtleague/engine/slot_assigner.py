"""Fair slot assigner — spreads good and bad time slots across teams.

Within a round, matches run concurrently on every court at a time slot,
filling all courts at the first slot before moving to the next. Each
team carries a "slot debt": getting a worse-than-average slot raises it,
a better one lowers it. Matches whose teams carry the highest combined
debt are served first, so the schedule self-corrects over a season.

Debt lives in an explicit mapping threaded through the calls. It starts
at zero for every team at the beginning of each generation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date

from courtleague.models.schedule import Pairing, ScheduledMatch

logger = logging.getLogger(__name__)

SlotDebt = dict[str, float]


@dataclass(frozen=True)
class TimeSlot:
    """A start hour with its desirability weight (higher = better)."""
    hour: int
    weight: float


DEFAULT_TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot(hour=18, weight=4),
    TimeSlot(hour=19, weight=3),
    TimeSlot(hour=20, weight=2),
    TimeSlot(hour=21, weight=1),
)


def mean_weight(time_slots: Sequence[TimeSlot]) -> float:
    if not time_slots:
        raise ValueError("At least one time slot is required")
    return sum(slot.weight for slot in time_slots) / len(time_slots)


@dataclass
class SlotAssignment:
    """All scheduled matches plus the final debt per team."""
    matches: list[ScheduledMatch] = field(default_factory=list)
    debt: SlotDebt = field(default_factory=dict)

    def for_round(self, round_number: int) -> list[ScheduledMatch]:
        return [m for m in self.matches if m.round_number == round_number]


def order_by_debt(pairings: Sequence[Pairing], debt: Mapping[str, float]) -> list[Pairing]:
    """Highest combined debt first; ties keep their original order."""
    # sorted() is stable, so equal keys stay in input order
    return sorted(
        pairings,
        key=lambda p: debt.get(p.home, 0.0) + debt.get(p.away, 0.0),
        reverse=True,
    )


def assign_round(
    pairings: Sequence[Pairing],
    round_number: int,
    round_date: date,
    court_ids: Sequence[int],
    debt: Mapping[str, float],
    time_slots: Sequence[TimeSlot] = DEFAULT_TIME_SLOTS,
) -> tuple[list[ScheduledMatch], SlotDebt]:
    """Place one round's pairings on slots and courts.

    Args:
        pairings: The round's fixtures in generation order.
        round_number: 1-based round number.
        round_date: Date every match of the round is played on.
        court_ids: Courts available concurrently at each slot.
        debt: Current slot debt per team (not modified).
        time_slots: Slots in order of play.

    Returns:
        (scheduled matches in slot/court order, updated debt mapping).
    """
    if not court_ids:
        raise ValueError("At least one court is required")
    average = mean_weight(time_slots)
    courts = len(court_ids)
    updated: SlotDebt = dict(debt)
    scheduled: list[ScheduledMatch] = []

    for position, pairing in enumerate(order_by_debt(pairings, updated)):
        # Wrap around when a round has more matches than slots x courts
        slot = time_slots[(position // courts) % len(time_slots)]
        scheduled.append(
            ScheduledMatch(
                home_team_id=pairing.home,
                away_team_id=pairing.away,
                round_number=round_number,
                date=round_date,
                start_hour=slot.hour,
                court_id=court_ids[position % courts],
            )
        )
        change = average - slot.weight
        updated[pairing.home] = updated.get(pairing.home, 0.0) + change
        updated[pairing.away] = updated.get(pairing.away, 0.0) + change

    return scheduled, updated


def assign_time_slots_and_courts(
    rounds: Sequence[Sequence[Pairing]],
    round_dates: Sequence[date],
    court_ids: Sequence[int],
    time_slots: Sequence[TimeSlot] = DEFAULT_TIME_SLOTS,
    team_ids: Sequence[str] | None = None,
) -> SlotAssignment:
    """Assign every round in order, carrying debt from round to round.

    Args:
        rounds: Pairings per round, first round first.
        round_dates: One date per round.
        court_ids: Available courts.
        time_slots: Slots in order of play.
        team_ids: Teams to start at zero debt; inferred from pairings if None.

    Returns:
        SlotAssignment with every match and the final debt per team.
    """
    if len(round_dates) < len(rounds):
        raise ValueError(
            f"Need a date for every round: {len(rounds)} rounds, {len(round_dates)} dates"
        )

    if team_ids is None:
        team_ids = [team for pairings in rounds for p in pairings for team in p]
    debt: SlotDebt = {team: 0.0 for team in team_ids}

    result = SlotAssignment()
    for index, pairings in enumerate(rounds):
        scheduled, debt = assign_round(
            pairings,
            round_number=index + 1,
            round_date=round_dates[index],
            court_ids=court_ids,
            debt=debt,
            time_slots=time_slots,
        )
        result.matches.extend(scheduled)

    result.debt = debt
    logger.debug(
        f"Assigned {len(result.matches)} matches over {len(rounds)} rounds "
        f"on {len(court_ids)} courts"
    )
    return result
