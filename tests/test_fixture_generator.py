"""Tests for the circle-method round-robin generator."""

from __future__ import annotations

from itertools import combinations

import pytest

from courtleague.engine.fixture_generator import (
    RoundRobinSchedule,
    expected_match_count,
    generate_round_robin,
    pairings_for_round,
    rounds_per_cycle,
)
from courtleague.models.schedule import Pairing


def _teams(n: int) -> list[str]:
    return [f"T{i:02d}" for i in range(n)]


def _unordered(round_pairings) -> set[frozenset[str]]:
    return {frozenset(p) for p in round_pairings}


class TestFourTeamExample:
    def test_rounds_match_worked_example(self):
        schedule = generate_round_robin(["A", "B", "C", "D"], 3)
        assert len(schedule) == 3
        assert _unordered(schedule[0]) == {frozenset("AD"), frozenset("BC")}
        assert _unordered(schedule[1]) == {frozenset("AC"), frozenset("DB")}
        assert _unordered(schedule[2]) == {frozenset("AB"), frozenset("CD")}

    def test_home_away_follows_round_parity(self):
        schedule = generate_round_robin(["A", "B", "C", "D"], 3)
        assert schedule[0] == (Pairing("A", "D"), Pairing("B", "C"))
        # Odd rounds swap home and away
        assert schedule[1] == (Pairing("C", "A"), Pairing("B", "D"))
        assert schedule[2] == (Pairing("A", "B"), Pairing("C", "D"))


class TestRoundRobinProperties:
    @pytest.mark.parametrize("n", range(2, 15))
    def test_every_pair_meets_exactly_once(self, n):
        teams = _teams(n)
        schedule = generate_round_robin(teams, 52)
        seen = [frozenset(p) for round_pairings in schedule for p in round_pairings]
        assert len(seen) == len(set(seen))
        assert set(seen) == {frozenset(pair) for pair in combinations(teams, 2)}

    @pytest.mark.parametrize("n", range(2, 15))
    def test_no_team_twice_in_a_round(self, n):
        for round_pairings in generate_round_robin(_teams(n), 52):
            playing = [team for p in round_pairings for team in p]
            assert len(playing) == len(set(playing))

    @pytest.mark.parametrize("n", [3, 5, 7, 9, 11])
    def test_odd_field_has_one_bye_per_round(self, n):
        teams = set(_teams(n))
        byes = []
        for round_pairings in generate_round_robin(sorted(teams), 52):
            playing = {team for p in round_pairings for team in p}
            absent = teams - playing
            assert len(absent) == 1
            byes.extend(absent)
        # Everyone sits out exactly once over the cycle
        assert sorted(byes) == sorted(teams)

    @pytest.mark.parametrize("n", range(2, 15))
    def test_round_count_is_one_cycle(self, n):
        schedule = generate_round_robin(_teams(n), 52)
        assert len(schedule) == rounds_per_cycle(n)
        assert schedule.match_count() == expected_match_count(n)
        assert schedule.match_count() == n * (n - 1) // 2

    def test_fixed_team_home_away_balanced(self):
        schedule = generate_round_robin(_teams(8), 7)
        home = sum(1 for r in schedule for p in r if p.home == "T00")
        away = sum(1 for r in schedule for p in r if p.away == "T00")
        assert home + away == 7
        assert abs(home - away) <= 1


class TestFiveTeams:
    def test_four_weeks_gives_four_rounds_with_one_bye(self):
        teams = ["A", "B", "C", "D", "E"]
        schedule = generate_round_robin(teams, 4)
        assert len(schedule) == 4
        for round_pairings in schedule:
            assert len(round_pairings) == 2
            playing = {team for p in round_pairings for team in p}
            assert len(set(teams) - playing) == 1


class TestCycleCap:
    def test_requested_rounds_beyond_cycle_are_capped(self):
        schedule = generate_round_robin(["A", "B", "C", "D"], 10)
        assert len(schedule) == 3
        assert schedule.truncated

    def test_fewer_rounds_than_cycle(self):
        schedule = generate_round_robin(_teams(6), 2)
        assert len(schedule) == 2
        assert not schedule.truncated
        assert schedule.match_count() == expected_match_count(6, 2) == 6

    def test_two_teams_single_round(self):
        schedule = generate_round_robin(["A", "B"], 4)
        assert list(schedule) == [(Pairing("A", "B"),)]

    def test_two_teams_parity_swaps_home(self):
        assert pairings_for_round(["A", "B"], 0) == (Pairing("A", "B"),)
        assert pairings_for_round(["A", "B"], 1) == (Pairing("B", "A"),)
        assert pairings_for_round(["A", "B"], 2) == (Pairing("A", "B"),)


class TestRestartable:
    def test_single_round_matches_full_iteration(self):
        teams = _teams(9)
        schedule = generate_round_robin(teams, 8)
        materialized = list(schedule)
        for i in range(len(schedule)):
            assert pairings_for_round(teams, i) == materialized[i]
            assert schedule[i] == materialized[i]

    def test_iterating_twice_is_identical(self):
        schedule = generate_round_robin(_teams(6), 5)
        assert list(schedule) == list(schedule)

    def test_negative_and_slice_indexing(self):
        schedule = generate_round_robin(_teams(6), 5)
        assert schedule[-1] == schedule[4]
        assert schedule[1:3] == [schedule[1], schedule[2]]

    def test_out_of_range_raises(self):
        schedule = generate_round_robin(_teams(4), 3)
        with pytest.raises(IndexError):
            schedule[3]

    def test_input_list_not_mutated(self):
        teams = _teams(5)
        original = list(teams)
        list(generate_round_robin(teams, 4))
        assert teams == original


class TestValidation:
    def test_too_few_teams(self):
        with pytest.raises(ValueError, match="at least 2 teams"):
            generate_round_robin(["A"], 3)

    def test_zero_rounds(self):
        with pytest.raises(ValueError):
            RoundRobinSchedule(["A", "B"], 0)

    def test_duplicate_team_ids(self):
        with pytest.raises(ValueError, match="unique"):
            generate_round_robin(["A", "B", "A"], 2)

    def test_negative_round_index(self):
        with pytest.raises(ValueError):
            pairings_for_round(["A", "B"], -1)
