#!/usr/bin/env python3
"""generate_schedule.py — Generate the round-robin schedule for a competition.

Usage:
    python scripts/generate_schedule.py --competition spring-league \
        --start-date 2026-03-02 --day-of-week 1 --weeks 7 --courts 1 2
    python scripts/generate_schedule.py --competition spring-league --create \
        --name "Spring League" --format INTERMEDIATE_4S --rosters data/rosters.csv ...
    python scripts/generate_schedule.py --competition spring-league --show
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from courtleague.config import resolve_db_path
from courtleague.utils.runtime import check_db_location, validate_runtime

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("schedule")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="courtleague — Schedule Generation")
    parser.add_argument("--competition", required=True, help="Competition id")
    parser.add_argument("--db-path", default=None, help="SQLite database path")
    parser.add_argument("--rules", default=None, help="Path to scheduling.json")
    parser.add_argument("--start-date", type=date.fromisoformat, help="Earliest match date (YYYY-MM-DD)")
    parser.add_argument("--day-of-week", type=int, help="0=Sunday … 6=Saturday")
    parser.add_argument("--weeks", type=int, help="Number of weeks (1-52)")
    parser.add_argument("--courts", type=int, nargs="+", help="Court ids, e.g. --courts 1 2 3")
    parser.add_argument("--create", action="store_true", help="Create the competition in REGISTRATION")
    parser.add_argument("--name", default=None, help="Competition name (with --create)")
    parser.add_argument("--format", default="ADVANCED_6S", help="INTERMEDIATE_4S or ADVANCED_6S")
    parser.add_argument("--type", default="LEAGUE", dest="competition_type", help="LEAGUE or TOURNAMENT")
    parser.add_argument("--rosters", default=None, help="Roster CSV to import (team, player)")
    parser.add_argument("--show", action="store_true", help="Print the existing schedule and exit")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        validate_runtime()
        db_path = check_db_location(resolve_db_path(args.db_path))
    except RuntimeError as exc:
        logger.error(str(exc))
        return 1

    from pydantic import ValidationError as ConfigError

    from courtleague.config import load_rules
    from courtleague.db.repository import CompetitionRepository
    from courtleague.db.session import get_engine, get_session_factory, init_db
    from courtleague.engine.fairness import slot_counts, summarize_debt
    from courtleague.engine.schedule_service import ScheduleOrchestrator
    from courtleague.errors import SchedulingError
    from courtleague.importers.roster_csv import import_rosters
    from courtleague.models.competition import (
        Competition,
        CompetitionFormat,
        CompetitionStatus,
        CompetitionType,
        ScheduleConfig,
    )

    rules = load_rules(args.rules)
    engine = init_db(get_engine(db_path, busy_timeout=rules.transaction.busy_timeout_seconds))
    factory = get_session_factory(engine)
    orchestrator = ScheduleOrchestrator(factory, rules=rules)

    if args.create:
        with factory() as session:
            repo = CompetitionRepository(session)
            if repo.get_by_id(args.competition) is None:
                repo.save(
                    Competition(
                        id=args.competition,
                        name=args.name or args.competition,
                        format=CompetitionFormat(args.format),
                        competition_type=CompetitionType(args.competition_type),
                        status=CompetitionStatus.REGISTRATION,
                    )
                )
                logger.info(f"Created competition {args.competition}")

    try:
        if args.rosters:
            import_rosters(factory, args.competition, args.rosters)

        if args.show:
            matches = orchestrator.get_schedule(args.competition)
            if args.json:
                print(json.dumps([m.model_dump(mode="json") for m in matches], indent=2))
            else:
                _print_matches(matches)
            return 0

        missing = [
            flag for flag, value in (
                ("--start-date", args.start_date),
                ("--day-of-week", args.day_of_week),
                ("--weeks", args.weeks),
                ("--courts", args.courts),
            )
            if value is None
        ]
        if missing:
            logger.error(f"Missing required options: {', '.join(missing)}")
            return 2

        config = ScheduleConfig(
            competition_id=args.competition,
            start_date=args.start_date,
            day_of_week=args.day_of_week,
            number_of_weeks=args.weeks,
            court_ids=args.courts,
        )
        result = orchestrator.generate_schedule(config)
    except (SchedulingError, ConfigError, OSError, ValueError) as exc:
        logger.error(str(exc))
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    _print_matches(result.matches)

    # Fairness report: replay the assignment to recover the final debt
    with factory() as session:
        competition = CompetitionRepository(session).get_by_id(args.competition)
    assignment = orchestrator.build_assignment(competition, config)
    hours = [slot.hour for slot in orchestrator.time_slots]
    counts = slot_counts(assignment.matches, hours)
    print()
    print(f"  Slot fairness: {summarize_debt(assignment.debt)}")
    print(f"  {'Team':<25} " + " ".join(f"{h:>4}h" for h in hours))
    for team in competition.teams:
        row = counts.get(team.id, {})
        print(f"  {team.name:<25} " + " ".join(f"{row.get(h, 0):>5}" for h in hours))
    print()
    print(f"  ✅ {result.matches_created} matches created for {result.competition_name}")
    return 0


def _print_matches(matches) -> None:
    current_round = None
    for match in matches:
        if match.round_number != current_round:
            current_round = match.round_number
            day = match.event.start_time.date().isoformat() if match.event else "?"
            print()
            print(f"  Round {current_round} — {day}")
            print("  " + "-" * 56)
        start = match.event.start_time.strftime("%H:%M") if match.event else "--:--"
        court = match.event.court_id if match.event else "?"
        score = ""
        if match.is_scored:
            score = f"  {match.home_score}-{match.away_score}"
        print(
            f"  {start}  Court {court:<3} {match.home_team_name:>20} vs "
            f"{match.away_team_name:<20}{score}"
        )


if __name__ == "__main__":
    raise SystemExit(main())
