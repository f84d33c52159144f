#!/usr/bin/env python3
"""record_score.py — Record the final score of a scheduled match.

Usage:
    python scripts/record_score.py MATCH_ID 25 21
    python scripts/record_score.py MATCH_ID 25 21 --db-path data/league.db
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from courtleague.config import resolve_db_path
from courtleague.utils.runtime import check_db_location, validate_runtime

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("score")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="courtleague — Record Match Score")
    parser.add_argument("match_id", help="Match id")
    parser.add_argument("home_score", type=int, help="Home team score")
    parser.add_argument("away_score", type=int, help="Away team score")
    parser.add_argument("--db-path", default=None, help="SQLite database path")
    args = parser.parse_args(argv)

    try:
        validate_runtime()
        db_path = check_db_location(resolve_db_path(args.db_path))
    except RuntimeError as exc:
        logger.error(str(exc))
        return 1

    from courtleague.db.session import get_engine, get_session_factory, init_db
    from courtleague.engine.score_recorder import MatchScoreRecorder
    from courtleague.errors import SchedulingError

    factory = get_session_factory(init_db(get_engine(db_path)))
    try:
        match = MatchScoreRecorder(factory).record_score(
            args.match_id, args.home_score, args.away_score
        )
    except SchedulingError as exc:
        logger.error(str(exc))
        return 1

    print(
        f"  Round {match.round_number}: {match.home_team_name} {match.home_score} - "
        f"{match.away_score} {match.away_team_name}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
