"""Scheduling rules and runtime settings.

Tuning constants live in config/scheduling.json and are loaded into a
SchedulingRules model. A missing file falls back to built-in defaults.
The database path may be overridden with COURTLEAGUE_DB_PATH.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, PositiveFloat

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_RULES_PATH = ROOT_DIR / "config" / "scheduling.json"
DEFAULT_DB_PATH = ROOT_DIR / "data" / "league.db"
DB_PATH_ENV = "COURTLEAGUE_DB_PATH"


class TimeSlotRule(BaseModel):
    """A start hour and how desirable it is (higher = better)."""
    hour: int = Field(ge=0, le=23)
    weight: PositiveFloat


class TransactionRules(BaseModel):
    """Retry and timeout policy for the schedule persistence transaction."""
    max_attempts: int = Field(default=3, ge=1, le=10)
    backoff_seconds: float = Field(default=0.05, ge=0.0)
    busy_timeout_seconds: PositiveFloat = Field(default=5.0)


def _default_slots() -> list[TimeSlotRule]:
    # 6pm is the prime slot, 9pm the least wanted
    return [
        TimeSlotRule(hour=18, weight=4),
        TimeSlotRule(hour=19, weight=3),
        TimeSlotRule(hour=20, weight=2),
        TimeSlotRule(hour=21, weight=1),
    ]


class SchedulingRules(BaseModel):
    time_slots: list[TimeSlotRule] = Field(default_factory=_default_slots, min_length=1)
    transaction: TransactionRules = Field(default_factory=TransactionRules)


def load_rules(rules_path: str | Path | None = None) -> SchedulingRules:
    """Load scheduling rules from JSON, falling back to defaults."""
    path = Path(rules_path) if rules_path else DEFAULT_RULES_PATH
    if not path.exists():
        logger.warning(f"Rules file not found: {path}, using defaults")
        return SchedulingRules()

    with open(path) as f:
        raw = json.load(f)

    return SchedulingRules.model_validate(raw.get("scheduling", raw))


def resolve_db_path(db_path: str | Path | None = None) -> Path:
    """Explicit path > COURTLEAGUE_DB_PATH > data/league.db."""
    if db_path:
        return Path(db_path)
    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH
