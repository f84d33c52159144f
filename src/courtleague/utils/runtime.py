"""Startup checks for the CLI scripts: interpreter, stack, database location."""

from __future__ import annotations

import importlib.util
import os
import sys
from collections.abc import Sequence
from pathlib import Path

MIN_PYTHON = (3, 12)
DEFAULT_REQUIRED_MODULES = (
    "pydantic",
    "pandas",
    "numpy",
    "sqlalchemy",
)
INSTALL_HINT = 'Install project dependencies with `python -m pip install -e ".[dev]"`.'


def validate_runtime(
    min_python: tuple[int, int] = MIN_PYTHON,
    required_modules: Sequence[str] = DEFAULT_REQUIRED_MODULES,
    python_version: tuple[int, int] | None = None,
) -> None:
    """Raise RuntimeError if the interpreter or dependencies are incompatible."""
    major, minor = python_version or sys.version_info[:2]
    if (major, minor) < min_python:
        wanted = ".".join(str(part) for part in min_python)
        raise RuntimeError(
            f"courtleague requires Python >={wanted}, found {major}.{minor}. {INSTALL_HINT}"
        )

    missing = sorted(mod for mod in required_modules if importlib.util.find_spec(mod) is None)
    if missing:
        raise RuntimeError(f"Missing required Python modules: {', '.join(missing)}. {INSTALL_HINT}")


def check_db_location(db_path: str | Path) -> Path:
    """Make sure the database directory exists and is writable.

    Returns:
        The database path.

    Raises:
        RuntimeError: If the directory cannot be created or written to.
    """
    path = Path(db_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Cannot create database directory {path.parent}: {exc}") from exc
    if not os.access(path.parent, os.W_OK):
        raise RuntimeError(f"Database directory {path.parent} is not writable")
    return path
