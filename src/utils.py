"""
Shared utilities: paths, config.
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root (parent of src/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

BOOKINGS_CSV_PATH = os.getenv("BOOKINGS_CSV_PATH", "data/hotel_bookings_1000.csv")
SAMPLE_CSV_PATH = os.getenv("SAMPLE_CSV_PATH", "data/hotel_bookings_sample.csv")


def get_data_path(sample: bool = False) -> Path:
    """Return absolute path to the bookings CSV."""
    p = Path(SAMPLE_CSV_PATH if sample else BOOKINGS_CSV_PATH)
    return p if p.is_absolute() else PROJECT_ROOT / p


def resolve_data_path() -> tuple[Path, bool]:
    """Full dataset if present, otherwise the bundled sample. Returns (path, using_sample)."""
    full_path = get_data_path(sample=False)
    if full_path.exists():
        return full_path, False
    return get_data_path(sample=True), True
