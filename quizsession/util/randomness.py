from __future__ import annotations

"""Randomness helpers for session ordering and seeding."""

import os
import random
from typing import Optional


def seed_from_env() -> Optional[int]:
    """Return the SEED env var as an int, or None when unset or invalid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build the RNG handed to the order generator.

    An explicit seed wins over SEED; with neither the RNG is OS-seeded.
    """
    if seed is None:
        seed = seed_from_env()
    return random.Random(seed)
