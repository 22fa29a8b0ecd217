"""Seed data for the rate store.

DEFAULT_RATES is the schema baseline: every key listed here is always present
in the loaded rate set, whatever the persisted file contains.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from bopp.models import Rate, RateHistoryEntry

SYSTEM_ACTOR_ID = "system-init"
SYSTEM_ACTOR_NAME = "System Initialization"

# (id, key, value) -- paste-type keys: brown_tape, color_tape, milky_white, transparent
_DEFAULT_RATE_ROWS: tuple[tuple[int, str, str], ...] = (
    (1, "adhesive_less_rate", "80.0000"),
    (2, "adhesive_rate", "90.0000"),
    (3, "bopp_film_rate", "118.0000"),
    (4, "brown_tape", "105.0000"),
    (5, "coating_exp", "12.0000"),
    (6, "color_tape", "250.0000"),
    (7, "double_colour_printed", "225.0000"),
    (8, "four_colour_printed", "350.0000"),
    (9, "full_print", "1000.0000"),
    (10, "milky_white", "160.0000"),
    (11, "natural", "0.0000"),
    (12, "packing_cost", "60.0000"),
    (13, "profit", "10.0000"),
    (14, "single_colour_printed", "150.0000"),
    (15, "three_colour_printed", "300.0000"),
    (16, "transparent", "0.0000"),
)


def default_rates() -> list[Rate]:
    """Fresh list of the default rates, ids 1-16."""
    return [Rate(id=i, key=k, value=Decimal(v)) for i, k, v in _DEFAULT_RATE_ROWS]


def initial_history(now: datetime) -> list[RateHistoryEntry]:
    """Demo history written when no history was ever stored, newest first."""

    def _snapshot(film: str, adhesive: str, packing: str, profit: str) -> tuple[Rate, ...]:
        return (
            Rate(id=3, key="bopp_film_rate", value=Decimal(film)),
            Rate(id=2, key="adhesive_rate", value=Decimal(adhesive)),
            Rate(id=12, key="packing_cost", value=Decimal(packing)),
            Rate(id=13, key="profit", value=Decimal(profit)),
        )

    return [
        RateHistoryEntry(
            id=2,
            changed_at=now - timedelta(days=1),
            changed_by_id=SYSTEM_ACTOR_ID,
            changed_by_name=SYSTEM_ACTOR_NAME,
            rates_snapshot=_snapshot("115.00", "85.00", "55.00", "8.00"),
        ),
        RateHistoryEntry(
            id=1,
            changed_at=now - timedelta(days=2),
            changed_by_id=SYSTEM_ACTOR_ID,
            changed_by_name=SYSTEM_ACTOR_NAME,
            rates_snapshot=_snapshot("110.00", "80.00", "50.00", "7.00"),
        ),
    ]
