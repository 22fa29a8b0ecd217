"""Rate configuration -- default rates, merge-by-key updates, and snapshot history."""

from bopp.rates.defaults import default_rates
from bopp.rates.store import RateStore

__all__ = ["RateStore", "default_rates"]
