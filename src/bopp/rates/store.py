"""Rate store: current rate values and their change history.

The current rate set is re-derived on every read as the defaults overlaid
with persisted rows, so the set stays structurally complete even after the
stored file is edited by hand. Writes merge by ``key``: a known key only has
its value replaced, an unknown key is inserted with a fresh id.

Every update first records a snapshot of the rate set as it was *before* the
change. History is kept newest-first and capped (RateSettings.history_cap).

CRITICAL: Values are Decimal end to end. Incoming values are converted with
Decimal(str(v)) and are not otherwise validated.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal

from bopp.config import RateSettings
from bopp.exceptions import StorageError
from bopp.logging import get_logger
from bopp.models import Clock, Rate, RateHistoryEntry, RateUpdate, utcnow
from bopp.rates.defaults import default_rates, initial_history
from bopp.storage.backend import Entity, StorageBackend
from bopp.storage.codec import (
    decode_decimal,
    history_from_record,
    history_to_record,
    rate_to_record,
)

logger = get_logger(__name__)


def overlay_rates(defaults: Sequence[Rate], records: Iterable[dict]) -> list[Rate]:
    """Overlay stored rate records onto the defaults, keyed by ``key``.

    Stored rows override the default with the same key (including its id) or
    are appended. Rows without an id get ``max + 1``, where max runs over the
    defaults and every stored id. Any id left duplicated after the overlay is
    reassigned the same way, so ids in the result are unique.

    Raises StorageError for rows without a key or with an undecodable value.
    """
    records = list(records)
    max_id = max((r.id for r in defaults), default=0)
    for record in records:
        raw_id = record.get("id") if isinstance(record, dict) else None
        if isinstance(raw_id, int) and raw_id > max_id:
            max_id = raw_id

    merged: dict[str, Rate] = {r.key: r for r in defaults}
    for record in records:
        if not isinstance(record, dict) or not record.get("key"):
            raise StorageError(f"Malformed rate record: {record!r}")
        key = str(record["key"])
        base = merged.get(key)

        raw_id = record.get("id")
        if raw_id:
            rate_id = int(raw_id)
        elif base is not None:
            rate_id = base.id
        else:
            max_id += 1
            rate_id = max_id

        if "value" in record:
            value = decode_decimal(record["value"])
        elif base is not None:
            value = base.value
        else:
            raise StorageError(f"Rate record without value: {record!r}")

        merged[key] = Rate(id=rate_id, key=key, value=value)

    seen: set[int] = set()
    result: list[Rate] = []
    for rate in merged.values():
        if rate.id in seen:
            max_id += 1
            rate = replace(rate, id=max_id)
        seen.add(rate.id)
        result.append(rate)
    return result


def merge_rate_updates(
    current: Sequence[Rate], updates: Iterable[Rate | RateUpdate]
) -> list[Rate]:
    """Apply incoming rates to ``current`` by key.

    Known keys keep their id and take the new value. Unknown keys are
    inserted with their own id when it is set and unused, otherwise with
    ``max + 1``. Ids are never reused.
    """
    merged: dict[str, Rate] = {r.key: r for r in current}
    used_ids = {r.id for r in current}
    max_id = max(used_ids, default=0)

    for incoming in updates:
        value = decode_decimal(incoming.value)
        existing = merged.get(incoming.key)
        if existing is not None:
            merged[incoming.key] = replace(existing, value=value)
            continue

        if incoming.id and incoming.id not in used_ids:
            rate_id = incoming.id
        else:
            rate_id = max_id + 1
        max_id = max(max_id, rate_id)
        used_ids.add(rate_id)
        merged[incoming.key] = Rate(id=rate_id, key=incoming.key, value=value)

    return list(merged.values())


class RateStore:
    """Single source of truth for current rates and their history.

    Each call performs a full read-modify-write against the backend; nothing
    is cached between calls.

    Args:
        backend: Record-set storage for rates and history.
        settings: History cap, default page size, and seeding behaviour.
        clock: Returns the current UTC time. Injected for tests.
    """

    def __init__(
        self,
        backend: StorageBackend,
        settings: RateSettings | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._backend = backend
        self._settings = settings or RateSettings()
        self._clock = clock

    # ──────────────────────────────────────────────
    # Loading
    # ──────────────────────────────────────────────

    async def _load_rates(self) -> list[Rate]:
        try:
            records = await self._backend.load(Entity.RATES)
        except StorageError as e:
            logger.error("rates_read_failed", error=str(e), fallback="defaults")
            return default_rates()

        if records is None:
            rates = default_rates()
            await self._backend.save(Entity.RATES, [rate_to_record(r) for r in rates])
            logger.info("rates_seeded", count=len(rates))
            return rates

        try:
            return overlay_rates(default_rates(), records)
        except (StorageError, TypeError, ValueError) as e:
            logger.error("rates_decode_failed", error=str(e), fallback="defaults")
            return default_rates()

    def _seed_history(self) -> list[RateHistoryEntry]:
        if not self._settings.seed_history:
            return []
        return initial_history(self._clock())

    async def _load_history(self) -> list[RateHistoryEntry]:
        try:
            records = await self._backend.load(Entity.RATE_HISTORY)
        except StorageError as e:
            logger.error("rate_history_read_failed", error=str(e), fallback="seed")
            return self._seed_history()

        if records is None:
            history = self._seed_history()
            await self._backend.save(
                Entity.RATE_HISTORY, [history_to_record(h) for h in history]
            )
            logger.info("rate_history_seeded", count=len(history))
            return history

        try:
            return [history_from_record(r) for r in records]
        except StorageError as e:
            logger.error("rate_history_decode_failed", error=str(e), fallback="seed")
            return self._seed_history()

    # ──────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────

    async def get_rates(self) -> list[Rate]:
        """Current rates: defaults overlaid with persisted values.

        Writes the defaults through when nothing was stored yet. Unreadable
        storage is logged and masked by returning the defaults.
        """
        rates = await self._load_rates()
        logger.debug("rates_fetched", count=len(rates))
        return rates

    async def get_rate(self, key: str) -> Rate | None:
        """Look up a single rate by key."""
        for rate in await self._load_rates():
            if rate.key == key:
                return rate
        return None

    async def rates_as_mapping(self) -> dict[str, Decimal]:
        """Current rates as ``{key: value}`` for cost calculations."""
        return {rate.key: rate.value for rate in await self._load_rates()}

    async def update_rates(
        self,
        new_rates: Sequence[Rate | RateUpdate],
        actor_id: str,
        actor_name: str,
    ) -> None:
        """Merge ``new_rates`` into the current set and record a history entry.

        The history entry holds a copy of the rate set as it was before this
        call. History is saved truncated to the configured cap.
        """
        current = await self._load_rates()
        history = await self._load_history()

        next_id = max((h.id for h in history), default=0) + 1
        # Rate is frozen and Decimal immutable, so a new tuple is a full copy
        entry = RateHistoryEntry(
            id=next_id,
            changed_at=self._clock(),
            changed_by_id=actor_id,
            changed_by_name=actor_name,
            rates_snapshot=tuple(current),
        )
        history.insert(0, entry)

        merged = merge_rate_updates(current, new_rates)
        kept_history = history[: self._settings.history_cap]

        await self._backend.save(Entity.RATES, [rate_to_record(r) for r in merged])
        await self._backend.save(
            Entity.RATE_HISTORY, [history_to_record(h) for h in kept_history]
        )

        logger.info(
            "rates_updated",
            actor_id=actor_id,
            history_id=next_id,
            incoming=len(new_rates),
            rate_count=len(merged),
            history_size=len(kept_history),
            history_dropped=len(history) - len(kept_history),
        )

    async def get_rate_history(self, limit: int | None = None) -> list[RateHistoryEntry]:
        """Newest ``limit`` history entries (default RateSettings.default_history_limit)."""
        if limit is None:
            limit = self._settings.default_history_limit
        history = await self._load_history()
        return history[: max(limit, 0)]
