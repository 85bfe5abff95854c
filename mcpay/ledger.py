"""Payment ledger: bounded, newest-first, in-memory store of accepted payments.

Thread-safe: a single ``threading.Lock`` guards every read and write, so an
insert (prepend + truncate) is atomic with respect to other inserts and to
balance queries. Nothing is persisted; a restart starts empty.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone

from mcpay.webhooks.validation import PaymentEvent

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class LedgerEntry:
    """One accepted payment. Created by the ledger, never mutated."""

    id: str
    payer: str
    amount: int | float
    raw: str
    ts: str
    received_at: str


class PaymentLedger:
    """Bounded ordered store with FIFO eviction and per-payer balances.

    Entries are kept newest-first by insertion order. When an insert would
    exceed ``capacity`` the oldest entries are dropped.

    Examples
    --------
    >>> ledger = PaymentLedger(capacity=2)
    >>> _ = ledger.insert(PaymentEvent(payer="Steve", amount=5, ts="t1"))
    >>> _ = ledger.insert(PaymentEvent(payer="steve", amount=3, ts="t2"))
    >>> ledger.balance_of("STEVE")
    8
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        self._capacity = capacity
        # appendleft on a full deque discards from the right (oldest) end
        self._entries: deque[LedgerEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._last_received: datetime | None = None

    @property
    def capacity(self) -> int:
        return self._capacity

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, event: PaymentEvent) -> LedgerEntry:
        """Record a validated payment and return the stored entry."""
        with self._lock:
            now = _utc_now()
            # receivedAt never goes backwards even if the wall clock does
            if self._last_received is not None and now < self._last_received:
                now = self._last_received
            self._last_received = now

            entry = LedgerEntry(
                id=str(uuid.uuid4()),
                payer=event.payer,
                amount=event.amount,
                raw=event.raw,
                ts=event.ts,
                received_at=_isoformat(now),
            )
            evicted = len(self._entries) == self._capacity
            self._entries.appendleft(entry)
            size = len(self._entries)

        if evicted:
            logger.debug("Ledger at capacity (%d); evicted oldest entry", self._capacity)
        logger.debug("Ledger insert id=%s payer=%s size=%d", entry.id, entry.payer, size)
        return entry

    def clear(self) -> None:
        """Drop all retained entries."""
        with self._lock:
            self._entries.clear()

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def balance_of(self, payer: str) -> int | float:
        """Sum of amounts for *payer*, matched case-insensitively.

        The query is stripped of surrounding whitespace; stored payers are
        compared as recorded. Returns 0 when nothing matches.
        """
        key = payer.strip().casefold()
        with self._lock:
            return sum(e.amount for e in self._entries if e.payer.casefold() == key)

    def entries(self) -> list[LedgerEntry]:
        """Snapshot of retained entries, newest first."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
