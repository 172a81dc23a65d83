from __future__ import annotations

from typing import Iterator, List, Optional

from .core import add, check_amount
from .core.datatypes import Snapshot
from .core.exc import SnapshotNotFound, TooSoon


class SnapshotLog:
    """Append-only, time-gated record of (supply, treasury balance, timestamp).

    The gate is `now >= last_record_timestamp + interval`; the first record is
    allowed one interval after the log was started (issuance time).
    """

    def __init__(self, interval: int, started_at: int) -> None:
        if interval <= 0:
            raise ValueError("snapshot interval must be > 0")
        self.interval = interval
        self.last_record_timestamp = started_at
        self._records: List[Snapshot] = []

    @property
    def record_count(self) -> int:
        return len(self._records)

    def next_record_time(self) -> int:
        return add(self.last_record_timestamp, self.interval)

    def check_due(self, now: int) -> None:
        next_time = self.next_record_time()
        if now < next_time:
            raise TooSoon(now, next_time)

    def append(self, now: int, total_supply: int, treasury_balance: int) -> Snapshot:
        self.check_due(now)
        check_amount(total_supply, "total_supply")
        check_amount(treasury_balance, "treasury_balance")
        snap = Snapshot(
            index=self.record_count + 1,
            total_supply=total_supply,
            treasury_balance=treasury_balance,
            timestamp=now,
        )
        self._records.append(snap)
        self.last_record_timestamp = now
        return snap

    def get(self, index: int) -> Snapshot:
        """Return snapshot `index` (1-based)."""
        if not 1 <= index <= self.record_count:
            raise SnapshotNotFound(f"snapshot {index} not in 1..{self.record_count}")
        return self._records[index - 1]

    def latest(self) -> Optional[Snapshot]:
        return self._records[-1] if self._records else None

    def __len__(self) -> int:
        return self.record_count

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(list(self._records))


__all__ = ["SnapshotLog"]
