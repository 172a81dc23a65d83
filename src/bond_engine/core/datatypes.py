"""
Core datatypes shared by the engine components.

These are intentionally minimal and immutable (where appropriate) so that
queries can hand out consistent copies of state and tests stay deterministic.

Notes:
- All amounts are int units (see fixed_point.py); timestamps are int seconds.
- Events are plain records appended by the engine; nothing subscribes to them
  inside the engine itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, Flag, auto
from typing import Dict, Iterable, Iterator, List, Type, TypeVar


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Snapshot:
    """One entry of the snapshot log.

    Fields:
    - index: 1-based position in the log.
    - total_supply: claim-token supply at record time.
    - treasury_balance: custody balance of the backing asset at record time.
    - timestamp: record time in seconds.
    """

    index: int
    total_supply: int
    treasury_balance: int
    timestamp: int


# ---------------------------------------------------------------------------
# Query results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SeriesInfo:
    maturity: int
    total_deposited: int
    total_supply: int
    record_count: int
    cumulative_index: int
    emergency_mode: bool


@dataclass(frozen=True)
class TreasuryStatus:
    balance: int
    required_reserve: int
    withdrawable: int


class SeriesFlag(Flag):
    """Composite series state. No flag set means the series is active."""
    ACTIVE = 0
    PAUSED = auto()
    MATURED = auto()
    EMERGENCY = auto()


class HealthStatus(Enum):
    """Distribution health as shown to holders (pending snapshots / emergency)."""
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EMERGENCY = "emergency"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Event:
    timestamp: int

    @property
    def name(self) -> str:
        return type(self).__name__

    def as_row(self) -> Dict[str, object]:
        """Flat dict for tabulation; fields missing on this event type are left out."""
        row: Dict[str, object] = {"event": self.name}
        for f in fields(self):
            row[f.name] = getattr(self, f.name)
        return row


@dataclass(frozen=True)
class Deposited(Event):
    holder: str
    amount: int
    minted: int


@dataclass(frozen=True)
class SnapshotRecorded(Event):
    index: int
    total_supply: int
    treasury_balance: int


@dataclass(frozen=True)
class CouponDistributed(Event):
    record: int
    amount: int
    index_delta: int
    cumulative_index: int


@dataclass(frozen=True)
class CouponClaimed(Event):
    holder: str
    amount: int
    cumulative_index: int


@dataclass(frozen=True)
class Redeemed(Event):
    holder: str
    burned: int
    principal: int
    emergency: bool


@dataclass(frozen=True)
class OwnerWithdrawn(Event):
    owner: str
    amount: int


@dataclass(frozen=True)
class OwnerDeposited(Event):
    payer: str
    amount: int


@dataclass(frozen=True)
class Transferred(Event):
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class PauseChanged(Event):
    paused: bool


@dataclass(frozen=True)
class EmergencyModeChanged(Event):
    enabled: bool


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    previous_owner: str
    new_owner: str


E = TypeVar("E", bound=Event)


@dataclass
class EventLog:
    """Append-only record of engine events, in execution order."""

    events: List[Event] = field(default_factory=list)

    def add(self, event: Event) -> None:
        self.events.append(event)

    def extend(self, events: Iterable[Event]) -> None:
        self.events.extend(events)

    def of_type(self, kind: Type[E]) -> List[E]:
        return [e for e in self.events if isinstance(e, kind)]

    def is_empty(self) -> bool:
        return not self.events

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self.events))


__all__ = [
    "Snapshot",
    "SeriesInfo",
    "TreasuryStatus",
    "SeriesFlag",
    "HealthStatus",
    "Event",
    "Deposited",
    "SnapshotRecorded",
    "CouponDistributed",
    "CouponClaimed",
    "Redeemed",
    "OwnerWithdrawn",
    "OwnerDeposited",
    "Transferred",
    "PauseChanged",
    "EmergencyModeChanged",
    "OwnershipTransferred",
    "EventLog",
]
