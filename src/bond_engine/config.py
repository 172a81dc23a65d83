from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .core.constants import (
    BPS_DENOMINATOR,
    COUPON_RATE_DEN,
    COUPON_RATE_NUM,
    ISSUANCE_CAP,
    MATURITY_HOURS,
    MINT_RATIO,
    RESERVE_RATIO_BPS,
    SNAPSHOT_INTERVAL_SECONDS,
)


@dataclass(frozen=True)
class SeriesConfig:
    """
    Immutable issuance parameters of one bond series.

    Defaults are the production instrument:
      - 10 claim units minted per backing unit (same 6-decimal grid, no precision loss),
      - coupon of 1/1000 of snapshot supply per snapshot,
      - 30% of lifetime deposits kept as reserve,
      - 100,000 backing units issuance cap,
      - one snapshot per day, 336h (14 day) term.

    Amount-like fields are integer units (scaled by 10^6).
    """

    mint_ratio: int = MINT_RATIO
    coupon_rate_num: int = COUPON_RATE_NUM
    coupon_rate_den: int = COUPON_RATE_DEN
    reserve_ratio_bps: int = RESERVE_RATIO_BPS
    issuance_cap: int = ISSUANCE_CAP
    snapshot_interval: int = SNAPSHOT_INTERVAL_SECONDS
    maturity_hours: int = MATURITY_HOURS

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueError(f"{f.name} must be an int, got {v!r}")
            if v < 0:
                raise ValueError(f"{f.name} must be >= 0, got {v}")
        if self.mint_ratio == 0:
            raise ValueError("mint_ratio must be > 0")
        if self.coupon_rate_den == 0:
            raise ValueError("coupon_rate_den must be > 0")
        if self.reserve_ratio_bps > BPS_DENOMINATOR:
            raise ValueError("reserve_ratio_bps must satisfy 0 ≤ bps ≤ 10000")
        if self.snapshot_interval == 0:
            raise ValueError("snapshot_interval must be > 0")

    @property
    def maturity_seconds(self) -> int:
        return self.maturity_hours * 3600

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SeriesConfig":
        """Build from a JSON-like mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown series config keys: {sorted(unknown)}")
        return cls(**{k: data[k] for k in known if k in data})


__all__ = ["SeriesConfig"]
