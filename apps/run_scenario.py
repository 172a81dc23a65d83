#!/usr/bin/env python3
"""
Replay a bond series scenario from JSON and print the outcome of every step.

Scenario layout:
  {
    "config": {...},              # optional SeriesConfig overrides (integer units)
    "owner": "owner",             # optional, default "owner"
    "start": 1700000000,          # optional clock start (seconds)
    "steps": [ {"op": "...", ...}, ... ]
  }

Amounts in steps are decimal backing/claim units ("2", "0.02") floored onto
the 1e-6 grid. `distribute` also accepts "due"; `redeem` also accepts "all".
Each step may carry `expect_error` (exception class name) or
`expect_ok: false`. Exit code is 0 when every expectation holds, 1 otherwise.

Printing policy:
1) One line per step: outcome or error.
2) Final series info, treasury status, snapshot table and holder positions.
3) Event table with --events.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from bond_engine import ManualClock, SeriesConfig, SettlementEngine, StableAsset
from bond_engine.core import BondEngineError, fmt_units, units_from_decimal_down
from bond_engine.research import events_frame, positions_frame, snapshots_frame


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Replay a bond series scenario.")
    p.add_argument("scenario", help="Path to scenario JSON")
    p.add_argument("--events", action="store_true", help="Print the event table")
    p.add_argument("--events-csv", default=None, help="Write the event table to this CSV path")
    p.add_argument("--quiet", action="store_true", help="Only print failed expectations")
    return p.parse_args(argv)


def _units(value: Any) -> int:
    return units_from_decimal_down(str(value))


class ScenarioRunner:
    """Holds the engine under replay and maps step ops onto engine calls."""

    def __init__(self, scenario: Mapping[str, Any]) -> None:
        self.owner = scenario.get("owner", "owner")
        self.clock = ManualClock(int(scenario.get("start", 1_700_000_000)))
        self.asset = StableAsset()
        config = SeriesConfig.from_mapping(scenario.get("config", {}))
        self.engine = SettlementEngine.issue(config, owner=self.owner, asset=self.asset, clock=self.clock)
        self._ops: Dict[str, Callable[[Mapping[str, Any]], str]] = {
            "faucet": self._faucet,
            "deposit": self._deposit,
            "advance": self._advance,
            "advance_to": self._advance_to,
            "snapshot": self._snapshot,
            "distribute": self._distribute,
            "claim": self._claim,
            "redeem": self._redeem,
            "withdraw": self._withdraw,
            "owner_deposit": self._owner_deposit,
            "transfer": self._transfer,
            "pause": self._pause,
            "unpause": self._unpause,
            "emergency": self._emergency,
            "transfer_ownership": self._transfer_ownership,
        }

    def run_step(self, step: Mapping[str, Any]) -> str:
        op = step.get("op")
        if op not in self._ops:
            raise ValueError(f"unknown op {op!r}")
        return self._ops[op](step)

    def _caller(self, step: Mapping[str, Any]) -> str:
        return step.get("caller", self.owner)

    # --- ops ---
    def _faucet(self, step):
        amount = _units(step["amount"])
        self.asset.mint(step["holder"], amount)
        return f"{step['holder']} funded {fmt_units(amount)}"

    def _deposit(self, step):
        minted = self.engine.deposit(step["holder"], _units(step["amount"]))
        return f"minted={fmt_units(minted)}"

    def _advance(self, step):
        return f"now={self.clock.advance(int(step['seconds']))}"

    def _advance_to(self, step):
        target = step["target"]
        if target == "next_record":
            target = self.engine.next_record_time()
        elif target == "maturity":
            target = self.engine.maturity
        self.clock.set(max(self.clock(), int(target)))
        return f"now={self.clock()}"

    def _snapshot(self, step):
        snap = self.engine.record_snapshot(step.get("caller"))
        return f"record #{snap.index} supply={fmt_units(snap.total_supply)} treasury={fmt_units(snap.treasury_balance)}"

    def _distribute(self, step):
        caller = self._caller(step)
        raw = step.get("amount", "due")
        amount = self.engine.coupon_due() if raw == "due" else _units(raw)
        if step.get("fund", True) and amount:
            self.asset.mint(caller, amount)
        delta = self.engine.distribute_coupon(caller, amount)
        return f"amount={fmt_units(amount)} index_delta={delta}"

    def _claim(self, step):
        return f"claimed={fmt_units(self.engine.claim_coupon(step['holder']))}"

    def _redeem(self, step):
        holder = step["holder"]
        raw = step.get("amount", "all")
        amount = self.engine.balance_of(holder) if raw == "all" else _units(raw)
        return f"principal={fmt_units(self.engine.redeem(holder, amount))}"

    def _withdraw(self, step):
        amount = _units(step["amount"])
        self.engine.owner_withdraw(self._caller(step), amount)
        return f"withdrawn={fmt_units(amount)}"

    def _owner_deposit(self, step):
        caller = self._caller(step)
        amount = _units(step["amount"])
        if step.get("fund", True):
            self.asset.mint(caller, amount)
        self.engine.owner_deposit(caller, amount)
        return f"deposited={fmt_units(amount)}"

    def _transfer(self, step):
        amount = _units(step["amount"])
        self.engine.transfer(step["sender"], step["recipient"], amount)
        return f"{step['sender']} -> {step['recipient']} {fmt_units(amount)}"

    def _pause(self, step):
        self.engine.pause(self._caller(step))
        return "paused"

    def _unpause(self, step):
        self.engine.unpause(self._caller(step))
        return "unpaused"

    def _emergency(self, step):
        enabled = bool(step.get("enabled", True))
        self.engine.set_emergency_mode(self._caller(step), enabled)
        return f"emergency_mode={enabled}"

    def _transfer_ownership(self, step):
        self.engine.transfer_ownership(self._caller(step), step["new_owner"])
        self.owner = step["new_owner"]
        return f"owner={self.owner}"


def _expectation_met(step: Mapping[str, Any], error: Optional[BondEngineError]) -> bool:
    expected_error = step.get("expect_error")
    if expected_error is not None:
        return error is not None and type(error).__name__ == expected_error
    if step.get("expect_ok", True):
        return error is None
    return error is not None


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    with open(args.scenario, "r", encoding="utf-8") as f:
        scenario = json.load(f)

    runner = ScenarioRunner(scenario)
    failures = 0
    for i, step in enumerate(scenario.get("steps", []), start=1):
        error: Optional[BondEngineError] = None
        try:
            outcome = runner.run_step(step)
        except BondEngineError as exc:
            error = exc
            outcome = f"{type(exc).__name__}: {exc}"
        ok = _expectation_met(step, error)
        if not ok:
            failures += 1
        if not args.quiet or not ok:
            tag = "ok" if error is None else "error"
            flag = "" if ok else "  <-- UNEXPECTED"
            print(f"[step {i}] {step.get('op')} {tag}: {outcome}{flag}")

    engine = runner.engine
    if not args.quiet:
        info = engine.series_info()
        status = engine.treasury_status()
        print("\n=== Series ===")
        print(f"state            : {engine.state()}")
        print(f"health           : {engine.health_status().value}")
        print(f"total_deposited  : {fmt_units(info.total_deposited)}")
        print(f"total_supply     : {fmt_units(info.total_supply)}")
        print(f"cumulative_index : {info.cumulative_index}")
        print(f"record_count     : {info.record_count}")
        print("\n=== Treasury ===")
        print(f"balance          : {fmt_units(status.balance)}")
        print(f"required_reserve : {fmt_units(status.required_reserve)}")
        print(f"withdrawable     : {fmt_units(status.withdrawable)}")
        print("\n=== Snapshots ===")
        print(snapshots_frame(engine).to_string(index=False))
        print("\n=== Positions ===")
        print(positions_frame(engine).to_string(index=False))
        if args.events:
            print("\n=== Events ===")
            print(events_frame(engine.events).to_string(index=False))

    if args.events_csv:
        out = Path(args.events_csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        events_frame(engine.events).to_csv(out, index=False)

    engine.check_invariants()
    if failures:
        print(f"\n{failures} step(s) did not match expectations", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
