# MIT License
# Copyright (c) 2025 Hashborn

"""
Airdrop vesting.

Each distribution is released in twelve equal slots: slot 0 at the
distribution instant, slot k at `timestamp + k * month_seconds`. Claimed
progress is stored in twelfths and amounts are always recomputed as
`entitlement * twelfths // 12`, so repeated partial claims never drift.
"""

import logging
from typing import List

from .events import Event
from ...protocol.types.airdrop import AirdropRecord, VestedAmount
from ...protocol.types.common import EventType, NothingToClaim

logger = logging.getLogger(__name__)


class VestingLedger:

    def __init__(self, state, snapshots, ledger, guard, config, events: List[Event]):
        self.state = state
        self.snapshots = snapshots
        self.ledger = ledger
        self.guard = guard
        self.config = config
        self.events = events

    @property
    def slots(self) -> int:
        return self.config.vesting_slots

    def entitlement(self, account: str, record: AirdropRecord) -> int:
        """Pro-rata share of the record's emission, fixed at its snapshot."""
        if record.total_supply == 0:
            return 0
        balance = self.snapshots.balance_at(record.snapshot_id, account)
        return record.amount * balance // record.total_supply

    def unlocked_twelfths(self, record: AirdropRecord, now: int) -> int:
        if now < record.timestamp:
            return 0
        return min(self.slots, 1 + (now - record.timestamp) // self.config.month_seconds)

    def claimed_twelfths(self, account: str, record: AirdropRecord) -> int:
        return self.state.claims.get(account, {}).get(record.snapshot_id, 0)

    def claimable_amount(self, account: str, record: AirdropRecord, now: int) -> int:
        entitlement = self.entitlement(account, record)
        unlocked = self.unlocked_twelfths(record, now)
        claimed = self.claimed_twelfths(account, record)
        return entitlement * unlocked // self.slots - entitlement * claimed // self.slots

    def get_claimable_total(self, account: str, now: int) -> int:
        return sum(self.claimable_amount(account, record, now) for record in self.state.airdrops)

    def get_vested_schedule(self, account: str, now: int) -> List[VestedAmount]:
        """Future unlocks, grouped by distribution then slot (ascending release time)."""
        schedule = []
        for record in self.state.airdrops:
            per_slot = self.entitlement(account, record) // self.slots
            for slot in range(self.unlocked_twelfths(record, now), self.slots):
                schedule.append(VestedAmount(
                    release_time=record.release_time(slot, self.config.month_seconds),
                    amount=per_slot,
                ))
        return schedule

    def claim(self, account: str, now: int) -> int:
        """
        Settle everything currently claimable for `account` with a single mint.

        Raises:
            Paused: token is paused
            NothingToClaim: nothing is unlocked and unclaimed
        """
        self.guard.require_not_paused()

        total = 0
        progress = {}
        for record in self.state.airdrops:
            amount = self.claimable_amount(account, record, now)
            if amount > 0:
                total += amount
                progress[record.snapshot_id] = self.unlocked_twelfths(record, now)

        if total == 0:
            raise NothingToClaim()

        claims = self.state.claims.setdefault(account, {})
        for snapshot_id, twelfths in progress.items():
            claims[snapshot_id] = max(claims.get(snapshot_id, 0), twelfths)

        self.ledger.mint(account, total)
        self.events.append(Event(
            event_type=EventType.AIRDROP_CLAIMED,
            data={"account": account, "amount": total}
        ))
        logger.info(f"{account} claimed {total} from {len(progress)} airdrop(s)")
        return total
