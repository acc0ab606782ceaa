# MIT License
# Copyright (c) 2025 Hashborn

"""
Xmas Airdrop Scheduler

Replays every Dec-25 boundary that elapsed since the last transfer, earliest
first, creating one snapshot and one airdrop record per boundary.
"""

import logging
from typing import List

from .events import Event
from ...protocol.types.airdrop import AirdropRecord, ScheduleState
from ...protocol.types.common import EventType
from ...protocol.config.calendar import SECONDS_PER_DAY, days_between_xmas, xmas_timestamp

logger = logging.getLogger(__name__)


def initial_schedule(first_year: int) -> ScheduleState:
    return ScheduleState(next_year=first_year, next_timestamp=xmas_timestamp(first_year))


class AirdropScheduler:
    """
    Lazy yearly distribution trigger.

    Cost of `catch_up` is linear in the number of elapsed years. Every due
    boundary is processed before the triggering transfer moves funds.
    """

    def __init__(self, state, snapshots, config, events: List[Event]):
        self.state = state
        self.snapshots = snapshots
        self.config = config
        self.events = events

    def catch_up(self, now: int) -> List[AirdropRecord]:
        """
        Process every distribution boundary at or before `now`.

        Args:
            now: Block time of the current call

        Returns:
            Airdrop records created by this call (empty if none was due)
        """
        created: List[AirdropRecord] = []
        schedule = self.state.schedule

        while now >= schedule.next_timestamp:
            snapshot = self.snapshots.create_snapshot(now)
            record = AirdropRecord(
                snapshot_id=snapshot.snapshot_id,
                year=schedule.next_year,
                timestamp=schedule.next_timestamp,
                total_supply=snapshot.total_supply,
                amount=self.config.xmas_airdrop_amount,
            )
            self.state.airdrops.append(record)
            created.append(record)

            self.events.append(Event(
                event_type=EventType.SNAPSHOT,
                data={"snapshot_id": record.snapshot_id}
            ))
            self.events.append(Event(
                event_type=EventType.XMAS_AIRDROP,
                data={"year": record.year, "amount": record.amount}
            ))
            logger.info(
                f"Xmas airdrop {record.year}: snapshot {record.snapshot_id}, "
                f"supply {record.total_supply}, emission {record.amount}"
            )

            schedule.next_year += 1
            schedule.next_timestamp += days_between_xmas(schedule.next_year) * SECONDS_PER_DAY

        if len(created) > self.config.catch_up_warn_threshold:
            logger.warning(
                f"Catch-up processed {len(created)} distributions in one call "
                f"({created[0].year}-{created[-1].year})"
            )
        return created

    def get_next_distribution_year(self) -> int:
        return self.state.schedule.next_year

    def get_next_distribution_time(self) -> int:
        return self.state.schedule.next_timestamp

    def get_last_airdrop_snapshot_id(self) -> int:
        if not self.state.airdrops:
            return 0
        return self.state.airdrops[-1].snapshot_id

    def get_distribution_count(self) -> int:
        return len(self.state.airdrops)

    def get_airdrops(self) -> List[AirdropRecord]:
        return list(self.state.airdrops)
