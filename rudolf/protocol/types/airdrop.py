from pydantic import BaseModel


class AirdropRecord(BaseModel):
    """One Xmas distribution. Immutable once appended to the state."""
    snapshot_id: int        # Snapshot the entitlements are computed from
    year: int               # Calendar year of the distribution
    timestamp: int          # Scheduled Dec-25 00:00 UTC instant (not the triggering block time)
    total_supply: int       # Total supply at the snapshot
    amount: int             # Emission of this distribution

    def release_time(self, slot: int, month_seconds: int) -> int:
        return self.timestamp + slot * month_seconds


class VestedAmount(BaseModel):
    """A future unlock of one twelfth of an entitlement."""
    release_time: int
    amount: int


class ScheduleState(BaseModel):
    next_year: int
    next_timestamp: int
