# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Data Structures
"""

from bisect import bisect_left
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class SnapshotMetadata(BaseModel):
    """
    Created once per snapshot, never modified.
    """
    snapshot_id: int = Field(..., description="Sequential snapshot id, starting at 1")
    block_time: int = Field(..., description="Block time of the call that took the snapshot")
    total_supply: int = Field(..., description="Total token supply at the snapshot")


class BalanceHistory(BaseModel):
    """
    Balance of one account at past snapshots.

    `values[i]` is the balance the account held at snapshot `ids[i]` and at
    every snapshot between `ids[i-1]` (exclusive) and `ids[i]`. Snapshots newer
    than the last id still see the live balance.
    """
    ids: List[int] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)

    def value_at(self, snapshot_id: int) -> Optional[int]:
        """Returns the recorded value, or None when the live value applies."""
        index = bisect_left(self.ids, snapshot_id)
        if index == len(self.ids):
            return None
        return self.values[index]

    def record(self, current_id: int, value: int) -> bool:
        """Stores the pre-change value once per snapshot. Returns True if written."""
        if current_id == 0:
            return False
        if self.ids and self.ids[-1] >= current_id:
            return False
        self.ids.append(current_id)
        self.values.append(value)
        return True


class SnapshotState(BaseModel):
    current_id: int = 0
    snapshots: List[SnapshotMetadata] = Field(default_factory=list)
    balances: Dict[str, BalanceHistory] = Field(default_factory=dict, description="address -> history")
