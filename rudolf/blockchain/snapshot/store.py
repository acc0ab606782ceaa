# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Store

Handles creation of balance snapshots and historical balance lookups.
"""

import logging

from .types import BalanceHistory, SnapshotMetadata
from ...protocol.types.common import UnknownSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Append-only sequence of snapshots over a TokenState.

    Taking a snapshot only bumps the id and records the total supply. An
    account's balance is copied into its history the first time it changes
    after a snapshot (see `record_balance`), so unchanged accounts cost
    nothing.
    """

    def __init__(self, state):
        self.state = state

    @property
    def _data(self):
        return self.state.snapshots

    def get_current_snapshot_id(self) -> int:
        return self._data.current_id

    def create_snapshot(self, block_time: int) -> SnapshotMetadata:
        """
        Freeze all balances and the total supply as of now.

        Args:
            block_time: Block time of the current call

        Returns:
            SnapshotMetadata of the new snapshot
        """
        self._data.current_id += 1
        metadata = SnapshotMetadata(
            snapshot_id=self._data.current_id,
            block_time=block_time,
            total_supply=self.state.total_supply,
        )
        self._data.snapshots.append(metadata)
        logger.debug(f"Snapshot {metadata.snapshot_id} taken (supply={metadata.total_supply})")
        return metadata

    def record_balance(self, address: str) -> None:
        """Must be called before every change to `address`'s balance."""
        current_id = self._data.current_id
        if current_id == 0:
            return
        history = self._data.balances.get(address)
        if history is None:
            history = BalanceHistory()
            self._data.balances[address] = history
        history.record(current_id, self.state.balance_of(address))

    def get_snapshot(self, snapshot_id: int) -> SnapshotMetadata:
        self._require_snapshot(snapshot_id)
        return self._data.snapshots[snapshot_id - 1]

    def balance_at(self, snapshot_id: int, address: str) -> int:
        self._require_snapshot(snapshot_id)
        history = self._data.balances.get(address)
        if history is not None:
            value = history.value_at(snapshot_id)
            if value is not None:
                return value
        return self.state.balance_of(address)

    def total_supply_at(self, snapshot_id: int) -> int:
        return self.get_snapshot(snapshot_id).total_supply

    def _require_snapshot(self, snapshot_id: int) -> None:
        if snapshot_id <= 0:
            raise UnknownSnapshot("id is 0")
        if snapshot_id > self._data.current_id:
            raise UnknownSnapshot(f"nonexistent id {snapshot_id}")
