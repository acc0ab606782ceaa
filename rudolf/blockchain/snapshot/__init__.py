# MIT License
# Copyright (c) 2025 Hashborn

"""
Point-in-time balance snapshots.

Snapshots are taken by the Xmas airdrop scheduler; balances at a snapshot are
kept as sparse copy-on-write histories per account.
"""

from .store import SnapshotStore
from .types import BalanceHistory, SnapshotMetadata, SnapshotState

__all__ = ["SnapshotStore", "BalanceHistory", "SnapshotMetadata", "SnapshotState"]
