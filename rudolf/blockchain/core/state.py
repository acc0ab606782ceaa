from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from .accounts import Account
from ..snapshot.types import SnapshotState
from ...protocol.types.airdrop import AirdropRecord, ScheduleState
from ..storage.db import StorageDB

STATE_KEY = "token_state"


class TokenState(BaseModel):
    """Complete token storage. Mutated only through the core components."""
    accounts: Dict[str, Account] = Field(default_factory=dict)
    total_supply: int = 0
    # owner -> spender -> amount
    allowances: Dict[str, Dict[str, int]] = Field(default_factory=dict)

    # Access control
    owner: Optional[str] = None
    paused: bool = False

    # Xmas airdrop
    schedule: ScheduleState
    snapshots: SnapshotState = Field(default_factory=SnapshotState)
    airdrops: List[AirdropRecord] = Field(default_factory=list)
    # account -> snapshot id -> twelfths claimed
    claims: Dict[str, Dict[int, int]] = Field(default_factory=dict)

    # Highest block time seen by a committed call
    last_block_time: int = 0

    def clone(self) -> 'TokenState':
        """Creates a copy of the state (for all-or-nothing calls)."""
        return self.model_copy(deep=True)

    def get_account(self, address: str) -> Account:
        acc = self.accounts.get(address)
        if acc is None:
            acc = Account(address=address)
            self.accounts[address] = acc
        return acc

    def balance_of(self, address: str) -> int:
        acc = self.accounts.get(address)
        return acc.balance if acc else 0

    def nonce_of(self, address: str) -> int:
        acc = self.accounts.get(address)
        return acc.nonce if acc else 0

    def sum_of_balances(self) -> int:
        return sum(acc.balance for acc in self.accounts.values())

    def persist(self, db: StorageDB, journal_entry: Optional[Dict[str, str]] = None):
        """Writes the state (and optionally the call that produced it) to DB."""
        db.save_state(STATE_KEY, self.model_dump_json(), journal_entry)

    @staticmethod
    def load(db: StorageDB) -> Optional['TokenState']:
        raw_json = db.get_state(STATE_KEY)
        if raw_json:
            return TokenState.model_validate_json(raw_json)
        return None
