import logging
from typing import List, Optional
from .events import Event
from ...protocol.types.common import (
    EventType, InsufficientBalance, InsufficientAllowance, InvalidAddress, InvalidAmount
)
from ...protocol.crypto.addresses import ZERO_ADDRESS, is_valid_address, is_zero_address

logger = logging.getLogger(__name__)

# Allowance that is never decreased by transfer_from
MAX_ALLOWANCE = 2**256 - 1


def require_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount(f"amount must be a non-negative integer, got {amount!r}")
    return amount


def require_address(address: str, role: str) -> str:
    if not is_valid_address(address) or is_zero_address(address):
        raise InvalidAddress(f"{role} {address!r} is the zero address or malformed")
    return address


class Ledger:
    """
    Balances, allowances and total supply.

    The transfer path (`transfer`, `transfer_from`) is the only trigger of the
    Xmas airdrop catch-up; it runs after the pause check and before any
    balance moves.
    """

    def __init__(self, state, guard, snapshots, scheduler, events: List[Event]):
        self.state = state
        self.guard = guard
        self.snapshots = snapshots
        self.scheduler = scheduler
        self.events = events

    def balance_of(self, address: str) -> int:
        return self.state.balance_of(address)

    def total_supply(self) -> int:
        return self.state.total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self.state.allowances.get(owner, {}).get(spender, 0)

    def transfer(self, sender: str, to: str, amount: int, now: int) -> bool:
        self.guard.require_not_paused()
        require_amount(amount)
        require_address(to, "recipient")
        self.scheduler.catch_up(now)
        self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int, now: int) -> bool:
        self.guard.require_not_paused()
        require_amount(amount)
        require_address(to, "recipient")
        self.scheduler.catch_up(now)

        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowance(f"allowance {allowed} below {amount}")
        self._move(owner, to, amount)
        if allowed != MAX_ALLOWANCE:
            self.state.allowances.setdefault(owner, {})[spender] = allowed - amount
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        require_amount(amount)
        require_address(spender, "spender")
        self.state.allowances.setdefault(owner, {})[spender] = amount
        self.events.append(Event(
            event_type=EventType.APPROVAL,
            data={"owner": owner, "spender": spender, "amount": amount}
        ))
        return True

    def mint(self, to: str, amount: int, check_paused: bool = True) -> None:
        """Creates `amount` new tokens for `to`. Claim settlement only (and construction)."""
        if check_paused:
            self.guard.require_not_paused()
        require_amount(amount)
        self.snapshots.record_balance(to)
        acc = self.state.get_account(to)
        acc.balance += amount
        self.state.total_supply += amount
        self._emit_transfer(ZERO_ADDRESS, to, amount)

    def _move(self, sender: str, to: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance(f"transfer amount {amount} exceeds balance {balance}")

        self.snapshots.record_balance(sender)
        self.snapshots.record_balance(to)

        self.state.get_account(sender).balance -= amount
        self.state.get_account(to).balance += amount
        self._emit_transfer(sender, to, amount)

    def _emit_transfer(self, sender: Optional[str], to: str, amount: int) -> None:
        self.events.append(Event(
            event_type=EventType.TRANSFER,
            data={"sender": sender, "recipient": to, "amount": amount}
        ))
