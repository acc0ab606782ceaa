# MIT License
# Copyright (c) 2025 Hashborn

import json
import logging
import threading
import time
from typing import Any, Callable, List, Optional

from .access import AccessGuard
from .events import Event, EventBus, event_bus
from .ledger import Ledger
from .scheduler import AirdropScheduler, initial_schedule
from .state import TokenState
from .vesting import VestingLedger
from ..observability.metrics import record_events
from ..snapshot.store import SnapshotStore
from ..snapshot.types import SnapshotMetadata
from ..storage.db import StorageDB
from ...protocol.config.calendar import first_xmas_year
from ...protocol.config.params import CURRENT_NETWORK, NetworkConfig
from ...protocol.crypto.addresses import address_from_pubkey, is_valid_address, is_zero_address
from ...protocol.crypto.hash import sha256_hex
from ...protocol.crypto.keys import verify
from ...protocol.types.airdrop import AirdropRecord, VestedAmount
from ...protocol.types.call import SignedCall
from ...protocol.types.common import CallType, EventType, InvalidAddress, InvalidCall, TokenError

logger = logging.getLogger(__name__)


class TokenContext:
    """Core components wired over one TokenState for the duration of a call."""

    def __init__(self, state: TokenState, config: NetworkConfig):
        self.state = state
        self.config = config
        self.events: List[Event] = []
        self.guard = AccessGuard(state, self.events)
        self.snapshots = SnapshotStore(state)
        self.scheduler = AirdropScheduler(state, self.snapshots, config, self.events)
        self.ledger = Ledger(state, self.guard, self.snapshots, self.scheduler, self.events)
        self.vesting = VestingLedger(state, self.snapshots, self.ledger, self.guard, config, self.events)


class RudolfToken:
    """
    The Rudolf token contract.

    Every mutating call runs against a clone of the state and replaces the
    live state only if it completes, so a rejected call changes nothing and
    emits nothing. `now` is the call's block time; it defaults to the injected
    clock and never goes below the last committed block time.
    """

    def __init__(self,
                 deployer: Optional[str] = None,
                 config: Optional[NetworkConfig] = None,
                 db: Optional[StorageDB] = None,
                 bus: Optional[EventBus] = None,
                 clock: Optional[Callable[[], float]] = None,
                 deployed_at: Optional[int] = None):
        self.config = config or CURRENT_NETWORK
        self.db = db
        self.bus = bus if bus is not None else event_bus
        self.clock = clock or time.time
        self._lock = threading.RLock()

        state = TokenState.load(db) if db else None
        if state is not None:
            self.state = state
            logger.info(
                f"Token state loaded: supply {state.total_supply}, "
                f"{len(state.airdrops)} airdrop(s), next Xmas {state.schedule.next_year}"
            )
        else:
            if deployer is None:
                raise ValueError("deployer address required to deploy a new token")
            self._deploy(deployer, deployed_at)

    # --- Deployment ---
    def _deploy(self, deployer: str, deployed_at: Optional[int]):
        if not is_valid_address(deployer) or is_zero_address(deployer):
            raise InvalidAddress(f"deployer {deployer!r} is the zero address or malformed")

        deployed_at = int(self.clock()) if deployed_at is None else int(deployed_at)
        year = self.config.first_xmas_year or first_xmas_year(deployed_at)

        state = TokenState(owner=deployer, schedule=initial_schedule(year))
        ctx = TokenContext(state, self.config)
        ctx.events.append(Event(
            event_type=EventType.OWNERSHIP_TRANSFERRED,
            data={"previous_owner": None, "new_owner": deployer}
        ))
        ctx.ledger.mint(deployer, self.config.initial_supply, check_paused=False)

        self._commit(ctx, "DEPLOY", {"deployer": deployer}, deployed_at)
        logger.info(
            f"{self.config.token_name} deployed by {deployer}: supply {state.total_supply}, "
            f"first Xmas airdrop {year}"
        )

    # --- Call plumbing ---
    def _block_time(self, now: Optional[int]) -> int:
        t = int(self.clock()) if now is None else int(now)
        return max(t, self.state.last_block_time)

    def _execute(self, call_type: str, fn: Callable[[TokenContext, int], Any],
                 now: Optional[int], params: dict, call_hash: Optional[str] = None) -> Any:
        with self._lock:
            block_time = self._block_time(now)
            working = self.state.clone()
            ctx = TokenContext(working, self.config)
            try:
                result = fn(ctx, block_time)
            except TokenError as e:
                logger.debug(f"{call_type} rejected: {e.kind}: {e.reason}")
                raise

            working.last_block_time = block_time
            self._commit(ctx, call_type, params, block_time, call_hash)
            return result

    def _commit(self, ctx: TokenContext, call_type: str, params: dict,
                block_time: int, call_hash: Optional[str] = None):
        # The live state is replaced only once the write has gone through
        if self.db:
            data = json.dumps(dict(params, call_type=call_type), sort_keys=True, default=str)
            ctx.state.persist(self.db, {
                "call_hash": call_hash or sha256_hex(data.encode("utf-8")),
                "call_type": call_type,
                "block_time": block_time,
                "data": data,
            })
        self.state = ctx.state
        record_events(ctx.events)
        self.bus.publish(ctx.events)

    def _view(self) -> TokenContext:
        return TokenContext(self.state, self.config)

    # --- ERC20 ---
    def name(self) -> str:
        return self.config.token_name

    def symbol(self) -> str:
        return self.config.token_symbol

    def decimals(self) -> int:
        return self.config.decimals

    def total_supply(self) -> int:
        return self.state.total_supply

    def balance_of(self, account: str) -> int:
        return self.state.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self._view().ledger.allowance(owner, spender)

    def transfer(self, sender: str, to: str, amount: int, now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.TRANSFER.value,
            lambda ctx, t: ctx.ledger.transfer(sender, to, amount, t),
            now, {"sender": sender, "to": to, "amount": amount},
        )

    def approve(self, owner: str, spender: str, amount: int, now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.APPROVE.value,
            lambda ctx, t: ctx.ledger.approve(owner, spender, amount),
            now, {"owner": owner, "spender": spender, "amount": amount},
        )

    def transfer_from(self, spender: str, owner: str, to: str, amount: int,
                      now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.TRANSFER_FROM.value,
            lambda ctx, t: ctx.ledger.transfer_from(spender, owner, to, amount, t),
            now, {"spender": spender, "owner": owner, "to": to, "amount": amount},
        )

    # --- Snapshots ---
    def get_current_snapshot_id(self) -> int:
        return self.state.snapshots.current_id

    def get_snapshot(self, snapshot_id: int) -> SnapshotMetadata:
        return self._view().snapshots.get_snapshot(snapshot_id)

    def balance_of_at(self, account: str, snapshot_id: int) -> int:
        return self._view().snapshots.balance_at(snapshot_id, account)

    def total_supply_at(self, snapshot_id: int) -> int:
        return self._view().snapshots.total_supply_at(snapshot_id)

    # --- Xmas airdrop schedule ---
    def get_next_distribution_year(self) -> int:
        return self.state.schedule.next_year

    def get_next_distribution_time(self) -> int:
        return self.state.schedule.next_timestamp

    def get_last_airdrop_snapshot_id(self) -> int:
        return self._view().scheduler.get_last_airdrop_snapshot_id()

    def get_distribution_count(self) -> int:
        return len(self.state.airdrops)

    def get_airdrops(self) -> List[AirdropRecord]:
        return self._view().scheduler.get_airdrops()

    # --- Vesting ---
    def get_claimable_airdrop_amount_for_account(self, account: str, now: Optional[int] = None) -> int:
        with self._lock:
            return self._view().vesting.get_claimable_total(account, self._block_time(now))

    def get_vested_airdrop_amount_for_account(self, account: str,
                                              now: Optional[int] = None) -> List[VestedAmount]:
        with self._lock:
            return self._view().vesting.get_vested_schedule(account, self._block_time(now))

    def claim_airdrop(self, caller: str, now: Optional[int] = None) -> int:
        return self._execute(
            CallType.CLAIM_AIRDROP.value,
            lambda ctx, t: ctx.vesting.claim(caller, t),
            now, {"caller": caller},
        )

    # --- Access control ---
    def owner(self) -> Optional[str]:
        return self.state.owner

    def paused(self) -> bool:
        return self.state.paused

    def pause(self, caller: str, now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.PAUSE.value,
            lambda ctx, t: ctx.guard.pause(caller) or True,
            now, {"caller": caller},
        )

    def unpause(self, caller: str, now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.UNPAUSE.value,
            lambda ctx, t: ctx.guard.unpause(caller) or True,
            now, {"caller": caller},
        )

    def transfer_ownership(self, caller: str, new_owner: str, now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.TRANSFER_OWNERSHIP.value,
            lambda ctx, t: ctx.guard.transfer_ownership(caller, new_owner) or True,
            now, {"caller": caller, "new_owner": new_owner},
        )

    def renounce_ownership(self, caller: str, now: Optional[int] = None) -> bool:
        return self._execute(
            CallType.RENOUNCE_OWNERSHIP.value,
            lambda ctx, t: ctx.guard.renounce_ownership(caller) or True,
            now, {"caller": caller},
        )

    # --- Signed calls ---
    def nonce_of(self, account: str) -> int:
        return self.state.nonce_of(account)

    def execute(self, call: SignedCall, now: Optional[int] = None) -> Any:
        """
        Verify a signed call and run it as `call.from_address`.

        The nonce is consumed only if the call succeeds.
        """
        def run(ctx: TokenContext, block_time: int) -> Any:
            self._verify_call(ctx.state, call)
            ctx.state.get_account(call.from_address).nonce += 1
            return self._dispatch(ctx, call, block_time)

        return self._execute(
            call.call_type.value, run, now,
            json.loads(call.model_dump_json(exclude={"signature", "pub_key"})),
            call_hash=call.hash(),
        )

    def _verify_call(self, state: TokenState, call: SignedCall):
        if not call.signature or not call.pub_key:
            raise InvalidCall("missing signature or pub_key")

        try:
            pub_bytes = bytes.fromhex(call.pub_key)
            sig_bytes = bytes.fromhex(call.signature)
        except ValueError:
            raise InvalidCall("pub_key and signature must be hex")

        derived = address_from_pubkey(pub_bytes, prefix=self.config.bech32_prefix)
        if derived != call.from_address:
            raise InvalidCall(f"pub_key mismatch: derived {derived}, expected {call.from_address}")

        if not verify(bytes.fromhex(call.hash()), sig_bytes, pub_bytes):
            raise InvalidCall("invalid signature")

        expected = state.nonce_of(call.from_address)
        if call.nonce != expected:
            raise InvalidCall(f"invalid nonce: expected {expected}, got {call.nonce}")

    def _dispatch(self, ctx: TokenContext, call: SignedCall, block_time: int) -> Any:
        sender = call.from_address

        if call.call_type == CallType.TRANSFER:
            return ctx.ledger.transfer(sender, call.to_address, call.amount, block_time)
        elif call.call_type == CallType.APPROVE:
            return ctx.ledger.approve(sender, call.to_address, call.amount)
        elif call.call_type == CallType.TRANSFER_FROM:
            if not call.owner_address:
                raise InvalidCall("TRANSFER_FROM must provide owner_address")
            return ctx.ledger.transfer_from(sender, call.owner_address, call.to_address, call.amount, block_time)
        elif call.call_type == CallType.CLAIM_AIRDROP:
            return ctx.vesting.claim(sender, block_time)
        elif call.call_type == CallType.PAUSE:
            ctx.guard.pause(sender)
        elif call.call_type == CallType.UNPAUSE:
            ctx.guard.unpause(sender)
        elif call.call_type == CallType.TRANSFER_OWNERSHIP:
            ctx.guard.transfer_ownership(sender, call.to_address)
        elif call.call_type == CallType.RENOUNCE_OWNERSHIP:
            ctx.guard.renounce_ownership(sender)
        else:
            raise InvalidCall(f"unsupported call type {call.call_type}")
        return True
