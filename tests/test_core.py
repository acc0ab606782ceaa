import pytest
from rudolf.blockchain.core.token import RudolfToken
from rudolf.blockchain.core.events import EventBus
from rudolf.blockchain.core.ledger import MAX_ALLOWANCE
from rudolf.protocol.config.params import CURRENT_NETWORK, UNIT
from rudolf.protocol.crypto.keys import generate_private_key, public_key_from_private
from rudolf.protocol.crypto.addresses import address_from_pubkey, ZERO_ADDRESS
from rudolf.protocol.types.common import (
    InsufficientBalance, InsufficientAllowance, InvalidAddress, InvalidAmount, UnknownSnapshot
)

XMAS_2021 = 1640390400
INITIAL_SUPPLY = 4_200_000_000 * UNIT


def new_address():
    return address_from_pubkey(public_key_from_private(generate_private_key()))


@pytest.fixture
def setup():
    alice, bob, carol = new_address(), new_address(), new_address()
    bus = EventBus()
    events = []
    bus.subscribe("*", lambda **data: events.append(data))
    token = RudolfToken(deployer=alice, bus=bus, clock=lambda: XMAS_2021 - 1000,
                        deployed_at=XMAS_2021 - 1000)
    return token, events, alice, bob, carol


def test_deployment(setup):
    token, events, alice, bob, _ = setup

    assert token.total_supply() == INITIAL_SUPPLY
    assert token.balance_of(alice) == INITIAL_SUPPLY
    assert token.balance_of(bob) == 0
    assert token.decimals() == 18
    assert token.name() == CURRENT_NETWORK.token_name
    assert token.symbol() == CURRENT_NETWORK.token_symbol
    assert token.owner() == alice
    assert token.paused() is False

    assert token.get_next_distribution_year() == 2021
    assert token.get_next_distribution_time() == XMAS_2021
    assert token.get_distribution_count() == 0
    assert token.get_last_airdrop_snapshot_id() == 0
    assert token.get_current_snapshot_id() == 0

    assert [e["event_type"] for e in events] == ["OwnershipTransferred", "Transfer"]
    assert events[1]["sender"] == ZERO_ADDRESS
    assert events[1]["amount"] == INITIAL_SUPPLY


def test_deploy_requires_valid_deployer():
    with pytest.raises(InvalidAddress):
        RudolfToken(deployer=ZERO_ADDRESS, bus=EventBus(), deployed_at=0)
    with pytest.raises(InvalidAddress):
        RudolfToken(deployer="not-an-address", bus=EventBus(), deployed_at=0)
    with pytest.raises(ValueError):
        RudolfToken(bus=EventBus())


def test_transfer(setup):
    token, events, alice, bob, _ = setup
    events.clear()

    assert token.transfer(alice, bob, 100 * UNIT, now=XMAS_2021 - 10) is True
    assert token.balance_of(alice) == INITIAL_SUPPLY - 100 * UNIT
    assert token.balance_of(bob) == 100 * UNIT
    assert token.total_supply() == INITIAL_SUPPLY
    assert events == [{"event_type": "Transfer", "sender": alice, "recipient": bob, "amount": 100 * UNIT}]

    # Zero-amount transfer is allowed
    assert token.transfer(bob, alice, 0, now=XMAS_2021 - 9) is True


def test_transfer_errors(setup):
    token, events, alice, bob, carol = setup
    token.transfer(alice, bob, 50, now=XMAS_2021 - 10)
    events.clear()

    with pytest.raises(InsufficientBalance, match="exceeds balance"):
        token.transfer(bob, carol, 51, now=XMAS_2021 - 9)
    with pytest.raises(InvalidAddress):
        token.transfer(bob, ZERO_ADDRESS, 1, now=XMAS_2021 - 9)
    with pytest.raises(InvalidAmount):
        token.transfer(bob, carol, -1, now=XMAS_2021 - 9)

    assert token.balance_of(bob) == 50
    assert token.balance_of(carol) == 0
    assert events == []


def test_allowances(setup):
    token, events, alice, bob, carol = setup

    assert token.allowance(alice, bob) == 0
    token.approve(alice, bob, 100, now=XMAS_2021 - 20)
    assert token.allowance(alice, bob) == 100

    token.transfer_from(bob, alice, carol, 60, now=XMAS_2021 - 19)
    assert token.balance_of(carol) == 60
    assert token.allowance(alice, bob) == 40

    with pytest.raises(InsufficientAllowance):
        token.transfer_from(bob, alice, carol, 41, now=XMAS_2021 - 18)
    assert token.allowance(alice, bob) == 40

    with pytest.raises(InvalidAddress):
        token.approve(alice, ZERO_ADDRESS, 1, now=XMAS_2021 - 18)


def test_max_allowance_is_not_decreased(setup):
    token, _, alice, bob, carol = setup
    token.approve(alice, bob, MAX_ALLOWANCE, now=XMAS_2021 - 20)
    token.transfer_from(bob, alice, carol, 1000, now=XMAS_2021 - 19)
    assert token.allowance(alice, bob) == MAX_ALLOWANCE


def test_transfer_from_respects_owner_balance(setup):
    token, _, alice, bob, carol = setup
    token.transfer(alice, carol, 10, now=XMAS_2021 - 30)
    token.approve(carol, bob, 100, now=XMAS_2021 - 29)

    with pytest.raises(InsufficientBalance):
        token.transfer_from(bob, carol, alice, 11, now=XMAS_2021 - 28)
    assert token.allowance(carol, bob) == 100


def test_block_time_never_goes_backwards(setup):
    token, _, alice, bob, _ = setup
    token.transfer(alice, bob, 1, now=XMAS_2021)
    assert token.get_distribution_count() == 1
    assert token.state.last_block_time == XMAS_2021

    # An older timestamp is clamped to the last block time
    token.transfer(alice, bob, 1, now=XMAS_2021 - 5000)
    assert token.state.last_block_time == XMAS_2021
    assert token.get_distribution_count() == 1


def test_unknown_snapshot(setup):
    token, _, alice, _, _ = setup
    with pytest.raises(UnknownSnapshot):
        token.balance_of_at(alice, 0)
    with pytest.raises(UnknownSnapshot):
        token.balance_of_at(alice, 1)
    with pytest.raises(UnknownSnapshot):
        token.total_supply_at(1)
