import json
import sqlite3
import pytest
from rudolf.blockchain.core.token import RudolfToken
from rudolf.blockchain.core.events import EventBus
from rudolf.blockchain.core.state import TokenState
from rudolf.blockchain.storage.db import StorageDB
from rudolf.protocol.crypto.keys import generate_private_key, public_key_from_private
from rudolf.protocol.crypto.addresses import address_from_pubkey
from rudolf.protocol.types.common import InsufficientBalance

XMAS_2021 = 1640390400
MONTH = 2_628_000


def new_address():
    return address_from_pubkey(public_key_from_private(generate_private_key()))


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "token.db")


def test_state_survives_restart(db_path):
    alice, bob = new_address(), new_address()

    db = StorageDB(db_path)
    token = RudolfToken(deployer=alice, db=db, bus=EventBus(), deployed_at=XMAS_2021 - 1000)
    token.transfer(alice, bob, 500, now=XMAS_2021)
    token.approve(alice, bob, 42, now=XMAS_2021 + 1)
    claimed = token.claim_airdrop(alice, now=XMAS_2021 + 2 * MONTH)
    db.close()

    db = StorageDB(db_path)
    restored = RudolfToken(db=db, bus=EventBus())

    assert restored.balance_of(bob) == 500
    assert restored.total_supply() == token.total_supply()
    assert restored.allowance(alice, bob) == 42
    assert restored.owner() == alice
    assert restored.get_distribution_count() == 1
    assert restored.get_next_distribution_year() == 2022
    assert restored.balance_of_at(alice, 1) == token.balance_of_at(alice, 1)
    assert restored.state.claims == {alice: {1: 3}}
    assert restored.state.last_block_time == XMAS_2021 + 2 * MONTH
    assert restored.get_claimable_airdrop_amount_for_account(alice, now=XMAS_2021 + 2 * MONTH) == 0
    assert claimed > 0
    db.close()


def test_journal_records_committed_calls_only(db_path):
    alice, bob = new_address(), new_address()
    db = StorageDB(db_path)
    token = RudolfToken(deployer=alice, db=db, bus=EventBus(), deployed_at=XMAS_2021 - 1000)
    token.transfer(alice, bob, 5, now=XMAS_2021 - 10)

    with pytest.raises(InsufficientBalance):
        token.transfer(bob, alice, 6, now=XMAS_2021 - 9)

    assert db.count_calls() == 2
    calls = db.get_calls()
    assert [c["call_type"] for c in calls] == ["TRANSFER", "DEPLOY"]
    assert calls[0]["block_time"] == XMAS_2021 - 10
    assert json.loads(calls[0]["data"])["amount"] == 5
    db.close()


def test_rejected_call_leaves_stored_state_untouched(db_path):
    alice, bob = new_address(), new_address()
    db = StorageDB(db_path)
    token = RudolfToken(deployer=alice, db=db, bus=EventBus(), deployed_at=XMAS_2021 - 1000)
    stored_before = db.get_state("token_state")

    with pytest.raises(InsufficientBalance):
        token.transfer(bob, alice, 1, now=XMAS_2021)

    assert db.get_state("token_state") == stored_before
    assert TokenState.load(db).airdrops == []
    db.close()


def test_failed_write_keeps_live_state(db_path):
    alice, bob = new_address(), new_address()
    db = StorageDB(db_path)
    bus = EventBus()
    seen = []
    bus.subscribe("*", lambda **kw: seen.append(kw))
    token = RudolfToken(deployer=alice, db=db, bus=bus, deployed_at=XMAS_2021 - 1000)
    seen.clear()
    db.conn.close()

    with pytest.raises(sqlite3.Error):
        token.transfer(alice, bob, 5, now=XMAS_2021)

    assert token.balance_of(bob) == 0
    assert token.get_distribution_count() == 0
    assert token.get_next_distribution_year() == 2021
    assert token.get_airdrops() == []
    assert token.state.last_block_time == 0
    assert seen == []


def test_load_from_empty_db(db_path):
    db = StorageDB(db_path)
    assert TokenState.load(db) is None
    assert db.get_state("token_state") is None
    assert db.count_calls() == 0
    db.close()
