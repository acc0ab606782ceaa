# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import sys
import json
import os
from decimal import Decimal
import requests
from .keystore import KeyStore, public_view
from ..protocol.types.call import SignedCall
from ..protocol.types.common import CallType
from ..protocol.config.params import DECIMALS
from ..protocol.crypto.keys import load_private_key

DEFAULT_NODE = "http://localhost:8000"


def get_node_url(args):
    return args.node or os.environ.get("RDF_NODE", DEFAULT_NODE)


def to_units(amount: str) -> int:
    return int(Decimal(amount) * 10**DECIMALS)


def format_units(units) -> str:
    return f"{Decimal(int(units)) / 10**DECIMALS:f}"


def fetch(url: str) -> dict:
    try:
        resp = requests.get(url, timeout=10)
    except requests.RequestException as e:
        print(f"Connection error: {e}")
        sys.exit(1)
    if resp.status_code != 200:
        print(f"Error: {resp.text}")
        sys.exit(1)
    return resp.json()


# --- Keys Commands ---
def cmd_keys_add(args):
    ks = KeyStore()
    try:
        key = ks.create_key(args.name)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"Key '{args.name}' created.")
    print(f"Address: {key['address']}")
    print(f"Pubkey:  {key['public_key']}")
    print("Important: Private key saved unencrypted. Do not share!")


def cmd_keys_import(args):
    ks = KeyStore()
    try:
        key = ks.import_key(args.name, args.private_key)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"Key '{args.name}' imported.")
    print(f"Address: {key['address']}")


def cmd_keys_list(args):
    keys = KeyStore().list_keys()
    if not keys:
        print("No keys found.")
        return

    print(f"{'Name':<15} {'Address':<45}")
    print("-" * 60)
    for k in keys:
        print(f"{k['name']:<15} {k['address']:<45}")


def cmd_keys_show(args):
    key = KeyStore().resolve(args.name)
    if not key:
        print(f"Key '{args.name}' not found.")
        sys.exit(1)
    print(json.dumps(public_view(key), indent=2))


def cmd_keys_delete(args):
    try:
        deleted = KeyStore().delete_key(args.name)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    if not deleted:
        print(f"Key '{args.name}' not found.")
        sys.exit(1)
    print(f"Key '{args.name}' deleted.")


# --- Query Commands ---
def cmd_query_balance(args):
    data = fetch(f"{get_node_url(args)}/balance/{args.address}")
    print(f"Balance: {format_units(data['balance'])}")
    print(f"Nonce: {data['nonce']}")


def cmd_query_supply(args):
    data = fetch(f"{get_node_url(args)}/supply")
    print(f"Total supply: {format_units(data['total_supply'])}")


def cmd_query_schedule(args):
    data = fetch(f"{get_node_url(args)}/airdrop/schedule")
    print(f"Next Xmas airdrop: {data['next_year']} (t={data['next_time']})")
    print(f"Distributions so far: {data['distribution_count']}")
    print(f"Last airdrop snapshot: {data['last_snapshot_id']}")


def cmd_query_claimable(args):
    data = fetch(f"{get_node_url(args)}/airdrop/claimable/{args.address}")
    print(f"Claimable: {format_units(data['claimable'])}")


def cmd_query_vested(args):
    data = fetch(f"{get_node_url(args)}/airdrop/vested/{args.address}")
    if not data['vested']:
        print("Nothing vested.")
        return
    print(f"{'Release time':<15} {'Amount'}")
    print("-" * 50)
    for v in data['vested']:
        print(f"{v['release_time']:<15} {format_units(v['amount'])}")
    print(f"Total vested: {format_units(data['total_vested'])}")


# --- Tx Commands ---
def send_call(args, call_type: CallType, to_address=None, owner_address=None, amount=0):
    sender_key = KeyStore().resolve(args.from_name)
    if not sender_key:
        print(f"Key '{args.from_name}' not found.")
        sys.exit(1)

    url = get_node_url(args)
    from_addr = sender_key['address']
    nonce = fetch(f"{url}/balance/{from_addr}")['nonce']

    call = SignedCall(
        call_type=call_type,
        from_address=from_addr,
        to_address=to_address,
        owner_address=owner_address,
        amount=amount,
        nonce=nonce,
        pub_key=sender_key['public_key'],
    )
    call.sign(load_private_key(sender_key['private_key']))

    try:
        resp = requests.post(f"{url}/call", json=json.loads(call.model_dump_json()), timeout=10)
    except requests.RequestException as e:
        print(f"Connection error: {e}")
        sys.exit(1)
    if resp.status_code != 200:
        print(f"Error: {resp.text}")
        sys.exit(1)
    res = resp.json()
    print(f"Success! CallHash: {res['call_hash']}")
    return res


def cmd_tx_transfer(args):
    print(f"Sending {args.amount} to {args.to_address}...")
    send_call(args, CallType.TRANSFER, to_address=args.to_address, amount=to_units(args.amount))


def cmd_tx_approve(args):
    send_call(args, CallType.APPROVE, to_address=args.spender, amount=to_units(args.amount))


def cmd_tx_transfer_from(args):
    send_call(args, CallType.TRANSFER_FROM, to_address=args.to_address,
              owner_address=args.owner, amount=to_units(args.amount))


def cmd_tx_claim(args):
    res = send_call(args, CallType.CLAIM_AIRDROP)
    print(f"Claimed: {format_units(res['result'])}")


def cmd_tx_pause(args):
    send_call(args, CallType.PAUSE)


def cmd_tx_unpause(args):
    send_call(args, CallType.UNPAUSE)


def cmd_tx_transfer_ownership(args):
    send_call(args, CallType.TRANSFER_OWNERSHIP, to_address=args.new_owner)


def cmd_tx_renounce_ownership(args):
    send_call(args, CallType.RENOUNCE_OWNERSHIP)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rudolf token CLI")
    parser.add_argument("--node", help="Node RPC URL (default: $RDF_NODE or localhost:8000)")
    subparsers = parser.add_subparsers(dest="group", required=True)

    # Keys
    keys = subparsers.add_parser("keys", help="Manage local keys").add_subparsers(dest="command", required=True)
    p = keys.add_parser("add")
    p.add_argument("name")
    p.set_defaults(func=cmd_keys_add)
    p = keys.add_parser("import")
    p.add_argument("name")
    p.add_argument("--private-key", required=True)
    p.set_defaults(func=cmd_keys_import)
    p = keys.add_parser("list")
    p.set_defaults(func=cmd_keys_list)
    p = keys.add_parser("show")
    p.add_argument("name")
    p.set_defaults(func=cmd_keys_show)
    p = keys.add_parser("delete")
    p.add_argument("name")
    p.set_defaults(func=cmd_keys_delete)

    # Query
    query = subparsers.add_parser("query", help="Read token state").add_subparsers(dest="command", required=True)
    p = query.add_parser("balance")
    p.add_argument("address")
    p.set_defaults(func=cmd_query_balance)
    p = query.add_parser("supply")
    p.set_defaults(func=cmd_query_supply)
    p = query.add_parser("schedule")
    p.set_defaults(func=cmd_query_schedule)
    p = query.add_parser("claimable")
    p.add_argument("address")
    p.set_defaults(func=cmd_query_claimable)
    p = query.add_parser("vested")
    p.add_argument("address")
    p.set_defaults(func=cmd_query_vested)

    # Tx
    tx = subparsers.add_parser("tx", help="Send signed calls").add_subparsers(dest="command", required=True)
    p = tx.add_parser("transfer")
    p.add_argument("to_address")
    p.add_argument("amount", help="Amount in whole tokens")
    p.set_defaults(func=cmd_tx_transfer)
    p = tx.add_parser("approve")
    p.add_argument("spender")
    p.add_argument("amount")
    p.set_defaults(func=cmd_tx_approve)
    p = tx.add_parser("transfer-from")
    p.add_argument("owner")
    p.add_argument("to_address")
    p.add_argument("amount")
    p.set_defaults(func=cmd_tx_transfer_from)
    p = tx.add_parser("claim")
    p.set_defaults(func=cmd_tx_claim)
    p = tx.add_parser("pause")
    p.set_defaults(func=cmd_tx_pause)
    p = tx.add_parser("unpause")
    p.set_defaults(func=cmd_tx_unpause)
    p = tx.add_parser("transfer-ownership")
    p.add_argument("new_owner")
    p.set_defaults(func=cmd_tx_transfer_ownership)
    p = tx.add_parser("renounce-ownership")
    p.set_defaults(func=cmd_tx_renounce_ownership)

    for sub in tx.choices.values():
        sub.add_argument("--from", dest="from_name", required=True, help="Key name or address to sign with")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
