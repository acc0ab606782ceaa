import argparse
import os
import sys
import logging
from uvicorn import Config, Server
from ...protocol.crypto.keys import generate_private_key, load_private_key, public_key_from_private
from ...protocol.crypto.addresses import address_from_pubkey
from ...protocol.config.params import NETWORKS, get_network, UNIT
from ..core.token import RudolfToken
from ..storage.db import StorageDB
from ..rpc import api  # import module to set globals

logger = logging.getLogger(__name__)

DB_FILE = "token.db"
DEPLOYER_KEY_FILE = "deployer_key.hex"


def cmd_init(args):
    """Initialize node: deployer key, data dir and freshly deployed token."""
    data_dir = args.datadir
    os.makedirs(data_dir, exist_ok=True)
    config = get_network(args.network)

    key_path = os.path.join(data_dir, DEPLOYER_KEY_FILE)
    if not os.path.exists(key_path):
        if config.deployer_priv_key:
            # Use deterministic key for Devnet
            priv = load_private_key(config.deployer_priv_key)
            print("Using DETERMINISTIC Devnet deployer key.")
        else:
            priv = generate_private_key()
        with open(key_path, "w") as f:
            f.write(priv.hex())
        os.chmod(key_path, 0o600)
    else:
        print(f"Deployer key already exists at {key_path}")
        with open(key_path, "r") as f:
            priv = load_private_key(f.read())

    deployer = address_from_pubkey(public_key_from_private(priv), prefix=config.bech32_prefix)

    db = StorageDB(os.path.join(data_dir, DB_FILE))
    try:
        token = RudolfToken(deployer=deployer, config=config, db=db)
        print(f"Token:    {token.name()} ({token.symbol()}) on {config.network_id}")
        print(f"Owner:    {token.owner()}")
        print(f"Supply:   {token.total_supply() / UNIT:,.0f} {token.symbol()}")
        print(f"Next Xmas airdrop: {token.get_next_distribution_year()} "
              f"(t={token.get_next_distribution_time()})")
    finally:
        db.close()

    print(f"\nNode initialized in {data_dir}")


def cmd_start(args):
    data_dir = args.datadir
    db_path = os.path.join(data_dir, DB_FILE)
    if not os.path.exists(db_path):
        print(f"No token database in {data_dir}. Run 'init' first.")
        sys.exit(1)

    config = get_network(args.network)
    db = StorageDB(db_path)
    api.token = RudolfToken(config=config, db=db)

    print(f"Starting Rudolf node...")
    print(f"Data DB: {db_path}")
    print(f"RPC: {args.host}:{args.port}")

    server = Server(Config(api.app, host=args.host, port=args.port, log_level=args.log_level.lower()))
    try:
        server.run()
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Rudolf token node")
    parser.add_argument("--datadir", default=os.path.expanduser("~/.rudolf/node"), help="Data directory")
    parser.add_argument("--network", choices=sorted(NETWORKS), default=None,
                        help="Network (default: $RDF_NETWORK or devnet)")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_init = subparsers.add_parser("init", help="Create deployer key and deploy the token")
    p_init.set_defaults(func=cmd_init)

    p_start = subparsers.add_parser("start", help="Serve the RPC API")
    p_start.add_argument("--host", default="127.0.0.1")
    p_start.add_argument("--port", type=int, default=8000)
    p_start.set_defaults(func=cmd_start)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    args.func(args)


if __name__ == "__main__":
    main()
