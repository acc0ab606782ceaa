import os
import json
import time
from typing import List, Dict, Optional
from ..protocol.config.params import NetworkConfig, get_network
from ..protocol.crypto.keys import generate_private_key, load_private_key, public_key_from_private
from ..protocol.crypto.addresses import address_from_pubkey

KEYSTORE_DIR = os.path.expanduser("~/.rudolf/keys")

# Fields that may be printed or listed
PUBLIC_FIELDS = ("name", "address", "public_key", "network")


def public_view(key_data: Dict[str, str]) -> Dict[str, str]:
    return {k: key_data[k] for k in PUBLIC_FIELDS if k in key_data}


class KeyStore:
    """
    Signing keys of the client CLI, one JSON file per key.

    Addresses are derived with the network's bech32 prefix so they match the
    `from_address` the node recomputes from a call's pub_key.
    """

    def __init__(self, root_dir: str = KEYSTORE_DIR, config: Optional[NetworkConfig] = None):
        self.root_dir = root_dir
        self.config = config or get_network()
        os.makedirs(self.root_dir, exist_ok=True)

    def create_key(self, name: str) -> Dict[str, str]:
        """Generates and saves a new key."""
        return self._store(name, generate_private_key())

    def import_key(self, name: str, private_key_hex: str) -> Dict[str, str]:
        """Imports an existing hex private key."""
        return self._store(name, load_private_key(private_key_hex))

    def get_key(self, name: str) -> Optional[Dict[str, str]]:
        path = self._path(name)
        if not os.path.exists(path):
            return None
        with open(path, "r") as f:
            return json.load(f)

    def find_by_address(self, address: str) -> Optional[Dict[str, str]]:
        for key in self.list_keys():
            if key["address"] == address:
                return self.get_key(key["name"])
        return None

    def resolve(self, name_or_address: str) -> Optional[Dict[str, str]]:
        """Looks a key up by name first, then by address."""
        return self.get_key(name_or_address) or self.find_by_address(name_or_address)

    def list_keys(self) -> List[Dict[str, str]]:
        """Lists all keys (public fields only), sorted by name."""
        keys = []
        for filename in sorted(os.listdir(self.root_dir)):
            if filename.endswith(".json"):
                keys.append(public_view(self.get_key(filename[:-5])))
        return keys

    def delete_key(self, name: str) -> bool:
        path = self._path(name)
        if os.path.exists(path):
            os.remove(path)
            return True
        return False

    def _path(self, name: str) -> str:
        if not name or os.sep in name or name.startswith("."):
            raise ValueError(f"Invalid key name {name!r}")
        return os.path.join(self.root_dir, f"{name}.json")

    def _store(self, name: str, priv: bytes) -> Dict[str, str]:
        path = self._path(name)
        if os.path.exists(path):
            raise ValueError(f"Key '{name}' already exists")

        pub = public_key_from_private(priv)
        key_data = {
            "name": name,
            "network": self.config.network_id,
            "address": address_from_pubkey(pub, prefix=self.config.bech32_prefix),
            "public_key": pub.hex(),
            "private_key": priv.hex(),  # TODO: encrypt with a passphrase before writing
            "created_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        }
        # Owner-only permissions from creation on
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(key_data, f, indent=2)
        return key_data
