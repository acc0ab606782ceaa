import bech32 # type: ignore
from typing import Tuple, Optional
from .hash import account_id, ACCOUNT_ID_BYTES
from ..config.params import DENOM

ADDRESS_BYTES = ACCOUNT_ID_BYTES


def address_from_bytes(h20: bytes, prefix: str = DENOM) -> str:
    """Bech32-encodes a 20-byte account id."""
    if len(h20) != ADDRESS_BYTES:
        raise ValueError(f"Account id must be {ADDRESS_BYTES} bytes, got {len(h20)}")
    five_bit_r = bech32.convertbits(h20, 8, 5)
    if five_bit_r is None:
        raise ValueError("Error converting to bech32 words")
    return bech32.bech32_encode(prefix, five_bit_r)


def address_from_pubkey(pub_bytes: bytes, prefix: str = DENOM) -> str:
    """Creates Bech32 address from public key."""
    return address_from_bytes(account_id(pub_bytes), prefix=prefix)


def decode_address(addr: str) -> Tuple[str, bytes]:
    """Decodes Bech32 address to (prefix, h20_bytes)."""
    hrp, data = bech32.bech32_decode(addr)
    if hrp is None or data is None:
        raise ValueError("Invalid bech32 address")

    decoded = bech32.convertbits(data, 5, 8, False)
    if decoded is None or len(decoded) != ADDRESS_BYTES:
        raise ValueError("Error converting from bech32 words")

    return hrp, bytes(decoded)


def is_valid_address(addr: str, expected_prefix: Optional[str] = None) -> bool:
    if not isinstance(addr, str) or not addr:
        return False
    try:
        hrp, _ = decode_address(addr)
        if expected_prefix and hrp != expected_prefix:
            return False
        return True
    except ValueError:
        return False


# Mint source / burn sink; never a valid recipient or owner
ZERO_ADDRESS = address_from_bytes(b"\x00" * ADDRESS_BYTES)


def is_zero_address(addr: str) -> bool:
    if not is_valid_address(addr):
        return False
    return decode_address(addr)[1] == b"\x00" * ADDRESS_BYTES
