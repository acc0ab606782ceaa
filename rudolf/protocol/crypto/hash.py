import hashlib

ACCOUNT_ID_BYTES = 20


def sha256(data: bytes) -> bytes:
    """Returns SHA256 hash of bytes."""
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    """Returns SHA256 hash of bytes as hex string. Used for call hashes."""
    return sha256(data).hex()


def account_id(pub_bytes: bytes) -> bytes:
    """20-byte account id of a public key: SHA256(SHA256(pub))[:20]."""
    return sha256(sha256(pub_bytes))[:ACCOUNT_ID_BYTES]
