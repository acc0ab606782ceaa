from ecdsa import SigningKey, VerifyingKey, SECP256k1, BadSignatureError # type: ignore
from ecdsa.errors import MalformedPointError # type: ignore

PRIVATE_KEY_BYTES = 32
# Raw r || s, 32 bytes each
SIGNATURE_BYTES = 64


def generate_private_key() -> bytes:
    """Generates a random 32-byte secp256k1 private key."""
    return SigningKey.generate(curve=SECP256k1).to_string()


def load_private_key(priv_hex: str) -> bytes:
    """Parses a hex private key as found in key files and network configs."""
    try:
        priv = bytes.fromhex(priv_hex.strip())
    except ValueError:
        raise ValueError("Invalid hex string")
    if len(priv) != PRIVATE_KEY_BYTES:
        raise ValueError("Invalid private key length")
    return priv


def public_key_from_private(priv_bytes: bytes) -> bytes:
    """Returns compressed 33-byte public key from private key."""
    sk = SigningKey.from_string(priv_bytes, curve=SECP256k1)
    return sk.get_verifying_key().to_string("compressed")


def _encode_rs(r, s, order) -> bytes:
    return r.to_bytes(32, 'big') + s.to_bytes(32, 'big')


def _decode_rs(sig, order):
    return int.from_bytes(sig[:32], 'big'), int.from_bytes(sig[32:], 'big')


def sign(message_hash: bytes, priv_bytes: bytes) -> bytes:
    """Signs a call hash. Returns the 64-byte (r, s) signature."""
    sk = SigningKey.from_string(priv_bytes, curve=SECP256k1)
    return sk.sign_digest(message_hash, sigencode=_encode_rs)


def verify(message_hash: bytes, signature: bytes, pub_bytes: bytes) -> bool:
    """True if `signature` over `message_hash` was made by the key of `pub_bytes`."""
    if len(signature) != SIGNATURE_BYTES:
        return False
    try:
        vk = VerifyingKey.from_string(pub_bytes, curve=SECP256k1)
        return vk.verify_digest(signature, message_hash, sigdecode=_decode_rs)
    except (BadSignatureError, MalformedPointError, ValueError):
        return False
