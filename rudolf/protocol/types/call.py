from pydantic import BaseModel
from typing import Optional
from ..crypto.hash import sha256_hex
from .common import CallType
from ..crypto.keys import sign as crypto_sign


class SignedCall(BaseModel):
    """An external call to the token, authenticated by the caller's key."""
    call_type: CallType
    from_address: str                    # Caller (msg.sender)
    to_address: Optional[str] = None     # Recipient, spender or new owner
    owner_address: Optional[str] = None  # Token owner for TRANSFER_FROM
    amount: int = 0
    nonce: int
    signature: str = ""  # hex ECDSA, default empty
    pub_key: str = ""    # hex public key of sender

    def hash(self) -> str:
        payload_str = (
            self.call_type.value
            + self.from_address
            + (self.to_address or "")
            + (self.owner_address or "")
            + str(self.amount)
            + str(self.nonce)
            + self.pub_key
        )
        return sha256_hex(payload_str.encode("utf-8"))

    def sign(self, priv_key_bytes: bytes):
        """Signs the call hash."""
        msg_hash = bytes.fromhex(self.hash())
        self.signature = crypto_sign(msg_hash, priv_key_bytes).hex()
