from pydantic import BaseModel


class Account(BaseModel):
    address: str
    balance: int = 0
    # Signed-call counter (replay protection)
    nonce: int = 0
