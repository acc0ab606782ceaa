from enum import Enum


class CallType(str, Enum):
    TRANSFER = "TRANSFER"
    APPROVE = "APPROVE"
    TRANSFER_FROM = "TRANSFER_FROM"
    CLAIM_AIRDROP = "CLAIM_AIRDROP"

    # Owner-only
    PAUSE = "PAUSE"
    UNPAUSE = "UNPAUSE"
    TRANSFER_OWNERSHIP = "TRANSFER_OWNERSHIP"
    RENOUNCE_OWNERSHIP = "RENOUNCE_OWNERSHIP"


class EventType(str, Enum):
    TRANSFER = "Transfer"
    APPROVAL = "Approval"
    SNAPSHOT = "Snapshot"
    XMAS_AIRDROP = "XmasAirdrop"
    AIRDROP_CLAIMED = "AirdropClaimed"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
    PAUSED = "Paused"
    UNPAUSED = "Unpaused"


class ProtocolError(Exception):
    pass


class TokenError(ProtocolError):
    """Rejected call. Nothing was changed; the caller may retry once the condition is fixed."""

    default_reason = "call rejected"

    def __init__(self, reason: str = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)

    @property
    def kind(self) -> str:
        return type(self).__name__


class InsufficientBalance(TokenError):
    default_reason = "transfer amount exceeds balance"


class InsufficientAllowance(TokenError):
    default_reason = "insufficient allowance"


class Paused(TokenError):
    default_reason = "paused"


class NotPaused(TokenError):
    default_reason = "not paused"


class Unauthorized(TokenError):
    default_reason = "caller is not the owner"


class InvalidOwner(TokenError):
    default_reason = "new owner is the zero address"


class InvalidAddress(TokenError):
    default_reason = "invalid address"


class InvalidAmount(TokenError):
    default_reason = "amount must be a non-negative integer"


class NothingToClaim(TokenError):
    default_reason = "nothing to claim"


class UnknownSnapshot(TokenError):
    default_reason = "nonexistent snapshot id"


class InvalidCall(TokenError):
    default_reason = "invalid call"
