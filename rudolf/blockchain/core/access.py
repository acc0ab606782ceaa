import logging
from typing import List, Optional
from .events import Event
from ...protocol.types.common import EventType, Paused, NotPaused, Unauthorized, InvalidOwner
from ...protocol.crypto.addresses import is_valid_address, is_zero_address

logger = logging.getLogger(__name__)


class AccessGuard:
    """Single transferable/renounceable owner plus the pause flag."""

    def __init__(self, state, events: List[Event]):
        self.state = state
        self.events = events

    def owner(self) -> Optional[str]:
        return self.state.owner

    def paused(self) -> bool:
        return self.state.paused

    def require_owner(self, caller: str):
        # After renouncement nobody passes
        if self.state.owner is None or caller != self.state.owner:
            raise Unauthorized()

    def require_not_paused(self):
        if self.state.paused:
            raise Paused()

    def transfer_ownership(self, caller: str, new_owner: str):
        self.require_owner(caller)
        if not is_valid_address(new_owner) or is_zero_address(new_owner):
            raise InvalidOwner(f"new owner {new_owner!r} is the zero address or malformed")
        self._set_owner(new_owner)

    def renounce_ownership(self, caller: str):
        self.require_owner(caller)
        self._set_owner(None)

    def pause(self, caller: str):
        self.require_owner(caller)
        self.require_not_paused()
        self.state.paused = True
        self.events.append(Event(event_type=EventType.PAUSED, data={"account": caller}))
        logger.info(f"Token paused by {caller}")

    def unpause(self, caller: str):
        self.require_owner(caller)
        if not self.state.paused:
            raise NotPaused()
        self.state.paused = False
        self.events.append(Event(event_type=EventType.UNPAUSED, data={"account": caller}))
        logger.info(f"Token unpaused by {caller}")

    def _set_owner(self, new_owner: Optional[str]):
        previous = self.state.owner
        self.state.owner = new_owner
        self.events.append(Event(
            event_type=EventType.OWNERSHIP_TRANSFERRED,
            data={"previous_owner": previous, "new_owner": new_owner}
        ))
        logger.info(f"Ownership transferred: {previous} -> {new_owner or 'none'}")
