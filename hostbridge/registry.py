from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import asyncio
import logging

from .errors import refused_error
from .message import Failure, Success
from .scheduler import TimerHandle

logger = logging.getLogger(__name__)

Outcome = Union[Success, Failure]


@dataclass
class PendingCall:
    call_id: int
    name: str                              # host function the call went to
    future: "asyncio.Future[Any]"
    timer: Optional[TimerHandle] = None    # timeout action; cancelled when a reply wins

    def settle(self, outcome: Outcome) -> None:
        if self.timer is not None:
            self.timer.cancel()
        if self.future.done():
            # caller cancelled the future; nothing left to deliver to
            logger.debug("Dropping outcome for call %d (%s): future already done", self.call_id, self.name)
            return
        if isinstance(outcome, Failure):
            try:
                outcome.apply(self.future)
            except TypeError:
                # set_exception refuses some errors (StopIteration); fail with a wrapper instead
                logger.warning("Call %d (%s): host error %r cannot be delivered as-is", self.call_id, self.name, outcome.error)
                self.future.set_exception(refused_error(outcome.error))
            return
        outcome.apply(self.future)


class PendingCallRegistry:
    """
    In-flight calls keyed by call id.

    take_and_remove() is the only way out of the registry, and settle() is the
    only caller of it on the completion paths (reply, host failure, timeout,
    send failure). Whichever path gets there first completes the call; the
    others find nothing and only log.
    """

    def __init__(self):
        self._calls: Dict[int, PendingCall] = {}

    def insert(self, call: PendingCall) -> None:
        if call.call_id in self._calls:
            raise ValueError(f"Call id {call.call_id} is already pending")
        self._calls[call.call_id] = call

    def take_and_remove(self, call_id: int) -> Optional[PendingCall]:
        return self._calls.pop(call_id, None)

    def has_pending(self, call_id: int) -> bool:
        return call_id in self._calls

    def settle(self, call_id: int, outcome: Outcome, *, source: str = "reply") -> bool:
        """Complete call_id with outcome if it is still pending. Returns True if this settled it."""
        call = self.take_and_remove(call_id)
        if call is None:
            if source == "timeout":
                logger.debug("Timeout fired for call %s after it was already completed", call_id)
            else:
                logger.warning("Could not complete call %s from %s: id not pending (%r)", call_id, source, outcome)
            return False
        call.settle(outcome)
        return True

    def pending_ids(self) -> List[int]:
        return sorted(self._calls)

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._calls

    def __len__(self) -> int:
        return len(self._calls)
