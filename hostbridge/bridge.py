from __future__ import annotations
from typing import Any, Optional, Sequence
import asyncio
import logging

from .channel import Channel, channel_available
from .config import BridgeConfig
from .errors import CallTimeout, ChannelUnavailable, SendFailure, normalize_error
from .ids import CallIdAllocator
from .message import Failure, OutboundMessage, Success
from .registry import PendingCall, PendingCallRegistry
from .scheduler import Scheduler
from .wire import encode_message

logger = logging.getLogger(__name__)


class HostBridge:

    # Notes:
    # - One bridge = one call-id sequence + one registry + one channel
    # - Runs on a single asyncio loop; dispatch, completions and timeouts are
    #   separate turns on that loop, so the registry is not locked.
    #   Other threads must hop over with loop.call_soon_threadsafe
    # - Fire-and-forget calls never report anything back to the caller
    # - Replies for ids that are no longer pending are logged and ignored

    def __init__(self, channel: Optional[Channel] = None, *,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 scheduler: Optional[Scheduler] = None,
                 config: Optional[BridgeConfig] = None):
        self.config = config or BridgeConfig()
        self.ids = CallIdAllocator()
        self.pending = PendingCallRegistry()
        self._channel = channel
        self._loop = loop
        self._scheduler = scheduler

    # ---- channel ----
    @property
    def channel_available(self) -> bool:
        return channel_available(self._channel)

    def attach_channel(self, channel: Channel) -> None:
        """Bind the host primitive (hosts often bind it after the page loads)."""
        self._channel = channel

    def detach_channel(self) -> None:
        self._channel = None

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    # ---- API ----
    def dispatch(self, name: str, args: Sequence[Any] = (), expect_response: bool = False) -> Optional["asyncio.Future[Any]"]:
        """
        Send `name(*args)` to the host.

        With expect_response the call gets an id, a registry entry and a
        timeout, and the returned future settles exactly once: with the host's
        value, the host's (normalized) error, CallTimeout, or SendFailure when
        the channel raised synchronously. Without it, returns None and every
        failure is logged and dropped.
        """
        channel = self._channel
        if not channel_available(channel):
            if expect_response:
                logger.error("Host channel is not available. Cannot call host function: %s", name)
                future = self._get_loop().create_future()
                future.set_exception(ChannelUnavailable(name))
                return future
            logger.debug("Host channel is not available; dropping %s", name)
            return None

        if not expect_response:
            msg = OutboundMessage(func=name, args=tuple(args))
            try:
                channel(encode_message(msg))
            except Exception:
                logger.error("Error invoking host channel for %s (no response expected)", name, exc_info=True)
            return None

        loop = self._get_loop()
        call_id = self.ids.next()
        future = loop.create_future()
        timeout_s = self.config.call_timeout_s
        timer = self._get_scheduler().call_later(timeout_s, self._expire, call_id, name, timeout_s)
        self.pending.insert(PendingCall(call_id=call_id, name=name, future=future, timer=timer))

        msg = OutboundMessage(func=name, args=tuple(args), promise_id=call_id)
        try:
            channel(encode_message(msg))
        except Exception as e:
            logger.error("Error invoking host channel for %s (expecting response)", name, exc_info=True)
            failure = SendFailure(name, e)
            failure.__cause__ = e
            self.pending.settle(call_id, Failure(failure), source="send")
        else:
            logger.debug("Dispatched %s as call %d", name, call_id)
        return future

    def call(self, name: str, *args: Any) -> "asyncio.Future[Any]":
        return self.dispatch(name, args, expect_response=True)

    def notify(self, name: str, *args: Any) -> None:
        self.dispatch(name, args, expect_response=False)

    # ---- host-facing completion entry points ----
    def complete_success(self, call_id: int, value: Any = None) -> None:
        """Host reply: resolve call_id with value. Unknown or stale ids are logged, never raised."""
        if self.pending.settle(call_id, Success(value), source="success"):
            logger.debug("Call %s resolved", call_id)

    def complete_failure(self, call_id: int, error: Any = None) -> None:
        """Host reply: fail call_id. Strings and structured values become HostReportedError."""
        if self.pending.settle(call_id, Failure(normalize_error(error)), source="failure"):
            logger.debug("Call %s rejected", call_id)

    # ---- internals ----
    def _expire(self, call_id: int, name: str, timeout_s: float) -> None:
        if self.pending.settle(call_id, Failure(CallTimeout(name, timeout_s)), source="timeout"):
            logger.warning("Call %d (%s) timed out after %gs", call_id, name, timeout_s)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                raise RuntimeError(
                    "HostBridge has no event loop: pass loop= or dispatch from a running loop"
                ) from None
        return self._loop

    def _get_scheduler(self) -> Scheduler:
        if self._scheduler is None:
            self._scheduler = self._get_loop()
        return self._scheduler
