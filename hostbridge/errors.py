from __future__ import annotations
from typing import Any, Optional
import json


class BridgeError(Exception):
    """Base class for every error raised or delivered by hostbridge."""


class ChannelUnavailable(BridgeError):
    """The host channel primitive is not bound."""

    def __init__(self, func: str):
        self.func = func
        super().__init__(f"Host channel is not available. Cannot call host function: {func}")


class SendFailure(BridgeError):
    """The channel primitive (or the encoder in front of it) raised while sending."""

    def __init__(self, func: str, error: BaseException):
        self.func = func
        self.error = error
        super().__init__(f"Error invoking host channel for {func}: {error!r}")


class CallTimeout(BridgeError):
    """No reply arrived for a pending call within its window."""

    def __init__(self, func: str, timeout_s: float):
        self.func = func
        self.timeout_s = timeout_s
        super().__init__(f"Timeout waiting for response from {func} ({timeout_s:g}s)")


class HostReportedError(BridgeError):
    """The host explicitly failed a call. `payload` keeps what the host sent."""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


class WireError(BridgeError, ValueError):
    """An outbound message could not be decoded or is missing required fields."""


class QueueFull(BridgeError):
    pass


class PoolStopped(BridgeError):
    pass


def normalize_error(error: Any) -> BaseException:
    """
    Turn whatever the host reported into an exception instance.
      - exceptions pass through unchanged, except ones a Future refuses
        (StopIteration), which are wrapped
      - exception classes -> HostReportedError named after the class
      - str -> HostReportedError with exactly that message
      - anything else -> HostReportedError whose message is its compact JSON text
    """
    if isinstance(error, StopIteration):
        return refused_error(error)
    if isinstance(error, BaseException):
        return error
    if isinstance(error, type) and issubclass(error, BaseException):
        return HostReportedError(error.__name__, payload=error)
    if isinstance(error, str):
        return HostReportedError(error, payload=error)
    return HostReportedError(_json_text(error), payload=error)


def _json_text(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError):
        return str(value)


def error_message(error: Optional[BaseException]) -> str:
    # host-side replies carry plain strings
    if error is None:
        return ""
    return str(error) or type(error).__name__


def refused_error(error: BaseException) -> HostReportedError:
    """Stand-in for an exception asyncio will not put into a Future."""
    wrapped = HostReportedError(f"{type(error).__name__}: {error}" if str(error) else type(error).__name__,
                                payload=error)
    wrapped.__cause__ = error
    return wrapped
