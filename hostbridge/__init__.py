"""
Public API:
- HostBridge: call correlation (dispatch, complete_success, complete_failure)
- create_bridge, loopback: factories
- BridgeConfig: timeout and loopback pool settings
- ConsoleForwarder, HostLogHandler, install_log_mirror: log mirroring to the host
- WindowRuntime: window.* convenience calls
- HostRouter, WorkerPool: in-process reference host
- ManualScheduler: simulated-time scheduler for deterministic timeouts
- OutboundMessage, encode_message, decode_message: wire format
- errors: BridgeError and subclasses, normalize_error
"""
import logging

# Core
from .bridge import HostBridge
from .config import BridgeConfig
from .factory import create_bridge, loopback

# Consumers
from .console import ConsoleForwarder, HostLogHandler, install_log_mirror
from .window import WindowRuntime

# Host side
from .host import HostRouter, WorkerPool

# Building blocks
from .ids import CallIdAllocator
from .message import Failure, OutboundMessage, Success
from .registry import PendingCall, PendingCallRegistry
from .scheduler import ManualScheduler, Scheduler
from .wire import decode_message, encode_message

from .errors import (
    BridgeError,
    CallTimeout,
    ChannelUnavailable,
    HostReportedError,
    PoolStopped,
    QueueFull,
    SendFailure,
    WireError,
    normalize_error,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "HostBridge",
    "BridgeConfig",
    "create_bridge",
    "loopback",
    "ConsoleForwarder",
    "HostLogHandler",
    "install_log_mirror",
    "WindowRuntime",
    "HostRouter",
    "WorkerPool",
    "CallIdAllocator",
    "OutboundMessage",
    "Success",
    "Failure",
    "PendingCall",
    "PendingCallRegistry",
    "ManualScheduler",
    "Scheduler",
    "encode_message",
    "decode_message",
    "BridgeError",
    "CallTimeout",
    "ChannelUnavailable",
    "HostReportedError",
    "PoolStopped",
    "QueueFull",
    "SendFailure",
    "WireError",
    "normalize_error",
]

__version__ = "0.1.0"
