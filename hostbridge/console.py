"""
Mirror local logging to the host.

Local output always happens first; the mirror is best effort and can never
raise into, or recurse through, the caller's logging.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
import json
import logging
import threading

from .bridge import HostBridge

# severity -> local logging level
SEVERITIES: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "log": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

SCRIPT_LOGGER = "script.console"

# set on records ConsoleForwarder already mirrors, so HostLogHandler skips them
MIRRORED_ATTR = "hostbridge_mirrored"


def host_function(severity: str) -> str:
    return f"console.{severity}"


def _mirror_arg(arg: Any) -> Any:
    try:
        json.dumps(arg)
    except (TypeError, ValueError):
        return str(arg)
    return arg


def _mirror(bridge: HostBridge, severity: str, args: tuple) -> None:
    if not bridge.channel_available:
        return
    try:
        bridge.dispatch(host_function(severity), [_mirror_arg(a) for a in args], expect_response=False)
    except Exception:
        # never let the mirror disturb the caller
        pass


class ConsoleForwarder:
    """console-style logger: debug/info/log/warn/error(*args)."""

    def __init__(self, bridge: HostBridge, logger: Optional[logging.Logger] = None):
        self.bridge = bridge
        self.logger = logger or logging.getLogger(SCRIPT_LOGGER)

    def _emit(self, severity: str, args: tuple) -> None:
        self.logger.log(SEVERITIES[severity], " ".join(str(a) for a in args), extra={MIRRORED_ATTR: True})
        _mirror(self.bridge, severity, args)

    def debug(self, *args: Any) -> None:
        self._emit("debug", args)

    def info(self, *args: Any) -> None:
        self._emit("info", args)

    def log(self, *args: Any) -> None:
        self._emit("log", args)

    def warn(self, *args: Any) -> None:
        self._emit("warn", args)

    def error(self, *args: Any) -> None:
        self._emit("error", args)


def severity_for(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    return "debug"


class HostLogHandler(logging.Handler):
    """
    logging.Handler that mirrors records to the host as console.<severity>.
    Records from hostbridge's own loggers and records ConsoleForwarder has
    already mirrored are skipped, as is anything logged
    while a mirror is already in progress on the same thread.
    """

    def __init__(self, bridge: HostBridge, level: int = logging.NOTSET):
        super().__init__(level)
        self.bridge = bridge
        self._local = threading.local()

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "hostbridge" or record.name.startswith("hostbridge."):
            return
        if getattr(record, MIRRORED_ATTR, False):
            return
        if getattr(self._local, "busy", False):
            return
        self._local.busy = True
        try:
            message = self.format(record)
            _mirror(self.bridge, severity_for(record.levelno), (message,))
        except Exception:
            self.handleError(record)
        finally:
            self._local.busy = False


def install_log_mirror(bridge: HostBridge, target: Optional[logging.Logger] = None,
                       level: int = logging.NOTSET) -> HostLogHandler:
    """Attach a HostLogHandler to `target` (root logger by default) and return it."""
    handler = HostLogHandler(bridge, level)
    (target or logging.getLogger()).addHandler(handler)
    return handler
