from __future__ import annotations
from typing import Any, Optional
import asyncio

from .bridge import HostBridge


class WindowRuntime:
    """
    Window controls owned by the host. Each method forwards straight to a
    window.* host function; arguments are checked on the host side, not here.
    Returns a future when built with expect_response=True, else None.
    """

    def __init__(self, bridge: HostBridge, expect_response: bool = False):
        self.bridge = bridge
        self.expect_response = expect_response

    def _call(self, func: str, *args: Any) -> Optional["asyncio.Future[Any]"]:
        return self.bridge.dispatch(func, args, expect_response=self.expect_response)

    def set_title(self, title: str):
        return self._call("window.setTitle", title)

    def set_size(self, width: int, height: int):
        return self._call("window.setSize", width, height)

    def set_fullscreen(self, fullscreen: bool):
        return self._call("window.setFullscreen", fullscreen)

    def set_frameless(self, frameless: bool):
        return self._call("window.setFrameless", frameless)

    def begin_drag_at(self, x: int, y: int):
        return self._call("window.beginDragAt", x, y)

    def minimize(self):
        return self._call("window.minimize")

    def maximize(self):
        return self._call("window.maximize")

    def restore(self):
        return self._call("window.restore")

    def close(self):
        return self._call("window.close")
