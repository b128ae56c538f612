from __future__ import annotations
from typing import Callable, Mapping, Optional, Tuple
import asyncio

from .bridge import HostBridge
from .channel import Channel
from .config import BridgeConfig
from .host import Handler, HostRouter
from .scheduler import Scheduler


def create_bridge(channel: Optional[Channel] = None,
                  *,
                  loop: Optional[asyncio.AbstractEventLoop] = None,
                  scheduler: Optional[Scheduler] = None,
                  config: Optional[BridgeConfig] = None) -> HostBridge:
    """
    One-liner factory:
      create_bridge(host_send)                       # defaults, loop picked up on first call
      create_bridge(host_send, config=BridgeConfig.from_env())
      create_bridge(None)                            # bind later with attach_channel()
    """
    return HostBridge(channel, loop=loop, scheduler=scheduler, config=config)


def loopback(handlers: Optional[Mapping[str, Handler]] = None,
             *,
             loop: asyncio.AbstractEventLoop,
             scheduler: Optional[Scheduler] = None,
             config: Optional[BridgeConfig] = None,
             auto_start: bool = True) -> Tuple[HostBridge, HostRouter]:
    """
    Bridge wired to an in-process HostRouter:
      bridge, router = loopback({"echo": lambda *a: list(a)}, loop=loop)

    - handlers: host function name -> handler(*args)
    - replies are posted back onto `loop` with call_soon_threadsafe
    - auto_start: start the router's worker threads immediately
    """
    config = config or BridgeConfig()
    bridge = HostBridge(None, loop=loop, scheduler=scheduler, config=config)
    post: Callable = loop.call_soon_threadsafe
    router = HostRouter(bridge, workers=config.host_workers,
                        queue_size=config.host_queue_size, post=post)
    if handlers:
        for name, handler in handlers.items():
            router.on(name, handler)
    bridge.attach_channel(router)
    if auto_start:
        router.start()
    return bridge, router
