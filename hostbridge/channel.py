from __future__ import annotations
from typing import Any, Callable, Optional

# "send serialized message to host": one string in, nothing out, may raise.
Channel = Callable[[str], None]


def channel_available(channel: Optional[Any]) -> bool:
    """Capability check: a channel is usable iff it is bound and callable."""
    return channel is not None and callable(channel)
