from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple
import asyncio


@dataclass(frozen=True)
class OutboundMessage:
    """
    One script -> host call. On the wire: {"func", "args", "promiseId"?}.
    promise_id is set iff the caller expects a reply.
    """
    func: str                              # host-side operation name, opaque to the bridge
    args: Tuple[Any, ...] = field(default_factory=tuple)
    promise_id: Optional[int] = None       # correlation id for the reply

    @property
    def expects_response(self) -> bool:
        return self.promise_id is not None


@dataclass(frozen=True)
class Success:
    value: Any

    def apply(self, future: "asyncio.Future[Any]") -> None:
        future.set_result(self.value)


@dataclass(frozen=True)
class Failure:
    error: BaseException

    def apply(self, future: "asyncio.Future[Any]") -> None:
        future.set_exception(self.error)
