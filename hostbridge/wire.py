from __future__ import annotations
from typing import Any, Dict
import json

from .errors import WireError
from .message import OutboundMessage

_SEPARATORS = (",", ":")


def encode_message(msg: OutboundMessage) -> str:
    body: Dict[str, Any] = {
        "func": msg.func,
        "args": list(msg.args),
    }
    # promiseId only travels when a reply is expected
    if msg.promise_id is not None:
        body["promiseId"] = msg.promise_id
    return json.dumps(body, separators=_SEPARATORS)


def decode_message(text: str) -> OutboundMessage:
    try:
        body = json.loads(text)
    except (TypeError, ValueError) as e:
        raise WireError(f"Malformed message: {e}") from e
    if not isinstance(body, dict):
        raise WireError("Message must be a JSON object")

    func = body.get("func")
    if not isinstance(func, str) or not func:
        raise WireError("Message 'func' must be a non-empty string")

    args = body.get("args", [])
    if args is None:
        args = []
    if not isinstance(args, list):
        raise WireError(f"Message 'args' for {func} must be an array")

    promise_id = body.get("promiseId")
    if promise_id is not None:
        if isinstance(promise_id, bool) or not isinstance(promise_id, int) or promise_id < 0:
            raise WireError(f"Message 'promiseId' for {func} must be a positive integer")
        # 0 is never issued; hosts treat it as "no reply expected"
        if promise_id == 0:
            promise_id = None

    return OutboundMessage(func=func, args=tuple(args), promise_id=promise_id)


def roundtrip_value(value: Any) -> Any:
    """Pass a host result through JSON, the way it would cross the wire."""
    return json.loads(json.dumps(value, separators=_SEPARATORS))
