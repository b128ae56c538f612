from __future__ import annotations

import logging

import pytest

from hostbridge import (
    BridgeConfig,
    CallTimeout,
    ChannelUnavailable,
    HostBridge,
    SendFailure,
)


def test_expecting_call_sends_promise_id_and_registers(bridge: HostBridge, channel) -> None:
    future = bridge.dispatch("op", [1, 2], expect_response=True)

    assert future is not None
    assert future.done() is False
    assert channel.messages == [{"func": "op", "args": [1, 2], "promiseId": 1}]
    assert bridge.pending.has_pending(1) is True


def test_fire_and_forget_sends_without_promise_id(bridge: HostBridge, channel) -> None:
    result = bridge.dispatch("notify", ["x"], expect_response=False)

    assert result is None
    assert channel.messages == [{"func": "notify", "args": ["x"]}]
    assert bridge.pending_count == 0


def test_reply_resolves_future_and_clears_entry(bridge: HostBridge, clock) -> None:
    future = bridge.dispatch("op", [1, 2], expect_response=True)

    bridge.complete_success(1, 42)

    assert future.result() == 42
    assert bridge.pending.has_pending(1) is False
    assert clock.pending == 0


def test_no_reply_times_out_after_thirty_seconds(bridge: HostBridge, clock) -> None:
    future = bridge.dispatch("op", [], expect_response=True)

    clock.advance(29.9)
    assert future.done() is False

    clock.advance(0.1)
    error = future.exception()

    assert isinstance(error, CallTimeout)
    assert error.func == "op"
    assert error.timeout_s == 30.0
    assert "op" in str(error)
    assert "30s" in str(error)
    assert bridge.pending_count == 0


def test_timeout_comes_from_config(loop, clock, channel) -> None:
    bridge = HostBridge(channel, loop=loop, scheduler=clock, config=BridgeConfig(call_timeout_s=2.5))
    future = bridge.dispatch("slow", [], expect_response=True)

    clock.advance(2.5)

    assert isinstance(future.exception(), CallTimeout)
    assert "(2.5s)" in str(future.exception())


def test_missing_channel_fails_fast_for_expecting_call(loop, clock) -> None:
    bridge = HostBridge(None, loop=loop, scheduler=clock)

    future = bridge.dispatch("op", [], expect_response=True)

    assert future.done() is True
    assert isinstance(future.exception(), ChannelUnavailable)
    assert "op" in str(future.exception())
    assert bridge.pending_count == 0
    assert bridge.ids.last == 0
    assert clock.pending == 0


def test_missing_channel_is_silent_for_fire_and_forget(loop, clock) -> None:
    bridge = HostBridge(None, loop=loop, scheduler=clock)

    assert bridge.dispatch("op", [], expect_response=False) is None
    assert bridge.pending_count == 0


def test_non_callable_channel_counts_as_missing(loop, clock) -> None:
    bridge = HostBridge("not-a-function", loop=loop, scheduler=clock)

    assert bridge.channel_available is False
    assert isinstance(bridge.call("op").exception(), ChannelUnavailable)


def test_raising_channel_is_swallowed_for_fire_and_forget(bridge: HostBridge, channel, caplog) -> None:
    channel.error = RuntimeError("bridge gone")

    with caplog.at_level(logging.ERROR, logger="hostbridge.bridge"):
        result = bridge.dispatch("fireOnly", [], expect_response=False)

    assert result is None
    assert bridge.pending_count == 0
    assert "fireOnly" in caplog.text


def test_raising_channel_fails_expecting_call_before_returning(bridge: HostBridge, channel, clock) -> None:
    boom = RuntimeError("bridge gone")
    channel.error = boom

    future = bridge.dispatch("op", [], expect_response=True)

    assert future.done() is True
    error = future.exception()
    assert isinstance(error, SendFailure)
    assert error.error is boom
    assert error.__cause__ is boom
    assert bridge.pending_count == 0
    assert clock.pending == 0


def test_unencodable_args_fail_like_a_send_failure(bridge: HostBridge, channel) -> None:
    future = bridge.dispatch("op", [object()], expect_response=True)

    assert isinstance(future.exception(), SendFailure)
    assert isinstance(future.exception().error, TypeError)
    assert channel.sent == []
    assert bridge.pending_count == 0


def test_attach_and_detach_channel(loop, clock, channel) -> None:
    bridge = HostBridge(None, loop=loop, scheduler=clock)
    bridge.attach_channel(channel)

    bridge.notify("ping")
    bridge.detach_channel()
    bridge.notify("ping")

    assert channel.messages == [{"func": "ping", "args": []}]
    assert bridge.channel_available is False


def test_call_and_notify_wrap_dispatch(bridge: HostBridge, channel) -> None:
    future = bridge.call("sum", 1, 2, 3)
    bridge.notify("log", "hi")

    assert future is not None
    assert channel.messages == [
        {"func": "sum", "args": [1, 2, 3], "promiseId": 1},
        {"func": "log", "args": ["hi"]},
    ]


def test_dispatch_without_loop_outside_running_loop_raises(channel, clock) -> None:
    bridge = HostBridge(channel, scheduler=clock)

    with pytest.raises(RuntimeError, match="no event loop"):
        bridge.dispatch("op", [], expect_response=True)
