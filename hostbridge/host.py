"""
Reference host side, for running a bridge end-to-end in one process.

HostRouter is itself a channel primitive: hand it to HostBridge and every
outbound message is decoded, looked up by name and run on a bounded pool of
worker threads. Replies go back through the bridge's completion entry points
via `post`, which should move them onto the bridge's loop
(loop.call_soon_threadsafe).
"""
from __future__ import annotations
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Protocol as TypingProtocol
import logging
import queue
import threading

from .errors import PoolStopped, QueueFull, WireError, error_message
from .message import OutboundMessage
from .wire import decode_message, roundtrip_value

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
Post = Callable[[Callable[[], Any]], Any]


class CompletionSink(TypingProtocol):
    def complete_success(self, call_id: int, value: Any = None) -> None: ...
    def complete_failure(self, call_id: int, error: Any = None) -> None: ...


_STOP = object()


class WorkerPool:
    """Fixed set of daemon threads fed from a bounded queue. submit() never blocks."""

    def __init__(self, workers: int = 4, queue_size: int = 100):
        self.workers = max(1, int(workers))
        self._jobs: "queue.Queue[Any]" = queue.Queue(maxsize=max(1, int(queue_size)))
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()
        self.running = False

    @property
    def capacity(self) -> int:
        return self._jobs.maxsize

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self.running = True
            self._threads = [
                threading.Thread(target=self._loop, name=f"hostbridge-worker-{i}", daemon=True)
                for i in range(self.workers)
            ]
            for t in self._threads:
                t.start()

    def submit(self, job: Callable[[], Any], label: str = "job") -> None:
        if not self.running:
            raise PoolStopped(f"worker pool is shutting down, cannot submit job for {label}")
        try:
            self._jobs.put_nowait(job)
        except queue.Full:
            raise QueueFull(
                f"worker pool job queue is full (capacity: {self.capacity}), cannot submit job for {label}"
            ) from None

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """Stop accepting jobs; workers finish what is already queued, then exit."""
        with self._lock:
            if not self.running:
                return
            self.running = False
            threads, self._threads = self._threads, []
        for _ in threads:
            self._jobs.put(_STOP)
        if wait:
            for t in threads:
                t.join(timeout)

    def _loop(self) -> None:
        while True:
            job = self._jobs.get()
            if job is _STOP:
                return
            try:
                job()
            except Exception:
                logger.exception("Unhandled error in worker job")


def _call_now(fn: Callable[[], Any]) -> Any:
    return fn()


class HostRouter:

    def __init__(self, sink: CompletionSink, *, workers: int = 4, queue_size: int = 100,
                 post: Optional[Post] = None):
        self.sink = sink
        self.handlers: Dict[str, Handler] = {}
        self.pool = WorkerPool(workers, queue_size)
        self._post = post or _call_now

    def on(self, name: str, handler: Handler) -> None:
        """Register handler(*args) -> value for host function `name`."""
        self.handlers[name] = handler

    def off(self, name: str) -> None:
        self.handlers.pop(name, None)

    def serve(self, name: str) -> Callable[[Handler], Handler]:
        def _register(handler: Handler) -> Handler:
            self.on(name, handler)
            return handler
        return _register

    def start(self) -> None:
        self.pool.start()

    def stop(self, wait: bool = True) -> None:
        self.pool.stop(wait)

    def __call__(self, raw: str) -> None:
        self.handle(raw)

    def handle(self, raw: str) -> None:
        if not raw:
            logger.error("Received empty request from script")
            return
        try:
            msg = decode_message(raw)
        except WireError as e:
            logger.error("Failed to decode request from script: %s. Request: %s", e, raw)
            return

        handler = self.handlers.get(msg.func)
        if handler is None:
            logger.error("Function '%s' not registered with the host router", msg.func)
            self._reject(msg, f"Function '{msg.func}' not found")
            return

        try:
            self.pool.submit(partial(self._run, msg, handler), label=msg.func)
        except (QueueFull, PoolStopped) as e:
            logger.error("Failed to submit job for '%s' to worker pool: %s", msg.func, e)
            self._reject(msg, f"Failed to queue task for '{msg.func}': {e}")

    def _run(self, msg: OutboundMessage, handler: Handler) -> None:
        try:
            result = handler(*msg.args)
        except Exception as e:
            if msg.expects_response:
                self._reject(msg, error_message(e))
            else:
                logger.warning("Error in fire-and-forget job %s: %s", msg.func, e)
            return

        if not msg.expects_response:
            return
        try:
            value = roundtrip_value(result)
        except (TypeError, ValueError) as e:
            self._reject(msg, f"Error encoding result for {msg.func}: {e}")
            return
        logger.debug("Job %s (call %s) completed", msg.func, msg.promise_id)
        self._post(partial(self.sink.complete_success, msg.promise_id, value))

    def _reject(self, msg: OutboundMessage, text: str) -> None:
        if msg.expects_response:
            self._post(partial(self.sink.complete_failure, msg.promise_id, text))
