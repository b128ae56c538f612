import asyncio
import logging

from hostbridge import ConsoleForwarder, WindowRuntime, loopback, BridgeConfig


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(run())


async def run():
    # Bridge and host in one process; the host side runs handlers on worker threads
    loop = asyncio.get_running_loop()
    bridge, router = loopback(loop=loop, config=BridgeConfig(call_timeout_s=2.0))

    @router.serve("echo")
    def echo(*args):
        return list(args)

    @router.serve("fail")
    def fail(reason):
        raise RuntimeError(reason)

    for name in ("console.debug", "console.info", "console.log", "console.warn", "console.error"):
        router.on(name, lambda *args, _n=name: print(f"[host {_n}]", *args))
    router.on("window.setTitle", lambda title: print("[host] title ->", title))

    print("echo ->", await bridge.call("echo", 1, "two", {"three": 3}))

    try:
        await bridge.call("fail", "no such file")
    except Exception as e:
        print("fail ->", type(e).__name__, e)

    try:
        await bridge.call("missing")
    except Exception as e:
        print("missing ->", type(e).__name__, e)

    ConsoleForwarder(bridge).info("hello", "from", "script")
    WindowRuntime(bridge).set_title("hostbridge demo")

    # A channel that swallows everything: the call times out after call_timeout_s
    bridge.attach_channel(lambda raw: None)
    try:
        await bridge.call("never")
    except Exception as e:
        print("never ->", type(e).__name__, e)

    await asyncio.sleep(0.1)
    router.stop()


if __name__ == "__main__":
    main()
