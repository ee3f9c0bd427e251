import asyncio

import pytest


@pytest.fixture
def target():
    from ..traversal import TraversalContext

    return TraversalContext


def test_claim(target):
    ctx = target()
    assert not ctx.is_claimed("a")
    assert ctx.claim("a")
    assert not ctx.claim("a")
    assert ctx.is_claimed("a")
    ctx.clear()
    assert not ctx.is_claimed("a")


@pytest.mark.asyncio
async def test_release(target):
    ctx = target()
    assert ctx.claim("a")
    ctx.release("a")
    assert not ctx.is_claimed("a")

    async def factory():
        return "value"

    await ctx.run_once("b", factory)
    ctx.release("b")
    assert ctx.is_claimed("b")
    assert ctx.result("b") == "value"


@pytest.mark.asyncio
async def test_run_once_shares_a_single_run(target):
    ctx = target()
    calls = []
    release = asyncio.Event()

    async def factory():
        calls.append(1)
        await release.wait()
        return "value"

    first = asyncio.ensure_future(ctx.run_once("a", factory))
    second = asyncio.ensure_future(ctx.run_once("a", factory))
    await asyncio.sleep(0)
    assert ctx.is_claimed("a")
    assert ctx.result("a") is None
    release.set()
    assert await asyncio.gather(first, second) == ["value", "value"]
    assert calls == [1]
    assert ctx.result("a") == "value"
    assert await ctx.run_once("a", factory) == "value"
    assert calls == [1]


@pytest.mark.asyncio
async def test_run_once_forgets_failures(target):
    ctx = target()
    attempts = []

    async def factory():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("boom")
        return "ok"

    with pytest.raises(RuntimeError):
        await ctx.run_once("a", factory)
    await asyncio.sleep(0)
    assert not ctx.is_claimed("a")
    assert ctx.result("a") is None
    assert await ctx.run_once("a", factory) == "ok"
    assert len(attempts) == 2
