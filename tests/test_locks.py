import asyncio
import gc

from app.core.locks import KeyedLock


async def test_same_key_shares_a_lock():
    locks = KeyedLock()

    assert locks.get(1) is locks.get(1)
    assert locks.get(1) is not locks.get(2)


async def test_hold_serializes_one_key_only():
    locks = KeyedLock()
    order: list[str] = []

    async def worker(key: int, name: str) -> None:
        async with locks.hold(key):
            order.append(f"{name}-in")
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            order.append(f"{name}-out")

    await asyncio.gather(worker(1, "a"), worker(1, "b"), worker(2, "c"))

    assert order.index("a-out") < order.index("b-in")
    assert order.index("c-in") < order.index("a-out")


async def test_released_locks_are_dropped():
    locks = KeyedLock()

    async with locks.hold("spot"):
        assert len(locks) == 1

    gc.collect()
    assert len(locks) == 0
