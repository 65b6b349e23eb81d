# test_shared_states.py

import asyncio

import pytest

from api.models.schemas import ServerConfig
from shared_states import BotContext, EventLockRegistry


@pytest.mark.asyncio
async def test_lock_registry_holds_one_lock_per_message():
    locks = EventLockRegistry()
    async with locks.hold(1):
        assert locks.is_locked("1")
        assert not locks.is_locked("2")
        assert len(locks) == 1
    assert not locks.is_locked("1")


@pytest.mark.asyncio
async def test_lock_registry_forgets_released_locks():
    locks = EventLockRegistry()
    for message_id in range(100):
        async with locks.hold(message_id):
            pass
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_registry_forgets_lock_after_error():
    locks = EventLockRegistry()
    with pytest.raises(RuntimeError):
        async with locks.hold("1"):
            raise RuntimeError("boom")
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_registry_serializes_same_message():
    locks = EventLockRegistry()
    order = []

    async def worker(name):
        async with locks.hold("1"):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"), worker("c"))

    assert order == ["a-in", "a-out", "b-in", "b-out", "c-in", "c-out"]
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_registry_keeps_lock_while_waiters_remain():
    locks = EventLockRegistry()
    first_in = asyncio.Event()
    release_first = asyncio.Event()

    async def first():
        async with locks.hold("1"):
            first_in.set()
            await release_first.wait()

    async def second():
        async with locks.hold("1"):
            assert len(locks) == 1

    task_a = asyncio.create_task(first())
    await first_in.wait()
    task_b = asyncio.create_task(second())
    await asyncio.sleep(0)
    release_first.set()
    await asyncio.gather(task_a, task_b)

    assert len(locks) == 0


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_leak_lock():
    locks = EventLockRegistry()

    async def waiter():
        async with locks.hold("1"):
            pass

    async with locks.hold("1"):
        task = asyncio.create_task(waiter())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_different_events_do_not_block_each_other():
    locks = EventLockRegistry()
    async with locks.hold("1"):
        async def other():
            async with locks.hold("2"):
                return True
        assert await asyncio.wait_for(other(), timeout=1)


@pytest.mark.asyncio
async def test_context_server_config_lookup(store, chat):
    await store.create_config("1", "10", "frFR")
    context = BotContext(store, store, chat, 999)

    await context.load_server_configs()

    assert context.bot_id == "999"
    assert isinstance(context.get_server_config(1), ServerConfig)
    assert context.lang_for_server("1") == "frFR"
    assert context.lang_for_server("2") == "enEN"
    assert context.lang_for_server(None) == "enEN"


def test_context_default_emojis(store, chat):
    context = BotContext(store, store, chat, 999, emojis={"valid": "👍"})
    assert context.emoji_valid == "👍"
    assert context.emoji_invalid == "❌"
    assert context.emoji_delete == "🗑️"


@pytest.mark.asyncio
async def test_context_close_closes_store(store, chat):
    context = BotContext(store, store, chat, 999)
    await context.close()
    assert store.closed


def test_context_start_time_is_aware(store, chat):
    context = BotContext(store, store, chat, 999)
    assert context.start_time.tzinfo is not None
