import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from rnseanomaly.common.adapters.stores.memory import MemoryResultStore
from rnseanomaly.common.dataclasses import AnomalyFlag, TimeSeries
from rnseanomaly.common.exceptions import NotFound

SERIES = TimeSeries(values=tuple(float(i) for i in range(10)))


@pytest.fixture
def store():
    return MemoryResultStore()


@pytest.mark.asyncio
async def test_create_and_get(store):
    flags = (AnomalyFlag(index=3, confidence=0.8),)
    record_id = await store.create("alice", "a.csv", SERIES, flags, {"scorer": "baseline"})

    record = await store.get("alice", record_id)

    assert record.record_id == record_id
    assert record.series == SERIES
    assert record.flags == flags
    assert record.anomaly_count == 1
    assert record.parameters == {"scorer": "baseline"}


@pytest.mark.asyncio
async def test_foreign_record_is_not_found(store):
    record_id = await store.create("alice", "a.csv", SERIES, ())

    with pytest.raises(NotFound):
        await store.get("bob", record_id)


@pytest.mark.asyncio
async def test_missing_record_is_not_found(store):
    with pytest.raises(NotFound):
        await store.get("alice", "does-not-exist")


@pytest.mark.asyncio
async def test_list_newest_first_and_scoped(store):
    first = await store.create("alice", "first.csv", SERIES, ())
    second = await store.create("alice", "second.csv", SERIES, (AnomalyFlag(1, 0.9),))
    await store.create("bob", "other.csv", SERIES, ())

    summaries = await store.list_by_owner("alice")

    assert [s.record_id for s in summaries] == [second, first]
    assert summaries[0].anomaly_count == 1
    assert await store.list_by_owner("carol") == []


@pytest.mark.asyncio
async def test_ids_are_unique(store):
    ids = {await store.create("alice", "a.csv", SERIES, ()) for _ in range(50)}
    assert len(ids) == 50


def test_concurrent_creates_from_threads(store):
    def _create(i):
        return asyncio.run(store.create("alice", f"{i}.csv", SERIES, ()))

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(_create, range(50)))

    assert len(set(ids)) == 50
    summaries = asyncio.run(store.list_by_owner("alice"))
    assert {s.record_id for s in summaries} == set(ids)


@pytest.mark.asyncio
async def test_concurrent_creates_on_one_loop(store):
    ids = await asyncio.gather(*(store.create("alice", f"{i}.csv", SERIES, ()) for i in range(50)))

    assert len(set(ids)) == 50
    assert len(await store.list_by_owner("alice")) == 50
