"""
Tests for the Django ORM result store.

The store is driven through async_to_sync so its thread-sensitive ORM calls
share the test's database connection and transaction.
"""
import asyncio
import uuid

import pytest
from asgiref.sync import async_to_sync

from rnseanomaly.analyses.models import AnalysisRecord as RecordModel
from rnseanomaly.common.dataclasses import AnomalyFlag, TimeSeries
from rnseanomaly.common.exceptions import NotFound
from rnseanomaly.config.django_store import DjangoResultStore

pytestmark = pytest.mark.integration

SERIES = TimeSeries(
    values=tuple(float(i) for i in range(12)),
    labels=tuple(f"t{i}" for i in range(12)),
)


@pytest.fixture
def store():
    return DjangoResultStore()


def _create(store, owner="1", filename="data.csv", flags=(), parameters=None):
    return async_to_sync(store.create)(owner, filename, SERIES, flags, parameters)


def test_create_persists_single_row(store):
    flags = (AnomalyFlag(index=4, confidence=0.6), AnomalyFlag(index=9, confidence=1.0))

    record_id = _create(store, flags=flags, parameters={"scorer": "baseline"})

    row = RecordModel.objects.get(record_id=record_id)
    assert row.owner == "1"
    assert row.values == list(SERIES.values)
    assert row.flags == [[4, 0.6], [9, 1.0]]
    assert row.anomaly_count == 2
    assert row.sample_count == 12


def test_get_round_trips_record(store):
    flags = (AnomalyFlag(index=2, confidence=0.75),)
    record_id = _create(store, flags=flags, parameters={"flag_threshold": 0.3})

    record = async_to_sync(store.get)("1", record_id)

    assert record.record_id == record_id
    assert record.filename == "data.csv"
    assert record.series == SERIES
    assert record.flags == flags
    assert record.parameters == {"flag_threshold": 0.3}
    assert record.created_at is not None


def test_record_without_labels(store):
    record_id = async_to_sync(store.create)("1", "plain.csv", TimeSeries(values=(1.0,) * 10), ())
    assert async_to_sync(store.get)("1", record_id).series.labels is None


def test_foreign_owner_is_not_found(store):
    record_id = _create(store, owner="1")

    with pytest.raises(NotFound):
        async_to_sync(store.get)("2", record_id)


def test_unknown_and_invalid_ids_are_not_found(store):
    with pytest.raises(NotFound):
        async_to_sync(store.get)("1", str(uuid.uuid4()))
    with pytest.raises(NotFound):
        async_to_sync(store.get)("1", "not-a-uuid")


def test_list_by_owner_newest_first(store):
    first = _create(store, filename="first.csv")
    second = _create(store, filename="second.csv", flags=(AnomalyFlag(1, 0.5),))
    _create(store, owner="2", filename="foreign.csv")

    summaries = async_to_sync(store.list_by_owner)("1")

    assert [s.record_id for s in summaries] == [second, first]
    assert [s.filename for s in summaries] == ["second.csv", "first.csv"]
    assert summaries[0].anomaly_count == 1


def test_list_by_owner_empty(store):
    assert async_to_sync(store.list_by_owner)("nobody") == []


def test_concurrent_creates_are_unique_and_complete(store):
    async def _create_many():
        return await asyncio.gather(*(
            store.create("1", f"{i}.csv", SERIES, ()) for i in range(50)
        ))

    ids = async_to_sync(_create_many)()

    assert len(set(ids)) == 50
    summaries = async_to_sync(store.list_by_owner)("1")
    assert {s.record_id for s in summaries} == set(ids)
    assert RecordModel.objects.filter(owner="1").count() == 50
