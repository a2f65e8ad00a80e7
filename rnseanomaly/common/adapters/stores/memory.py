"""
Memory Result Store - Process-local implementation of ResultStore.
"""

import threading
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any

from rnseanomaly.common.dataclasses import (
    AnalysisRecord,
    AnomalyFlag,
    RecordSummary,
    TimeSeries,
)
from rnseanomaly.common.exceptions import NotFound
from rnseanomaly.common.interfaces.result_store import ResultStore


class MemoryResultStore(ResultStore):
    """
    Result store that keeps records in a dict partitioned by owner.

    Writes are serialized per owner; owners never contend with each other.
    A record is inserted fully built, so readers never see partial state.
    """

    def __init__(self):
        self._records: dict[str, dict[str, AnalysisRecord]] = defaultdict(dict)
        self._owner_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, owner: str) -> threading.Lock:
        with self._locks_guard:
            if owner not in self._owner_locks:
                self._owner_locks[owner] = threading.Lock()
            return self._owner_locks[owner]

    async def create(
        self,
        owner: str,
        filename: str,
        series: TimeSeries,
        flags: tuple[AnomalyFlag, ...],
        parameters: dict[str, Any] | None = None,
    ) -> str:
        with self._lock_for(owner):
            partition = self._records[owner]
            record_id = str(uuid.uuid4())
            while record_id in partition:
                record_id = str(uuid.uuid4())
            partition[record_id] = AnalysisRecord(
                record_id=record_id,
                owner=owner,
                filename=filename,
                series=series,
                flags=tuple(flags),
                created_at=datetime.now(timezone.utc),
                parameters=dict(parameters or {}),
            )
        return record_id

    async def get(self, owner: str, record_id: str) -> AnalysisRecord:
        record = self._records.get(owner, {}).get(record_id)
        if record is None:
            raise NotFound(f"Result '{record_id}' not found")
        return record

    async def list_by_owner(self, owner: str) -> list[RecordSummary]:
        records = list(self._records.get(owner, {}).values())
        # dicts keep insertion order, so reversing breaks created_at ties newest first
        records.reverse()
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [
            RecordSummary(
                record_id=r.record_id,
                filename=r.filename,
                anomaly_count=r.anomaly_count,
                created_at=r.created_at,
            )
            for r in records
        ]
