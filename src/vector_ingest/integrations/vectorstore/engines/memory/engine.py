"""
목적: 인메모리 벡터 스토어 엔진을 제공한다.
설명: 로컬 실행과 테스트를 위해 컬렉션/인덱스/행을 프로세스 메모리에 보관한다.
      업서트는 대기 버퍼에 쌓이고 flush 이후에만 행 수에 반영된다.
디자인 패턴: 전략 패턴 구현체
참조: src/vector_ingest/integrations/vectorstore/base/engine.py
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vector_ingest.integrations.vectorstore.base.engine import (
    BaseVectorStoreEngine,
    IndexAlreadyExistsError,
)
from vector_ingest.integrations.vectorstore.base.models import (
    CollectionSchema,
    IndexPlanEntry,
    IndexState,
    StoreRow,
)
from vector_ingest.shared.logging import Logger, create_default_logger


@dataclass
class _MemoryCollection:
    schema: CollectionSchema
    rows: Dict[str, StoreRow] = field(default_factory=dict)
    pending: Dict[str, StoreRow] = field(default_factory=dict)
    indexes: Dict[str, IndexPlanEntry] = field(default_factory=dict)
    loaded: bool = False


class InMemoryVectorStoreEngine(BaseVectorStoreEngine):
    """스레드 안전한 인메모리 벡터 스토어 엔진."""

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger or create_default_logger("InMemoryVectorStoreEngine")
        self._collections: Dict[str, _MemoryCollection] = {}
        self._lock = threading.RLock()
        self._connected = False

    @property
    def name(self) -> str:
        return "memory"

    def connect(self) -> None:
        self._connected = True

    def close(self) -> None:
        self._connected = False

    def has_collection(self, collection: str) -> bool:
        with self._lock:
            return collection in self._collections

    def drop_collection(self, collection: str) -> None:
        with self._lock:
            self._collections.pop(collection, None)

    def create_collection(self, schema: CollectionSchema) -> None:
        with self._lock:
            if schema.collection_name in self._collections:
                raise ValueError(f"컬렉션이 이미 존재합니다: {schema.collection_name}")
            self._collections[schema.collection_name] = _MemoryCollection(schema=schema)
        self._logger.debug(f"컬렉션 생성: {schema.collection_name}")

    def create_index(self, collection: str, entry: IndexPlanEntry) -> None:
        with self._lock:
            target = self._require(collection)
            if entry.index_name in target.indexes:
                raise IndexAlreadyExistsError(f"인덱스가 이미 존재합니다: {entry.index_name}")
            if target.schema.get_field(entry.field_name) is None:
                raise ValueError(f"인덱스 대상 필드가 없습니다: {entry.field_name}")
            target.indexes[entry.index_name] = entry

    def get_index_state(self, collection: str, index_name: str) -> IndexState:
        with self._lock:
            target = self._require(collection)
            if index_name not in target.indexes:
                raise ValueError(f"인덱스가 없습니다: {index_name}")
            return IndexState.FINISHED

    def upsert(self, collection: str, rows: List[StoreRow]) -> int:
        with self._lock:
            target = self._require(collection)
            validated = [self._validate_row(target.schema, row) for row in rows]
            pk_name = target.schema.primary_key.name
            for row in validated:
                target.pending[str(row[pk_name])] = row
            return len(validated)

    def flush(self, collection: str) -> None:
        with self._lock:
            target = self._require(collection)
            target.rows.update(target.pending)
            target.pending.clear()

    def get_row_count(self, collection: str) -> int:
        with self._lock:
            return len(self._require(collection).rows)

    def load_collection(self, collection: str) -> None:
        with self._lock:
            self._require(collection).loaded = True

    def get_rows(self, collection: str) -> List[StoreRow]:
        """영속화된 행의 사본을 반환한다."""

        with self._lock:
            return [dict(row) for row in self._require(collection).rows.values()]

    def get_schema(self, collection: str) -> CollectionSchema:
        """컬렉션 스키마를 반환한다."""

        with self._lock:
            return self._require(collection).schema

    def list_indexes(self, collection: str) -> List[IndexPlanEntry]:
        """생성된 인덱스 목록을 반환한다."""

        with self._lock:
            return list(self._require(collection).indexes.values())

    def is_loaded(self, collection: str) -> bool:
        """컬렉션 적재 여부를 반환한다."""

        with self._lock:
            return self._require(collection).loaded

    def _require(self, collection: str) -> _MemoryCollection:
        target = self._collections.get(collection)
        if target is None:
            raise ValueError(f"컬렉션이 존재하지 않습니다: {collection}")
        return target

    def _validate_row(self, schema: CollectionSchema, row: StoreRow) -> StoreRow:
        pk_name = schema.primary_key.name
        if not row.get(pk_name):
            raise ValueError(f"기본 키가 비어 있는 행은 저장할 수 없습니다: {pk_name}")
        vector_field = schema.vector_field
        vector = row.get(vector_field.name)
        if vector is None or len(vector) != vector_field.vector_dim:
            raise ValueError(
                f"벡터 차원이 스키마와 다릅니다: 기대 {vector_field.vector_dim}, "
                f"실제 {0 if vector is None else len(vector)}"
            )
        if not all(math.isfinite(float(value)) for value in vector):
            raise ValueError("벡터에 유한하지 않은 값이 있습니다.")
        if not schema.allow_extra_fields:
            unknown = sorted(key for key in row if schema.get_field(key) is None)
            if unknown:
                raise ValueError(f"스키마에 없는 필드: {', '.join(unknown)}")
        stored = dict(row)
        stored[vector_field.name] = [float(value) for value in vector]
        return stored
