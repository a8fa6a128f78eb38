"""
목적: 공통 벡터 스토어 클라이언트를 제공한다.
설명: 엔진을 주입받아 적재 파이프라인이 사용하는 단순한 호출을 제공한다.
      연결/종료만 잠금으로 직렬화하고 나머지 호출은 엔진에 그대로 위임한다.
디자인 패턴: 파사드
참조: src/vector_ingest/integrations/vectorstore/base/engine.py
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Sequence

from vector_ingest.integrations.vectorstore.base.engine import BaseVectorStoreEngine
from vector_ingest.integrations.vectorstore.base.models import (
    CollectionSchema,
    IndexPlanEntry,
    IndexState,
    StoreRow,
)
from vector_ingest.shared.logging import Logger, create_default_logger


class VectorStoreClient:
    """공통 벡터 스토어 클라이언트."""

    def __init__(self, engine: BaseVectorStoreEngine, logger: Optional[Logger] = None) -> None:
        self._engine = engine
        self._logger = logger or create_default_logger("VectorStoreClient")
        self._schemas: Dict[str, CollectionSchema] = {}
        self._connection_lock = threading.Lock()
        self._connected = False

    @property
    def engine(self) -> BaseVectorStoreEngine:
        """내부 엔진을 반환한다."""

        return self._engine

    @property
    def connected(self) -> bool:
        """연결 여부를 반환한다."""

        return self._connected

    def connect(self) -> None:
        """엔진 연결을 초기화한다. 이미 연결되어 있으면 아무것도 하지 않는다."""

        with self._connection_lock:
            if self._connected:
                return
            self._engine.connect()
            self._connected = True
            self._logger.info(f"벡터 스토어 연결 완료: {self._engine.name}")

    def close(self) -> None:
        """엔진 연결을 종료한다."""

        with self._connection_lock:
            if not self._connected:
                return
            self._engine.close()
            self._connected = False
            self._logger.info(f"벡터 스토어 연결 종료: {self._engine.name}")

    def __enter__(self) -> "VectorStoreClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_schema(self, collection: str) -> Optional[CollectionSchema]:
        """이 클라이언트로 생성한 컬렉션의 스키마를 조회한다."""

        return self._schemas.get(collection)

    def has_collection(self, collection: str) -> bool:
        """컬렉션 존재 여부를 반환한다."""

        return self._engine.has_collection(collection)

    def drop_collection(self, collection: str) -> None:
        """컬렉션을 삭제한다."""

        self._engine.drop_collection(collection)
        self._schemas.pop(collection, None)

    def create_collection(self, schema: CollectionSchema) -> None:
        """스키마 기반으로 컬렉션을 생성한다."""

        self._engine.create_collection(schema)
        self._schemas[schema.collection_name] = schema

    def create_index(self, collection: str, entry: IndexPlanEntry) -> None:
        """인덱스 빌드를 요청한다."""

        self._engine.create_index(collection, entry)

    def get_index_state(self, collection: str, index_name: str) -> IndexState:
        """인덱스 빌드 상태를 조회한다."""

        return self._engine.get_index_state(collection, index_name)

    def upsert(self, collection: str, rows: Sequence[StoreRow]) -> int:
        """행을 업서트하고 기록된 건수를 반환한다."""

        batch: List[StoreRow] = list(rows)
        if not batch:
            return 0
        return int(self._engine.upsert(collection, batch))

    def flush(self, collection: str) -> None:
        """버퍼된 쓰기를 영속화한다."""

        self._engine.flush(collection)

    def get_row_count(self, collection: str) -> int:
        """영속화된 행 수를 반환한다."""

        return int(self._engine.get_row_count(collection))

    def load_collection(self, collection: str) -> None:
        """검색 가능하도록 컬렉션을 적재한다."""

        self._engine.load_collection(collection)
