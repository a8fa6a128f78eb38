"""
목적: Milvus 벡터 스토어 엔진을 제공한다.
설명: pymilvus MilvusClient로 컬렉션 수명 관리, 인덱스 빌드, 업서트, flush/행 수 조회를 수행한다.
디자인 패턴: 전략 패턴 구현체, 어댑터 패턴
참조: src/vector_ingest/integrations/vectorstore/engines/milvus/schema_adapter.py
"""

from __future__ import annotations

import os
from typing import Any, List, Optional

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
from vector_ingest.integrations.vectorstore.engines.milvus.schema_adapter import (
    MilvusSchemaAdapter,
)
from vector_ingest.shared.logging import Logger, create_default_logger

MilvusClient: Any | None
try:
    from pymilvus import MilvusClient as _MilvusClient
except ImportError:  # pragma: no cover - 환경 의존 로딩
    MilvusClient = None
else:  # pragma: no cover - 환경 의존 로딩
    MilvusClient = _MilvusClient


class MilvusEngine(BaseVectorStoreEngine):
    """Milvus 엔진 구현체.

    Args:
        uri: Milvus 접속 URI. 없으면 MILVUS_URI 환경 변수를 사용한다.
        token: 인증 토큰. 없으면 MILVUS_TOKEN 환경 변수를 사용한다.
        db_name: 데이터베이스 이름.
        vector_index_type: 벡터 인덱스 타입(AUTOINDEX, DISKANN, HNSW 등).
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        token: Optional[str] = None,
        db_name: Optional[str] = None,
        vector_index_type: str = "AUTOINDEX",
        logger: Optional[Logger] = None,
    ) -> None:
        self._uri = uri or os.getenv("MILVUS_URI", "http://127.0.0.1:19530")
        self._token = token or os.getenv("MILVUS_TOKEN")
        self._db_name = db_name
        self._adapter = MilvusSchemaAdapter(vector_index_type=vector_index_type)
        self._logger = logger or create_default_logger("MilvusEngine")
        self._client: Any = None

    @property
    def name(self) -> str:
        return "milvus"

    def connect(self) -> None:
        if self._client is not None:
            return
        if MilvusClient is None:
            raise RuntimeError("pymilvus 패키지가 설치되어 있지 않습니다.")
        kwargs: dict[str, Any] = {"uri": self._uri}
        if self._token:
            kwargs["token"] = self._token
        if self._db_name:
            kwargs["db_name"] = self._db_name
        self._client = MilvusClient(**kwargs)
        self._logger.info(f"Milvus 연결 완료: {self._uri}")

    def close(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None

    def has_collection(self, collection: str) -> bool:
        return bool(self._ensure_client().has_collection(collection_name=collection))

    def drop_collection(self, collection: str) -> None:
        self._ensure_client().drop_collection(collection_name=collection)

    def create_collection(self, schema: CollectionSchema) -> None:
        self._ensure_client().create_collection(
            collection_name=schema.collection_name,
            schema=self._adapter.build_schema(schema),
        )

    def create_index(self, collection: str, entry: IndexPlanEntry) -> None:
        client = self._ensure_client()
        index_params = client.prepare_index_params()
        self._adapter.add_index(index_params, entry)
        try:
            client.create_index(collection_name=collection, index_params=index_params)
        except Exception as error:  # noqa: BLE001 - 드라이버 예외 타입이 버전마다 다름
            if "already exist" in str(error).lower():
                raise IndexAlreadyExistsError(str(error)) from error
            raise

    def get_index_state(self, collection: str, index_name: str) -> IndexState:
        info = self._ensure_client().describe_index(
            collection_name=collection,
            index_name=index_name,
        )
        return self._adapter.parse_index_state(info)

    def upsert(self, collection: str, rows: List[StoreRow]) -> int:
        result = self._ensure_client().upsert(collection_name=collection, data=rows)
        if isinstance(result, dict):
            return int(result.get("upsert_count", len(rows)))
        return int(getattr(result, "upsert_count", len(rows)))

    def flush(self, collection: str) -> None:
        self._ensure_client().flush(collection_name=collection)

    def get_row_count(self, collection: str) -> int:
        stats = self._ensure_client().get_collection_stats(collection_name=collection)
        return int(stats.get("row_count", 0))

    def load_collection(self, collection: str) -> None:
        self._ensure_client().load_collection(collection_name=collection)

    def _ensure_client(self) -> Any:
        if self._client is None:
            self.connect()
        return self._client
