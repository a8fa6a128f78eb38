"""
목적: 적재 파이프라인 테스트 공용 지원 코드를 제공한다.
설명: 호출 기록과 장애 주입이 가능한 인메모리 엔진, 결정적 임베딩 제공자, 응답이 정해진 채팅 모델,
      대기 시간이 0인 설정, 예시 작업 생성 함수를 제공한다.
디자인 패턴: 테스트 더블
참조: src/vector_ingest/integrations/vectorstore/engines/memory/engine.py, src/vector_ingest/core/ingestion/orchestrator.py
"""

from __future__ import annotations

import hashlib
import threading
from typing import Any, Dict, List, Optional, Set

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from pydantic import Field

from vector_ingest.core.ingestion.const import (
    IndexSettings,
    IngestionSettings,
    PipelineSettings,
    ProvisioningSettings,
    TemplateGenerationSettings,
)
from vector_ingest.integrations.vectorstore import (
    IndexPlanEntry,
    IndexState,
    InMemoryVectorStoreEngine,
    StoreRow,
    VectorStoreClient,
)

PROVIDER = "unit"


class ScriptedVectorStoreEngine(InMemoryVectorStoreEngine):
    """호출을 기록하고 스크립트된 장애를 주입하는 인메모리 엔진.

    Args:
        has_collection_failures: 처음 N번의 has_collection 호출을 실패시킨다.
        index_ready_after: 인덱스마다 N번째 상태 조회에서 완료를 돌려준다.
        failed_indexes: 빌드 실패를 보고할 인덱스 이름.
        rejected_indexes: 생성 요청을 거부할 인덱스 이름.
        row_count_offsets: get_row_count 호출 순서대로 더할 오프셋.
        upsert_failures: 실패시킬 upsert 호출 번호(1부터).
    """

    def __init__(
        self,
        has_collection_failures: int = 0,
        index_ready_after: int = 1,
        failed_indexes: Optional[Set[str]] = None,
        rejected_indexes: Optional[Set[str]] = None,
        row_count_offsets: Optional[List[int]] = None,
        upsert_failures: Optional[Set[int]] = None,
    ) -> None:
        super().__init__()
        self.calls: List[str] = []
        self.upserted_batches: List[int] = []
        self.index_polls: Dict[str, int] = {}
        self._has_collection_failures = has_collection_failures
        self._index_ready_after = index_ready_after
        self._failed_indexes = set(failed_indexes or ())
        self._rejected_indexes = set(rejected_indexes or ())
        self._row_count_offsets = list(row_count_offsets or [])
        self._upsert_failures = set(upsert_failures or ())
        self._upsert_calls = 0
        self._calls_lock = threading.Lock()

    def _record(self, name: str) -> None:
        with self._calls_lock:
            self.calls.append(name)

    def connect(self) -> None:
        self._record("connect")
        super().connect()

    def has_collection(self, collection: str) -> bool:
        self._record("has_collection")
        if self._has_collection_failures > 0:
            self._has_collection_failures -= 1
            raise ConnectionError("벡터 스토어에 일시적으로 연결할 수 없습니다.")
        return super().has_collection(collection)

    def drop_collection(self, collection: str) -> None:
        self._record("drop_collection")
        super().drop_collection(collection)

    def create_collection(self, schema) -> None:
        self._record("create_collection")
        super().create_collection(schema)

    def create_index(self, collection: str, entry: IndexPlanEntry) -> None:
        self._record("create_index")
        if entry.index_name in self._rejected_indexes:
            raise RuntimeError(f"인덱스 생성 거부: {entry.index_name}")
        super().create_index(collection, entry)

    def get_index_state(self, collection: str, index_name: str) -> IndexState:
        self._record("get_index_state")
        state = super().get_index_state(collection, index_name)
        polls = self.index_polls.get(index_name, 0) + 1
        self.index_polls[index_name] = polls
        if index_name in self._failed_indexes:
            return IndexState.FAILED
        if polls < self._index_ready_after:
            return IndexState.IN_PROGRESS
        return state

    def upsert(self, collection: str, rows: List[StoreRow]) -> int:
        self._record("upsert")
        with self._calls_lock:
            self._upsert_calls += 1
            number = self._upsert_calls
        if number in self._upsert_failures:
            raise RuntimeError(f"업서트 호출 {number} 실패")
        written = super().upsert(collection, rows)
        with self._calls_lock:
            self.upserted_batches.append(len(rows))
        return written

    def flush(self, collection: str) -> None:
        self._record("flush")
        super().flush(collection)

    def get_row_count(self, collection: str) -> int:
        self._record("get_row_count")
        offset = self._row_count_offsets.pop(0) if self._row_count_offsets else 0
        return super().get_row_count(collection) + offset

    def load_collection(self, collection: str) -> None:
        self._record("load_collection")
        super().load_collection(collection)


class FixedLengthEmbeddings(Embeddings):
    """텍스트 해시로 결정적 벡터를 만드는 임베딩 제공자.

    Args:
        dim: 돌려줄 벡터 길이.
        failing_texts: 호출 시 예외를 낼 텍스트.
        short_texts: 한 차원만 돌려줄 텍스트.
    """

    def __init__(
        self,
        dim: int = 3072,
        failing_texts: Optional[Set[str]] = None,
        short_texts: Optional[Set[str]] = None,
    ) -> None:
        self.dim = dim
        self.failing_texts = set(failing_texts or ())
        self.short_texts = set(short_texts or ())
        self.queries: List[str] = []
        self._lock = threading.Lock()

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        return [self.embed_query(text) for text in texts]

    def embed_query(self, text: str) -> List[float]:
        with self._lock:
            self.queries.append(text)
        if text in self.failing_texts:
            raise RuntimeError("임베딩 제공자 오류")
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        vector = [float((digest[index % len(digest)] + index) % 17 + 1) for index in range(self.dim)]
        if text in self.short_texts:
            return vector[:1]
        return vector


class ScriptedChatModel(FakeListChatModel):
    """받은 프롬프트를 기록하고 처음 N번 호출을 실패시키는 채팅 모델."""

    prompts: List[str] = Field(default_factory=list)
    failures: int = 0

    def _call(self, messages, stop=None, run_manager=None, **kwargs) -> str:
        self.prompts.append(str(messages[-1].content))
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("채팅 모델에 일시적으로 연결할 수 없습니다.")
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)


def fast_settings(**overrides: Any) -> IngestionSettings:
    """대기 시간이 0인 테스트용 설정을 만든다."""

    settings = IngestionSettings(
        provisioning=ProvisioningSettings(
            drop_settle_seconds=0,
            existence_poll_attempts=5,
            existence_poll_interval_seconds=0,
            create_retry_delay_seconds=0,
        ),
        index=IndexSettings(poll_attempts=10, poll_interval_seconds=0),
        pipeline=PipelineSettings(max_attempts=3, retry_delay_seconds=0),
        template_generation=TemplateGenerationSettings(enabled=False, max_attempts=2, retry_delay_seconds=0),
        providers={},
    )
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


def make_client(engine: Optional[InMemoryVectorStoreEngine] = None) -> VectorStoreClient:
    """엔진을 감싼 클라이언트를 만든다."""

    return VectorStoreClient(engine or ScriptedVectorStoreEngine())


def product_records() -> List[Dict[str, Any]]:
    """예시 상품 레코드 목록."""

    return [
        {
            "docId": "sku-1",
            "title": "무선 키보드",
            "price": 39.5,
            "stock": 12,
            "inStock": True,
            "tags": ["office", "wireless"],
            "created_at": 1700000000,
        },
        {
            "docId": "sku-2",
            "title": "기계식 키보드",
            "price": 120,
            "stock": 0,
            "inStock": False,
            "tags": ["gaming"],
            "created_at": 1710000000,
        },
        {
            "docId": "sku-3",
            "title": "마우스 패드",
            "price": 9.99,
            "stock": 200,
            "inStock": True,
            "tags": [],
            "created_at": 1720000000,
        },
    ]


def product_job(**overrides: Any) -> Dict[str, Any]:
    """예시 작업 페이로드(camelCase)."""

    payload: Dict[str, Any] = {
        "collectionName": "products",
        "records": product_records(),
        "template": "{{ title }} / {{ price }}원 / 재고 {{ inStock }} / {{ tags }} / {{ created_at }}",
        "fieldDescriptions": {"title": "상품명", "price": "판매가"},
        "embeddingProvider": PROVIDER,
    }
    payload.update(overrides)
    return payload
