"""
목적: 벡터 스토어 엔진 추상 인터페이스를 정의한다.
설명: 컬렉션 수명 관리, 인덱스 빌드, 업서트, 내구성 확인을 위한 표준 메서드를 제공한다.
디자인 패턴: 전략 패턴
참조: src/vector_ingest/integrations/vectorstore/base/models.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from vector_ingest.integrations.vectorstore.base.models import (
    CollectionSchema,
    IndexPlanEntry,
    IndexState,
    StoreRow,
)


class IndexAlreadyExistsError(ValueError):
    """같은 이름의 인덱스가 이미 있을 때 엔진이 발생시키는 예외."""


class BaseVectorStoreEngine(ABC):
    """벡터 스토어 엔진 인터페이스."""

    @property
    @abstractmethod
    def name(self) -> str:
        """엔진 이름을 반환한다."""

    @abstractmethod
    def connect(self) -> None:
        """연결을 초기화한다."""

    @abstractmethod
    def close(self) -> None:
        """연결을 종료한다."""

    @abstractmethod
    def has_collection(self, collection: str) -> bool:
        """컬렉션 존재 여부를 반환한다."""

    @abstractmethod
    def drop_collection(self, collection: str) -> None:
        """컬렉션을 삭제한다."""

    @abstractmethod
    def create_collection(self, schema: CollectionSchema) -> None:
        """스키마로 컬렉션을 생성한다."""

    @abstractmethod
    def create_index(self, collection: str, entry: IndexPlanEntry) -> None:
        """인덱스 빌드를 요청한다."""

    @abstractmethod
    def get_index_state(self, collection: str, index_name: str) -> IndexState:
        """인덱스 빌드 상태를 조회한다."""

    @abstractmethod
    def upsert(self, collection: str, rows: List[StoreRow]) -> int:
        """행을 삽입 또는 교체하고 기록된 건수를 반환한다."""

    @abstractmethod
    def flush(self, collection: str) -> None:
        """버퍼된 쓰기를 영속화한다."""

    @abstractmethod
    def get_row_count(self, collection: str) -> int:
        """영속화된 행 수를 반환한다."""

    @abstractmethod
    def load_collection(self, collection: str) -> None:
        """검색 가능하도록 컬렉션을 적재한다."""
