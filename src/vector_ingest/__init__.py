"""
목적: vector_ingest 패키지의 공개 API를 제공한다.
설명: JSON 레코드 묶음을 검색 가능한 벡터 스토어 컬렉션으로 적재하는 진입점을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/core/ingestion, src/vector_ingest/integrations
"""

from vector_ingest.core.ingestion import (
    IngestionJob,
    IngestionResult,
    IngestionSettings,
    PipelineOrchestrator,
    load_ingestion_settings,
)
from vector_ingest.integrations.vectorstore import (
    InMemoryVectorStoreEngine,
    MilvusEngine,
    VectorStoreClient,
)
from vector_ingest.shared.runtime import CancellationToken

__all__ = [
    "PipelineOrchestrator",
    "IngestionJob",
    "IngestionResult",
    "IngestionSettings",
    "load_ingestion_settings",
    "VectorStoreClient",
    "InMemoryVectorStoreEngine",
    "MilvusEngine",
    "CancellationToken",
]
