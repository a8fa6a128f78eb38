"""
목적: 적재 파이프라인 공개 API를 제공한다.
설명: 오케스트레이터, 작업 입출력 모델, 설정, 도메인 예외를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/core/ingestion/orchestrator.py
"""

from vector_ingest.core.ingestion.const import IngestionSettings, load_ingestion_settings
from vector_ingest.core.ingestion.exceptions import (
    ConsistencyError,
    EmbeddingError,
    IndexBuildTimeoutError,
    IngestionError,
    ProvisioningError,
    SchemaInferenceError,
    TemplateGenerationError,
    UpsertError,
)
from vector_ingest.core.ingestion.models import (
    IngestionAttempt,
    IngestionJob,
    IngestionPhase,
    IngestionResult,
)
from vector_ingest.core.ingestion.orchestrator import PipelineOrchestrator

__all__ = [
    "PipelineOrchestrator",
    "IngestionJob",
    "IngestionResult",
    "IngestionAttempt",
    "IngestionPhase",
    "IngestionSettings",
    "load_ingestion_settings",
    "IngestionError",
    "SchemaInferenceError",
    "TemplateGenerationError",
    "ProvisioningError",
    "IndexBuildTimeoutError",
    "EmbeddingError",
    "UpsertError",
    "ConsistencyError",
]
