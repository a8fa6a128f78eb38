"""
목적: core 패키지의 공개 API를 제공한다.
설명: 적재 파이프라인 도메인 모듈을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/core/ingestion
"""

from vector_ingest.core.ingestion import (
    IngestionJob,
    IngestionResult,
    IngestionSettings,
    PipelineOrchestrator,
    load_ingestion_settings,
)

__all__ = [
    "PipelineOrchestrator",
    "IngestionJob",
    "IngestionResult",
    "IngestionSettings",
    "load_ingestion_settings",
]
