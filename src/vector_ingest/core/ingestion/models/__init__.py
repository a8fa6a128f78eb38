"""
목적: 적재 파이프라인 모델 공개 API를 제공한다.
설명: 원시 값, 레코드, 시도 기록, 작업 입출력 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/core/ingestion/models
"""

from vector_ingest.core.ingestion.models.attempt import IngestionAttempt, IngestionPhase
from vector_ingest.core.ingestion.models.job import IngestionJob, IngestionResult
from vector_ingest.core.ingestion.models.records import (
    BatchResult,
    IngestBatch,
    IngestRecord,
    RejectedRecord,
    RenderedRecord,
)
from vector_ingest.core.ingestion.models.values import (
    RawValue,
    RawValueKind,
    ValueCoercionError,
    format_number,
    to_json_text,
)

__all__ = [
    "IngestionAttempt",
    "IngestionPhase",
    "IngestionJob",
    "IngestionResult",
    "BatchResult",
    "IngestBatch",
    "IngestRecord",
    "RejectedRecord",
    "RenderedRecord",
    "RawValue",
    "RawValueKind",
    "ValueCoercionError",
    "format_number",
    "to_json_text",
]
