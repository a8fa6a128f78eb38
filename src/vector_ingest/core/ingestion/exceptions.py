"""
목적: 적재 파이프라인 도메인 예외를 정의한다.
설명: 단계별 실패를 IngestionError 하위 클래스로 구분하고 기본 코드와 재시도 가능 여부를 선언한다.
디자인 패턴: 도메인 예외 객체
참조: src/vector_ingest/shared/exceptions/base.py
"""

from __future__ import annotations

from vector_ingest.shared.exceptions import BaseAppException


class IngestionError(BaseAppException):
    """적재 파이프라인 공통 예외."""

    default_code = "INGESTION_ERROR"
    retryable = True


class SchemaInferenceError(IngestionError):
    """입력 작업이나 레코드에서 스키마를 만들 수 없을 때 발생한다. 재시도하지 않는다."""

    default_code = "INGESTION_SCHEMA_INFERENCE"
    retryable = False


class TemplateGenerationError(IngestionError):
    """요약 템플릿을 생성하지 못했을 때 발생한다."""

    default_code = "INGESTION_TEMPLATE_GENERATION"


class ProvisioningError(IngestionError):
    """컬렉션을 비운 상태로 준비하지 못했을 때 발생한다."""

    default_code = "INGESTION_PROVISIONING"


class IndexBuildTimeoutError(IngestionError):
    """필수 인덱스가 모두 빌드에 실패했을 때 발생한다."""

    default_code = "INGESTION_INDEX_BUILD"


class EmbeddingError(IngestionError):
    """레코드 임베딩이 유효하지 않거나 살아남은 레코드가 없을 때 발생한다."""

    default_code = "INGESTION_EMBEDDING"


class UpsertError(IngestionError):
    """배치 업서트가 하나라도 실패했을 때 발생한다."""

    default_code = "INGESTION_UPSERT"


class ConsistencyError(IngestionError):
    """flush 이후 행 수가 기대값과 다를 때 발생한다."""

    default_code = "INGESTION_CONSISTENCY"


__all__ = [
    "IngestionError",
    "SchemaInferenceError",
    "TemplateGenerationError",
    "ProvisioningError",
    "IndexBuildTimeoutError",
    "EmbeddingError",
    "UpsertError",
    "ConsistencyError",
]
