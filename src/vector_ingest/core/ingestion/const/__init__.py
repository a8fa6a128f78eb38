"""
목적: 적재 파이프라인 상수/설정 공개 API를 제공한다.
설명: 시스템 필드 이름과 설정 모델, 설정 로더를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/core/ingestion/const/settings.py
"""

from vector_ingest.core.ingestion.const.settings import (
    MAX_BATCH_SIZE,
    PRIMARY_KEY_FIELD,
    SUMMARY_FIELD,
    SYSTEM_FIELDS,
    VECTOR_FIELD,
    EmbeddingSettings,
    IndexSettings,
    IngestionSettings,
    PipelineSettings,
    ProvisioningSettings,
    SchemaSettings,
    TemplateGenerationSettings,
    UpsertSettings,
    load_ingestion_settings,
)

__all__ = [
    "MAX_BATCH_SIZE",
    "PRIMARY_KEY_FIELD",
    "SUMMARY_FIELD",
    "SYSTEM_FIELDS",
    "VECTOR_FIELD",
    "SchemaSettings",
    "ProvisioningSettings",
    "IndexSettings",
    "EmbeddingSettings",
    "UpsertSettings",
    "PipelineSettings",
    "TemplateGenerationSettings",
    "IngestionSettings",
    "load_ingestion_settings",
]
