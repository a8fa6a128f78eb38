"""
목적: 적재 파이프라인 설정 모델과 로더를 제공한다.
설명: 스키마/프로비저닝/인덱스/임베딩/업서트/파이프라인/템플릿 생성/제공자 설정 그룹을 Pydantic으로 정의하고,
      JSON 파일 → .env 및 환경 변수 → 명시적 override 순으로 병합해 생성한다.
디자인 패턴: 설정 객체, 빌더 패턴
참조: src/vector_ingest/shared/config/loader.py
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from vector_ingest.integrations.embeddings import (
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OPENAI_MODEL,
    EmbeddingProviderConfig,
    EmbeddingProviderName,
)
from vector_ingest.integrations.llm import ChatModelConfig
from vector_ingest.integrations.vectorstore import VectorMetric
from vector_ingest.shared.config import ConfigLoader
from vector_ingest.shared.const import SharedConst
from vector_ingest.shared.logging import Logger

PRIMARY_KEY_FIELD = "docId"
VECTOR_FIELD = "embedding"
SUMMARY_FIELD = "documentText"
SYSTEM_FIELDS = (PRIMARY_KEY_FIELD, VECTOR_FIELD, SUMMARY_FIELD)

MAX_BATCH_SIZE = 10000


class SchemaSettings(BaseModel):
    """스키마 추론 설정.

    Args:
        vector_dim: 벡터 필드 차원.
        text_max_length: 데이터 텍스트 필드 최대 길이(바이트).
        summary_max_length: 요약 텍스트 필드 최대 길이(바이트).
        primary_key_max_length: 기본 키 최대 길이(바이트).
        primary_key_source: 레코드에서 기본 키로 사용할 필드 이름.
        date_fields: 유닉스 초 값을 날짜로 렌더링할 필드 이름 목록.
        unindexed_fields: 인덱스를 만들지 않을 필드 이름 목록.
        allow_extra_fields: 스키마 밖 필드 허용(동적 필드) 여부.
        vector_metric: 벡터 인덱스 유사도 지표.
    """

    vector_dim: int = Field(default=768, ge=1)
    text_max_length: int = Field(default=8192, ge=1)
    summary_max_length: int = Field(default=16384, ge=1)
    primary_key_max_length: int = Field(default=256, ge=1)
    primary_key_source: str = Field(default=PRIMARY_KEY_FIELD)
    date_fields: List[str] = Field(default_factory=lambda: ["created_at"])
    unindexed_fields: List[str] = Field(default_factory=list)
    allow_extra_fields: bool = True
    vector_metric: VectorMetric = VectorMetric.COSINE


class ProvisioningSettings(BaseModel):
    """컬렉션 프로비저닝 설정."""

    drop_settle_seconds: float = Field(default=2.0, ge=0)
    existence_poll_attempts: int = Field(default=30, ge=1)
    existence_poll_interval_seconds: float = Field(default=1.0, ge=0)
    max_create_attempts: int = Field(default=3, ge=1)
    create_retry_delay_seconds: float = Field(default=5.0, ge=0)


class IndexSettings(BaseModel):
    """인덱스 빌드 설정."""

    poll_attempts: int = Field(default=60, ge=1)
    poll_interval_seconds: float = Field(default=1.0, ge=0)


class EmbeddingSettings(BaseModel):
    """임베딩 설정."""

    concurrency: int = Field(default=4, ge=1)


class UpsertSettings(BaseModel):
    """업서트 설정."""

    batch_size: int = Field(default=1000, ge=1, le=MAX_BATCH_SIZE)
    concurrency: int = Field(default=1, ge=1)


class PipelineSettings(BaseModel):
    """전체 파이프라인 재시도 설정."""

    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=15.0, ge=0)


class TemplateGenerationSettings(BaseModel):
    """요약 템플릿 생성 설정.

    Args:
        enabled: 템플릿이 없는 작업에 채팅 모델로 템플릿을 생성할지 여부.
        chat_model: 채팅 모델 설정.
        max_attempts: 생성 최대 시도 횟수.
        retry_delay_seconds: 생성 재시도 대기 시간(초).
    """

    enabled: bool = True
    chat_model: ChatModelConfig = Field(default_factory=ChatModelConfig)
    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=2.0, ge=0)


def _default_providers() -> Dict[str, EmbeddingProviderConfig]:
    return {
        EmbeddingProviderName.OPENAI.value: EmbeddingProviderConfig(
            provider=EmbeddingProviderName.OPENAI,
            model=DEFAULT_OPENAI_MODEL,
        ),
        EmbeddingProviderName.OLLAMA.value: EmbeddingProviderConfig(
            provider=EmbeddingProviderName.OLLAMA,
            model=DEFAULT_OLLAMA_MODEL,
        ),
    }


class IngestionSettings(BaseModel):
    """적재 파이프라인 전체 설정."""

    model_config = ConfigDict(populate_by_name=True)

    schema_: SchemaSettings = Field(default_factory=SchemaSettings, alias="schema")
    provisioning: ProvisioningSettings = Field(default_factory=ProvisioningSettings)
    index: IndexSettings = Field(default_factory=IndexSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    upsert: UpsertSettings = Field(default_factory=UpsertSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    template_generation: TemplateGenerationSettings = Field(default_factory=TemplateGenerationSettings)
    providers: Dict[str, EmbeddingProviderConfig] = Field(default_factory=_default_providers)


def load_ingestion_settings(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    logger: Optional[Logger] = None,
) -> IngestionSettings:
    """설정 소스를 병합해 IngestionSettings를 생성한다.

    Raises:
        ValueError: 설정 값이 유효하지 않을 때(pydantic ValidationError 포함).
    """

    loader = ConfigLoader(logger=logger)
    if config_path:
        loader.add_json_file(config_path, required=True)
    loader.load_env_file(env_file)
    loader.add_env(prefix=SharedConst.ENV_PREFIX, delimiter=SharedConst.ENV_NESTED_DELIMITER)
    return IngestionSettings.model_validate(loader.build(overrides))
