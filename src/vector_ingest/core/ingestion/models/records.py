"""
목적: 적재 레코드와 배치 모델을 정의한다.
설명: 렌더링 결과, 임베딩이 붙은 불변 레코드, 업서트 배치와 배치 결과, 제외 레코드를 제공한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/core/ingestion/stages/batch_upserter.py
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vector_ingest.core.ingestion.const import (
    MAX_BATCH_SIZE,
    PRIMARY_KEY_FIELD,
    SUMMARY_FIELD,
    VECTOR_FIELD,
)
from vector_ingest.core.ingestion.models.values import RawValue
from vector_ingest.integrations.vectorstore import StoreRow


@dataclass(frozen=True)
class RenderedRecord:
    """임베딩 전 단계의 레코드.

    Args:
        index: 작업 입력에서의 순서.
        primary_key: 확정된 기본 키.
        raw: 필드별 원시 값.
        fields: 필드별 저장 값.
        summary_text: 템플릿 렌더링 결과.
    """

    index: int
    primary_key: str
    raw: Dict[str, RawValue] = field(default_factory=dict)
    fields: Dict[str, Any] = field(default_factory=dict)
    summary_text: str = ""


class IngestRecord(BaseModel):
    """임베딩까지 끝난 불변 적재 레코드."""

    model_config = ConfigDict(frozen=True)

    primary_key: str = Field(min_length=1)
    summary_text: str
    embedding_vector: Tuple[float, ...]
    fields: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("embedding_vector")
    @classmethod
    def _check_vector(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        if not value:
            raise ValueError("임베딩 벡터가 비어 있습니다.")
        if not all(math.isfinite(component) for component in value):
            raise ValueError("임베딩 벡터에 유한하지 않은 값이 있습니다.")
        return value

    @classmethod
    def from_rendered(cls, rendered: RenderedRecord, vector: Tuple[float, ...]) -> "IngestRecord":
        """렌더링 레코드에 벡터를 붙인다."""

        return cls(
            primary_key=rendered.primary_key,
            summary_text=rendered.summary_text,
            embedding_vector=vector,
            fields=dict(rendered.fields),
        )

    def to_row(self) -> StoreRow:
        """벡터 스토어 행으로 변환한다."""

        row: StoreRow = dict(self.fields)
        row[PRIMARY_KEY_FIELD] = self.primary_key
        row[VECTOR_FIELD] = list(self.embedding_vector)
        row[SUMMARY_FIELD] = self.summary_text
        return row


class IngestBatch(BaseModel):
    """업서트 단위 배치."""

    batch_number: int = Field(ge=1)
    records: List[IngestRecord]

    @model_validator(mode="after")
    def _check_size(self) -> "IngestBatch":
        if not self.records:
            raise ValueError("빈 배치는 만들 수 없습니다.")
        if len(self.records) > MAX_BATCH_SIZE:
            raise ValueError(f"배치 크기는 {MAX_BATCH_SIZE}건을 넘을 수 없습니다.")
        return self

    def to_rows(self) -> List[StoreRow]:
        return [record.to_row() for record in self.records]


class BatchResult(BaseModel):
    """배치 업서트 결과."""

    batch_number: int
    count: int
    success: bool
    written: int = 0
    error: Optional[str] = None


class RejectedRecord(BaseModel):
    """처리 중 제외된 레코드."""

    primary_key: Optional[str] = None
    code: str
    reason: str
