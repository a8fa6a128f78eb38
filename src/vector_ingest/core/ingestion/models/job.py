"""
목적: 적재 작업 입력과 결과 모델을 정의한다.
설명: camelCase/snake_case 입력을 모두 받는 작업 모델과, 호출자에게 돌려줄 결과 모델을 제공한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/core/ingestion/orchestrator.py
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vector_ingest.core.ingestion.exceptions import SchemaInferenceError
from vector_ingest.core.ingestion.models.attempt import IngestionAttempt
from vector_ingest.core.ingestion.models.records import RejectedRecord
from vector_ingest.integrations.vectorstore import is_valid_collection_name
from vector_ingest.shared.const import SharedConst


class IngestionJob(BaseModel):
    """적재 작업 입력 모델이다.

    Args:
        job_id: 작업 식별자. 생략하면 생성한다.
        collection_name: 대상 컬렉션 이름.
        records: 원시 JSON 객체 목록.
        template: 요약 텍스트 템플릿. 생략하면 채팅 모델로 생성한다.
        field_descriptions: 필드 설명 사전.
        embedding_provider: 사용할 임베딩 제공자 이름.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    job_id: str = Field(default_factory=lambda: uuid4().hex, alias="jobId")
    collection_name: str = Field(alias="collectionName")
    records: List[Dict[str, Any]] = Field(default_factory=list)
    template: Optional[str] = None
    field_descriptions: Dict[str, str] = Field(default_factory=dict, alias="fieldDescriptions")
    embedding_provider: str = Field(alias="embeddingProvider")

    @field_validator("collection_name")
    @classmethod
    def _check_collection_name(cls, value: str) -> str:
        if not is_valid_collection_name(value):
            raise ValueError(
                "컬렉션 이름은 영문자나 밑줄로 시작하고 영숫자/밑줄만 사용하며 255자 이하여야 합니다."
            )
        return value

    @classmethod
    def from_payload(cls, payload: Union[str, bytes, Mapping[str, Any]]) -> "IngestionJob":
        """JSON 문자열/바이트 또는 매핑에서 작업을 만든다.

        Raises:
            SchemaInferenceError: 페이로드가 유효하지 않을 때.
        """

        data: Any = payload
        if isinstance(payload, (bytes, bytearray)):
            try:
                data = payload.decode(SharedConst.DEFAULT_ENCODING)
            except UnicodeDecodeError as error:
                raise SchemaInferenceError.build(
                    "작업 페이로드를 디코딩할 수 없습니다.",
                    original=error,
                ) from error
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as error:
                raise SchemaInferenceError.build(
                    "작업 페이로드가 올바른 JSON이 아닙니다.",
                    cause=str(error),
                    original=error,
                ) from error
        if not isinstance(data, Mapping):
            raise SchemaInferenceError.build(
                "작업 페이로드는 JSON 객체여야 합니다.",
                cause=type(data).__name__,
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as error:
            raise SchemaInferenceError.build(
                "작업 페이로드 검증에 실패했습니다.",
                cause=str(error),
                original=error,
            ) from error


class IngestionResult(BaseModel):
    """적재 작업 결과 모델이다."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    rows_written: int = Field(default=0, alias="rowsWritten")
    attempts: int = 0
    rejected_records: List[RejectedRecord] = Field(default_factory=list, alias="rejectedRecords")
    attempt_log: List[IngestionAttempt] = Field(default_factory=list, exclude=True)

    def to_response(self) -> Dict[str, Any]:
        """호출자 응답 형태 `{success, message, rowsWritten}`로 변환한다."""

        return {
            "success": self.success,
            "message": self.message,
            "rowsWritten": self.rows_written,
        }
