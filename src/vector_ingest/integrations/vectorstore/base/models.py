"""
목적: 벡터 스토어 통합 인터페이스에서 공통으로 사용하는 모델을 정의한다.
설명: 필드 기술자/컬렉션 스키마/인덱스 계획/인덱스 상태 모델을 제공한다.
      스키마와 인덱스 계획은 생성 시점에 불변식을 검증한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/integrations/vectorstore/base/engine.py
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

_COLLECTION_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,254}$")
_FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,254}$")

StoreRow = Dict[str, Any]


class FieldType(str, Enum):
    """필드 의미 타입."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    VECTOR = "VECTOR"
    NULLABLE = "NULLABLE"


class IndexKind(str, Enum):
    """인덱스 종류."""

    INVERTED = "INVERTED"
    BITMAP = "BITMAP"
    RANGE = "RANGE"
    VECTOR = "VECTOR"


class VectorMetric(str, Enum):
    """벡터 유사도 지표."""

    COSINE = "COSINE"
    L2 = "L2"
    IP = "IP"


class IndexState(str, Enum):
    """인덱스 빌드 상태."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        """더 이상 변하지 않는 상태인지 반환한다."""

        return self in (IndexState.FINISHED, IndexState.FAILED)


def is_valid_collection_name(name: str) -> bool:
    """컬렉션 이름 규칙(영문자/밑줄 시작, 영숫자/밑줄, 255자 이하) 충족 여부."""

    return bool(name) and _COLLECTION_NAME_PATTERN.match(name) is not None


def is_valid_field_name(name: str) -> bool:
    """필드 이름 규칙 충족 여부."""

    return bool(name) and _FIELD_NAME_PATTERN.match(name) is not None


class FieldDescriptor(BaseModel):
    """컬렉션 필드 기술자이다.

    Args:
        name: 필드 이름.
        inferred_type: 추론된 의미 타입.
        max_length: 텍스트 최대 길이(바이트). TEXT/NULLABLE에서만 사용한다.
        is_primary_key: 기본 키 여부.
        vector_dim: 벡터 차원. VECTOR에서만 사용한다.
        nullable: 일부 레코드에 값이 없거나 null인지 여부.
        description: 필드 설명.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    inferred_type: FieldType
    max_length: Optional[int] = Field(default=None, ge=1)
    is_primary_key: bool = False
    vector_dim: Optional[int] = Field(default=None, ge=1)
    nullable: bool = False
    description: str = ""

    @model_validator(mode="after")
    def _check_type_options(self) -> "FieldDescriptor":
        if not is_valid_field_name(self.name):
            raise ValueError(f"유효하지 않은 필드 이름입니다: {self.name!r}")
        if self.inferred_type == FieldType.VECTOR:
            if self.vector_dim is None:
                raise ValueError(f"벡터 필드에는 vector_dim이 필요합니다: {self.name}")
            if self.is_primary_key:
                raise ValueError("벡터 필드는 기본 키가 될 수 없습니다.")
        elif self.vector_dim is not None:
            raise ValueError(f"vector_dim은 벡터 필드에서만 사용할 수 있습니다: {self.name}")
        if self.max_length is not None and self.inferred_type not in (
            FieldType.TEXT,
            FieldType.NULLABLE,
        ):
            raise ValueError(f"max_length는 텍스트 필드에서만 사용할 수 있습니다: {self.name}")
        if self.is_primary_key and self.inferred_type != FieldType.TEXT:
            raise ValueError("기본 키는 텍스트 필드여야 합니다.")
        if self.is_primary_key and self.nullable:
            raise ValueError("기본 키는 nullable일 수 없습니다.")
        return self


class CollectionSchema(BaseModel):
    """컬렉션 스키마이다.

    필드 이름은 유일해야 하며 기본 키 필드와 벡터 필드는 정확히 하나씩 존재해야 한다.
    """

    model_config = ConfigDict(frozen=True)

    collection_name: str
    fields: List[FieldDescriptor]
    allow_extra_fields: bool = True
    description: str = ""

    @model_validator(mode="after")
    def _check_invariants(self) -> "CollectionSchema":
        if not is_valid_collection_name(self.collection_name):
            raise ValueError(f"유효하지 않은 컬렉션 이름입니다: {self.collection_name!r}")
        names = [item.name for item in self.fields]
        duplicated = sorted({name for name in names if names.count(name) > 1})
        if duplicated:
            raise ValueError(f"중복된 필드 이름: {', '.join(duplicated)}")
        primary_keys = [item for item in self.fields if item.is_primary_key]
        if len(primary_keys) != 1:
            raise ValueError(f"기본 키 필드는 정확히 하나여야 합니다 (현재 {len(primary_keys)}개).")
        vectors = [item for item in self.fields if item.inferred_type == FieldType.VECTOR]
        if len(vectors) != 1:
            raise ValueError(f"벡터 필드는 정확히 하나여야 합니다 (현재 {len(vectors)}개).")
        return self

    @property
    def primary_key(self) -> FieldDescriptor:
        """기본 키 필드를 반환한다."""

        return next(item for item in self.fields if item.is_primary_key)

    @property
    def vector_field(self) -> FieldDescriptor:
        """벡터 필드를 반환한다."""

        return next(item for item in self.fields if item.inferred_type == FieldType.VECTOR)

    @property
    def vector_dim(self) -> int:
        """벡터 차원을 반환한다."""

        return int(self.vector_field.vector_dim or 0)

    def field_names(self) -> List[str]:
        """필드 이름 목록을 순서대로 반환한다."""

        return [item.name for item in self.fields]

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """이름으로 필드를 조회한다."""

        for item in self.fields:
            if item.name == name:
                return item
        return None


class IndexPlanEntry(BaseModel):
    """인덱스 계획 항목이다.

    Args:
        field_name: 대상 필드 이름.
        index_name: 인덱스 이름.
        index_kind: 인덱스 종류.
        metric: 벡터 인덱스 유사도 지표.
        mandatory: 필수 인덱스 여부(기본 키, 벡터).
    """

    model_config = ConfigDict(frozen=True)

    field_name: str
    index_name: str
    index_kind: IndexKind
    metric: Optional[VectorMetric] = None
    mandatory: bool = False

    @model_validator(mode="after")
    def _check_metric(self) -> "IndexPlanEntry":
        if self.index_kind == IndexKind.VECTOR and self.metric is None:
            raise ValueError("벡터 인덱스에는 metric이 필요합니다.")
        if self.index_kind != IndexKind.VECTOR and self.metric is not None:
            raise ValueError("metric은 벡터 인덱스에서만 사용할 수 있습니다.")
        return self

    @classmethod
    def for_field(
        cls,
        field_name: str,
        index_kind: IndexKind,
        metric: Optional[VectorMetric] = None,
        mandatory: bool = False,
    ) -> "IndexPlanEntry":
        """`<필드>_index` 이름 규칙으로 항목을 생성한다."""

        return cls(
            field_name=field_name,
            index_name=f"{field_name}_index",
            index_kind=index_kind,
            metric=metric,
            mandatory=mandatory,
        )


class IndexPlan(BaseModel):
    """순서가 있는 인덱스 계획이다."""

    model_config = ConfigDict(frozen=True)

    entries: List[IndexPlanEntry] = Field(default_factory=list)

    def validate_for(self, schema: CollectionSchema, excluded: Iterable[str] = ()) -> None:
        """스키마 기준으로 계획을 검증한다.

        Raises:
            ValueError: 존재하지 않는 필드, 필드당 중복 항목, 제외 필드 항목이 있을 때.
        """

        known = set(schema.field_names())
        excluded_set = set(excluded)
        seen: set[str] = set()
        for entry in self.entries:
            if entry.field_name not in known:
                raise ValueError(f"스키마에 없는 필드의 인덱스입니다: {entry.field_name}")
            if entry.field_name in seen:
                raise ValueError(f"필드당 인덱스는 하나만 허용됩니다: {entry.field_name}")
            if entry.field_name in excluded_set:
                raise ValueError(f"인덱스 제외 필드에 인덱스가 계획되었습니다: {entry.field_name}")
            seen.add(entry.field_name)

    def mandatory_entries(self) -> List[IndexPlanEntry]:
        """필수 인덱스 항목을 반환한다."""

        return [entry for entry in self.entries if entry.mandatory]

    def field_names(self) -> List[str]:
        """인덱스 대상 필드 이름 목록을 반환한다."""

        return [entry.field_name for entry in self.entries]
