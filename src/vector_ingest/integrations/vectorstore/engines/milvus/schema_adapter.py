"""
목적: Milvus 스키마/인덱스 변환 어댑터를 제공한다.
설명: CollectionSchema를 pymilvus CollectionSchema로, IndexPlanEntry를 인덱스 파라미터로 변환한다.
디자인 패턴: 어댑터 패턴
참조: src/vector_ingest/integrations/vectorstore/base/models.py
"""

from __future__ import annotations

from typing import Any, Dict

from vector_ingest.integrations.vectorstore.base.models import (
    CollectionSchema,
    FieldDescriptor,
    FieldType,
    IndexKind,
    IndexPlanEntry,
    IndexState,
)

pymilvus: Any | None
try:
    import pymilvus as _pymilvus
except ImportError:  # pragma: no cover - 환경 의존 로딩
    pymilvus = None
else:  # pragma: no cover - 환경 의존 로딩
    pymilvus = _pymilvus

_DEFAULT_TEXT_MAX_LENGTH = 8192

_INDEX_TYPES: Dict[IndexKind, str] = {
    IndexKind.INVERTED: "INVERTED",
    IndexKind.BITMAP: "BITMAP",
    IndexKind.RANGE: "STL_SORT",
}

_STATE_NAMES: Dict[str, IndexState] = {
    "finished": IndexState.FINISHED,
    "failed": IndexState.FAILED,
    "inprogress": IndexState.IN_PROGRESS,
    "in_progress": IndexState.IN_PROGRESS,
    "unissued": IndexState.PENDING,
    "none": IndexState.PENDING,
}


def _require_pymilvus() -> Any:
    if pymilvus is None:
        raise RuntimeError("pymilvus 패키지가 설치되어 있지 않습니다.")
    return pymilvus


class MilvusSchemaAdapter:
    """Milvus 스키마/인덱스 변환 어댑터."""

    def __init__(self, vector_index_type: str = "AUTOINDEX") -> None:
        self._vector_index_type = vector_index_type

    def build_schema(self, schema: CollectionSchema):
        """pymilvus CollectionSchema를 생성한다."""

        module = _require_pymilvus()
        fields = [self.build_field(item) for item in schema.fields]
        return module.CollectionSchema(
            fields=fields,
            description=schema.description,
            enable_dynamic_field=schema.allow_extra_fields,
        )

    def build_field(self, descriptor: FieldDescriptor):
        """FieldDescriptor를 pymilvus FieldSchema로 변환한다."""

        module = _require_pymilvus()
        data_type = module.DataType
        kwargs: Dict[str, Any] = {
            "name": descriptor.name,
            "description": descriptor.description,
        }
        if descriptor.inferred_type == FieldType.VECTOR:
            kwargs.update(dtype=data_type.FLOAT_VECTOR, dim=int(descriptor.vector_dim or 0))
        elif descriptor.inferred_type in (FieldType.TEXT, FieldType.NULLABLE):
            kwargs.update(
                dtype=data_type.VARCHAR,
                max_length=int(descriptor.max_length or _DEFAULT_TEXT_MAX_LENGTH),
            )
        elif descriptor.inferred_type == FieldType.INTEGER:
            kwargs.update(dtype=data_type.INT64)
        elif descriptor.inferred_type == FieldType.FLOAT:
            kwargs.update(dtype=data_type.DOUBLE)
        elif descriptor.inferred_type == FieldType.BOOLEAN:
            kwargs.update(dtype=data_type.BOOL)
        else:  # pragma: no cover - 열거형 확장 시 방어
            raise ValueError(f"지원하지 않는 필드 타입입니다: {descriptor.inferred_type}")
        if descriptor.is_primary_key:
            kwargs.update(is_primary=True, auto_id=False)
        elif descriptor.nullable or descriptor.inferred_type == FieldType.NULLABLE:
            kwargs["nullable"] = True
        return module.FieldSchema(**kwargs)

    def index_type(self, entry: IndexPlanEntry) -> str:
        """인덱스 종류를 Milvus 인덱스 타입 이름으로 변환한다."""

        if entry.index_kind == IndexKind.VECTOR:
            return self._vector_index_type
        return _INDEX_TYPES[entry.index_kind]

    def add_index(self, index_params, entry: IndexPlanEntry) -> None:
        """MilvusClient.prepare_index_params 결과에 항목을 추가한다."""

        kwargs: Dict[str, Any] = {
            "field_name": entry.field_name,
            "index_type": self.index_type(entry),
            "index_name": entry.index_name,
        }
        if entry.metric is not None:
            kwargs["metric_type"] = entry.metric.value
        index_params.add_index(**kwargs)

    def parse_index_state(self, info: Any) -> IndexState:
        """describe_index 응답에서 빌드 상태를 해석한다.

        상태 키가 없는 응답은 인덱스 정보가 존재하면 완료로 본다.
        """

        if not info:
            return IndexState.PENDING
        raw = info.get("state") if isinstance(info, dict) else getattr(info, "state", None)
        if raw is None:
            return IndexState.FINISHED
        name = getattr(raw, "name", raw)
        return _STATE_NAMES.get(str(name).strip().lower(), IndexState.IN_PROGRESS)
