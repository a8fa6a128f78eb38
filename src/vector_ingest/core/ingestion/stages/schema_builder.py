"""
목적: 레코드 묶음에서 컬렉션 스키마와 인덱스 계획을 만든다.
설명: 시스템 필드(docId, embedding, documentText)를 먼저 두고, 모든 레코드 키와 필드 설명 키의
      합집합을 이름순으로 정렬해 데이터 필드를 추론한다. 레코드마다 관찰된 타입은 넓혀서 합치므로
      레코드 순서나 키 순서가 바뀌어도 같은 스키마가 나온다.
디자인 패턴: 빌더 패턴
참조: src/vector_ingest/core/ingestion/stages/type_inferencer.py, src/vector_ingest/integrations/vectorstore/base/models.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from vector_ingest.core.ingestion.const import (
    PRIMARY_KEY_FIELD,
    SUMMARY_FIELD,
    SYSTEM_FIELDS,
    VECTOR_FIELD,
    SchemaSettings,
)
from vector_ingest.core.ingestion.exceptions import SchemaInferenceError
from vector_ingest.core.ingestion.stages.type_inferencer import TypeInferencer
from vector_ingest.integrations.vectorstore import (
    CollectionSchema,
    FieldDescriptor,
    FieldType,
    IndexKind,
    IndexPlan,
    IndexPlanEntry,
    is_valid_field_name,
)
from vector_ingest.shared.logging import Logger, create_default_logger

_INDEX_KINDS: Dict[FieldType, IndexKind] = {
    FieldType.TEXT: IndexKind.INVERTED,
    FieldType.INTEGER: IndexKind.BITMAP,
    FieldType.BOOLEAN: IndexKind.BITMAP,
    FieldType.FLOAT: IndexKind.RANGE,
    FieldType.VECTOR: IndexKind.VECTOR,
}


@dataclass
class _FieldObservation:
    inferred: Optional[FieldType] = None
    sample: Any = None
    nullable: bool = False
    seen: int = 0


@dataclass(frozen=True)
class SchemaBlueprint:
    """작업당 한 번 만들어지는 스키마와 인덱스 계획."""

    schema: CollectionSchema
    plan: IndexPlan
    skipped_fields: Tuple[str, ...] = field(default_factory=tuple)


def index_kind_for(field_type: FieldType) -> Optional[IndexKind]:
    """필드 타입에 대응하는 인덱스 종류. 없으면 None."""

    return _INDEX_KINDS.get(field_type)


class SchemaBuilder:
    """컬렉션 스키마/인덱스 계획 빌더."""

    def __init__(
        self,
        settings: Optional[SchemaSettings] = None,
        type_inferencer: Optional[TypeInferencer] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._settings = settings or SchemaSettings()
        self._logger = logger or create_default_logger("SchemaBuilder")
        self._inferencer = type_inferencer or TypeInferencer(logger=self._logger)

    def build(
        self,
        collection_name: str,
        records: Sequence[Mapping[str, Any]],
        field_descriptions: Optional[Mapping[str, str]] = None,
    ) -> SchemaBlueprint:
        """레코드에서 스키마와 인덱스 계획을 만든다.

        Raises:
            SchemaInferenceError: 레코드가 없거나, 객체가 아니거나, 필드 이름이 잘못되었을 때.
        """

        descriptions = dict(field_descriptions or {})
        if not records:
            raise SchemaInferenceError.build("스키마를 추론할 레코드가 없습니다.")
        observations = self._observe(records, descriptions)

        fields = self._system_fields()
        skipped: List[str] = []
        for name in sorted(observations):
            if name in SYSTEM_FIELDS:
                skipped.append(name)
                if name != self._settings.primary_key_source:
                    self._logger.warning(f"시스템 필드와 이름이 같은 데이터 필드를 건너뜁니다: {name}")
                continue
            fields.append(self._describe(name, observations[name], descriptions.get(name)))

        try:
            schema = CollectionSchema(
                collection_name=collection_name,
                fields=fields,
                allow_extra_fields=self._settings.allow_extra_fields,
                description=f"Collection '{collection_name}' built from {len(records)} records.",
            )
        except ValidationError as error:
            raise SchemaInferenceError.build(
                "컬렉션 스키마 검증에 실패했습니다.",
                cause=str(error),
                original=error,
            ) from error

        plan = self._plan(schema)
        self._logger.info(
            f"스키마 추론 완료: 필드 {len(schema.fields)}개, 인덱스 {len(plan.entries)}개",
            collection=collection_name,
        )
        return SchemaBlueprint(schema=schema, plan=plan, skipped_fields=tuple(skipped))

    def _observe(
        self,
        records: Sequence[Mapping[str, Any]],
        descriptions: Mapping[str, str],
    ) -> Dict[str, _FieldObservation]:
        observations: Dict[str, _FieldObservation] = {
            name: _FieldObservation() for name in descriptions
        }
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise SchemaInferenceError.build(
                    f"레코드는 JSON 객체여야 합니다: index={position}",
                    cause=type(record).__name__,
                )
            for name, value in record.items():
                observation = observations.setdefault(name, _FieldObservation())
                observation.seen += 1
                if value is None:
                    observation.nullable = True
                    continue
                if observation.sample is None:
                    observation.sample = value
                observed = self._inferencer.infer(value, field_name=name)
                observation.inferred = self._inferencer.merge(observation.inferred, observed)
        for name, observation in observations.items():
            if not is_valid_field_name(name):
                raise SchemaInferenceError.build(
                    f"유효하지 않은 필드 이름입니다: {name!r}",
                    hint="필드 이름은 영문자나 밑줄로 시작하고 영숫자/밑줄만 사용해야 합니다.",
                )
            if observation.seen < len(records):
                observation.nullable = True
        return observations

    def _system_fields(self) -> List[FieldDescriptor]:
        settings = self._settings
        return [
            FieldDescriptor(
                name=PRIMARY_KEY_FIELD,
                inferred_type=FieldType.TEXT,
                max_length=settings.primary_key_max_length,
                is_primary_key=True,
                description="Unique identifier for each document/record.",
            ),
            FieldDescriptor(
                name=VECTOR_FIELD,
                inferred_type=FieldType.VECTOR,
                vector_dim=settings.vector_dim,
                description="Embedding vector of the rendered summary text.",
            ),
            FieldDescriptor(
                name=SUMMARY_FIELD,
                inferred_type=FieldType.TEXT,
                max_length=settings.summary_max_length,
                description="Rendered summary text used to compute the embedding.",
            ),
        ]

    def _describe(
        self,
        name: str,
        observation: _FieldObservation,
        description: Optional[str],
    ) -> FieldDescriptor:
        inferred = observation.inferred or FieldType.NULLABLE
        is_text = inferred in (FieldType.TEXT, FieldType.NULLABLE)
        return FieldDescriptor(
            name=name,
            inferred_type=inferred,
            max_length=self._settings.text_max_length if is_text else None,
            nullable=observation.nullable,
            description=description or f"Inferred field: {name}.",
        )

    def _plan(self, schema: CollectionSchema) -> IndexPlan:
        mandatory_fields = {schema.primary_key.name, schema.vector_field.name}
        excluded = set(self._settings.unindexed_fields)
        for name in sorted(excluded & mandatory_fields):
            self._logger.warning(f"필수 인덱스는 제외할 수 없어 유지합니다: {name}")
        excluded -= mandatory_fields

        entries: List[IndexPlanEntry] = []
        for descriptor in schema.fields:
            if descriptor.name in excluded:
                continue
            kind = index_kind_for(descriptor.inferred_type)
            if kind is None:
                self._logger.warning(
                    f"인덱스를 지원하지 않는 타입이라 인덱스를 만들지 않습니다: "
                    f"{descriptor.name} ({descriptor.inferred_type.value})"
                )
                continue
            entries.append(
                IndexPlanEntry.for_field(
                    descriptor.name,
                    kind,
                    metric=self._settings.vector_metric if kind == IndexKind.VECTOR else None,
                    mandatory=descriptor.name in mandatory_fields,
                )
            )
        plan = IndexPlan(entries=entries)
        plan.validate_for(schema, excluded=excluded)
        return plan
