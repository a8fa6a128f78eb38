"""
목적: 레코드 기반 스키마/인덱스 계획 생성을 검증한다.
설명: 시스템 필드 배치, 이름순 데이터 필드, 타입 넓히기, nullable 판정,
      인덱스 종류 선택, 인덱스 제외, 순서 무관성, 입력 오류를 확인한다.
디자인 패턴: 빌더 패턴
참조: src/vector_ingest/core/ingestion/stages/schema_builder.py
"""

from __future__ import annotations

import pytest

from vector_ingest.core.ingestion import SchemaInferenceError
from vector_ingest.core.ingestion.const import SchemaSettings
from vector_ingest.core.ingestion.stages import SchemaBuilder
from vector_ingest.integrations.vectorstore import FieldType, IndexKind, VectorMetric
from vector_ingest.shared.logging import InMemoryLogger, LogLevel

try:
    from tests.core.ingestion._ingestion_support import product_records
except ModuleNotFoundError:
    from _ingestion_support import product_records  # type: ignore[no-redef]


def _warnings(logger: InMemoryLogger) -> list[str]:
    return [record.message for record in logger.repository.list() if record.level == LogLevel.WARNING]


def test_schema_fields_and_types() -> None:
    """시스템 필드 뒤에 데이터 필드가 이름순으로 오고 타입이 넓혀지는지 확인한다."""

    logger = InMemoryLogger(name="schema-test")

    blueprint = SchemaBuilder(logger=logger).build(
        "products",
        product_records(),
        {"title": "상품명"},
    )
    schema = blueprint.schema

    assert schema.field_names() == [
        "docId",
        "embedding",
        "documentText",
        "created_at",
        "inStock",
        "price",
        "stock",
        "tags",
        "title",
    ]
    types = {item.name: item.inferred_type for item in schema.fields}
    assert types["price"] == FieldType.FLOAT
    assert types["stock"] == FieldType.INTEGER
    assert types["inStock"] == FieldType.BOOLEAN
    assert types["tags"] == FieldType.TEXT
    assert types["created_at"] == FieldType.INTEGER
    assert schema.primary_key.name == "docId"
    assert schema.primary_key.max_length == 256
    assert schema.vector_dim == 768
    assert schema.get_field("documentText").max_length == 16384
    assert schema.get_field("title").max_length == 8192
    assert schema.get_field("title").description == "상품명"
    assert schema.get_field("stock").nullable is False
    assert blueprint.skipped_fields == ("docId",)
    assert _warnings(logger) == []


def test_index_plan_kinds() -> None:
    """필드 타입별 인덱스 종류와 필수 인덱스 표시를 확인한다."""

    blueprint = SchemaBuilder().build("products", product_records())
    plan = {entry.field_name: entry for entry in blueprint.plan.entries}

    assert plan["docId"].index_kind == IndexKind.INVERTED
    assert plan["docId"].mandatory is True
    assert plan["embedding"].index_kind == IndexKind.VECTOR
    assert plan["embedding"].metric == VectorMetric.COSINE
    assert plan["embedding"].mandatory is True
    assert plan["documentText"].index_kind == IndexKind.INVERTED
    assert plan["price"].index_kind == IndexKind.RANGE
    assert plan["stock"].index_kind == IndexKind.BITMAP
    assert plan["inStock"].index_kind == IndexKind.BITMAP
    assert plan["title"].index_kind == IndexKind.INVERTED
    assert plan["title"].mandatory is False
    assert plan["title"].index_name == "title_index"


def test_nullable_fields() -> None:
    """일부 레코드에만 있거나 null뿐인 필드를 nullable로 처리하는지 확인한다."""

    logger = InMemoryLogger(name="schema-test")
    records = [
        {"title": "a", "note": None, "rating": 4},
        {"title": "b", "note": None},
    ]

    blueprint = SchemaBuilder(logger=logger).build("reviews", records, {"comment": "리뷰 본문"})
    schema = blueprint.schema

    assert schema.get_field("rating").inferred_type == FieldType.INTEGER
    assert schema.get_field("rating").nullable is True
    assert schema.get_field("note").inferred_type == FieldType.NULLABLE
    assert schema.get_field("comment").inferred_type == FieldType.NULLABLE
    assert schema.get_field("comment").description == "리뷰 본문"
    assert schema.get_field("title").nullable is False
    indexed = blueprint.plan.field_names()
    assert "note" not in indexed
    assert "comment" not in indexed
    assert "rating" in indexed
    assert len(_warnings(logger)) == 2


def test_unindexed_fields_keep_mandatory_indexes() -> None:
    """인덱스 제외 설정이 필수 인덱스에는 적용되지 않는지 확인한다."""

    logger = InMemoryLogger(name="schema-test")
    settings = SchemaSettings(unindexed_fields=["title", "docId"], vector_dim=4, vector_metric=VectorMetric.IP)

    blueprint = SchemaBuilder(settings, logger=logger).build("products", product_records())

    indexed = blueprint.plan.field_names()
    assert "title" not in indexed
    assert "docId" in indexed
    assert blueprint.schema.vector_dim == 4
    assert blueprint.plan.entries[1].metric == VectorMetric.IP
    assert any("docId" in message for message in _warnings(logger))


def test_system_name_collision_skipped() -> None:
    """시스템 필드와 이름이 같은 데이터 필드는 경고 후 건너뛰는지 확인한다."""

    logger = InMemoryLogger(name="schema-test")

    blueprint = SchemaBuilder(logger=logger).build(
        "products",
        [{"embedding": [0.1, 0.2], "documentText": "원문", "title": "a"}],
    )

    assert blueprint.schema.field_names() == ["docId", "embedding", "documentText", "title"]
    assert blueprint.schema.vector_field.inferred_type == FieldType.VECTOR
    assert set(blueprint.skipped_fields) == {"embedding", "documentText"}
    assert len(_warnings(logger)) == 2


def test_schema_independent_of_record_and_key_order() -> None:
    """레코드 순서와 키 순서가 바뀌어도 같은 스키마가 나오는지 확인한다."""

    records = product_records()
    shuffled = [{key: record[key] for key in reversed(list(record))} for record in reversed(records)]

    first = SchemaBuilder().build("products", records)
    second = SchemaBuilder().build("products", shuffled)

    assert first.schema == second.schema
    assert first.plan == second.plan


@pytest.mark.parametrize(
    ("collection", "records"),
    [
        ("products", []),
        ("products", [{"title": "a"}, "not-an-object"]),
        ("products", [{"bad-name": 1}]),
        ("1products", [{"title": "a"}]),
    ],
)
def test_invalid_input_raises(collection: str, records) -> None:
    """스키마를 만들 수 없는 입력은 SchemaInferenceError를 내는지 확인한다."""

    with pytest.raises(SchemaInferenceError):
        SchemaBuilder().build(collection, records)
