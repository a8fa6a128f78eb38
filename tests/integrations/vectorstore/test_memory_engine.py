"""
목적: 인메모리 벡터 스토어 엔진과 공통 클라이언트 동작을 검증한다.
설명: 컬렉션 수명, 인덱스 생성, flush 전후 행 수, 행 검증, 클라이언트 연결 멱등성을 확인한다.
디자인 패턴: 전략 패턴 구현체, 파사드
참조: src/vector_ingest/integrations/vectorstore/engines/memory/engine.py, src/vector_ingest/integrations/vectorstore/client.py
"""

from __future__ import annotations

import pytest

from vector_ingest.integrations.vectorstore import (
    CollectionSchema,
    FieldDescriptor,
    FieldType,
    IndexAlreadyExistsError,
    IndexKind,
    IndexPlanEntry,
    IndexState,
    InMemoryVectorStoreEngine,
    VectorMetric,
    VectorStoreClient,
)


def _schema(allow_extra_fields: bool = True) -> CollectionSchema:
    return CollectionSchema(
        collection_name="products",
        allow_extra_fields=allow_extra_fields,
        fields=[
            FieldDescriptor(name="docId", inferred_type=FieldType.TEXT, max_length=256, is_primary_key=True),
            FieldDescriptor(name="embedding", inferred_type=FieldType.VECTOR, vector_dim=3),
            FieldDescriptor(name="title", inferred_type=FieldType.TEXT, max_length=64),
        ],
    )


def _row(pk: str, title: str = "상품") -> dict:
    return {"docId": pk, "embedding": [1.0, 0.0, 0.0], "title": title}


def test_client_connect_is_idempotent() -> None:
    """연결/종료가 여러 번 호출돼도 한 번만 반영되는지 확인한다."""

    client = VectorStoreClient(InMemoryVectorStoreEngine())

    with client:
        client.connect()
        assert client.connected is True
    assert client.connected is False
    client.close()


def test_collection_lifecycle() -> None:
    """생성/존재 확인/삭제 흐름을 확인한다."""

    client = VectorStoreClient(InMemoryVectorStoreEngine())
    schema = _schema()

    assert client.has_collection("products") is False
    client.create_collection(schema)
    assert client.has_collection("products") is True
    assert client.get_schema("products") == schema
    with pytest.raises(ValueError):
        client.create_collection(schema)

    client.drop_collection("products")
    assert client.has_collection("products") is False
    assert client.get_schema("products") is None


def test_rows_visible_only_after_flush() -> None:
    """업서트된 행은 flush 이후에만 행 수에 반영되는지 확인한다."""

    engine = InMemoryVectorStoreEngine()
    client = VectorStoreClient(engine)
    client.create_collection(_schema())

    written = client.upsert("products", [_row("a"), _row("b")])
    assert written == 2
    assert client.get_row_count("products") == 0

    client.flush("products")
    assert client.get_row_count("products") == 2

    client.upsert("products", [_row("a", title="갱신")])
    client.flush("products")
    assert client.get_row_count("products") == 2
    titles = {row["docId"]: row["title"] for row in engine.get_rows("products")}
    assert titles == {"a": "갱신", "b": "상품"}
    assert client.upsert("products", []) == 0


def test_row_validation() -> None:
    """기본 키/벡터 차원/유한값/스키마 밖 필드 검증을 확인한다."""

    client = VectorStoreClient(InMemoryVectorStoreEngine())
    client.create_collection(_schema(allow_extra_fields=False))

    with pytest.raises(ValueError):
        client.upsert("products", [{"docId": "", "embedding": [1.0, 0.0, 0.0]}])
    with pytest.raises(ValueError):
        client.upsert("products", [{"docId": "a", "embedding": [1.0, 0.0]}])
    with pytest.raises(ValueError):
        client.upsert("products", [{"docId": "a", "embedding": [float("nan"), 0.0, 0.0]}])
    with pytest.raises(ValueError):
        client.upsert("products", [{"docId": "a", "embedding": [1.0, 0.0, 0.0], "extra": 1}])


def test_index_creation_and_state() -> None:
    """인덱스 생성, 중복 생성 오류, 상태 조회를 확인한다."""

    engine = InMemoryVectorStoreEngine()
    client = VectorStoreClient(engine)
    client.create_collection(_schema())
    entry = IndexPlanEntry.for_field("embedding", IndexKind.VECTOR, VectorMetric.COSINE, mandatory=True)

    client.create_index("products", entry)

    assert client.get_index_state("products", "embedding_index") == IndexState.FINISHED
    assert engine.list_indexes("products") == [entry]
    with pytest.raises(IndexAlreadyExistsError):
        client.create_index("products", entry)
    with pytest.raises(ValueError):
        client.create_index("products", IndexPlanEntry.for_field("missing", IndexKind.INVERTED))
    with pytest.raises(ValueError):
        client.get_index_state("products", "title_index")


def test_load_collection() -> None:
    """컬렉션 적재 플래그를 확인한다."""

    engine = InMemoryVectorStoreEngine()
    client = VectorStoreClient(engine)
    client.create_collection(_schema())

    assert engine.is_loaded("products") is False
    client.load_collection("products")
    assert engine.is_loaded("products") is True
    with pytest.raises(ValueError):
        client.load_collection("unknown")
