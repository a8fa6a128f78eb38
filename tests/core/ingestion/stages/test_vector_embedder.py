"""
목적: 임베딩 단계와 벡터 정규화 규칙을 검증한다.
설명: 긴 벡터 자르기/재정규화, 같은 길이 벡터 유지, 잘못된 벡터 거부,
      레코드 단위 실패 제외와 입력 순서 유지를 확인한다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/core/ingestion/stages/embedder.py
"""

from __future__ import annotations

import math

import pytest

from vector_ingest.core.ingestion import EmbeddingError
from vector_ingest.core.ingestion.const import EmbeddingSettings
from vector_ingest.core.ingestion.models import RenderedRecord
from vector_ingest.core.ingestion.stages import VectorEmbedder, normalize_vector
from vector_ingest.shared.runtime import CancellationToken, OperationCancelledError

try:
    from tests.core.ingestion._ingestion_support import FixedLengthEmbeddings
except ModuleNotFoundError:
    from _ingestion_support import FixedLengthEmbeddings  # type: ignore[no-redef]


def _records(count: int) -> list[RenderedRecord]:
    return [
        RenderedRecord(index=index, primary_key=f"key-{index}", summary_text=f"요약 {index}")
        for index in range(count)
    ]


def _norm(vector) -> float:
    return math.sqrt(math.fsum(value * value for value in vector))


def test_normalize_truncates_and_renormalizes() -> None:
    """긴 벡터는 앞쪽 차원만 남기고 단위 길이로 정규화하는지 확인한다."""

    vector = normalize_vector([3.0, 4.0, 12.0], 2)

    assert vector == pytest.approx((0.6, 0.8))
    assert _norm(vector) == pytest.approx(1.0)


def test_normalize_keeps_equal_length_vector() -> None:
    """선언 차원과 같은 길이의 벡터는 그대로 두는지 확인한다."""

    assert normalize_vector([3.0, 4.0], 2) == (3.0, 4.0)


@pytest.mark.parametrize(
    "raw",
    [
        [],
        [1.0],
        [1.0, float("nan"), 2.0],
        [0.0, 0.0, 5.0],
        [0.0, 0.0],
    ],
)
def test_normalize_rejects_invalid_vectors(raw) -> None:
    """비었거나, 짧거나, 유한하지 않거나, 길이가 0인 벡터를 거부하는지 확인한다."""

    with pytest.raises(EmbeddingError):
        normalize_vector(raw, 2)


def test_embed_keeps_order_and_dimension() -> None:
    """3072차원 제공자 벡터를 768차원 단위 벡터로 맞추고 입력 순서를 유지하는지 확인한다."""

    embeddings = FixedLengthEmbeddings(dim=3072)

    accepted, rejected = VectorEmbedder(EmbeddingSettings(concurrency=4)).embed(_records(10), embeddings, 768)

    assert rejected == []
    assert [record.primary_key for record in accepted] == [f"key-{index}" for index in range(10)]
    assert all(len(record.embedding_vector) == 768 for record in accepted)
    assert all(_norm(record.embedding_vector) == pytest.approx(1.0) for record in accepted)
    assert sorted(embeddings.queries) == sorted(f"요약 {index}" for index in range(10))


def test_embed_rejects_failed_records() -> None:
    """제공자 오류와 짧은 벡터는 해당 레코드만 제외하는지 확인한다."""

    embeddings = FixedLengthEmbeddings(dim=3072, failing_texts={"요약 1"}, short_texts={"요약 3"})

    accepted, rejected = VectorEmbedder().embed(_records(5), embeddings, 768)

    assert [record.primary_key for record in accepted] == ["key-0", "key-2", "key-4"]
    assert [(item.primary_key, item.code) for item in rejected] == [
        ("key-1", "INGESTION_EMBEDDING"),
        ("key-3", "INGESTION_EMBEDDING"),
    ]


def test_embed_raises_when_nothing_survives() -> None:
    """살아남은 레코드가 없으면 EmbeddingError를 내는지 확인한다."""

    embeddings = FixedLengthEmbeddings(dim=10)

    with pytest.raises(EmbeddingError):
        VectorEmbedder().embed(_records(3), embeddings, 768)


def test_embed_cancelled() -> None:
    """취소된 토큰이면 임베딩을 시작하지 않는지 확인한다."""

    token = CancellationToken()
    token.cancel()
    embeddings = FixedLengthEmbeddings()

    with pytest.raises(OperationCancelledError):
        VectorEmbedder().embed(_records(2), embeddings, 768, token)

    assert embeddings.queries == []
