"""
목적: 인덱스 빌드 단계를 검증한다.
설명: 라운드별 상태 조회, 선택 인덱스 실패 허용, 필수 인덱스 전부 실패 시 오류,
      생성 요청 거부와 이미 존재하는 인덱스 처리를 확인한다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/core/ingestion/stages/index_builder.py
"""

from __future__ import annotations

import pytest

from vector_ingest.core.ingestion import IndexBuildTimeoutError
from vector_ingest.core.ingestion.const import IndexSettings
from vector_ingest.core.ingestion.stages import IndexBuilder, SchemaBuilder
from vector_ingest.integrations.vectorstore import VectorStoreClient

try:
    from tests.core.ingestion._ingestion_support import ScriptedVectorStoreEngine, product_records
except ModuleNotFoundError:
    from _ingestion_support import ScriptedVectorStoreEngine, product_records  # type: ignore[no-redef]

_SETTINGS = IndexSettings(poll_attempts=10, poll_interval_seconds=0)


def _prepare(engine: ScriptedVectorStoreEngine):
    blueprint = SchemaBuilder().build("products", product_records())
    client = VectorStoreClient(engine)
    client.create_collection(blueprint.schema)
    return client, blueprint.plan


def test_waits_until_indexes_finish() -> None:
    """다섯 번째 조회에서 완료되는 인덱스를 모두 기다리는지 확인한다."""

    engine = ScriptedVectorStoreEngine(index_ready_after=5)
    client, plan = _prepare(engine)

    report = IndexBuilder(client, _SETTINGS).build("products", plan)

    assert report.polls == 5
    assert report.failed == {}
    assert sorted(report.finished) == sorted(entry.index_name for entry in plan.entries)
    assert set(engine.index_polls.values()) == {5}


def test_optional_failure_is_tolerated() -> None:
    """선택 인덱스 실패와 생성 거부는 경고로 끝나는지 확인한다."""

    engine = ScriptedVectorStoreEngine(failed_indexes={"title_index"}, rejected_indexes={"price_index"})
    client, plan = _prepare(engine)

    report = IndexBuilder(client, _SETTINGS).build("products", plan)

    assert set(report.failed) == {"title_index", "price_index"}
    assert "price_index" not in engine.index_polls
    assert "docId_index" in report.finished


def test_single_mandatory_failure_is_tolerated() -> None:
    """필수 인덱스 중 하나만 실패하면 계속 진행하는지 확인한다."""

    engine = ScriptedVectorStoreEngine(failed_indexes={"docId_index"})
    client, plan = _prepare(engine)

    report = IndexBuilder(client, _SETTINGS).build("products", plan)

    assert "docId_index" in report.failed
    assert "embedding_index" in report.finished


def test_all_mandatory_failures_raise() -> None:
    """필수 인덱스가 모두 실패하면 IndexBuildTimeoutError를 내는지 확인한다."""

    engine = ScriptedVectorStoreEngine(failed_indexes={"docId_index", "embedding_index"})
    client, plan = _prepare(engine)

    with pytest.raises(IndexBuildTimeoutError) as exc_info:
        IndexBuilder(client, _SETTINGS).build("products", plan)

    assert exc_info.value.retryable is True
    assert exc_info.value.detail.metadata["failed"] == ["docId_index", "embedding_index"]


def test_timeout_marks_pending_indexes_failed() -> None:
    """조회 횟수 안에 끝나지 않은 인덱스를 실패로 보는지 확인한다."""

    engine = ScriptedVectorStoreEngine(index_ready_after=100)
    client, plan = _prepare(engine)

    with pytest.raises(IndexBuildTimeoutError):
        IndexBuilder(client, IndexSettings(poll_attempts=3, poll_interval_seconds=0)).build("products", plan)

    assert set(engine.index_polls.values()) == {3}


def test_existing_index_counts_as_submitted() -> None:
    """이미 존재하는 인덱스는 요청된 것으로 보고 상태를 조회하는지 확인한다."""

    engine = ScriptedVectorStoreEngine()
    client, plan = _prepare(engine)
    client.create_index("products", plan.entries[0])

    report = IndexBuilder(client, _SETTINGS).build("products", plan)

    assert report.failed == {}
    assert plan.entries[0].index_name in report.finished
