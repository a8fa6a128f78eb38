"""
목적: 요약 텍스트를 고정 차원 벡터로 임베딩한다.
설명: 제공자가 더 긴 벡터를 돌려주면 앞쪽 차원만 남기고 L2 단위 길이로 다시 정규화한다.
      더 짧거나 비었거나 유한하지 않거나 길이가 0인 벡터는 해당 레코드만 제외한다.
      호출은 제한된 스레드풀로 나눠 실행하고 결과는 입력 순서로 다시 맞춘다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/shared/runtime/thread_pool/thread_pool.py, src/vector_ingest/core/ingestion/models/records.py
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from langchain_core.embeddings import Embeddings

from vector_ingest.core.ingestion.const import EmbeddingSettings
from vector_ingest.core.ingestion.exceptions import EmbeddingError
from vector_ingest.core.ingestion.models import IngestRecord, RejectedRecord, RenderedRecord
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import (
    CancellationToken,
    OperationCancelledError,
    ThreadPool,
    ThreadPoolConfig,
    none_token,
)


def normalize_vector(raw: Sequence[float], vector_dim: int) -> Tuple[float, ...]:
    """제공자 벡터를 선언 차원에 맞춘다.

    Raises:
        EmbeddingError: 비었거나, 짧거나, 유한하지 않거나, 길이(노름)가 0일 때.
    """

    values = [float(value) for value in raw]
    if not values:
        raise EmbeddingError.build("임베딩 벡터가 비어 있습니다.")
    if len(values) < vector_dim:
        raise EmbeddingError.build(
            f"임베딩 차원이 부족합니다: 기대 {vector_dim}, 실제 {len(values)}",
            expected=vector_dim,
            actual=len(values),
        )
    if not all(math.isfinite(value) for value in values):
        raise EmbeddingError.build("임베딩 벡터에 유한하지 않은 값이 있습니다.")
    truncated = len(values) > vector_dim
    values = values[:vector_dim]
    norm = math.sqrt(math.fsum(value * value for value in values))
    if norm == 0.0:
        raise EmbeddingError.build("길이가 0인 벡터는 정규화할 수 없습니다.")
    if truncated:
        values = [value / norm for value in values]
    return tuple(values)


class VectorEmbedder:
    """레코드 임베딩 단계."""

    def __init__(self, settings: Optional[EmbeddingSettings] = None, logger: Optional[Logger] = None) -> None:
        self._settings = settings or EmbeddingSettings()
        self._logger = logger or create_default_logger("VectorEmbedder")

    def embed(
        self,
        records: Sequence[RenderedRecord],
        embeddings: Embeddings,
        vector_dim: int,
        token: Optional[CancellationToken] = None,
    ) -> Tuple[List[IngestRecord], List[RejectedRecord]]:
        """렌더링된 레코드에 벡터를 붙인다.

        Raises:
            EmbeddingError: 살아남은 레코드가 하나도 없을 때.
        """

        token = token or none_token()
        token.raise_if_cancelled()

        def embed_one(record: RenderedRecord) -> IngestRecord:
            token.raise_if_cancelled()
            try:
                raw = embeddings.embed_query(record.summary_text)
            except Exception as error:  # noqa: BLE001 - 제공자 예외를 레코드 단위 오류로 변환
                raise EmbeddingError.build(
                    f"임베딩 제공자 호출 실패: {error}",
                    cause=type(error).__name__,
                    original=error,
                ) from error
            return IngestRecord.from_rendered(record, normalize_vector(raw, vector_dim))

        config = ThreadPoolConfig(
            max_workers=self._settings.concurrency,
            thread_name_prefix="embedding",
        )
        with ThreadPool(config, logger=self._logger) as pool:
            outcomes = pool.map_settled(embed_one, records)

        accepted: List[IngestRecord] = []
        rejected: List[RejectedRecord] = []
        for record, outcome in zip(records, outcomes):
            if outcome.ok:
                accepted.append(outcome.value)
                continue
            error = outcome.error
            if isinstance(error, OperationCancelledError):
                raise error
            if not isinstance(error, EmbeddingError):
                error = EmbeddingError.build(str(error), original=error)  # type: ignore[arg-type]
            rejected.append(
                RejectedRecord(primary_key=record.primary_key, code=error.code, reason=error.message)
            )
            self._logger.warning(f"레코드 임베딩 실패로 제외합니다: {record.primary_key} ({error.message})")

        if not accepted:
            raise EmbeddingError.build(
                f"임베딩에 성공한 레코드가 없습니다 (대상 {len(records)}건).",
                rejected=len(rejected),
            )
        self._logger.info(f"임베딩 완료: 성공 {len(accepted)}건, 제외 {len(rejected)}건")
        return accepted, rejected
