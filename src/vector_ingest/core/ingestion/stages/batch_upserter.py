"""
목적: 임베딩된 레코드를 배치 단위로 업서트한다.
설명: 레코드를 batch_size 단위 배치로 나누고 배치마다 한 번 업서트한다.
      concurrency가 1이면 순서대로 실행하고 첫 실패에서 멈추며,
      그보다 크면 스레드풀에서 실행하고 모든 배치가 끝난 뒤 결과를 판정한다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/shared/runtime/thread_pool/thread_pool.py, src/vector_ingest/integrations/vectorstore/client.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from vector_ingest.core.ingestion.const import UpsertSettings
from vector_ingest.core.ingestion.exceptions import UpsertError
from vector_ingest.core.ingestion.models import BatchResult, IngestBatch, IngestRecord
from vector_ingest.integrations.vectorstore import VectorStoreClient
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import (
    CancellationToken,
    OperationCancelledError,
    ThreadPool,
    ThreadPoolConfig,
    none_token,
)


@dataclass
class UpsertReport:
    """업서트 결과 요약."""

    results: List[BatchResult] = field(default_factory=list)

    @property
    def written(self) -> int:
        return sum(result.written for result in self.results if result.success)

    @property
    def failed(self) -> List[BatchResult]:
        return [result for result in self.results if not result.success]


def partition(records: Sequence[IngestRecord], batch_size: int) -> List[IngestBatch]:
    """레코드를 순서를 유지한 배치 목록으로 나눈다."""

    return [
        IngestBatch(batch_number=number, records=list(records[start : start + batch_size]))
        for number, start in enumerate(range(0, len(records), batch_size), start=1)
    ]


class BatchUpserter:
    """배치 업서터."""

    def __init__(
        self,
        client: VectorStoreClient,
        settings: Optional[UpsertSettings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._client = client
        self._settings = settings or UpsertSettings()
        self._logger = logger or create_default_logger("BatchUpserter")

    def upsert(
        self,
        collection: str,
        records: Sequence[IngestRecord],
        token: Optional[CancellationToken] = None,
    ) -> UpsertReport:
        """레코드를 업서트하고 배치 결과를 돌려준다.

        Raises:
            UpsertError: 실패한 배치가 하나라도 있을 때.
        """

        token = token or none_token()
        batches = partition(records, self._settings.batch_size)
        self._logger.info(
            f"업서트 시작: 레코드 {len(records)}건, 배치 {len(batches)}개",
            collection=collection,
        )
        report = UpsertReport()
        if self._settings.concurrency <= 1 or len(batches) <= 1:
            for batch in batches:
                token.raise_if_cancelled()
                result = self._upsert_batch(collection, batch, len(batches))
                report.results.append(result)
                if not result.success:
                    break
        else:
            config = ThreadPoolConfig(
                max_workers=self._settings.concurrency,
                thread_name_prefix="upsert",
            )

            def run(batch: IngestBatch) -> BatchResult:
                token.raise_if_cancelled()
                return self._upsert_batch(collection, batch, len(batches))

            with ThreadPool(config, logger=self._logger) as pool:
                outcomes = pool.map_settled(run, batches)
            for outcome in outcomes:
                if isinstance(outcome.error, OperationCancelledError):
                    raise outcome.error
            report.results.extend(outcome.value for outcome in outcomes)

        failed = report.failed
        if failed:
            first = failed[0]
            raise UpsertError.build(
                f"배치 {first.batch_number} 업서트에 실패했습니다: {first.error}",
                collection=collection,
                failed_batches=[result.batch_number for result in failed],
                written=report.written,
            )
        self._logger.info(f"업서트 완료: {report.written}건", collection=collection)
        return report

    def _upsert_batch(self, collection: str, batch: IngestBatch, total: int) -> BatchResult:
        count = len(batch.records)
        try:
            written = self._client.upsert(collection, batch.to_rows())
        except Exception as error:  # noqa: BLE001 - 배치 결과로 기록
            self._logger.error(f"배치 업서트 실패: {batch.batch_number}/{total} ({error})")
            return BatchResult(
                batch_number=batch.batch_number,
                count=count,
                success=False,
                error=str(error),
            )
        if written != count:
            self._logger.warning(
                f"배치 {batch.batch_number}의 기록 건수가 다릅니다: 요청 {count}, 기록 {written}"
            )
        self._logger.debug(f"배치 완료: {batch.batch_number}/{total} (batch_size={count})")
        return BatchResult(
            batch_number=batch.batch_number,
            count=count,
            success=True,
            written=written,
        )
