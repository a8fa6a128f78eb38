"""
목적: 인덱스 계획대로 인덱스 빌드를 요청하고 완료를 기다린다.
설명: 항목마다 빌드를 요청한 뒤, 요청된 항목의 상태를 라운드마다 각각 조회한다.
      시간 안에 끝나지 않은 항목은 실패로 본다. 선택 인덱스 실패는 경고로 끝나고,
      필수 인덱스(기본 키, 벡터)가 모두 실패한 경우에만 IndexBuildTimeoutError를 발생시킨다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/shared/runtime/retry/executor.py, src/vector_ingest/integrations/vectorstore/client.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vector_ingest.core.ingestion.const import IndexSettings
from vector_ingest.core.ingestion.exceptions import IndexBuildTimeoutError
from vector_ingest.integrations.vectorstore import (
    IndexAlreadyExistsError,
    IndexPlan,
    IndexPlanEntry,
    IndexState,
    VectorStoreClient,
)
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import (
    CancellationToken,
    OperationCancelledError,
    RetryExecutor,
    RetryPolicy,
    none_token,
)


@dataclass
class IndexBuildReport:
    """인덱스 빌드 결과 요약."""

    finished: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    polls: int = 0


class IndexBuilder:
    """인덱스 빌더."""

    def __init__(
        self,
        client: VectorStoreClient,
        settings: Optional[IndexSettings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._client = client
        self._settings = settings or IndexSettings()
        self._logger = logger or create_default_logger("IndexBuilder")

    def build(
        self,
        collection: str,
        plan: IndexPlan,
        token: Optional[CancellationToken] = None,
    ) -> IndexBuildReport:
        """계획된 인덱스를 빌드한다.

        Raises:
            IndexBuildTimeoutError: 필수 인덱스가 모두 실패했을 때.
        """

        token = token or none_token()
        report = IndexBuildReport()
        pending: Dict[str, IndexPlanEntry] = {}
        for entry in plan.entries:
            token.raise_if_cancelled()
            if self._submit(collection, entry, report):
                pending[entry.index_name] = entry

        if pending:
            poller = RetryExecutor(
                RetryPolicy(
                    max_attempts=self._settings.poll_attempts,
                    delay_seconds=self._settings.poll_interval_seconds,
                ),
                sleeper=token.sleep,
                logger=self._logger,
                name="index-state",
            )

            def check(round_number: int) -> Optional[bool]:
                report.polls = round_number
                self._poll_round(collection, pending, report)
                return True if not pending else None

            poller.poll(check)

        for index_name in pending:
            report.failed[index_name] = f"{self._settings.poll_attempts}회 조회 안에 빌드가 끝나지 않았습니다."

        self._check_failures(collection, plan, report)
        self._logger.info(
            f"인덱스 빌드 종료: 완료 {len(report.finished)}개, 실패 {len(report.failed)}개",
            collection=collection,
        )
        return report

    def _submit(self, collection: str, entry: IndexPlanEntry, report: IndexBuildReport) -> bool:
        try:
            self._client.create_index(collection, entry)
        except IndexAlreadyExistsError:
            self._logger.info(f"인덱스가 이미 존재해 요청된 것으로 봅니다: {entry.index_name}")
        except OperationCancelledError:
            raise
        except Exception as error:  # noqa: BLE001 - 항목 단위 실패로 기록
            self._logger.warning(f"인덱스 생성 요청 실패: {entry.index_name} ({error})")
            report.failed[entry.index_name] = str(error)
            return False
        return True

    def _poll_round(
        self,
        collection: str,
        pending: Dict[str, IndexPlanEntry],
        report: IndexBuildReport,
    ) -> None:
        for index_name in list(pending):
            try:
                state = self._client.get_index_state(collection, index_name)
            except Exception as error:  # noqa: BLE001 - 일시 오류는 다음 라운드에 다시 조회
                self._logger.warning(f"인덱스 상태 조회 실패: {index_name} ({error})")
                continue
            if state == IndexState.FINISHED:
                report.finished.append(index_name)
                pending.pop(index_name)
            elif state == IndexState.FAILED:
                report.failed[index_name] = "벡터 스토어가 빌드 실패를 보고했습니다."
                pending.pop(index_name)

    def _check_failures(self, collection: str, plan: IndexPlan, report: IndexBuildReport) -> None:
        mandatory = plan.mandatory_entries()
        for entry in plan.entries:
            reason = report.failed.get(entry.index_name)
            if reason is not None:
                self._logger.warning(f"인덱스 빌드 실패: {entry.index_name} ({reason})")
        if mandatory and all(entry.index_name in report.failed for entry in mandatory):
            raise IndexBuildTimeoutError.build(
                f"컬렉션 '{collection}'의 필수 인덱스가 모두 빌드에 실패했습니다.",
                cause="; ".join(
                    f"{entry.index_name}: {report.failed[entry.index_name]}" for entry in mandatory
                ),
                collection=collection,
                failed=sorted(report.failed),
            )
