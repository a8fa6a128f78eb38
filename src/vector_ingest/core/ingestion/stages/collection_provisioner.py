"""
목적: 스키마와 정확히 일치하는 빈 컬렉션을 준비한다.
설명: 기존 컬렉션이 있으면 삭제 후 안정화 대기, 생성, 존재 여부 폴링 순으로 진행한다.
      이 과정 전체를 생성 재시도 정책으로 감싸고, 모두 실패하면 ProvisioningError를 발생시킨다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/shared/runtime/retry/executor.py, src/vector_ingest/integrations/vectorstore/client.py
"""

from __future__ import annotations

from typing import Optional

from vector_ingest.core.ingestion.const import ProvisioningSettings
from vector_ingest.core.ingestion.exceptions import ProvisioningError
from vector_ingest.integrations.vectorstore import CollectionSchema, VectorStoreClient
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import (
    CancellationToken,
    OperationCancelledError,
    RetryExecutor,
    RetryPolicy,
    none_token,
)


class CollectionProvisioner:
    """컬렉션 프로비저너."""

    def __init__(
        self,
        client: VectorStoreClient,
        settings: Optional[ProvisioningSettings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._client = client
        self._settings = settings or ProvisioningSettings()
        self._logger = logger or create_default_logger("CollectionProvisioner")

    def provision(self, schema: CollectionSchema, token: Optional[CancellationToken] = None) -> None:
        """컬렉션을 삭제 후 재생성하고 조회 가능해질 때까지 기다린다.

        Raises:
            ProvisioningError: 생성 재시도를 모두 소진했을 때.
            OperationCancelledError: 진행 중 취소되었을 때.
        """

        token = token or none_token()
        settings = self._settings
        executor = RetryExecutor(
            RetryPolicy(
                max_attempts=settings.max_create_attempts,
                delay_seconds=settings.create_retry_delay_seconds,
            ),
            sleeper=token.sleep,
            logger=self._logger,
            name="provisioning",
        )
        try:
            executor.run(
                lambda attempt: self._create_once(schema, token, attempt),
                should_retry=lambda error: not isinstance(error, OperationCancelledError),
            )
        except OperationCancelledError:
            raise
        except ProvisioningError:
            raise
        except Exception as error:  # noqa: BLE001 - 드라이버 예외를 도메인 예외로 변환
            raise ProvisioningError.build(
                f"컬렉션 '{schema.collection_name}' 준비에 실패했습니다: {error}",
                cause=type(error).__name__,
                original=error,
                collection=schema.collection_name,
            ) from error

    def _create_once(self, schema: CollectionSchema, token: CancellationToken, attempt: int) -> None:
        token.raise_if_cancelled()
        name = schema.collection_name
        if self._client.has_collection(name):
            self._logger.info(f"기존 컬렉션을 삭제합니다: {name}")
            self._client.drop_collection(name)
            token.sleep(self._settings.drop_settle_seconds)
        self._client.create_collection(schema)
        self._logger.info(f"컬렉션 생성 요청 완료 (시도 {attempt}): {name}")

        poller = RetryExecutor(
            RetryPolicy(
                max_attempts=self._settings.existence_poll_attempts,
                delay_seconds=self._settings.existence_poll_interval_seconds,
            ),
            sleeper=token.sleep,
            logger=self._logger,
            name="collection-visibility",
        )
        visible = poller.poll(lambda _: True if self._client.has_collection(name) else None)
        if visible is None:
            raise ProvisioningError.build(
                f"컬렉션 '{name}'이(가) 생성 후 조회되지 않습니다.",
                hint="벡터 스토어 상태를 확인하세요.",
                collection=name,
            )
        self._logger.info(f"컬렉션 준비 완료: {name}")
