"""
목적: 업서트 결과가 영속화되었는지 확인한다.
설명: flush 후 행 수를 조회해 임베딩에 성공한 레코드 수와 비교한다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/integrations/vectorstore/client.py
"""

from __future__ import annotations

from typing import Optional

from vector_ingest.core.ingestion.exceptions import ConsistencyError
from vector_ingest.integrations.vectorstore import VectorStoreClient
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import CancellationToken, none_token


class ConsistencyVerifier:
    """행 수 일관성 검증기."""

    def __init__(self, client: VectorStoreClient, logger: Optional[Logger] = None) -> None:
        self._client = client
        self._logger = logger or create_default_logger("ConsistencyVerifier")

    def verify(
        self,
        collection: str,
        expected: int,
        token: Optional[CancellationToken] = None,
    ) -> int:
        """flush 후 행 수가 expected와 같은지 확인하고 실제 행 수를 반환한다.

        Raises:
            ConsistencyError: 호출이 실패하거나 행 수가 다를 때.
        """

        token = token or none_token()
        token.raise_if_cancelled()
        try:
            self._client.flush(collection)
            actual = self._client.get_row_count(collection)
        except Exception as error:  # noqa: BLE001 - 드라이버 예외를 도메인 예외로 변환
            raise ConsistencyError.build(
                f"컬렉션 '{collection}'의 flush/행 수 조회에 실패했습니다: {error}",
                cause=type(error).__name__,
                original=error,
                collection=collection,
            ) from error
        if actual != expected:
            raise ConsistencyError.build(
                f"행 수가 일치하지 않습니다: 기대 {expected}, 실제 {actual}",
                collection=collection,
                expected=expected,
                actual=actual,
            )
        self._logger.info(f"행 수 검증 완료: {actual}건", collection=collection)
        return actual
