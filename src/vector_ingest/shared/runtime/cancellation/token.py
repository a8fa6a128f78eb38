"""
목적: 협력적 취소 토큰을 제공한다.
설명: 파이프라인 단계 시작 시점과 재시도/폴링 대기 구간에서 취소 여부를 확인한다.
      대기는 threading.Event 기반이라 취소 즉시 깨어난다.
디자인 패턴: 취소 토큰
참조: src/vector_ingest/shared/runtime/retry/executor.py
"""

from __future__ import annotations

import threading
from typing import Optional

from vector_ingest.shared.exceptions import BaseAppException


class OperationCancelledError(BaseAppException):
    """작업 취소 예외. 재시도 대상이 아니다."""

    default_code = "OPERATION_CANCELLED"
    retryable = False


class CancellationToken:
    """취소 신호를 전달하는 토큰이다."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        """취소 여부를 반환한다."""

        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        """취소 사유를 반환한다."""

        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """취소를 요청한다. 여러 번 호출해도 첫 사유를 유지한다."""

        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        """취소되었으면 OperationCancelledError를 발생시킨다."""

        if self._event.is_set():
            raise OperationCancelledError.build(
                "작업이 취소되었습니다.",
                cause=self._reason or "취소 요청",
            )

    def sleep(self, seconds: float) -> None:
        """지정 시간 동안 대기하되 취소 시 즉시 예외를 발생시킨다."""

        self.raise_if_cancelled()
        if seconds > 0 and self._event.wait(seconds):
            self.raise_if_cancelled()


class _NeverCancelledToken(CancellationToken):
    def cancel(self, reason: Optional[str] = None) -> None:
        raise RuntimeError("기본 토큰은 취소할 수 없습니다.")


def none_token() -> CancellationToken:
    """취소되지 않는 기본 토큰을 반환한다."""

    return _NeverCancelledToken()
