"""
목적: 재사용 가능한 재시도 실행기를 제공한다.
설명: 실패 시 정책에 따라 대기 후 재실행하는 run과,
      준비 완료 값이 나올 때까지 반복 조회하는 poll을 제공한다.
      대기 함수는 주입받으며 취소 토큰의 sleep을 넘기면 대기 중 취소가 즉시 반영된다.
디자인 패턴: 템플릿 메서드, 전략 패턴
참조: src/vector_ingest/shared/runtime/retry/model.py, src/vector_ingest/shared/runtime/cancellation/token.py
"""

from __future__ import annotations

import time
from typing import Callable, Optional, TypeVar

from vector_ingest.shared.exceptions import BaseAppException
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime.cancellation import OperationCancelledError
from vector_ingest.shared.runtime.retry.model import RetryPolicy

T = TypeVar("T")

Sleeper = Callable[[float], None]
RetryPredicate = Callable[[Exception], bool]
RetryCallback = Callable[[int, Exception, float], None]


def default_should_retry(error: Exception) -> bool:
    """기본 재시도 판정. 도메인 예외는 retryable 속성을 따른다."""

    if isinstance(error, BaseAppException):
        return error.retryable
    return True


class RetryExecutor:
    """재시도 실행기 구현체이다.

    Args:
        policy: 재시도 정책.
        sleeper: 대기 함수. 기본값은 time.sleep.
        logger: 주입 가능한 로거.
        name: 로그에 표시할 실행기 이름.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleeper: Optional[Sleeper] = None,
        logger: Optional[Logger] = None,
        name: str = "retry",
    ) -> None:
        self._policy = policy or RetryPolicy()
        self._sleeper = sleeper or time.sleep
        self._logger = logger or create_default_logger("RetryExecutor")
        self._name = name

    @property
    def policy(self) -> RetryPolicy:
        """재시도 정책을 반환한다."""

        return self._policy

    def run(
        self,
        fn: Callable[[int], T],
        should_retry: Optional[RetryPredicate] = None,
        on_retry: Optional[RetryCallback] = None,
    ) -> T:
        """fn(attempt)을 성공할 때까지 정책 범위 안에서 반복 실행한다.

        재시도 불가 예외이거나 시도 횟수를 모두 소진하면 마지막 예외를 그대로 다시 발생시킨다.
        """

        predicate = should_retry or default_should_retry
        max_attempts = self._policy.max_attempts
        attempt = 1
        while True:
            try:
                return fn(attempt)
            except OperationCancelledError:
                raise
            except Exception as error:  # noqa: BLE001 - 재시도 판정을 위해 포괄 처리
                if attempt >= max_attempts or not predicate(error):
                    self._logger.error(
                        f"[{self._name}] 재시도 중단: {attempt}/{max_attempts} 시도 후 실패 ({error})"
                    )
                    raise
                delay = self._policy.delay_for(attempt)
                self._logger.warning(
                    f"[{self._name}] 시도 {attempt}/{max_attempts} 실패, {delay}초 후 재시도: {error}"
                )
                if on_retry is not None:
                    on_retry(attempt, error, delay)
                self._sleeper(delay)
                attempt += 1

    def poll(
        self,
        check: Callable[[int], Optional[T]],
        max_attempts: Optional[int] = None,
    ) -> Optional[T]:
        """check(attempt)가 None이 아닌 값을 돌려줄 때까지 반복 조회한다.

        check에서 발생한 예외는 로그만 남기고 "아직 준비되지 않음"으로 취급한다.
        모든 시도가 끝나도 값이 없으면 None을 반환한다.
        """

        attempts = max_attempts or self._policy.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                value = check(attempt)
            except OperationCancelledError:
                raise
            except Exception as error:  # noqa: BLE001 - 폴링 중 일시 오류 흡수
                self._logger.warning(f"[{self._name}] 조회 {attempt}/{attempts} 실패: {error}")
                value = None
            if value is not None:
                return value
            if attempt < attempts:
                self._sleeper(self._policy.delay_for(1))
        self._logger.warning(f"[{self._name}] 조회 {attempts}회 동안 준비되지 않았습니다.")
        return None
