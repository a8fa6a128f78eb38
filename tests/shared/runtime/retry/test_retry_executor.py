"""
목적: 재시도 실행기의 run/poll 동작을 검증한다.
설명: 대기 시간 계산, 재시도 불가 예외 처리, 취소 전파, 폴링 소진을 확인한다.
디자인 패턴: 템플릿 메서드, 전략 패턴
참조: src/vector_ingest/shared/runtime/retry/executor.py, src/vector_ingest/shared/runtime/retry/model.py
"""

from __future__ import annotations

from typing import List, Optional

import pytest

from vector_ingest.shared.exceptions import BaseAppException
from vector_ingest.shared.runtime import (
    OperationCancelledError,
    RetryExecutor,
    RetryPolicy,
    default_should_retry,
)


class _FatalError(BaseAppException):
    default_code = "UNIT_FATAL"
    retryable = False


def _executor(policy: RetryPolicy, sleeps: List[float]) -> RetryExecutor:
    return RetryExecutor(policy, sleeper=sleeps.append, name="unit")


def test_policy_delay_backoff_and_cap() -> None:
    """배수 증가와 상한이 적용되는지 확인한다."""

    policy = RetryPolicy(max_attempts=5, delay_seconds=1.0, backoff_multiplier=2.0, max_delay_seconds=3.0)

    assert [policy.delay_for(attempt) for attempt in (1, 2, 3)] == [1.0, 2.0, 3.0]


def test_run_retries_until_success() -> None:
    """실패 후 대기하고 다시 실행해 성공 값을 반환하는지 확인한다."""

    sleeps: List[float] = []
    calls: List[int] = []
    retried: List[int] = []

    def flaky(attempt: int) -> str:
        calls.append(attempt)
        if attempt < 3:
            raise RuntimeError("일시 오류")
        return "ok"

    result = _executor(RetryPolicy(max_attempts=3, delay_seconds=5.0), sleeps).run(
        flaky,
        on_retry=lambda attempt, error, delay: retried.append(attempt),
    )

    assert result == "ok"
    assert calls == [1, 2, 3]
    assert sleeps == [5.0, 5.0]
    assert retried == [1, 2]


def test_run_raises_last_error_after_exhaustion() -> None:
    """시도 횟수를 소진하면 마지막 예외를 다시 발생시키는지 확인한다."""

    sleeps: List[float] = []

    def always_fail(attempt: int) -> None:
        raise RuntimeError(f"실패 {attempt}")

    with pytest.raises(RuntimeError, match="실패 2"):
        _executor(RetryPolicy(max_attempts=2), sleeps).run(always_fail)
    assert sleeps == [0.0]


def test_run_does_not_retry_fatal_or_cancelled() -> None:
    """재시도 불가 예외와 취소는 즉시 전파되는지 확인한다."""

    sleeps: List[float] = []
    calls: List[int] = []
    executor = _executor(RetryPolicy(max_attempts=3), sleeps)

    def fatal(attempt: int) -> None:
        calls.append(attempt)
        raise _FatalError("치명적")

    def cancelled(attempt: int) -> None:
        calls.append(attempt)
        raise OperationCancelledError("취소")

    with pytest.raises(_FatalError):
        executor.run(fatal)
    with pytest.raises(OperationCancelledError):
        executor.run(cancelled, should_retry=lambda error: True)
    assert calls == [1, 1]
    assert sleeps == []


def test_default_should_retry() -> None:
    """도메인 예외는 retryable 속성을 따르는지 확인한다."""

    assert default_should_retry(RuntimeError("x")) is True
    assert default_should_retry(_FatalError("x")) is False


def test_poll_returns_first_ready_value() -> None:
    """준비된 값이 나올 때까지 폴링하고 예외는 흡수하는지 확인한다."""

    sleeps: List[float] = []

    def check(attempt: int) -> Optional[int]:
        if attempt == 1:
            raise ConnectionError("일시 단절")
        if attempt < 4:
            return None
        return attempt

    value = _executor(RetryPolicy(max_attempts=10, delay_seconds=1.0), sleeps).poll(check)

    assert value == 4
    assert sleeps == [1.0, 1.0, 1.0]


def test_poll_returns_none_after_exhaustion() -> None:
    """끝까지 준비되지 않으면 None을 반환하는지 확인한다."""

    sleeps: List[float] = []

    value = _executor(RetryPolicy(max_attempts=10, delay_seconds=0.5), sleeps).poll(
        lambda attempt: None,
        max_attempts=3,
    )

    assert value is None
    assert sleeps == [0.5, 0.5]
