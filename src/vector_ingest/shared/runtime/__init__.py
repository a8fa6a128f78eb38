"""
목적: 런타임 모듈 공개 API를 제공한다.
설명: 취소 토큰/재시도 실행기/스레드풀 구성 요소를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/shared/runtime/cancellation, src/vector_ingest/shared/runtime/retry, src/vector_ingest/shared/runtime/thread_pool
"""

from vector_ingest.shared.runtime.cancellation import (
    CancellationToken,
    OperationCancelledError,
    none_token,
)
from vector_ingest.shared.runtime.retry import RetryExecutor, RetryPolicy, default_should_retry
from vector_ingest.shared.runtime.thread_pool import TaskOutcome, ThreadPool, ThreadPoolConfig

__all__ = [
    "CancellationToken",
    "OperationCancelledError",
    "none_token",
    "RetryPolicy",
    "RetryExecutor",
    "default_should_retry",
    "ThreadPoolConfig",
    "TaskOutcome",
    "ThreadPool",
]
