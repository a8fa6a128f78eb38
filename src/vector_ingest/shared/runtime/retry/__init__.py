"""
목적: 재시도 모듈 공개 API를 제공한다.
설명: 재시도 정책과 실행기를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/shared/runtime/retry/executor.py, src/vector_ingest/shared/runtime/retry/model.py
"""

from vector_ingest.shared.runtime.retry.executor import RetryExecutor, default_should_retry
from vector_ingest.shared.runtime.retry.model import RetryPolicy

__all__ = ["RetryPolicy", "RetryExecutor", "default_should_retry"]
