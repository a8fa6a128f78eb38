"""
목적: shared 패키지의 공개 API를 제공한다.
설명: 하위 공통 모듈에 대한 접근 포인트를 제공한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/shared/exceptions, src/vector_ingest/shared/logging, src/vector_ingest/shared/runtime
"""

from __future__ import annotations

from vector_ingest.shared.config import ConfigLoader
from vector_ingest.shared.exceptions import BaseAppException, ExceptionDetail
from vector_ingest.shared.logging import (
    InMemoryLogger,
    LogContext,
    LogLevel,
    LogRecord,
    Logger,
    LogRepository,
    create_default_logger,
)
from vector_ingest.shared.runtime import (
    CancellationToken,
    OperationCancelledError,
    RetryExecutor,
    RetryPolicy,
    TaskOutcome,
    ThreadPool,
    ThreadPoolConfig,
)

__all__ = [
    "BaseAppException",
    "ExceptionDetail",
    "ConfigLoader",
    "LogContext",
    "LogLevel",
    "LogRecord",
    "Logger",
    "LogRepository",
    "InMemoryLogger",
    "create_default_logger",
    "CancellationToken",
    "OperationCancelledError",
    "RetryPolicy",
    "RetryExecutor",
    "ThreadPoolConfig",
    "TaskOutcome",
    "ThreadPool",
]
