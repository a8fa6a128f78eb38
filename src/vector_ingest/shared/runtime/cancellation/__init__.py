"""
목적: 취소 토큰 공개 API를 제공한다.
설명: 토큰과 취소 예외를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/shared/runtime/cancellation/token.py
"""

from vector_ingest.shared.runtime.cancellation.token import (
    CancellationToken,
    OperationCancelledError,
    none_token,
)

__all__ = ["CancellationToken", "OperationCancelledError", "none_token"]
