"""
목적: 재시도 정책 모델을 정의한다.
설명: 최대 시도 횟수와 대기 시간 계산 규칙을 Pydantic으로 제공한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/shared/runtime/retry/executor.py
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RetryPolicy(BaseModel):
    """재시도 정책 모델이다.

    Args:
        max_attempts: 첫 시도를 포함한 최대 시도 횟수.
        delay_seconds: 첫 재시도 전 대기 시간(초).
        backoff_multiplier: 재시도마다 곱해지는 대기 배수.
        max_delay_seconds: 대기 시간 상한(초). None이면 상한이 없다.
    """

    max_attempts: int = Field(default=3, ge=1)
    delay_seconds: float = Field(default=0.0, ge=0)
    backoff_multiplier: float = Field(default=1.0, ge=1.0)
    max_delay_seconds: Optional[float] = Field(default=None, ge=0)

    def delay_for(self, attempt: int) -> float:
        """attempt번째 시도 실패 후의 대기 시간을 계산한다."""

        delay = self.delay_seconds * (self.backoff_multiplier ** max(0, attempt - 1))
        if self.max_delay_seconds is not None:
            delay = min(delay, self.max_delay_seconds)
        return delay
