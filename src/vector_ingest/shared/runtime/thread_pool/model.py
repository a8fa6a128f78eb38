"""
목적: 스레드풀 모델을 정의한다.
설명: 스레드풀 설정과 태스크 결과 모델을 Pydantic으로 제공한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/shared/runtime/thread_pool/thread_pool.py
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ThreadPoolConfig(BaseModel):
    """스레드풀 설정 모델이다.

    Args:
        max_workers: 최대 스레드 수.
        thread_name_prefix: 스레드 이름 접두사.
    """

    max_workers: int = Field(default=4, ge=1)
    thread_name_prefix: str = Field(default="thread-pool")


class TaskOutcome(BaseModel):
    """map_settled 한 건의 실행 결과이다.

    Args:
        index: 입력 순서 인덱스.
        value: 성공 시 반환값.
        error: 실패 시 예외 객체.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int
    value: Optional[Any] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        """성공 여부를 반환한다."""

        return self.error is None
