"""
목적: 파이프라인 시도 기록 모델을 정의한다.
설명: 시도마다 거친 단계, 오류, 제외 레코드, 기록 건수를 남긴다.
디자인 패턴: 상태 기록 객체
참조: src/vector_ingest/core/ingestion/orchestrator.py
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from vector_ingest.core.ingestion.models.records import RejectedRecord


class IngestionPhase(str, Enum):
    """파이프라인 단계."""

    PROVISIONING = "Provisioning"
    INDEX_BUILDING = "IndexBuilding"
    RENDERING = "Rendering"
    EMBEDDING = "Embedding"
    UPSERTING = "Upserting"
    VERIFYING = "Verifying"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IngestionAttempt(BaseModel):
    """전체 파이프라인 한 번의 시도 기록."""

    attempt_number: int = Field(ge=1)
    phase: Optional[IngestionPhase] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    phase_history: List[IngestionPhase] = Field(default_factory=list)
    rejected: List[RejectedRecord] = Field(default_factory=list)
    rows_written: int = 0
    started_at: datetime = Field(default_factory=_utc_now)
    finished_at: Optional[datetime] = None

    def enter(self, phase: IngestionPhase) -> None:
        """단계에 진입한다."""

        self.phase = phase
        self.phase_history.append(phase)

    def succeed(self, rows_written: int) -> None:
        """성공으로 종료한다."""

        self.rows_written = rows_written
        self.enter(IngestionPhase.SUCCEEDED)
        self.finished_at = _utc_now()

    def fail(self, message: str, code: Optional[str] = None) -> None:
        """실패로 종료한다."""

        self.error = message
        self.error_code = code
        self.enter(IngestionPhase.FAILED)
        self.finished_at = _utc_now()

    @property
    def failed_phase(self) -> Optional[IngestionPhase]:
        """실패 직전에 진행 중이던 단계를 반환한다."""

        if self.phase != IngestionPhase.FAILED or len(self.phase_history) < 2:
            return None
        return self.phase_history[-2]
