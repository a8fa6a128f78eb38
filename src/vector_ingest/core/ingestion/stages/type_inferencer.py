"""
목적: 샘플 값에서 필드 의미 타입을 추론한다.
설명: JSON 값 하나를 Text/Integer/Float/Boolean/Nullable 중 하나로 분류하고,
      여러 레코드에서 관찰된 타입을 넓히는 병합 규칙을 제공한다.
      예상하지 못한 런타임 타입은 경고 후 Text로 처리하며 실패하지 않는다.
디자인 패턴: 전략 객체
참조: src/vector_ingest/core/ingestion/stages/schema_builder.py
"""

from __future__ import annotations

import math
from typing import Any, Optional

from vector_ingest.integrations.vectorstore import FieldType
from vector_ingest.shared.logging import Logger, create_default_logger

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class TypeInferencer:
    """샘플 값 타입 추론기."""

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger or create_default_logger("TypeInferencer")

    def infer(self, value: Any, field_name: str = "") -> FieldType:
        """샘플 값 하나의 의미 타입을 반환한다."""

        if value is None:
            return FieldType.NULLABLE
        # bool은 int의 하위 타입이므로 먼저 판정한다.
        if isinstance(value, bool):
            return FieldType.BOOLEAN
        if isinstance(value, int):
            if INT64_MIN <= value <= INT64_MAX:
                return FieldType.INTEGER
            return FieldType.TEXT
        if isinstance(value, float):
            if not math.isfinite(value):
                return FieldType.TEXT
            if value.is_integer() and INT64_MIN <= value <= INT64_MAX:
                return FieldType.INTEGER
            return FieldType.FLOAT
        if isinstance(value, (str, list, tuple, dict)):
            return FieldType.TEXT
        self._logger.warning(
            f"알 수 없는 값 타입을 Text로 처리합니다: field={field_name or '?'}, "
            f"type={type(value).__name__}"
        )
        return FieldType.TEXT

    @staticmethod
    def merge(current: Optional[FieldType], observed: FieldType) -> FieldType:
        """두 관찰 타입을 넓혀 하나로 합친다.

        Integer+Float는 Float, Nullable+X는 X, 나머지 충돌은 Text가 된다.
        """

        if current is None or current == observed:
            return observed
        if current == FieldType.NULLABLE:
            return observed
        if observed == FieldType.NULLABLE:
            return current
        if {current, observed} == {FieldType.INTEGER, FieldType.FLOAT}:
            return FieldType.FLOAT
        return FieldType.TEXT
