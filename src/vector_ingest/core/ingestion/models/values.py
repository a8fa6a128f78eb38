"""
목적: 원시 JSON 값을 태그된 값 객체로 표현한다.
설명: 입력 경계에서 한 번만 분류하고, 대상 필드 타입별 변환 함수를 하나씩 제공한다.
디자인 패턴: 값 객체, 태그드 유니언
참조: src/vector_ingest/core/ingestion/stages/record_renderer.py, src/vector_ingest/core/ingestion/stages/template_compiler.py
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from vector_ingest.integrations.vectorstore import FieldType


class RawValueKind(str, Enum):
    """원시 값 분류."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"
    UNKNOWN = "UNKNOWN"


class ValueCoercionError(ValueError):
    """원시 값을 대상 필드 타입으로 바꿀 수 없을 때 발생한다."""


def to_json_text(value: Any) -> str:
    """값을 공백 없는 JSON 텍스트로 직렬화한다."""

    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def format_number(value: Any) -> str:
    """숫자를 텍스트로 만든다. 정수값 실수는 소수점 없이 표기한다."""

    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


@dataclass(frozen=True)
class RawValue:
    """분류된 원시 값."""

    kind: RawValueKind
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> "RawValue":
        """파이썬 값을 분류한다. bool은 숫자보다 먼저 판정한다."""

        if value is None:
            return cls(RawValueKind.NULL)
        if isinstance(value, bool):
            return cls(RawValueKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(RawValueKind.INTEGER, value)
        if isinstance(value, float):
            return cls(RawValueKind.FLOAT, value)
        if isinstance(value, str):
            return cls(RawValueKind.TEXT, value)
        if isinstance(value, (list, tuple)):
            return cls(RawValueKind.ARRAY, list(value))
        if isinstance(value, dict):
            return cls(RawValueKind.OBJECT, value)
        return cls(RawValueKind.UNKNOWN, value)

    @classmethod
    def missing(cls) -> "RawValue":
        """레코드에 없는 필드를 표현한다."""

        return cls(RawValueKind.NULL)

    @property
    def is_null(self) -> bool:
        return self.kind == RawValueKind.NULL

    @property
    def is_number(self) -> bool:
        return self.kind in (RawValueKind.INTEGER, RawValueKind.FLOAT)

    def to_text(self) -> str:
        if self.kind == RawValueKind.TEXT:
            return self.value
        if self.kind == RawValueKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.is_number:
            return format_number(self.value)
        if self.kind in (RawValueKind.ARRAY, RawValueKind.OBJECT):
            return to_json_text(self.value)
        if self.kind == RawValueKind.NULL:
            return ""
        return str(self.value)

    def to_integer(self) -> int:
        if self.kind == RawValueKind.INTEGER:
            return int(self.value)
        if (
            self.kind == RawValueKind.FLOAT
            and math.isfinite(self.value)
            and float(self.value).is_integer()
        ):
            return int(self.value)
        raise ValueCoercionError(f"정수로 변환할 수 없는 값입니다: {self.kind.value}")

    def to_float(self) -> float:
        if self.is_number and math.isfinite(float(self.value)):
            return float(self.value)
        raise ValueCoercionError(f"실수로 변환할 수 없는 값입니다: {self.kind.value}")

    def to_boolean(self) -> bool:
        if self.kind == RawValueKind.BOOLEAN:
            return bool(self.value)
        raise ValueCoercionError(f"불리언으로 변환할 수 없는 값입니다: {self.kind.value}")

    def coerce(self, field_type: FieldType, nullable: bool = False) -> Any:
        """대상 필드 타입의 저장 값으로 변환한다.

        null은 nullable 필드에서 None으로, 그 외에는 타입 기본값으로 저장한다.
        """

        if self.is_null:
            if nullable or field_type == FieldType.NULLABLE:
                return None
            return _NULL_DEFAULTS.get(field_type)
        converter = _CONVERTERS.get(field_type)
        if converter is None:
            raise ValueCoercionError(f"데이터 필드로 저장할 수 없는 타입입니다: {field_type.value}")
        return converter(self)


_CONVERTERS: Dict[FieldType, Callable[[RawValue], Any]] = {
    FieldType.TEXT: RawValue.to_text,
    FieldType.NULLABLE: RawValue.to_text,
    FieldType.INTEGER: RawValue.to_integer,
    FieldType.FLOAT: RawValue.to_float,
    FieldType.BOOLEAN: RawValue.to_boolean,
}

_NULL_DEFAULTS: Dict[FieldType, Optional[Any]] = {
    FieldType.TEXT: "",
    FieldType.INTEGER: 0,
    FieldType.FLOAT: 0.0,
    FieldType.BOOLEAN: False,
}
