"""
목적: 요약 텍스트 템플릿을 컴파일하고 레코드를 렌더링한다.
설명: `{{ fieldName }}` 자리표시자를 작업당 한 번 리터럴/필드 참조 구간으로 나눈다.
      렌더링은 값 종류별 표기 규칙(Yes/No, N/A, 쉼표 결합, JSON, 날짜)을 따른다.
      스키마에도 레코드에도 없는 자리표시자는 원문 그대로 남긴다.
디자인 패턴: 인터프리터(컴파일된 구간 목록)
참조: src/vector_ingest/core/ingestion/models/values.py
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Collection, Iterable, List, Mapping, Optional, Tuple, Union

from vector_ingest.core.ingestion.models.values import (
    RawValue,
    RawValueKind,
    format_number,
    to_json_text,
)
from vector_ingest.shared.logging import Logger, create_default_logger

_PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")
_DATE_SUFFIXES = ("Unix", "_unix")
_NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class FieldReference:
    """필드 참조 구간."""

    name: str
    source: str


Segment = Union[str, FieldReference]


def is_date_field(name: str, date_fields: Collection[str] = ()) -> bool:
    """필드 이름이 유닉스 초 날짜 인코딩을 뜻하는지 판정한다."""

    return name.endswith(_DATE_SUFFIXES) or name in date_fields


def _format_date(value: RawValue) -> Optional[str]:
    if not value.is_number or not value.value > 0:
        return None
    try:
        return datetime.fromtimestamp(float(value.value), tz=timezone.utc).date().isoformat()
    except (OverflowError, OSError, ValueError):
        return None


def format_display(value: RawValue) -> str:
    """렌더링용 표기 규칙으로 값을 텍스트로 만든다."""

    if value.kind == RawValueKind.NULL:
        return _NOT_AVAILABLE
    if value.kind == RawValueKind.BOOLEAN:
        return "Yes" if value.value else "No"
    if value.kind == RawValueKind.ARRAY:
        return ", ".join(format_display(RawValue.of(item)) for item in value.value)
    if value.kind == RawValueKind.OBJECT:
        return to_json_text(value.value)
    if value.is_number:
        return format_number(value.value)
    if value.kind == RawValueKind.TEXT:
        return value.value
    return str(value.value)


class CompiledTemplate:
    """컴파일된 템플릿."""

    def __init__(self, source: str, segments: List[Segment], date_fields: Collection[str] = ()) -> None:
        self._source = source
        self._segments = tuple(segments)
        self._date_fields = frozenset(date_fields)

    @property
    def source(self) -> str:
        return self._source

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def placeholders(self) -> List[str]:
        """등장 순서대로 중복 없는 자리표시자 이름 목록."""

        seen: List[str] = []
        for segment in self._segments:
            if isinstance(segment, FieldReference) and segment.name not in seen:
                seen.append(segment.name)
        return seen

    def render(self, values: Mapping[str, RawValue], known_fields: Collection[str] = ()) -> str:
        """레코드 값을 채워 텍스트를 만든다.

        Args:
            values: 레코드의 필드별 원시 값.
            known_fields: 스키마 필드 이름. 레코드에 없으면 N/A로 렌더링한다.
        """

        parts: List[str] = []
        for segment in self._segments:
            if isinstance(segment, str):
                parts.append(segment)
                continue
            parts.append(self._render_reference(segment, values, known_fields))
        return "".join(parts)

    def _render_reference(
        self,
        reference: FieldReference,
        values: Mapping[str, RawValue],
        known_fields: Collection[str],
    ) -> str:
        value = values.get(reference.name)
        if value is None:
            if reference.name in known_fields:
                return _NOT_AVAILABLE
            return reference.source
        if is_date_field(reference.name, self._date_fields):
            formatted = _format_date(value)
            if formatted is not None:
                return formatted
        return format_display(value)


class TemplateCompiler:
    """요약 템플릿 컴파일러."""

    def __init__(
        self,
        date_fields: Iterable[str] = ("created_at",),
        logger: Optional[Logger] = None,
    ) -> None:
        self._date_fields = tuple(date_fields)
        self._logger = logger or create_default_logger("TemplateCompiler")

    def compile(self, template: str, schema_fields: Optional[Collection[str]] = None) -> CompiledTemplate:
        """템플릿을 구간 목록으로 컴파일한다.

        schema_fields가 주어지면 스키마에 없는 자리표시자를 한 번에 모아 경고한다.
        """

        segments: List[Segment] = []
        cursor = 0
        for matched in _PLACEHOLDER_PATTERN.finditer(template):
            if matched.start() > cursor:
                segments.append(template[cursor : matched.start()])
            segments.append(FieldReference(name=matched.group(1), source=matched.group(0)))
            cursor = matched.end()
        if cursor < len(template):
            segments.append(template[cursor:])
        compiled = CompiledTemplate(template, segments, self._date_fields)
        if schema_fields is not None:
            unknown = [name for name in compiled.placeholders if name not in schema_fields]
            if unknown:
                self._logger.warning(
                    f"스키마에 없는 템플릿 자리표시자는 원문으로 남습니다: {', '.join(unknown)}"
                )
        return compiled
