"""
목적: 원시 레코드를 임베딩 직전 형태로 렌더링한다.
설명: 기본 키를 확정하고(없으면 생성), 데이터 필드를 스키마 타입으로 변환하고,
      컴파일된 템플릿으로 요약 텍스트를 만든다. 변환할 수 없는 레코드는 제외 목록으로 보낸다.
      사용자가 준 기본 키가 중복되거나 모든 레코드가 제외되면 재시도해도 해결되지 않으므로
      SchemaInferenceError로 중단한다.
디자인 패턴: 단계 객체
참조: src/vector_ingest/core/ingestion/models/values.py, src/vector_ingest/core/ingestion/stages/template_compiler.py
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple
from uuid import uuid4

from vector_ingest.core.ingestion.const import PRIMARY_KEY_FIELD, SYSTEM_FIELDS, SchemaSettings
from vector_ingest.core.ingestion.exceptions import SchemaInferenceError
from vector_ingest.core.ingestion.models import (
    RawValue,
    RejectedRecord,
    RenderedRecord,
    ValueCoercionError,
)
from vector_ingest.core.ingestion.stages.template_compiler import CompiledTemplate
from vector_ingest.integrations.vectorstore import CollectionSchema, FieldType
from vector_ingest.shared.const import SharedConst
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import CancellationToken, none_token

REJECT_PRIMARY_KEY = "PRIMARY_KEY_INVALID"
REJECT_COERCION = "FIELD_COERCION"


def truncate_utf8(text: str, max_bytes: int) -> str:
    """UTF-8 바이트 기준으로 문자열을 자른다. 잘린 멀티바이트 문자는 버린다."""

    encoded = text.encode(SharedConst.DEFAULT_ENCODING)
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode(SharedConst.DEFAULT_ENCODING, errors="ignore")
class RecordRenderer:
    """레코드 렌더러."""

    def __init__(self, settings: Optional[SchemaSettings] = None, logger: Optional[Logger] = None) -> None:
        self._settings = settings or SchemaSettings()
        self._logger = logger or create_default_logger("RecordRenderer")

    def check_primary_keys(self, records: Sequence[Mapping[str, Any]]) -> None:
        """사용자가 준 기본 키가 작업 안에서 유일한지 확인한다.

        벡터 스토어를 건드리기 전에 호출한다. 최대 길이를 넘는 키는 렌더링에서 제외되므로 건너뛴다.

        Raises:
            SchemaInferenceError: 같은 기본 키가 두 번 이상 있을 때.
        """

        seen: Set[str] = set()
        for record in records:
            if not isinstance(record, Mapping):
                continue
            key = self._supplied_key(record)
            if key is None or self._exceeds_key_length(key):
                continue
            if key in seen:
                raise self._duplicate_key_error(key)
            seen.add(key)

    def render(
        self,
        records: Sequence[Mapping[str, Any]],
        schema: CollectionSchema,
        template: CompiledTemplate,
        token: Optional[CancellationToken] = None,
    ) -> Tuple[List[RenderedRecord], List[RejectedRecord]]:
        """레코드 목록을 렌더링한다.

        Returns:
            (렌더링된 레코드 목록, 제외된 레코드 목록)

        Raises:
            SchemaInferenceError: 입력에 같은 기본 키가 두 번 이상 있거나, 모든 레코드가 제외됐을 때.
        """

        token = token or none_token()
        token.raise_if_cancelled()
        known_fields = set(schema.field_names())
        data_fields = [item for item in schema.fields if item.name not in SYSTEM_FIELDS]
        used_keys: Set[str] = set()
        truncated_fields: Set[str] = set()
        rendered: List[RenderedRecord] = []
        rejected: List[RejectedRecord] = []

        for index, record in enumerate(records):
            primary_key, supplied = self._resolve_primary_key(record, used_keys)
            if primary_key is None:
                rejected.append(
                    RejectedRecord(
                        primary_key=None,
                        code=REJECT_PRIMARY_KEY,
                        reason=f"기본 키가 최대 길이 {self._settings.primary_key_max_length}바이트를 넘습니다: index={index}",
                    )
                )
                continue
            if supplied and primary_key in used_keys:
                raise self._duplicate_key_error(primary_key)
            used_keys.add(primary_key)

            raw = {name: RawValue.of(value) for name, value in record.items()}
            try:
                fields = self._coerce_fields(raw, data_fields, truncated_fields)
            except ValueCoercionError as error:
                rejected.append(
                    RejectedRecord(primary_key=primary_key, code=REJECT_COERCION, reason=str(error))
                )
                continue
            # 생성된 키도 {{docId}} 자리표시자에 나타나야 한다.
            raw[PRIMARY_KEY_FIELD] = RawValue.of(primary_key)
            summary = truncate_utf8(
                template.render(raw, known_fields=known_fields),
                self._settings.summary_max_length,
            )
            rendered.append(
                RenderedRecord(
                    index=index,
                    primary_key=primary_key,
                    raw=raw,
                    fields=fields,
                    summary_text=summary,
                )
            )

        if records and not rendered:
            reasons = "; ".join(item.reason for item in rejected[:5])
            raise SchemaInferenceError.build(
                f"렌더링할 수 있는 레코드가 없습니다 (대상 {len(records)}건, 제외 {len(rejected)}건): {reasons}",
                hint="기본 키 길이와 필드 값 타입을 확인하세요.",
                rejected=len(rejected),
            )
        if rejected:
            self._logger.warning(f"렌더링 중 레코드 {len(rejected)}건을 제외했습니다.")
        self._logger.info(f"레코드 렌더링 완료: {len(rendered)}건")
        return rendered, rejected

    def _supplied_key(self, record: Mapping[str, Any]) -> Optional[str]:
        value = record.get(self._settings.primary_key_source)
        if value is None:
            return None
        text = RawValue.of(value).to_text().strip()
        return text or None

    def _exceeds_key_length(self, key: str) -> bool:
        return len(key.encode(SharedConst.DEFAULT_ENCODING)) > self._settings.primary_key_max_length

    def _duplicate_key_error(self, primary_key: str) -> SchemaInferenceError:
        return SchemaInferenceError.build(
            f"입력 레코드의 기본 키가 중복됩니다: {primary_key}",
            hint=f"'{self._settings.primary_key_source}' 값은 작업 안에서 유일해야 합니다.",
            primary_key=primary_key,
        )

    def _resolve_primary_key(
        self,
        record: Mapping[str, Any],
        used_keys: Set[str],
    ) -> Tuple[Optional[str], bool]:
        supplied = self._supplied_key(record)
        if supplied is not None:
            if self._exceeds_key_length(supplied):
                return None, True
            return supplied, True
        generated = uuid4().hex
        while generated in used_keys:
            generated = uuid4().hex
        return generated, False

    def _coerce_fields(
        self,
        raw: Mapping[str, RawValue],
        data_fields,
        truncated_fields: Set[str],
    ) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for descriptor in data_fields:
            value = raw.get(descriptor.name, RawValue.missing())
            try:
                stored = value.coerce(descriptor.inferred_type, nullable=descriptor.nullable)
            except ValueCoercionError as error:
                raise ValueCoercionError(f"{descriptor.name}: {error}") from error
            if isinstance(stored, str) and descriptor.inferred_type in (FieldType.TEXT, FieldType.NULLABLE):
                max_length = descriptor.max_length or self._settings.text_max_length
                truncated = truncate_utf8(stored, max_length)
                if truncated != stored and descriptor.name not in truncated_fields:
                    truncated_fields.add(descriptor.name)
                    self._logger.warning(
                        f"필드 '{descriptor.name}' 값이 최대 길이 {max_length}바이트를 넘어 잘렸습니다."
                    )
                stored = truncated
            fields[descriptor.name] = stored
        return fields
