"""
목적: 채팅 모델로 요약 텍스트 템플릿을 생성한다.
설명: 추론된 스키마 필드와 설명, 첫 번째 레코드를 프롬프트에 넣어 `{{필드}}` 자리표시자 템플릿을 받는다.
      응답에서 코드 블록/따옴표를 걷어내고, 스키마 필드 자리표시자가 하나도 없으면 다시 요청한다.
디자인 패턴: 단계 객체, 프롬프트 템플릿
참조: src/vector_ingest/core/ingestion/stages/template_compiler.py, src/vector_ingest/shared/runtime/retry/executor.py
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from vector_ingest.core.ingestion.const import SUMMARY_FIELD, VECTOR_FIELD, TemplateGenerationSettings
from vector_ingest.core.ingestion.exceptions import TemplateGenerationError
from vector_ingest.core.ingestion.stages.template_compiler import TemplateCompiler
from vector_ingest.integrations.vectorstore import CollectionSchema
from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime import (
    CancellationToken,
    RetryExecutor,
    RetryPolicy,
    none_token,
)

SUMMARY_TEMPLATE_PROMPT = """당신은 데이터 요약 전문가입니다. 데이터 레코드 하나를 사람이 읽기 쉬운 짧은 요약으로 바꾸는 템플릿을 작성하세요.
스키마(필드 이름과 설명)와 예시 레코드를 제공합니다.
출력은 실제 값 자리에 자리표시자를 쓴 한 문단이어야 합니다.
자리표시자는 `{{{{필드이름}}}}`처럼 이중 중괄호로 씁니다.
사용자가 주로 물어볼 만한 핵심 정보를 담으세요.
날짜(유닉스 초)와 불리언 값이 문장에서 자연스럽게 읽히도록 배치하세요.
머리말이나 맺음말 없이 요약 문단만 출력하세요.

스키마(필드 이름과 설명):
{schema}

예시 레코드(첫 번째 레코드, 값의 맥락을 이해하는 용도):
{record}

요약 템플릿을 생성하세요 (예: "학생 {{{{studentName}}}}은(는) {{{{schoolName}}}}에서 {{{{leaveType}}}} 휴가를 신청했습니다..."):"""


def _extract_message_text(message: object) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts: List[str] = []
        for item in content:
            if isinstance(item, str):
                texts.append(item)
                continue
            if isinstance(item, dict):
                text = item.get("text")
                if text is not None:
                    texts.append(str(text))
        return "".join(texts)
    return str(content)


def clean_template_text(text: str) -> str:
    """모델 응답에서 코드 블록 표시와 감싼 따옴표를 제거한다."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


class SummaryTemplateGenerator:
    """요약 템플릿 생성기.

    Args:
        model: langchain 채팅 모델.
        settings: 생성 재시도 설정.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        model: BaseChatModel,
        settings: Optional[TemplateGenerationSettings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._model = model
        self._settings = settings or TemplateGenerationSettings()
        self._logger = logger or create_default_logger("SummaryTemplateGenerator")

    def build_prompt(self, schema: CollectionSchema, first_record: Mapping[str, Any]) -> str:
        """스키마 필드 설명과 첫 레코드로 프롬프트를 만든다."""

        fields: List[Dict[str, str]] = [
            {
                "name": item.name,
                "description": item.description
                or f"추론된 필드: {item.name} (타입: {item.inferred_type.value})",
            }
            for item in schema.fields
            if item.name not in (VECTOR_FIELD, SUMMARY_FIELD)
        ]
        return SUMMARY_TEMPLATE_PROMPT.format(
            schema=json.dumps(fields, ensure_ascii=False, indent=2),
            record=json.dumps(dict(first_record), ensure_ascii=False, indent=2, default=str),
        )

    def generate(
        self,
        schema: CollectionSchema,
        first_record: Mapping[str, Any],
        token: Optional[CancellationToken] = None,
    ) -> str:
        """요약 템플릿을 생성한다.

        Raises:
            TemplateGenerationError: 시도 횟수 안에 쓸 수 있는 템플릿을 받지 못했을 때.
            OperationCancelledError: 작업이 취소됐을 때.
        """

        token = token or none_token()
        prompt = self.build_prompt(schema, first_record)
        usable_fields = {
            name for name in schema.field_names() if name not in (VECTOR_FIELD, SUMMARY_FIELD)
        }
        executor = RetryExecutor(
            RetryPolicy(
                max_attempts=self._settings.max_attempts,
                delay_seconds=self._settings.retry_delay_seconds,
            ),
            sleeper=token.sleep,
            logger=self._logger,
            name="template-generation",
        )

        def attempt(number: int) -> str:
            token.raise_if_cancelled()
            try:
                response = self._model.invoke([HumanMessage(content=prompt)])
            except Exception as error:  # noqa: BLE001 - 모델 호출 오류를 생성 실패로 변환
                raise TemplateGenerationError.build(
                    f"요약 템플릿 생성 호출에 실패했습니다: {error}",
                    cause=type(error).__name__,
                    original=error,
                    attempt=number,
                ) from error
            template = clean_template_text(_extract_message_text(response))
            placeholders = TemplateCompiler(logger=self._logger).compile(template).placeholders
            if not any(name in usable_fields for name in placeholders):
                raise TemplateGenerationError.build(
                    "생성된 템플릿에 스키마 필드 자리표시자가 없습니다.",
                    cause=template[:200],
                    attempt=number,
                )
            return template

        template = executor.run(attempt)
        self._logger.info(f"요약 템플릿 생성 완료: {template}")
        return template
