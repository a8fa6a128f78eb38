"""
목적: langchain 채팅 모델 생성 함수를 제공한다.
설명: 설정을 받아 OpenAI 채팅 모델을 만든다. API 키가 없으면 ChatModelError를 발생시킨다.
디자인 패턴: 팩토리
참조: src/vector_ingest/integrations/llm/models.py, src/vector_ingest/integrations/embeddings/factory.py
"""

from __future__ import annotations

import os
from typing import Any, Dict

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from vector_ingest.integrations.llm.models import ChatModelConfig
from vector_ingest.shared.exceptions import BaseAppException

DEFAULT_CHAT_MODEL = "gpt-4o-mini"


class ChatModelError(BaseAppException):
    """채팅 모델을 만들 수 없을 때 발생한다."""

    default_code = "CHAT_MODEL_UNAVAILABLE"


def create_chat_model(config: ChatModelConfig) -> BaseChatModel:
    """설정으로 채팅 모델 인스턴스를 생성한다."""

    api_key = os.getenv(config.api_key_env, "").strip()
    if not api_key:
        raise ChatModelError.build(
            f"채팅 모델 실행을 위해 {config.api_key_env}가 필요합니다.",
            cause=f"{config.api_key_env} 환경 변수가 비어 있습니다.",
        )
    kwargs: Dict[str, Any] = {
        "model": config.model or DEFAULT_CHAT_MODEL,
        "api_key": SecretStr(api_key),
        "temperature": config.temperature,
    }
    if config.base_url:
        kwargs["base_url"] = config.base_url
    return ChatOpenAI(**kwargs)
