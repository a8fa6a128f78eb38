"""
목적: 채팅 모델 통합 모듈 공개 API를 제공한다.
설명: 채팅 모델 설정 모델과 생성 함수를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/llm/factory.py, src/vector_ingest/integrations/llm/models.py
"""

from vector_ingest.integrations.llm.factory import (
    DEFAULT_CHAT_MODEL,
    ChatModelError,
    create_chat_model,
)
from vector_ingest.integrations.llm.models import ChatModelConfig

__all__ = [
    "DEFAULT_CHAT_MODEL",
    "ChatModelConfig",
    "ChatModelError",
    "create_chat_model",
]
