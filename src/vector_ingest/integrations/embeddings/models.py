"""
목적: 임베딩 제공자 설정 모델을 정의한다.
설명: 제공자 종류, 모델 이름, 자격 증명 환경 변수 이름을 Pydantic으로 제공한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/integrations/embeddings/factory.py
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EmbeddingProviderName(str, Enum):
    """지원하는 임베딩 제공자."""

    OPENAI = "openai"
    OLLAMA = "ollama"


class EmbeddingProviderConfig(BaseModel):
    """임베딩 제공자 설정 모델이다.

    Args:
        provider: 제공자 종류.
        model: 모델 이름. 비우면 제공자 기본값을 사용한다.
        api_key_env: API 키를 읽을 환경 변수 이름.
        base_url: 엔드포인트 URL.
        dimensions: 제공자에 요청할 출력 차원. 지원하지 않는 제공자는 무시한다.
    """

    provider: EmbeddingProviderName
    model: Optional[str] = None
    api_key_env: str = Field(default="OPENAI_API_KEY")
    base_url: Optional[str] = None
    dimensions: Optional[int] = Field(default=None, ge=1)
