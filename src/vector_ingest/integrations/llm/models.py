"""
목적: 채팅 모델 설정 모델을 정의한다.
설명: 요약 템플릿 생성에 쓸 채팅 모델 이름, 자격 증명 환경 변수, 온도를 Pydantic으로 제공한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/vector_ingest/integrations/llm/factory.py
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ChatModelConfig(BaseModel):
    """채팅 모델 설정 모델이다.

    Args:
        model: 모델 이름. 비우면 기본 모델을 사용한다.
        api_key_env: API 키를 읽을 환경 변수 이름.
        base_url: 엔드포인트 URL.
        temperature: 샘플링 온도.
    """

    model: Optional[str] = None
    api_key_env: str = Field(default="OPENAI_API_KEY")
    base_url: Optional[str] = None
    temperature: float = Field(default=0.0, ge=0)
