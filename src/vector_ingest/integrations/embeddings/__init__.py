"""
목적: 임베딩 통합 모듈 공개 API를 제공한다.
설명: 제공자 설정 모델과 생성 함수를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/embeddings/factory.py, src/vector_ingest/integrations/embeddings/models.py
"""

from vector_ingest.integrations.embeddings.factory import (
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OPENAI_MODEL,
    EmbeddingProviderError,
    build_embedders,
    create_embedder,
)
from vector_ingest.integrations.embeddings.models import (
    EmbeddingProviderConfig,
    EmbeddingProviderName,
)

__all__ = [
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_OLLAMA_MODEL",
    "EmbeddingProviderConfig",
    "EmbeddingProviderName",
    "EmbeddingProviderError",
    "build_embedders",
    "create_embedder",
]
