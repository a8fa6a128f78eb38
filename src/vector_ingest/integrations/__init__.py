"""
목적: integrations 패키지의 공개 API를 제공한다.
설명: 벡터 스토어/임베딩/채팅 모델 통합 모듈을 한 번에 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/vectorstore, src/vector_ingest/integrations/embeddings, src/vector_ingest/integrations/llm
"""

from vector_ingest.integrations.embeddings import (
    EmbeddingProviderConfig,
    EmbeddingProviderName,
    build_embedders,
    create_embedder,
)
from vector_ingest.integrations.llm import ChatModelConfig, create_chat_model
from vector_ingest.integrations.vectorstore import (
    InMemoryVectorStoreEngine,
    MilvusEngine,
    VectorStoreClient,
)

__all__ = [
    "EmbeddingProviderConfig",
    "EmbeddingProviderName",
    "build_embedders",
    "create_embedder",
    "ChatModelConfig",
    "create_chat_model",
    "VectorStoreClient",
    "InMemoryVectorStoreEngine",
    "MilvusEngine",
]
