"""
목적: 벡터 스토어 엔진 구현체 공개 API를 제공한다.
설명: 인메모리 엔진과 Milvus 엔진을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/vectorstore/engines/memory, src/vector_ingest/integrations/vectorstore/engines/milvus
"""

from vector_ingest.integrations.vectorstore.engines.memory import InMemoryVectorStoreEngine
from vector_ingest.integrations.vectorstore.engines.milvus import MilvusEngine, MilvusSchemaAdapter

__all__ = ["InMemoryVectorStoreEngine", "MilvusEngine", "MilvusSchemaAdapter"]
