"""
목적: 인메모리 엔진 공개 API를 제공한다.
설명: 인메모리 벡터 스토어 엔진을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/vectorstore/engines/memory/engine.py
"""

from vector_ingest.integrations.vectorstore.engines.memory.engine import InMemoryVectorStoreEngine

__all__ = ["InMemoryVectorStoreEngine"]
