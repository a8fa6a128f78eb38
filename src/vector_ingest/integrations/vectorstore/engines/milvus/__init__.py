"""
목적: Milvus 엔진 공개 API를 제공한다.
설명: Milvus 엔진과 스키마 어댑터를 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/vectorstore/engines/milvus/engine.py
"""

from vector_ingest.integrations.vectorstore.engines.milvus.engine import MilvusEngine
from vector_ingest.integrations.vectorstore.engines.milvus.schema_adapter import (
    MilvusSchemaAdapter,
)

__all__ = ["MilvusEngine", "MilvusSchemaAdapter"]
