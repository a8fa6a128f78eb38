"""
목적: 벡터 스토어 통합 모듈 공개 API를 제공한다.
설명: 클라이언트, 엔진, 공통 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/vectorstore/client.py, src/vector_ingest/integrations/vectorstore/base
"""

from vector_ingest.integrations.vectorstore.base import (
    BaseVectorStoreEngine,
    CollectionSchema,
    FieldDescriptor,
    FieldType,
    IndexAlreadyExistsError,
    IndexKind,
    IndexPlan,
    IndexPlanEntry,
    IndexState,
    StoreRow,
    VectorMetric,
    is_valid_collection_name,
    is_valid_field_name,
)
from vector_ingest.integrations.vectorstore.client import VectorStoreClient
from vector_ingest.integrations.vectorstore.engines import (
    InMemoryVectorStoreEngine,
    MilvusEngine,
    MilvusSchemaAdapter,
)

__all__ = [
    "BaseVectorStoreEngine",
    "CollectionSchema",
    "FieldDescriptor",
    "FieldType",
    "IndexAlreadyExistsError",
    "IndexKind",
    "IndexPlan",
    "IndexPlanEntry",
    "IndexState",
    "StoreRow",
    "VectorMetric",
    "is_valid_collection_name",
    "is_valid_field_name",
    "VectorStoreClient",
    "InMemoryVectorStoreEngine",
    "MilvusEngine",
    "MilvusSchemaAdapter",
]
