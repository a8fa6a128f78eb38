"""
목적: 벡터 스토어 기본 모듈 공개 API를 제공한다.
설명: 엔진 인터페이스와 공통 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/integrations/vectorstore/base/models.py, src/vector_ingest/integrations/vectorstore/base/engine.py
"""

from vector_ingest.integrations.vectorstore.base.engine import (
    BaseVectorStoreEngine,
    IndexAlreadyExistsError,
)
from vector_ingest.integrations.vectorstore.base.models import (
    CollectionSchema,
    FieldDescriptor,
    FieldType,
    IndexKind,
    IndexPlan,
    IndexPlanEntry,
    IndexState,
    StoreRow,
    VectorMetric,
    is_valid_collection_name,
    is_valid_field_name,
)

__all__ = [
    "BaseVectorStoreEngine",
    "IndexAlreadyExistsError",
    "CollectionSchema",
    "FieldDescriptor",
    "FieldType",
    "IndexKind",
    "IndexPlan",
    "IndexPlanEntry",
    "IndexState",
    "StoreRow",
    "VectorMetric",
    "is_valid_collection_name",
    "is_valid_field_name",
]
