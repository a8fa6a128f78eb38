"""
목적: 적재 파이프라인 단계 공개 API를 제공한다.
설명: 스키마 추론부터 일관성 검증까지 각 단계 구현을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/core/ingestion/stages
"""

from vector_ingest.core.ingestion.stages.batch_upserter import BatchUpserter, UpsertReport, partition
from vector_ingest.core.ingestion.stages.collection_provisioner import CollectionProvisioner
from vector_ingest.core.ingestion.stages.consistency_verifier import ConsistencyVerifier
from vector_ingest.core.ingestion.stages.embedder import VectorEmbedder, normalize_vector
from vector_ingest.core.ingestion.stages.index_builder import IndexBuilder, IndexBuildReport
from vector_ingest.core.ingestion.stages.record_renderer import RecordRenderer, truncate_utf8
from vector_ingest.core.ingestion.stages.schema_builder import (
    SchemaBlueprint,
    SchemaBuilder,
    index_kind_for,
)
from vector_ingest.core.ingestion.stages.template_compiler import (
    CompiledTemplate,
    FieldReference,
    TemplateCompiler,
    format_display,
    is_date_field,
)
from vector_ingest.core.ingestion.stages.template_generator import SummaryTemplateGenerator
from vector_ingest.core.ingestion.stages.type_inferencer import TypeInferencer

__all__ = [
    "TypeInferencer",
    "TemplateCompiler",
    "CompiledTemplate",
    "FieldReference",
    "format_display",
    "is_date_field",
    "SummaryTemplateGenerator",
    "SchemaBuilder",
    "SchemaBlueprint",
    "index_kind_for",
    "RecordRenderer",
    "truncate_utf8",
    "CollectionProvisioner",
    "IndexBuilder",
    "IndexBuildReport",
    "VectorEmbedder",
    "normalize_vector",
    "BatchUpserter",
    "UpsertReport",
    "partition",
    "ConsistencyVerifier",
]
