"""
목적: 적재 파이프라인 전체를 조율한다.
설명: 작업을 검증하고 스키마/인덱스 계획/템플릿을 작업당 한 번 만든 뒤,
      프로비저닝 → 인덱스 빌드 → 렌더링 → 임베딩 → 업서트 → 검증을 하나의 시도로 실행한다.
      시도가 실패하면 대기 후 프로비저닝부터 다시 시작하며, 레코드는 원본 페이로드에서 다시 만든다.
      작업에 템플릿이 없으면 채팅 모델로 한 번 생성한다. 입력 오류는 벡터 스토어를 건드리기 전에 걸러내며,
      스키마 추론 오류와 취소는 재시도하지 않는다.
디자인 패턴: 템플릿 메서드, 파사드
참조: src/vector_ingest/core/ingestion/stages, src/vector_ingest/shared/runtime/retry/executor.py
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from vector_ingest.core.ingestion.const import IngestionSettings
from vector_ingest.core.ingestion.exceptions import (
    ConsistencyError,
    SchemaInferenceError,
    TemplateGenerationError,
)
from vector_ingest.core.ingestion.models import (
    IngestionAttempt,
    IngestionJob,
    IngestionPhase,
    IngestionResult,
)
from vector_ingest.core.ingestion.stages import (
    BatchUpserter,
    CollectionProvisioner,
    CompiledTemplate,
    ConsistencyVerifier,
    IndexBuilder,
    RecordRenderer,
    SchemaBlueprint,
    SchemaBuilder,
    SummaryTemplateGenerator,
    TemplateCompiler,
    VectorEmbedder,
)
from vector_ingest.integrations.embeddings import build_embedders
from vector_ingest.integrations.llm import ChatModelError, create_chat_model
from vector_ingest.integrations.vectorstore import VectorStoreClient
from vector_ingest.shared.exceptions import BaseAppException
from vector_ingest.shared.logging import LogContext, Logger, create_default_logger
from vector_ingest.shared.runtime import (
    CancellationToken,
    OperationCancelledError,
    RetryExecutor,
    RetryPolicy,
)

JobInput = Union[IngestionJob, str, bytes, Mapping[str, Any]]


def _error_message(error: BaseException) -> str:
    if isinstance(error, BaseAppException):
        return error.message
    return str(error) or type(error).__name__


def _error_code(error: BaseException) -> Optional[str]:
    if isinstance(error, BaseAppException):
        return error.code
    return type(error).__name__


class PipelineOrchestrator:
    """적재 파이프라인 오케스트레이터.

    Args:
        client: 장수명 벡터 스토어 클라이언트.
        embedders: 임베딩 제공자 이름 → Embeddings 매핑.
        settings: 파이프라인 설정.
        logger: 주입 가능한 로거.
        chat_model: 템플릿이 없는 작업의 요약 템플릿을 생성할 채팅 모델.
    """

    def __init__(
        self,
        client: VectorStoreClient,
        embedders: Mapping[str, Embeddings],
        settings: Optional[IngestionSettings] = None,
        logger: Optional[Logger] = None,
        chat_model: Optional[BaseChatModel] = None,
    ) -> None:
        self._client = client
        self._embedders = dict(embedders)
        self._settings = settings or IngestionSettings()
        self._logger = logger or create_default_logger("PipelineOrchestrator")
        self._chat_model = chat_model

    @classmethod
    def from_settings(
        cls,
        client: VectorStoreClient,
        settings: IngestionSettings,
        logger: Optional[Logger] = None,
    ) -> "PipelineOrchestrator":
        """설정의 제공자 목록으로 임베더와 템플릿 생성 모델을 만들어 오케스트레이터를 생성한다."""

        chat_model: Optional[BaseChatModel] = None
        generation = settings.template_generation
        if generation.enabled:
            try:
                chat_model = create_chat_model(generation.chat_model)
            except ChatModelError as error:
                (logger or create_default_logger("PipelineOrchestrator")).warning(
                    f"템플릿 생성 모델 없이 시작합니다: {error.message}"
                )
        embedders = build_embedders(settings.providers, logger=logger)
        return cls(client, embedders, settings, logger, chat_model=chat_model)

    @property
    def settings(self) -> IngestionSettings:
        return self._settings

    def run(self, job: JobInput, token: Optional[CancellationToken] = None) -> IngestionResult:
        """작업 하나를 실행하고 결과를 반환한다. 실패도 예외 대신 결과로 돌려준다."""

        token = token or CancellationToken()
        try:
            job = job if isinstance(job, IngestionJob) else IngestionJob.from_payload(job)
        except SchemaInferenceError as error:
            self._logger.error(f"작업 입력이 유효하지 않습니다: {error.message}")
            return IngestionResult(success=False, message=error.message)

        log = self._logger.with_context(
            LogContext(job_id=job.job_id, collection=job.collection_name)
        )
        log.info(f"적재 작업 시작: 레코드 {len(job.records)}건, 제공자 {job.embedding_provider}")
        if not job.records:
            log.info("적재할 레코드가 없어 벡터 스토어를 호출하지 않습니다.")
            return IngestionResult(success=True, message="적재할 레코드가 없습니다.", rows_written=0)

        try:
            token.raise_if_cancelled()
            embeddings = self._resolve_embeddings(job)
            blueprint, template = self._prepare(job, log, token)
        except (SchemaInferenceError, TemplateGenerationError, OperationCancelledError) as error:
            log.error(f"적재 작업 준비 실패: {error.message}")
            return IngestionResult(success=False, message=error.message)

        attempt_log: List[IngestionAttempt] = []
        settings = self._settings.pipeline
        executor = RetryExecutor(
            RetryPolicy(
                max_attempts=settings.max_attempts,
                delay_seconds=settings.retry_delay_seconds,
            ),
            sleeper=token.sleep,
            logger=log,
            name="pipeline",
        )

        def run_attempt(number: int) -> int:
            attempt = IngestionAttempt(attempt_number=number)
            attempt_log.append(attempt)
            attempt_logger = log.with_context(LogContext(attempt=number))
            try:
                rows = self._run_attempt(job, blueprint, template, embeddings, attempt, token, attempt_logger)
            except Exception as error:
                attempt.fail(_error_message(error), _error_code(error))
                attempt_logger.error(
                    f"시도 {number} 실패 ({attempt.failed_phase.value if attempt.failed_phase else '?'}): "
                    f"{attempt.error}"
                )
                raise
            attempt.succeed(rows)
            attempt_logger.info(f"시도 {number} 성공: {rows}건")
            return rows

        try:
            rows_written = executor.run(run_attempt)
        except Exception as error:  # noqa: BLE001 - 마지막 오류를 결과 메시지로 변환
            return self._result(False, _error_message(error), attempt_log)

        return self._result(
            True,
            f"컬렉션 '{job.collection_name}'에 {rows_written}건을 적재했습니다.",
            attempt_log,
            rows_written=rows_written,
        )

    def _resolve_embeddings(self, job: IngestionJob) -> Embeddings:
        embeddings = self._embedders.get(job.embedding_provider)
        if embeddings is None:
            raise SchemaInferenceError.build(
                f"알 수 없는 임베딩 제공자입니다: {job.embedding_provider}",
                hint=f"사용 가능: {', '.join(sorted(self._embedders)) or '없음'}",
            )
        return embeddings

    def _prepare(
        self,
        job: IngestionJob,
        log: Logger,
        token: CancellationToken,
    ) -> tuple[SchemaBlueprint, CompiledTemplate]:
        schema_settings = self._settings.schema_
        blueprint = SchemaBuilder(schema_settings, logger=log).build(
            job.collection_name,
            job.records,
            job.field_descriptions,
        )
        RecordRenderer(schema_settings, logger=log).check_primary_keys(job.records)
        template_text = job.template
        if template_text is None:
            template_text = self._generate_template(job, blueprint, log, token)
        template = TemplateCompiler(schema_settings.date_fields, logger=log).compile(
            template_text,
            schema_fields=blueprint.schema.field_names(),
        )
        return blueprint, template

    def _generate_template(
        self,
        job: IngestionJob,
        blueprint: SchemaBlueprint,
        log: Logger,
        token: CancellationToken,
    ) -> str:
        if self._chat_model is None:
            raise SchemaInferenceError.build(
                "작업에 요약 템플릿이 없고 템플릿 생성 모델도 설정되지 않았습니다.",
                hint="작업에 template을 넣거나 채팅 모델을 설정하세요.",
            )
        log.info("작업에 템플릿이 없어 채팅 모델로 요약 템플릿을 생성합니다.")
        generator = SummaryTemplateGenerator(
            self._chat_model,
            self._settings.template_generation,
            logger=log,
        )
        return generator.generate(blueprint.schema, job.records[0], token)

    def _run_attempt(
        self,
        job: IngestionJob,
        blueprint: SchemaBlueprint,
        template: CompiledTemplate,
        embeddings: Embeddings,
        attempt: IngestionAttempt,
        token: CancellationToken,
        log: Logger,
    ) -> int:
        settings = self._settings
        schema = blueprint.schema
        collection = schema.collection_name

        attempt.enter(IngestionPhase.PROVISIONING)
        token.raise_if_cancelled()
        self._client.connect()
        CollectionProvisioner(self._client, settings.provisioning, logger=log).provision(schema, token)

        attempt.enter(IngestionPhase.INDEX_BUILDING)
        token.raise_if_cancelled()
        IndexBuilder(self._client, settings.index, logger=log).build(collection, blueprint.plan, token)

        attempt.enter(IngestionPhase.RENDERING)
        token.raise_if_cancelled()
        rendered, rejected = RecordRenderer(settings.schema_, logger=log).render(
            job.records,
            schema,
            template,
            token,
        )
        attempt.rejected.extend(rejected)

        attempt.enter(IngestionPhase.EMBEDDING)
        token.raise_if_cancelled()
        accepted, rejected = VectorEmbedder(settings.embedding, logger=log).embed(
            rendered,
            embeddings,
            schema.vector_dim,
            token,
        )
        attempt.rejected.extend(rejected)

        attempt.enter(IngestionPhase.UPSERTING)
        token.raise_if_cancelled()
        report = BatchUpserter(self._client, settings.upsert, logger=log).upsert(
            collection,
            accepted,
            token,
        )
        attempt.rows_written = report.written

        attempt.enter(IngestionPhase.VERIFYING)
        token.raise_if_cancelled()
        rows = ConsistencyVerifier(self._client, logger=log).verify(collection, len(accepted), token)
        try:
            self._client.load_collection(collection)
        except Exception as error:  # noqa: BLE001 - 적재 실패는 검증 단계 실패로 처리
            raise ConsistencyError.build(
                f"컬렉션 '{collection}' 적재(load)에 실패했습니다: {error}",
                original=error,
                collection=collection,
            ) from error
        return rows

    def _result(
        self,
        success: bool,
        message: str,
        attempt_log: List[IngestionAttempt],
        rows_written: int = 0,
    ) -> IngestionResult:
        last = attempt_log[-1] if attempt_log else None
        return IngestionResult(
            success=success,
            message=message,
            rows_written=rows_written,
            attempts=len(attempt_log),
            rejected_records=list(last.rejected) if last else [],
            attempt_log=list(attempt_log),
        )
