"""
목적: langchain 임베딩 제공자 생성 함수를 제공한다.
설명: 제공자 설정을 받아 OpenAI/Ollama Embeddings 인스턴스를 만든다.
      Ollama는 선택 의존성이므로 사용할 때만 로딩한다.
디자인 패턴: 팩토리
참조: src/vector_ingest/integrations/embeddings/models.py
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings

from vector_ingest.integrations.embeddings.models import (
    EmbeddingProviderConfig,
    EmbeddingProviderName,
)
from vector_ingest.shared.exceptions import BaseAppException
from vector_ingest.shared.logging import Logger, create_default_logger

OllamaEmbeddings: Any | None
try:
    from langchain_ollama import OllamaEmbeddings as _OllamaEmbeddings
except ImportError:  # pragma: no cover - 환경 의존 로딩
    OllamaEmbeddings = None
else:  # pragma: no cover - 환경 의존 로딩
    OllamaEmbeddings = _OllamaEmbeddings

DEFAULT_OPENAI_MODEL = "text-embedding-3-large"
DEFAULT_OLLAMA_MODEL = "nomic-embed-text"
DEFAULT_OLLAMA_BASE_URL = "http://127.0.0.1:11434"


class EmbeddingProviderError(BaseAppException):
    """임베딩 제공자를 만들 수 없을 때 발생한다."""

    default_code = "EMBEDDING_PROVIDER_UNAVAILABLE"


def create_embedder(config: EmbeddingProviderConfig) -> Embeddings:
    """제공자 설정으로 Embeddings 인스턴스를 생성한다."""

    if config.provider == EmbeddingProviderName.OPENAI:
        return _build_openai(config)
    if config.provider == EmbeddingProviderName.OLLAMA:
        return _build_ollama(config)
    raise EmbeddingProviderError.build(
        f"지원하지 않는 임베딩 제공자입니다: {config.provider}",
        provider=str(config.provider),
    )


def build_embedders(
    configs: Mapping[str, EmbeddingProviderConfig],
    logger: Optional[Logger] = None,
) -> Dict[str, Embeddings]:
    """이름별 제공자 설정으로 임베더 매핑을 만든다.

    생성할 수 없는 제공자는 경고 로그를 남기고 매핑에서 제외한다.
    """

    logger = logger or create_default_logger("EmbeddingFactory")
    embedders: Dict[str, Embeddings] = {}
    for name, config in configs.items():
        try:
            embedders[name] = create_embedder(config)
        except EmbeddingProviderError as error:
            logger.warning(f"임베딩 제공자 '{name}'을(를) 건너뜁니다: {error.message}")
    return embedders


def _resolve_api_key(config: EmbeddingProviderConfig) -> str:
    api_key = os.getenv(config.api_key_env, "").strip()
    if not api_key:
        raise EmbeddingProviderError.build(
            f"임베딩 제공자 실행을 위해 {config.api_key_env}가 필요합니다.",
            cause=f"{config.api_key_env} 환경 변수가 비어 있습니다.",
        )
    return api_key


def _build_openai(config: EmbeddingProviderConfig) -> Embeddings:
    kwargs: Dict[str, Any] = {
        "model": config.model or DEFAULT_OPENAI_MODEL,
        "api_key": _resolve_api_key(config),
    }
    if config.base_url:
        kwargs["base_url"] = config.base_url
    if config.dimensions:
        kwargs["dimensions"] = config.dimensions
    return OpenAIEmbeddings(**kwargs)


def _build_ollama(config: EmbeddingProviderConfig) -> Embeddings:
    if OllamaEmbeddings is None:
        raise EmbeddingProviderError.build(
            "langchain-ollama 패키지가 설치되어 있지 않습니다.",
            hint="pip install 'vector-ingest[ollama]'",
        )
    return OllamaEmbeddings(
        model=config.model or DEFAULT_OLLAMA_MODEL,
        base_url=config.base_url or DEFAULT_OLLAMA_BASE_URL,
    )
