"""
목적: 스레드풀 모듈 공개 API를 제공한다.
설명: 스레드풀 실행기와 관련 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/shared/runtime/thread_pool/thread_pool.py, src/vector_ingest/shared/runtime/thread_pool/model.py
"""

from vector_ingest.shared.runtime.thread_pool.model import TaskOutcome, ThreadPoolConfig
from vector_ingest.shared.runtime.thread_pool.thread_pool import ThreadPool

__all__ = ["ThreadPoolConfig", "TaskOutcome", "ThreadPool"]
