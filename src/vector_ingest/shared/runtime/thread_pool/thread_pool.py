"""
목적: 스레드풀 실행기를 제공한다.
설명: with 문으로 수명을 관리하며 graceful shutdown을 보장한다.
      map_settled는 모든 태스크가 끝날 때까지 기다린 뒤 입력 순서대로 결과를 돌려준다.
디자인 패턴: 파사드, 커맨드 패턴
참조: src/vector_ingest/shared/runtime/thread_pool/model.py
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, Optional, TypeVar

from vector_ingest.shared.logging import Logger, create_default_logger
from vector_ingest.shared.runtime.thread_pool.model import TaskOutcome, ThreadPoolConfig

T = TypeVar("T")
R = TypeVar("R")


class ThreadPool:
    """스레드풀 실행기 구현체."""

    def __init__(
        self,
        config: Optional[ThreadPoolConfig] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._config = config or ThreadPoolConfig()
        self._logger = logger or create_default_logger("ThreadPool")
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.RLock()

    def __enter__(self) -> "ThreadPool":
        """with 문 진입 시 실행기를 생성한다."""

        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._config.max_workers,
                    thread_name_prefix=self._config.thread_name_prefix,
                )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """with 문 종료 시 실행기를 종료한다."""

        self.shutdown(wait=True)

    def submit(self, fn: Callable[..., T], *args, **kwargs) -> Future[T]:
        """태스크를 제출한다."""

        with self._lock:
            if self._executor is None:
                self.__enter__()
            if self._executor is None:
                raise RuntimeError("스레드풀이 초기화되지 않았습니다.")
            return self._executor.submit(fn, *args, **kwargs)

    def map_settled(self, fn: Callable[[T], R], items: Iterable[T]) -> List[TaskOutcome]:
        """모든 입력에 fn을 실행하고 성공/실패 결과를 입력 순서대로 반환한다."""

        futures = [self.submit(fn, item) for item in items]
        if not futures:
            return []
        wait(futures)
        outcomes: List[TaskOutcome] = []
        for index, future in enumerate(futures):
            error = future.exception()
            if error is not None:
                outcomes.append(TaskOutcome(index=index, error=error))
            else:
                outcomes.append(TaskOutcome(index=index, value=future.result()))
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        self._logger.debug(f"태스크 {len(outcomes)}건 완료 (실패 {failed}건)")
        return outcomes

    def shutdown(self, wait: bool = True) -> None:
        """스레드풀을 종료한다."""

        with self._lock:
            if self._executor:
                self._executor.shutdown(wait=wait)
                self._executor = None
                self._logger.debug("스레드풀이 종료되었습니다.")
