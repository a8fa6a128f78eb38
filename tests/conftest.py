"""
목적: pytest 공통 로깅 훅과 픽스처를 제공한다.
설명: 테스트 시작/종료와 결과를 로깅해 실행 흐름을 추적하고,
      외부 환경 변수가 설정 로딩 테스트에 섞이지 않도록 정리한다.
디자인 패턴: 테스트 훅
참조: pyproject.toml
"""

from __future__ import annotations

import logging
import os

import pytest

from vector_ingest.shared.const import SharedConst

_LOGGER = logging.getLogger("tests")


@pytest.fixture(autouse=True)
def _isolate_ingest_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """VECTOR_INGEST__ 접두사 환경 변수를 테스트마다 비운다."""

    for key in list(os.environ):
        if key.startswith(SharedConst.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("LOG_STDOUT", raising=False)


def pytest_sessionstart(session) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """테스트 세션 시작을 로깅한다."""

    _LOGGER.info("테스트 세션 시작")


def pytest_sessionfinish(session, exitstatus: int) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """테스트 세션 종료를 로깅한다."""

    _LOGGER.info("테스트 세션 종료 (exitstatus=%s)", exitstatus)


def pytest_runtest_logstart(nodeid: str, location) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """각 테스트 시작을 로깅한다."""

    _LOGGER.info("테스트 시작: %s", nodeid)


def pytest_runtest_logreport(report) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """테스트 결과를 로깅한다."""

    if report.when != "call":
        return
    if report.passed:
        _LOGGER.info("테스트 완료: %s", report.nodeid)
        return
    if report.skipped:
        _LOGGER.warning("테스트 스킵: %s", report.nodeid)
        return
    _LOGGER.error("테스트 실패: %s", report.nodeid)
