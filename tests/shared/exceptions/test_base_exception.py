"""
목적: 공통 예외 모델과 베이스 예외 동작을 검증한다.
설명: 예외 메시지/상세 모델/원본 예외 저장, build 헬퍼, 재시도 속성 상속을 확인한다.
디자인 패턴: 도메인 예외 객체, DTO
참조: src/vector_ingest/shared/exceptions/base.py, src/vector_ingest/shared/exceptions/models.py
"""

from __future__ import annotations

from vector_ingest.shared.exceptions import BaseAppException, ExceptionDetail


class _RetryableError(BaseAppException):
    default_code = "UNIT_RETRYABLE"
    retryable = True


def test_base_app_exception_to_dict() -> None:
    """BaseAppException의 직렬화 결과를 검증한다."""

    detail = ExceptionDetail(
        code="E-001",
        cause="입력 데이터 누락",
        hint="필수 파라미터를 확인하세요.",
        metadata={"field": "collectionName"},
    )
    original = ValueError("collectionName is required")
    error = BaseAppException(message="유효하지 않은 작업입니다.", detail=detail, original=original)

    result = error.to_dict()

    assert error.message == "유효하지 않은 작업입니다."
    assert error.detail.code == "E-001"
    assert error.original is original
    assert result["message"] == "유효하지 않은 작업입니다."
    assert result["detail"]["metadata"]["field"] == "collectionName"
    assert "ValueError" in result["original"]


def test_base_app_exception_defaults_to_class_code() -> None:
    """상세 모델을 생략하면 클래스 기본 코드가 쓰이는지 확인한다."""

    error = BaseAppException("실패")

    assert error.code == "APP_ERROR"
    assert error.retryable is False
    assert error.to_dict()["original"] is None


def test_build_fills_detail_metadata() -> None:
    """build 헬퍼가 코드/원인/힌트/메타데이터를 채우는지 확인한다."""

    error = _RetryableError.build(
        "컬렉션 생성 실패",
        cause="타임아웃",
        hint="잠시 후 다시 시도하세요.",
        collection="products",
        attempt=2,
    )

    assert isinstance(error, _RetryableError)
    assert error.code == "UNIT_RETRYABLE"
    assert error.retryable is True
    assert error.detail.cause == "타임아웃"
    assert error.detail.hint == "잠시 후 다시 시도하세요."
    assert error.detail.metadata == {"collection": "products", "attempt": 2}
    assert str(error) == "컬렉션 생성 실패"
