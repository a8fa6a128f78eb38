"""
목적: 설정 로더 공개 API를 제공한다.
설명: 일반 설정 병합 로더를 외부에 노출한다.
디자인 패턴: 퍼사드
참조: src/vector_ingest/shared/config/loader.py
"""

from vector_ingest.shared.config.loader import ConfigLoader

__all__ = ["ConfigLoader"]
