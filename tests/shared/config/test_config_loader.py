"""
목적: 설정 로더의 병합 규칙을 검증한다.
설명: dict/JSON 파일/.env 파일/환경 변수/override 순서와 값 파싱을 확인한다.
디자인 패턴: 빌더 패턴
참조: src/vector_ingest/shared/config/loader.py
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from vector_ingest.shared.config import ConfigLoader


def test_sources_merge_in_order(tmp_path: Path) -> None:
    """뒤에 추가된 소스가 앞의 값을 깊게 덮어쓰는지 확인한다."""

    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"upsert": {"batch_size": 500, "concurrency": 2}}),
        encoding="utf-8",
    )

    merged = (
        ConfigLoader()
        .add_dict({"upsert": {"batch_size": 100}, "pipeline": {"max_attempts": 5}})
        .add_json_file(str(config_path))
        .build({"upsert": {"concurrency": 4}})
    )

    assert merged == {
        "upsert": {"batch_size": 500, "concurrency": 4},
        "pipeline": {"max_attempts": 5},
    }


def test_missing_json_file(tmp_path: Path) -> None:
    """선택 파일은 건너뛰고 필수 파일은 오류를 내는지 확인한다."""

    missing = str(tmp_path / "missing.json")

    assert ConfigLoader().add_json_file(missing).build() == {}
    with pytest.raises(FileNotFoundError):
        ConfigLoader().add_json_file(missing, required=True)


def test_json_file_must_be_object(tmp_path: Path) -> None:
    """최상위가 객체가 아닌 JSON 파일을 거부하는지 확인한다."""

    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigLoader().add_json_file(str(config_path))


def test_env_nested_keys_and_values(monkeypatch: pytest.MonkeyPatch) -> None:
    """접두사/구분자 기반 환경 변수가 중첩 사전으로 파싱되는지 확인한다."""

    monkeypatch.setenv("UNITCFG__UPSERT__BATCH_SIZE", "250")
    monkeypatch.setenv("UNITCFG__PIPELINE__RETRY_DELAY_SECONDS", "0.5")
    monkeypatch.setenv("UNITCFG__SCHEMA__ALLOW_EXTRA_FIELDS", "false")
    monkeypatch.setenv("UNITCFG__SCHEMA__DATE_FIELDS", '["created_at", "updated"]')
    monkeypatch.setenv("UNITCFG__SCHEMA__PRIMARY_KEY_SOURCE", "sku")

    merged = ConfigLoader().add_env(prefix="UNITCFG__", delimiter="__").build()

    assert merged["upsert"]["batch_size"] == 250
    assert merged["pipeline"]["retry_delay_seconds"] == 0.5
    assert merged["schema"]["allow_extra_fields"] is False
    assert merged["schema"]["date_fields"] == ["created_at", "updated"]
    assert merged["schema"]["primary_key_source"] == "sku"


def test_load_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """.env 파일 값이 환경 변수로 반영되는지 확인한다."""

    env_path = tmp_path / ".env"
    env_path.write_text("UNITDOTENV__INDEX__POLL_ATTEMPTS=7\n", encoding="utf-8")
    monkeypatch.delenv("UNITDOTENV__INDEX__POLL_ATTEMPTS", raising=False)

    try:
        merged = (
            ConfigLoader()
            .load_env_file(str(env_path))
            .add_env(prefix="UNITDOTENV__")
            .build()
        )
    finally:
        os.environ.pop("UNITDOTENV__INDEX__POLL_ATTEMPTS", None)

    assert merged == {"index": {"poll_attempts": 7}}
