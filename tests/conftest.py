"""
Persona Context — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Generator

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"

from persona_context.compression import engine as compression_engine  # noqa: E402
from persona_context.config import loader as config_loader  # noqa: E402
from persona_context.evaluation import evaluator as quality_evaluator  # noqa: E402
from persona_context.observability import monitoring  # noqa: E402

CONFIG_ENV_VARS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "MAX_INPUT_CHARS",
    "DEFAULT_COMPRESSION_LEVEL",
    "ENABLE_METRICS",
)


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Drop cached config, engines and observability so each test starts clean."""
    config_loader._config_instance = None
    compression_engine._engine_instance = None
    quality_evaluator._evaluator_instance = None
    monitoring._observability_adapter = None
    yield
    config_loader._config_instance = None
    compression_engine._engine_instance = None
    quality_evaluator._evaluator_instance = None
    monitoring._observability_adapter = None


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    """Environment without any config variables and no .env file in cwd."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def security_text() -> str:
    """Korean security review with keywords spread across paragraphs."""
    return (
        "# 보안 검토 결과\n"
        "\n"
        "이번 릴리스에서 인증 모듈의 취약점이 발견되었습니다. 세션 토큰이 평문으로 저장됩니다.\n"
        "\n"
        "로그인 화면의 문구가 변경되었습니다. 버튼 색상도 조정되었습니다. 번역 파일이 갱신되었습니다.\n"
        "\n"
        "---\n"
        "\n"
        "모든 저장 데이터는 암호화 되어야 합니다. 외부 위협 모델을 다시 작성합니다.\n"
    )


@pytest.fixture
def markdown_text() -> str:
    """English notes with decoration, emphasis and a fenced code block."""
    return (
        "## Release notes 🚀\n"
        "\n"
        "\n"
        "\n"
        "The **API** gateway   now retries failed calls.   It also logs them.\n"
        "Operators can tune the backoff.\n"
        "\n"
        "==========\n"
        "\n"
        "```python\n"
        "def retry(n):\n"
        "    return n  # keep    spacing\n"
        "```\n"
        "\n"
        "- first item with ~~old~~ text\n"
        "- second item ✅\n"
    )
