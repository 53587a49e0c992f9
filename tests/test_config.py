from pathlib import Path

import pytest
from pydantic import ValidationError

from layoutopt.config import Settings, get_settings
from layoutopt.models import Architecture


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    settings = Settings()
    assert settings.architecture == Architecture.amd64
    assert settings.cache_line_size == 64
    assert settings.strict_types is False
    assert settings.output_dir == Path("./outputs")


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LAYOUTOPT_ARCHITECTURE", "386")
    monkeypatch.setenv("LAYOUTOPT_CACHE_LINE_SIZE", "128")
    monkeypatch.setenv("LAYOUTOPT_STRICT_TYPES", "true")

    settings = get_settings()
    assert settings.architecture == Architecture.i386
    assert settings.cache_line_size == 128
    assert settings.strict_types is True


def test_dotenv_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LAYOUTOPT_ARCHITECTURE=arm64\n", encoding="utf-8")
    assert Settings().architecture == Architecture.arm64


def test_environment_architecture_is_case_insensitive(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LAYOUTOPT_ARCHITECTURE", "AMD64")
    assert Settings().architecture == Architecture.amd64


def test_unknown_environment_architecture(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LAYOUTOPT_ARCHITECTURE", "sparc")
    with pytest.raises(ValidationError, match="Unsupported architecture"):
        Settings()
