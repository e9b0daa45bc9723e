"""Тестовые фикстуры: приложение, клиент и хранилище для pytest."""

import os
import random
import tempfile
from typing import Generator

import pytest

# Настраиваем окружение до импорта модулей приложения
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("UPLOAD_FOLDER", tempfile.mkdtemp(prefix="geoalert-uploads-"))

from app import create_app  # noqa: E402
from utils.analysis import RandomVerdictEngine  # noqa: E402
from utils.intake import FilenameGenerator  # noqa: E402

# Минимальный PNG-заголовок, дополненный до ~2 КБ
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 2040


class StepClock:
    """Часы, возвращающие возрастающие миллисекунды."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.value = start

    def __call__(self) -> int:
        self.value += 1
        return self.value


@pytest.fixture()
def upload_dir(tmp_path) -> str:
    path = tmp_path / "uploads"
    path.mkdir()
    return str(path)


@pytest.fixture()
def app(upload_dir):
    """Свежее приложение с пустым хранилищем и детерминированными зависимостями."""
    application = create_app(
        {
            "TESTING": True,
            "UPLOAD_FOLDER": upload_dir,
            "RATE_LIMIT_ENABLED": False,
        }
    )
    application.extensions["verdict_engine"] = RandomVerdictEngine(rng=random.Random(7))
    application.extensions["filename_generator"] = FilenameGenerator(
        clock=StepClock(), rng=random.Random(42)
    )
    yield application


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app) -> Generator:
    """Хранилище записей внутри контекста приложения."""
    with app.app_context():
        yield app.extensions["record_store"]


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_BYTES
