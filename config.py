"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: config.py – конфигурация приложения.

Назначение модуля:
- Определение базовых параметров приложения Flask (секретный ключ, строка подключения к БД).
- Настройка параметров загрузки файлов (папка, максимальный размер, имя поля формы).
- Параметры ограничения частоты запросов, CORS и журналирования.
"""

import os
import warnings


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Преобразует переменную окружения в bool."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_int(name: str, default: int) -> int:
    """Преобразует переменную окружения в int."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str] | None = None) -> list[str]:
    """Преобразует переменную окружения вида 'a,b,c' в список."""
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


def _is_production() -> bool:
    """Определяет production-режим по FLASK_ENV."""
    return os.environ.get("FLASK_ENV", "").strip().lower() == "production"


class Config:
    """Базовая конфигурация приложения."""

    _PRODUCTION = _is_production()

    SECRET_KEY = os.environ.get("SECRET_KEY")
    if not SECRET_KEY:
        if _PRODUCTION:
            raise RuntimeError(
                "SECRET_KEY environment variable is required in production. "
                "Set a strong random value before starting the app."
            )
        SECRET_KEY = "dev-insecure-secret-key"
        warnings.warn(
            "SECRET_KEY is not set. Using insecure development fallback key.",
            RuntimeWarning,
            stacklevel=1,
        )

    # Записи живут только в памяти процесса и пропадают при перезапуске
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ENABLED = _get_env_bool("CORS_ENABLED", default=False)
    CORS_ORIGINS = _get_env_list(
        "CORS_ORIGINS",
        default=[
            "http://127.0.0.1:5000",
            "http://localhost:5000",
            "http://localhost:5173",
        ],
    )

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    UPLOAD_FIELD_NAME = "image"
    MAX_UPLOAD_SIZE = _get_env_int("MAX_UPLOAD_SIZE", 10 * 1024 * 1024)
    # Запас на служебные части multipart-запроса
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 1024 * 1024

    RATE_LIMIT_ENABLED = _get_env_bool("RATE_LIMIT_ENABLED", default=True)
    RATE_LIMIT_WINDOW_SECONDS = _get_env_int("RATE_LIMIT_WINDOW_SECONDS", 10 * 60)
    UPLOAD_RATE_LIMIT = _get_env_int("UPLOAD_RATE_LIMIT", 40)
    ANALYZE_RATE_LIMIT = _get_env_int("ANALYZE_RATE_LIMIT", 120)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
