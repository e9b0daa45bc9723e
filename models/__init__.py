"""
Модуль: `models/__init__.py`.
Назначение: Импорт моделей для корректной регистрации в SQLAlchemy metadata.
"""

from .user import User
from .upload import Upload

__all__ = ["User", "Upload"]
