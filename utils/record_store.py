"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: utils/record_store.py – хранилище записей о загрузках и пользователях.

Назначение модуля:
- Создание записей о загрузках с монотонно растущими идентификаторами.
- Чтение записи по идентификатору и получение списка всех записей.
- Запись результата анализа (флаг и пояснение всегда обновляются вместе).
- Минимальные операции над пользователями (маршрутами не используются).

Данные лежат в SQLite в памяти процесса, поэтому теряются при перезапуске.
Экземпляр хранилища создаётся фабрикой приложения и доступен через
`current_app.extensions["record_store"]`.
"""

from datetime import datetime, timezone
from threading import Lock
from typing import Callable

from models.upload import Upload
from models.user import User
from utils.errors import UsernameTaken

# Диапазон INTEGER в SQLite: идентификаторы вне него заведомо не существуют
_MIN_ROW_ID = -(2**63)
_MAX_ROW_ID = 2**63 - 1


def _is_storable_id(row_id: int) -> bool:
    return _MIN_ROW_ID <= row_id <= _MAX_ROW_ID


def utc_now() -> datetime:
    """Текущее время в UTC без tzinfo (так его хранит SQLite)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordStore:
    """Хранилище записей поверх сессии Flask-SQLAlchemy."""

    def __init__(self, database, clock: Callable[[], datetime] | None = None):
        self._db = database
        self._clock = clock or utc_now
        # Сериализуем изменения: запросы могут приходить из разных потоков
        self._write_lock = Lock()

    def create_upload(
        self,
        filename: str,
        original_name: str,
        mime_type: str,
        size_bytes: int,
        user_id: int | None = None,
    ) -> Upload:
        record = Upload(
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size_bytes=size_bytes,
            user_id=user_id,
            analysis_result=None,
            analysis_details=None,
            created_at=self._clock(),
        )
        with self._write_lock:
            self._db.session.add(record)
            try:
                self._db.session.commit()
            except Exception:
                self._db.session.rollback()
                raise
        return record

    def get_upload(self, upload_id: int) -> Upload | None:
        if not _is_storable_id(upload_id):
            return None
        return self._db.session.get(Upload, upload_id)

    def update_upload_analysis(self, upload_id: int, result: bool, details: str) -> Upload | None:
        """Заменяет вердикт записи. Для неизвестного id возвращает None."""
        if details is None:
            raise ValueError("analysis details must accompany the result")

        if not _is_storable_id(upload_id):
            return None

        with self._write_lock:
            record = self._db.session.get(Upload, upload_id)
            if record is None:
                return None
            record.analysis_result = bool(result)
            record.analysis_details = details
            try:
                self._db.session.commit()
            except Exception:
                self._db.session.rollback()
                raise
        return record

    def get_all_uploads(self) -> list[Upload]:
        return self._db.session.query(Upload).order_by(Upload.id.asc()).all()

    def count_uploads(self) -> int:
        return self._db.session.query(Upload).count()

    def create_user(self, username: str, password: str) -> User:
        with self._write_lock:
            if self._db.session.query(User).filter_by(username=username).first() is not None:
                raise UsernameTaken()
            user = User(username=username, password=password)
            self._db.session.add(user)
            self._db.session.commit()
        return user

    def get_user(self, user_id: int) -> User | None:
        if not _is_storable_id(user_id):
            return None
        return self._db.session.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self._db.session.query(User).filter_by(username=username).first()
