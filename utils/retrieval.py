"""
Модуль: `utils/retrieval.py`.
Назначение: Поиск записи по идентификатору и сохранённого файла по имени.
"""

import os

from werkzeug.security import safe_join

from models.upload import Upload
from utils.errors import StoredFileNotFound, UploadNotFound
from utils.record_store import RecordStore


def get_upload_metadata(store: RecordStore, upload_id: int) -> Upload:
    record = store.get_upload(upload_id)
    if record is None:
        raise UploadNotFound()
    return record


def resolve_stored_file(upload_folder: str, filename: str) -> str:
    """Возвращает абсолютный путь к файлу внутри папки загрузок.

    Попытки выйти за пределы папки (`..`, абсолютные пути) считаются
    отсутствующим файлом.
    """
    if not filename:
        raise StoredFileNotFound()

    base = os.path.abspath(upload_folder)
    path = safe_join(base, filename)
    if path is None or not os.path.isfile(path):
        raise StoredFileNotFound()
    return path


def read_stored_file(upload_folder: str, filename: str) -> bytes:
    with open(resolve_stored_file(upload_folder, filename), "rb") as source:
        return source.read()
