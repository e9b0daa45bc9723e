"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: utils/intake.py – приём загружаемых изображений.

Назначение модуля:
- Проверка полезной нагрузки: наличие файла, MIME-тип `image/*`, размер не более лимита.
- Генерация уникального имени файла вида `<поле>-<метка времени>-<случайное число>.<расширение>`.
- Сохранение файла в папку загрузок и создание записи в хранилище.
"""

import os
import random
import re
import time
from dataclasses import dataclass
from typing import Callable

from utils.errors import FileTooLarge, InvalidFileType, NoFileProvided
from utils.record_store import RecordStore

DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024
DEFAULT_FIELD_NAME = "image"
_MAX_NAME_ATTEMPTS = 5
# Расширение переносится в имя на диске, только если состоит из латиницы и цифр
_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


@dataclass(frozen=True)
class IntakeResult:
    upload_id: int
    filename: str


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def _extension_of(original_name: str | None) -> str:
    # Клиенты Windows присылают имя вместе с путём через обратный слеш
    basename = os.path.basename((original_name or "").replace("\\", "/"))
    extension = os.path.splitext(basename)[1]
    if _EXTENSION_RE.match(extension):
        return extension
    return ""


class FilenameGenerator:
    """Формирует имена файлов; часы и генератор случайных чисел можно подменить в тестах."""

    def __init__(self, clock: Callable[[], int] | None = None, rng: random.Random | None = None):
        self._clock = clock or _epoch_millis
        self._rng = rng or random.Random()

    def __call__(self, fieldname: str, original_name: str) -> str:
        extension = _extension_of(original_name)
        suffix = self._rng.randint(0, 10**9)
        return f"{fieldname}-{self._clock()}-{suffix}{extension}"


def _describe_size(size: int) -> str:
    mebibyte = 1024 * 1024
    if size >= mebibyte and size % mebibyte == 0:
        return f"{size // mebibyte} MB"
    return f"{size} bytes"


def validate_payload(payload: bytes | None, mime_type: str | None, size_bytes: int, max_size: int) -> None:
    """Бросает ValidationError, если файл нельзя принять."""
    if payload is None:
        raise NoFileProvided()
    if not (mime_type or "").startswith("image/"):
        raise InvalidFileType()
    if size_bytes > max_size:
        raise FileTooLarge(f"File too large. Maximum size is {_describe_size(max_size)}")


def _write_exclusive(upload_folder: str, payload: bytes, fieldname: str, original_name: str, naming) -> tuple[str, str]:
    # Режим "xb" не даёт перезаписать чужой файл при совпадении имён
    for _ in range(_MAX_NAME_ATTEMPTS):
        filename = naming(fieldname, original_name)
        filepath = os.path.join(upload_folder, filename)
        try:
            target = open(filepath, "xb")
        except FileExistsError:
            continue
        try:
            with target:
                target.write(payload)
        except Exception:
            os.remove(filepath)
            raise
        return filename, filepath
    raise FileExistsError(f"could not allocate a unique filename in {upload_folder}")


def accept_upload(
    store: RecordStore,
    upload_folder: str,
    payload: bytes | None,
    original_name: str,
    mime_type: str,
    size_bytes: int | None = None,
    *,
    fieldname: str = DEFAULT_FIELD_NAME,
    naming: FilenameGenerator | None = None,
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE,
) -> IntakeResult:
    """Проверяет и сохраняет изображение, затем создаёт запись о загрузке.

    Если размер не передан, используется длина полезной нагрузки.
    При ошибке создания записи сохранённый файл удаляется, так что
    неудачная загрузка не оставляет ни записи, ни файла.
    """
    if size_bytes is None and payload is not None:
        size_bytes = len(payload)
    validate_payload(payload, mime_type, size_bytes or 0, max_size)

    naming = naming or FilenameGenerator()
    os.makedirs(upload_folder, exist_ok=True)
    filename, filepath = _write_exclusive(upload_folder, payload, fieldname, original_name, naming)

    try:
        record = store.create_upload(
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size_bytes=size_bytes,
        )
    except Exception:
        os.remove(filepath)
        raise

    return IntakeResult(upload_id=record.id, filename=record.filename)
