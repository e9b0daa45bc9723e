"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: utils/analysis.py – анализ загруженных изображений.

Назначение модуля:
- Интерфейс движка вердиктов: evaluate(record) -> (флаг тревоги, пояснение).
- Заглушка RandomVerdictEngine: флаг выбирается случайно, текст фиксирован.
- Применение вердикта к записи в хранилище.

Реальной модели здесь нет. Чтобы подключить её, достаточно положить другой
движок в `app.extensions["verdict_engine"]`; хранилище и маршруты не меняются.
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol

from models.upload import Upload
from utils.errors import UploadNotFound
from utils.record_store import RecordStore, utc_now

ALERT_DETAILS = (
    "Our ML model has detected patterns consistent with a potential flood risk in the analyzed area. "
    "The satellite imagery shows signs of excessive water accumulation and terrain vulnerabilities."
)
CLEAR_DETAILS = (
    "Our ML model analysis indicates normal conditions in the captured area. "
    "No signs of imminent natural disasters were detected in the satellite imagery."
)


class VerdictEngine(Protocol):
    def evaluate(self, record: Upload) -> tuple[bool, str]:
        ...


class RandomVerdictEngine:
    """Недетерминированный вердикт: тревога с вероятностью 1/2."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def evaluate(self, record: Upload) -> tuple[bool, str]:
        is_alert = self._rng.random() > 0.5
        return is_alert, ALERT_DETAILS if is_alert else CLEAR_DETAILS


@dataclass(frozen=True)
class AnalysisOutcome:
    upload_id: int
    filename: str
    is_alert: bool
    details: str
    analyzed_at: datetime

    def to_dict(self) -> dict:
        return {
            "uploadId": self.upload_id,
            "filename": self.filename,
            "isAlert": self.is_alert,
            "details": self.details,
            "date": self.analyzed_at.isoformat() + "Z",
        }


def analyze_upload(
    store: RecordStore,
    engine: VerdictEngine,
    upload_id: int,
    clock: Callable[[], datetime] | None = None,
) -> AnalysisOutcome:
    """Выносит вердикт по загрузке и сохраняет его в записи.

    Повторный анализ перезаписывает предыдущий вердикт.
    """
    record = store.get_upload(upload_id)
    if record is None:
        raise UploadNotFound()

    is_alert, details = engine.evaluate(record)
    updated = store.update_upload_analysis(upload_id, is_alert, details)
    if updated is None:
        raise UploadNotFound()

    return AnalysisOutcome(
        upload_id=updated.id,
        filename=updated.filename,
        is_alert=bool(is_alert),
        details=details,
        analyzed_at=(clock or utc_now)(),
    )
