"""Тесты движка вердиктов и применения анализа к записям."""

import random
from datetime import datetime

import pytest

from utils.analysis import (
    ALERT_DETAILS,
    CLEAR_DETAILS,
    RandomVerdictEngine,
    analyze_upload,
)
from utils.errors import NotFoundError, UploadNotFound


class _FixedVerdict:
    def __init__(self, is_alert: bool, details: str):
        self.verdict = (is_alert, details)
        self.seen = []

    def evaluate(self, record):
        self.seen.append(record.id)
        return self.verdict


def _pending(store):
    return store.create_upload(
        filename="image-1-1.png",
        original_name="test.png",
        mime_type="image/png",
        size_bytes=2048,
    )


def test_random_engine_pairs_flag_with_matching_text():
    engine = RandomVerdictEngine(rng=random.Random(0))
    verdicts = [engine.evaluate(None) for _ in range(50)]

    assert {flag for flag, _ in verdicts} == {True, False}
    for flag, details in verdicts:
        assert details == (ALERT_DETAILS if flag else CLEAR_DETAILS)


def test_random_engine_is_reproducible_with_seed():
    first = RandomVerdictEngine(rng=random.Random(11))
    second = RandomVerdictEngine(rng=random.Random(11))
    assert [first.evaluate(None) for _ in range(10)] == [second.evaluate(None) for _ in range(10)]


def test_analyze_writes_verdict_back(store):
    record = _pending(store)
    engine = _FixedVerdict(True, "flood risk")
    analyzed_at = datetime(2025, 3, 1, 12, 30)

    outcome = analyze_upload(store, engine, record.id, clock=lambda: analyzed_at)

    assert outcome.upload_id == record.id
    assert outcome.filename == "image-1-1.png"
    assert outcome.is_alert is True
    assert outcome.details == "flood risk"
    assert outcome.to_dict() == {
        "uploadId": record.id,
        "filename": "image-1-1.png",
        "isAlert": True,
        "details": "flood risk",
        "date": "2025-03-01T12:30:00Z",
    }
    stored = store.get_upload(record.id)
    assert stored.analysis_result is True
    assert stored.analysis_details == "flood risk"
    assert engine.seen == [record.id]


def test_analyze_unknown_id_raises_and_creates_nothing(store):
    engine = _FixedVerdict(False, "all clear")

    with pytest.raises(UploadNotFound) as excinfo:
        analyze_upload(store, engine, 999)

    assert isinstance(excinfo.value, NotFoundError)
    assert engine.seen == []
    assert store.get_all_uploads() == []


def test_repeat_analysis_overwrites_verdict(store):
    record = _pending(store)
    analyze_upload(store, _FixedVerdict(True, "flood risk"), record.id)

    outcome = analyze_upload(store, _FixedVerdict(False, "all clear"), record.id)

    assert outcome.is_alert is False
    stored = store.get_upload(record.id)
    assert (stored.analysis_result, stored.analysis_details) == (False, "all clear")


def test_failed_engine_leaves_record_unchanged(store):
    record = _pending(store)

    class Exploding:
        def evaluate(self, record):
            raise RuntimeError("model offline")

    with pytest.raises(RuntimeError):
        analyze_upload(store, Exploding(), record.id)

    stored = store.get_upload(record.id)
    assert stored.analysis_result is None
    assert stored.analysis_details is None
