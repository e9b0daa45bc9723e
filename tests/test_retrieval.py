"""Тесты поиска записей и сохранённых файлов."""

import os

import pytest

from utils.errors import StoredFileNotFound, UploadNotFound
from utils.retrieval import get_upload_metadata, read_stored_file, resolve_stored_file


def test_get_upload_metadata_returns_record(store):
    record = store.create_upload(
        filename="image-1-1.png", original_name="a.png", mime_type="image/png", size_bytes=3
    )
    assert get_upload_metadata(store, record.id).filename == "image-1-1.png"


def test_get_upload_metadata_unknown_id(store):
    with pytest.raises(UploadNotFound):
        get_upload_metadata(store, 5)


def test_read_stored_file_returns_bytes(upload_dir):
    with open(os.path.join(upload_dir, "image-1-1.png"), "wb") as target:
        target.write(b"pixels")

    assert read_stored_file(upload_dir, "image-1-1.png") == b"pixels"
    assert resolve_stored_file(upload_dir, "image-1-1.png") == os.path.join(
        os.path.abspath(upload_dir), "image-1-1.png"
    )


@pytest.mark.parametrize("filename", ["missing.png", "", "..", "../secret.txt", "/etc/passwd"])
def test_unknown_or_escaping_names_are_not_found(tmp_path, upload_dir, filename):
    (tmp_path / "secret.txt").write_text("do not serve")

    with pytest.raises(StoredFileNotFound):
        resolve_stored_file(upload_dir, filename)


def test_directories_are_not_served(upload_dir):
    os.mkdir(os.path.join(upload_dir, "nested"))
    with pytest.raises(StoredFileNotFound):
        resolve_stored_file(upload_dir, "nested")
