"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: routes/api.py – JSON API.

Назначение модуля:
- Приём изображений (POST /api/upload).
- Анализ загруженного изображения (POST /api/analyze/<id>).
- Выдача сохранённых файлов (GET /api/uploads/<filename>).
- Просмотр записей о загрузках (GET /api/records, GET /api/records/<id>).
"""

import re

from flask import current_app, jsonify, request, send_file
from werkzeug.exceptions import RequestEntityTooLarge

from utils.analysis import analyze_upload
from utils.errors import FileTooLarge, InvalidUploadId, NotFoundError, ValidationError
from utils.intake import accept_upload
from utils.rate_limit import is_rate_limited
from utils.retrieval import get_upload_metadata, resolve_stored_file


# Только десятичные цифры, допускается минус
_UPLOAD_ID_RE = re.compile(r"-?[0-9]+")


def _api_error(message: str, status: int = 400):
    return jsonify({"message": message}), status


def _record_store():
    return current_app.extensions["record_store"]


def _parse_upload_id(raw_value: str) -> int:
    if not isinstance(raw_value, str) or not _UPLOAD_ID_RE.fullmatch(raw_value):
        raise InvalidUploadId()
    return int(raw_value)


def register_routes(app):
    @app.route("/api/upload", methods=["POST"])
    def upload_image():
        """Обработчик загрузки изображения."""
        try:
            if is_rate_limited("upload", app.config["UPLOAD_RATE_LIMIT"]):
                return _api_error("Too many uploads. Please try again later.", 429)

            fieldname = app.config["UPLOAD_FIELD_NAME"]
            file = request.files.get(fieldname)

            # Пустое имя означает, что пользователь не выбрал файл
            payload = None
            if file is not None and file.filename:
                payload = file.read()

            result = accept_upload(
                _record_store(),
                app.config["UPLOAD_FOLDER"],
                payload,
                original_name=file.filename if file is not None else "",
                mime_type=file.mimetype if file is not None else "",
                fieldname=fieldname,
                naming=app.extensions["filename_generator"],
                max_size=app.config["MAX_UPLOAD_SIZE"],
            )
            current_app.logger.info(
                "Upload %s stored as %s", result.upload_id, result.filename
            )

            return (
                jsonify(
                    {
                        "message": "File uploaded successfully",
                        "uploadId": result.upload_id,
                        "filename": result.filename,
                    }
                ),
                201,
            )

        except ValidationError as exc:
            current_app.logger.warning("Upload rejected: %s", exc.message)
            return _api_error(exc.message, exc.status_code)
        except RequestEntityTooLarge:
            current_app.logger.warning("Upload rejected: request body too large")
            return _api_error(FileTooLarge.default_message, 400)
        except Exception:
            current_app.logger.exception("Error uploading file")
            return _api_error("Error uploading file", 500)

    @app.route("/api/analyze/<upload_id>", methods=["POST"])
    def analyze_image(upload_id: str):
        """Анализирует загруженное изображение и сохраняет вердикт."""
        try:
            if is_rate_limited("analyze", app.config["ANALYZE_RATE_LIMIT"]):
                return _api_error("Too many requests. Please try again later.", 429)

            outcome = analyze_upload(
                _record_store(),
                app.extensions["verdict_engine"],
                _parse_upload_id(upload_id),
            )
            current_app.logger.info(
                "Upload %s analyzed, alert=%s", outcome.upload_id, outcome.is_alert
            )
            return jsonify(outcome.to_dict()), 200

        except (ValidationError, NotFoundError) as exc:
            return _api_error(exc.message, exc.status_code)
        except Exception:
            current_app.logger.exception("Error analyzing image")
            return _api_error("Error analyzing image", 500)

    @app.route("/api/uploads/<filename>")
    def uploaded_file(filename):
        try:
            path = resolve_stored_file(app.config["UPLOAD_FOLDER"], filename)
        except NotFoundError as exc:
            current_app.logger.warning("Stored file not found: %s", filename)
            return _api_error(exc.message, exc.status_code)
        return send_file(path)

    @app.get("/api/records")
    def list_records():
        try:
            records = _record_store().get_all_uploads()
            return jsonify({"records": [record.to_dict() for record in records]})
        except Exception:
            current_app.logger.exception("Error listing uploads")
            return _api_error("Internal server error", 500)

    @app.get("/api/records/<upload_id>")
    def get_record(upload_id: str):
        try:
            record = get_upload_metadata(_record_store(), _parse_upload_id(upload_id))
            return jsonify(record.to_dict())
        except (ValidationError, NotFoundError) as exc:
            return _api_error(exc.message, exc.status_code)
        except Exception:
            current_app.logger.exception("Error reading upload record")
            return _api_error("Internal server error", 500)
