"""
Название: «GeoAlert»
Дата и номер версии: 2026-10-17 v1.0
Язык: Python (Flask)
Краткое описание: сервис загрузки спутниковых снимков и выдачи вердикта об угрозе стихийного бедствия
"""

import logging
import os

from flask import Flask
from werkzeug.exceptions import RequestEntityTooLarge

from config import Config
from extensions import db, cors
import models  # noqa: F401 - регистрирует модели для db.create_all()
from routes.api import register_routes as register_api_routes
from utils.analysis import RandomVerdictEngine
from utils.errors import FileTooLarge
from utils.intake import FilenameGenerator
from utils.rate_limit import InMemoryRateLimiter
from utils.record_store import RecordStore


def create_app(config_overrides: dict | None = None) -> Flask:
    """Фабрика приложения, собирающая все модули воедино."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"], logging.INFO))

    # Инициализация расширений
    db.init_app(app)

    if app.config["CORS_ENABLED"]:
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        )

    # Единственные экземпляры хранилища и вспомогательных сервисов на процесс
    app.extensions["record_store"] = RecordStore(db)
    app.extensions["verdict_engine"] = RandomVerdictEngine()
    app.extensions["filename_generator"] = FilenameGenerator()
    app.extensions["rate_limiter"] = InMemoryRateLimiter()

    # Гарантируем наличие папки загрузок
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    register_api_routes(app)

    with app.app_context():
        # База в памяти: таблицы создаются при каждом запуске
        db.create_all()

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(error):
        """Тело запроса больше MAX_CONTENT_LENGTH: отвечаем как на слишком большой файл."""
        return {"message": FileTooLarge.default_message}, 400

    @app.after_request
    def apply_security_headers(response):
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok", "uploads": app.extensions["record_store"].count_uploads()}, 200

    app.logger.debug("Application created, uploads go to %s", app.config["UPLOAD_FOLDER"])
    return app


app = create_app()


if __name__ == "__main__":
    is_production = os.environ.get("FLASK_ENV", "").lower() == "production"
    app.run(debug=not is_production)
