"""
Модуль: `utils/errors.py`.
Назначение: Иерархия ошибок предметной области и соответствующие HTTP-статусы.

- ValidationError (400): некорректный файл, тип, размер или идентификатор.
- NotFoundError (404): неизвестная запись или файл.
Всё остальное считается внутренней ошибкой и отдаётся клиенту как 500.
"""


class GeoAlertError(Exception):
    """Базовая ошибка приложения."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(GeoAlertError):
    status_code = 400
    default_message = "Invalid request"


class NoFileProvided(ValidationError):
    default_message = "No file uploaded"


class InvalidFileType(ValidationError):
    default_message = "Only image files are allowed"


class FileTooLarge(ValidationError):
    default_message = "File too large"


class InvalidUploadId(ValidationError):
    default_message = "Invalid upload ID"


class UsernameTaken(ValidationError):
    default_message = "Username is already taken"


class NotFoundError(GeoAlertError):
    status_code = 404
    default_message = "Not found"


class UploadNotFound(NotFoundError):
    default_message = "Upload not found"


class StoredFileNotFound(NotFoundError):
    default_message = "File not found"
