"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: models/upload.py – модель загруженного изображения.

Назначение модуля:
- Описание ORM-модели Upload для учёта загруженных изображений.
- Хранение имени файла на диске, исходного имени, типа и размера.
- Хранение результата анализа (флаг тревоги и пояснение), который появляется после анализа.
"""

from extensions import db

STATUS_PENDING = "pending"
STATUS_ANALYZED = "analyzed"


class Upload(db.Model):
    """Запись о загруженном изображении и его вердикте."""

    # AUTOINCREMENT гарантирует, что идентификаторы не переиспользуются
    __table_args__ = (
        db.CheckConstraint(
            "(analysis_result IS NULL) = (analysis_details IS NULL)",
            name="ck_upload_analysis_pair",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(127), nullable=False)
    size_bytes = db.Column(db.Integer, nullable=False)
    # Привязка к пользователю (всегда пустая: аутентификации нет)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    analysis_result = db.Column(db.Boolean, nullable=True)
    analysis_details = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False)

    @property
    def status(self) -> str:
        if self.analysis_result is None:
            return STATUS_PENDING
        return STATUS_ANALYZED

    def to_dict(self) -> dict:
        """Представление записи для JSON-ответов API."""
        return {
            "id": self.id,
            "filename": self.filename,
            "originalName": self.original_name,
            "mimeType": self.mime_type,
            "sizeBytes": self.size_bytes,
            "userId": self.user_id,
            "analysisResult": self.analysis_result,
            "analysisDetails": self.analysis_details,
            "status": self.status,
            "createdAt": self.created_at.isoformat() + "Z",
        }

    def __repr__(self):
        return f"<Upload {self.id} file={self.filename} status={self.status}>"
