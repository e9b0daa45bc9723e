"""
Программа: «GeoAlert» – сервис загрузки и анализа спутниковых снимков.
Модуль: models/user.py – модель пользователя системы.

Назначение модуля:
- Описание ORM-модели User. Таблица существует для связи с загрузками,
  но ни один маршрут её пока не использует (аутентификации нет).
"""

from extensions import db


class User(db.Model):
    """Класс `User` описывает учётную запись пользователя."""
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    # Пароль хранится как есть: вход в систему не реализован
    password = db.Column(db.String(200), nullable=False)
    uploads = db.relationship("Upload", backref="user", lazy=True)

    def __repr__(self):
        return f"<User {self.username}>"
