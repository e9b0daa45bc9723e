"""
Модуль: `extensions.py`.
Назначение: Инициализация и экспорт экземпляров Flask-расширений.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS

# Все расширения создаём здесь и инициализируем в фабрике приложения
db = SQLAlchemy()
cors = CORS()
