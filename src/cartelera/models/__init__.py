"""SQLAlchemy ORM models."""

from cartelera.models.base import Base
from cartelera.models.cinema import Cinema
from cartelera.models.show import Show

__all__ = ["Base", "Cinema", "Show"]
