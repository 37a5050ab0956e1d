"""Show model storing scraped and TMDb-enriched film data."""

from sqlalchemy import BigInteger, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cartelera.models.base import Base, TimestampMixin


class Show(Base, TimestampMixin):
    """
    Show model.

    Keyed by the slug of the scraped title. TMDb columns stay empty until
    the show has been reconciled.
    """

    __tablename__ = "shows"

    id: Mapped[str] = mapped_column(String(200), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    special_edition: Mapped[str | None] = mapped_column(String(200), nullable=True)
    synopsis: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_readable: Mapped[str | None] = mapped_column(String(20), nullable=True)
    director: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    writers: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    actors: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    genres: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)
    poster: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    trailer: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    source: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # TMDb metadata
    original_name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    tmdb_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    imdb_id: Mapped[str | None] = mapped_column(String(20), nullable=True)
    tagline: Mapped[str | None] = mapped_column(Text, nullable=True)
    budget: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    revenue: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    release_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    original_language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    popularity: Mapped[float | None] = mapped_column(Float, nullable=True)
    vote_average: Mapped[float | None] = mapped_column(Float, nullable=True)
    vote_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Show(id={self.id!r}, name={self.name!r}, tmdb_id={self.tmdb_id})>"
