"""Cinema model storing the last known state of each venue."""

from sqlalchemy import String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cartelera.models.base import Base, TimestampMixin


class Cinema(Base, TimestampMixin):
    """
    Cinema venue model.

    Written by upsert only. Holds the venue metadata, when its listings were
    last scraped, the ids of the shows on that listing and the sessions of
    each show keyed by show id.
    """

    __tablename__ = "venues"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    source: Mapped[str] = mapped_column(String(500), nullable=False)
    family: Mapped[str] = mapped_column(String(50), nullable=False)

    last_updated: Mapped[str | None] = mapped_column(String(40), nullable=True)
    show_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, server_default=text("'{}'")
    )
    sessions: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default=text("'{}'"))

    def __repr__(self) -> str:
        return f"<Cinema(id={self.id!r}, name={self.name!r}, location={self.location!r})>"
