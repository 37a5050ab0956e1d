"""Upsert-only persistence of venues and shows."""

import logging
from dataclasses import asdict
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cartelera.models import Cinema, Show
from cartelera.scrapers.models import ShowRecord, Venue

logger = logging.getLogger(__name__)


def show_row(show: ShowRecord) -> dict[str, Any]:
    """
    Column values for a show.

    Only the fields the record actually carries are included, so upserting a
    plain ShowRecord keeps the TMDb columns of an earlier enriched upsert.
    """
    return {key: value for key, value in asdict(show).items() if key != "sessions"}


def venue_row(
    venue: Venue,
    last_updated: str | None = None,
    shows: list[ShowRecord] | None = None,
) -> dict[str, Any]:
    """Column values for a venue, with its listing when shows are given."""
    row = asdict(venue)
    if shows is not None:
        row["last_updated"] = last_updated
        row["show_ids"] = [show.id for show in shows]
        row["sessions"] = {show.id: [asdict(s) for s in show.sessions] for show in shows}
    return row


class CatalogStore:
    """
    Durable shadow of the latest venue listings and show metadata.

    Writes are PostgreSQL upserts keyed by id, so concurrent refreshes of the
    same show do not conflict. Nothing is ever deleted here.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def upsert_shows(self, shows: list[ShowRecord]) -> None:
        """Insert or update shows by id."""
        if not shows:
            return

        # Plain and enriched records carry different columns; one statement each.
        groups: dict[tuple[str, ...], list[dict[str, Any]]] = {}
        for show in shows:
            row = show_row(show)
            groups.setdefault(tuple(row), []).append(row)

        async with self.session_factory() as db:
            for rows in groups.values():
                await db.execute(self._upsert(Show, _dedupe(rows)))
            await db.commit()

        logger.debug(f"Upserted {len(shows)} shows")

    async def upsert_venue(
        self,
        venue: Venue,
        last_updated: str | None = None,
        shows: list[ShowRecord] | None = None,
    ) -> None:
        """Insert or update a venue, including its current listing when given."""
        async with self.session_factory() as db:
            await db.execute(self._upsert(Cinema, [venue_row(venue, last_updated, shows)]))
            await db.commit()

    async def upsert_venues(self, venues: list[Venue]) -> None:
        """Insert or update venue metadata only."""
        if not venues:
            return
        async with self.session_factory() as db:
            await db.execute(self._upsert(Cinema, [venue_row(v) for v in venues]))
            await db.commit()
        logger.info(f"Upserted {len(venues)} venues")

    async def get_venues(self) -> list[Venue]:
        """Venues persisted by earlier runs, including directory-discovered ones."""
        async with self.session_factory() as db:
            result = await db.execute(select(Cinema).order_by(Cinema.id))
            rows = result.scalars().all()

        return [
            Venue(
                id=row.id,
                name=row.name,
                family=row.family,
                source=row.source,
                address=row.address,
                location=row.location,
                website=row.website,
            )
            for row in rows
        ]

    def _upsert(self, model: type[Cinema] | type[Show], rows: list[dict[str, Any]]):
        stmt = insert(model).values(rows)
        columns = [key for key in rows[0] if key != "id"]
        return stmt.on_conflict_do_update(
            index_elements=[model.id],
            set_={**{key: stmt.excluded[key] for key in columns}, "updated_at": func.now()},
        )


def _dedupe(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the last row per id; ON CONFLICT cannot touch one row twice."""
    return list({row["id"]: row for row in rows}.values())
