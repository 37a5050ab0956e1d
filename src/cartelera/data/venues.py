"""Static venue registry."""

import logging
from collections.abc import Iterable

from cartelera.scrapers.models import Venue

logger = logging.getLogger(__name__)

VENUES: dict[str, Venue] = {
    venue.id: venue
    for venue in [
        # Cines Palafox group: listing page + per-film detail pages
        Venue(
            id="palafox",
            name="Cines Palafox",
            family="listing",
            source="https://www.cinespalafox.com/cartelera-cines-palafox.html",
            address="Paseo de la Independencia, 12, 50004 Zaragoza",
            location="Zaragoza",
            website="https://www.cinespalafox.com/cartelera-cines-palafox.html",
        ),
        Venue(
            id="aragonia",
            name="Aragonia",
            family="listing",
            source="https://www.cinespalafox.com/cartelera-cines-aragonia.html",
            address="Avenida de Juan Pablo II, 43, 50009 Zaragoza",
            location="Zaragoza",
            website="https://www.cinespalafox.com/cartelera-cines-aragonia.html",
        ),
        Venue(
            id="cervantes",
            name="Sala Cervantes",
            family="listing",
            source="https://www.cinespalafox.com/cartelera-cine-cervantes.html",
            address="Calle Marqués de Casa Jiménez, 2, 50004 Zaragoza",
            location="Zaragoza",
            website="https://www.cinespalafox.com/cartelera-cine-cervantes.html",
        ),
        # Cinesa: JSON feed
        Venue(
            id="grancasa",
            name="Cinesa GranCasa",
            family="json-feed",
            source="https://www.cinesa.es/Cines/Horarios/320/50015",
            address="Calle de María Zambrano, 35, 50018 Zaragoza",
            location="Zaragoza",
            website="https://www.cinesa.es/cines/grancasa",
        ),
        Venue(
            id="venecia",
            name="Cinesa Puerto Venecia",
            family="json-feed",
            source="https://www.cinesa.es/Cines/Horarios/1190/50015",
            address="Travesía Jardines Reales, 7, 50021 Zaragoza",
            location="Zaragoza",
            website="https://www.cinesa.es/cines/puerto-venecia",
        ),
        # reservaentradas.com: card grid
        Venue(
            id="victoria",
            name="Multicines Victoria",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/huesca/multicinesvictoria/",
            address="Calle Santa Barbara, 27, 22400 Monzón",
            location="Huesca",
            website="https://circusa.com/monzon/",
        ),
        Venue(
            id="maravillas",
            name="Cine Maravillas",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/teruel/cinemaravillas/",
            address="Calle San Miguel, 5, 44001 Teruel",
            location="Teruel",
            website="https://cinemaravillas.com/",
        ),
        Venue(
            id="lys",
            name="Cines Lys",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/valencia/cineslys/",
            address="Paseo de Ruzafa, 3, 46002 Valencia",
            location="Valencia",
            website="https://www.cineslys.com/",
        ),
        Venue(
            id="abcpark",
            name="Cines ABC Park",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/valencia/abcpark/",
            address="Calle Roger de Lauria, 21, 46002 Valencia",
            location="Valencia",
            website="https://www.cinesabc.com/",
        ),
        Venue(
            id="abcgranturia",
            name="Cines ABC Gran Turia",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/valencia/abcgranturia/",
            address="Plaza de Europa, 46950 Xirivella",
            location="Valencia",
            website="https://www.cinesabc.com/",
        ),
        Venue(
            id="abcelsaler",
            name="Cines ABC El Saler",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/valencia/abcelsaler/",
            address="Avenida Profesor López Piñero, 16, 46013 Valencia",
            location="Valencia",
            website="https://www.cinesabc.com/",
        ),
        Venue(
            id="abcgandia",
            name="Cines ABC Gandia",
            family="card-grid",
            source="https://www.reservaentradas.com/cine/valencia/abcgandia/",
            address="Avenida La Vital, 10, 46701 Gandia",
            location="Valencia",
            website="https://www.cinesabc.com/",
        ),
    ]
}


class VenueRegistry:
    """
    Venues known to the service.

    Starts from the static VENUES table; directory refreshes can add new
    venues but never replace a registered one.
    """

    def __init__(self, venues: Iterable[Venue] | None = None) -> None:
        self._venues: dict[str, Venue] = {
            venue.id: venue for venue in (VENUES.values() if venues is None else venues)
        }

    def all(self) -> list[Venue]:
        return list(self._venues.values())

    def get(self, venue_id: str) -> Venue | None:
        return self._venues.get(venue_id)

    def merge(self, venues: Iterable[Venue]) -> list[Venue]:
        """
        Add venues that are not registered yet.

        A venue counts as registered when its id or its source URL is
        already known.

        Returns:
            The venues that were added
        """
        known_sources = {_source_key(v.source) for v in self._venues.values()}
        added: list[Venue] = []

        for venue in venues:
            source = _source_key(venue.source)
            if venue.id in self._venues or source in known_sources:
                continue
            self._venues[venue.id] = venue
            known_sources.add(source)
            added.append(venue)

        if added:
            logger.info(f"Registered {len(added)} new venues: {[v.id for v in added]}")
        return added


def _source_key(url: str) -> str:
    return url.rstrip("/").lower()
