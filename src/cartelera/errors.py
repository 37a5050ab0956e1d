"""Exceptions raised by scrapers, the TMDb client and the orchestrator."""


class CarteleraError(Exception):
    """Base class for every error surfaced to API callers."""

    status_code = 500


class NotFoundError(CarteleraError):
    """Unknown venue id."""

    status_code = 404

    def __init__(self, resource_id: str) -> None:
        self.resource_id = resource_id
        super().__init__(f"Resource with ID '{resource_id}' was not found")


class UpstreamFetchError(CarteleraError):
    """A cinema website or the TMDb API could not be fetched."""


class FetchError(UpstreamFetchError):
    """A scraper could not download its source page."""


class ParseError(UpstreamFetchError):
    """A source page is missing the elements a scraper relies on."""
