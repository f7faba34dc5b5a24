"""MusicBrainz catalog access."""

from watchbrainz.catalog.client import MusicBrainzClient
from watchbrainz.catalog.models import CatalogArtist, CatalogArtistMatch, CatalogReleaseGroup
from watchbrainz.catalog.protocol import CatalogClient

__all__ = [
    "CatalogArtist",
    "CatalogArtistMatch",
    "CatalogClient",
    "CatalogReleaseGroup",
    "MusicBrainzClient",
]
