"""postcodes.io adapters."""

from fair_meet.adapters.postcodes_api.postcodes_geo_provider import PostcodesIoGeoProvider

__all__ = ["PostcodesIoGeoProvider"]
