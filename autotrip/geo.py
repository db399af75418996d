"""
Geocoding and routing collaborators.

The models only need two opaque functions:

    geocode(address)                   -> Coordinates | None
    route_distance(origin, destination) -> km | None

Real deployments plug in a geocoding/directions service. The two
implementations here are deterministic stand-ins for demos and tests:
a lookup table of known addresses and a great-circle "router".

Either collaborator may raise CollaboratorError on a service failure;
the engine degrades that quorum to absent and moves on.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)

EARTH_RADIUS_KM = 6371.0088


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lng}")

    @property
    def ll(self) -> str:
        return f"{self.lat},{self.lng}"


class Geocoder(Protocol):
    def geocode(self, address: str) -> Optional[Coordinates]: ...


class Router(Protocol):
    def route_distance(self, origin: Coordinates, destination: Coordinates) -> Optional[float]: ...


def _normalize(address: str) -> str:
    return " ".join(address.casefold().split())


class StaticGeocoder:
    """Geocoder backed by a fixed address table."""

    def __init__(self, table: Mapping[str, Coordinates]):
        self._table = {_normalize(address): coords for address, coords in table.items()}

    def geocode(self, address: str) -> Optional[Coordinates]:
        coords = self._table.get(_normalize(address))
        if coords is None:
            logger.debug("geocode_miss", address=address)
        return coords


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Great-circle distance in kilometres."""
    lat1, lng1 = math.radians(origin.lat), math.radians(origin.lng)
    lat2, lng2 = math.radians(destination.lat), math.radians(destination.lng)
    a = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


class GreatCircleRouter:
    """
    Approximates road distance as great-circle distance times a detour
    factor (1.0 = as the crow flies).
    """

    def __init__(self, detour_factor: float = 1.0):
        if detour_factor < 1.0:
            raise ValueError("detour_factor must be at least 1.0")
        self.detour_factor = detour_factor

    def route_distance(self, origin: Coordinates, destination: Coordinates) -> Optional[float]:
        return haversine_km(origin, destination) * self.detour_factor
