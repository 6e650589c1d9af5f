"""Geographic coordinates and great-circle distance."""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    @classmethod
    def from_click(cls, lat: float, lng: float) -> "Coordinate":
        """Build a coordinate from a map click; leaflet reports unwrapped longitudes."""
        return cls(latitude=float(lat), longitude=normalize_longitude(float(lng)))

    def as_list(self) -> list:
        return [self.latitude, self.longitude]


def normalize_longitude(lng: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    return (lng + 180.0) % 360.0 - 180.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    # Returns distance in kilometers between two coordinates
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push h slightly past 1 near antipodal points
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def format_distance(km: float) -> str:
    """Format distance in km with appropriate precision."""
    if km < 1:
        return f"{km * 1000:,.0f} m"
    elif km < 10:
        return f"{km:,.2f} km"
    elif km < 100:
        return f"{km:,.1f} km"
    else:
        return f"{km:,.0f} km"
