"""Geography helpers that fill in the sheet's computed columns.

Two lookups run upstream of scoring:
  - Block group: which census block group polygon contains a point
  - Supernode distance: great-circle distance from a point to a supernode

The scorer never calls these itself; it reads the block group and
distance columns they produce. Failures raise instead of leaving a
wrong value in the row.
"""

import json
import math
import re

from shapely.geometry import Point, shape
from shapely.prepared import prep

from .scorer import COL_BLOCK_GROUP, COL_DISTANCE, COL_LOCATION, COL_SUPERNODE, COL_TEAM


# Supernode coordinates as (lng, lat)
SUPERNODES = {
    'Tucson House': (-110.97911841503442, 32.24040791166328),
    'BICAS': (-110.97072672091602, 32.24640552014024),
}

# Mean earth radius in meters, same value turf uses
EARTH_RADIUS_M = 6371008.8
UNIT_FACTORS = {
    'kilometers': EARTH_RADIUS_M / 1000,
    'miles': EARTH_RADIUS_M / 1609.344,
    'meters': EARTH_RADIUS_M,
}


class BlockGroupResolver:
    """Tag points with the id of the block group polygon covering them.

    Args:
        feature_collection: GeoJSON FeatureCollection dict of polygons.
        id_property: Feature property holding the block group id.
    """

    def __init__(self, feature_collection: dict, id_property: str = 'geoid20'):
        self.id_property = id_property
        self._polygons = []
        for feature in feature_collection.get('features', []):
            geometry = feature.get('geometry')
            if not geometry:
                continue
            geoid = (feature.get('properties') or {}).get(id_property)
            self._polygons.append((geoid, prep(shape(geometry))))

    @classmethod
    def from_file(cls, path: str, id_property: str = 'geoid20') -> 'BlockGroupResolver':
        with open(path, 'r', encoding='utf-8') as f:
            return cls(json.load(f), id_property=id_property)

    def __len__(self):
        return len(self._polygons)

    def resolve(self, lat: float, lng: float) -> str:
        """Return the block group id for a point. Boundary points count as inside."""
        point = Point(lng, lat)
        for geoid, polygon in self._polygons:
            if polygon.covers(point) and geoid is not None:
                return geoid
        raise ValueError('Could not get block group for coordinates')


def supernode_distance(lat: float, lng: float, supernode: str,
                       units: str = 'kilometers',
                       supernodes: dict | None = None) -> float:
    """Haversine distance from a point to a named supernode.

    Defaults to kilometers, which is what the event sheet has always
    reported in its distance column.
    """
    supernodes = SUPERNODES if supernodes is None else supernodes
    if supernode not in supernodes:
        raise ValueError(f"Unknown supernode: {supernode!r}")
    if units not in UNIT_FACTORS:
        raise ValueError(f"Unknown distance units: {units!r}")

    node_lng, node_lat = supernodes[supernode]
    d_lat = math.radians(node_lat - lat)
    d_lng = math.radians(node_lng - lng)
    a = (math.sin(d_lat / 2) ** 2
         + math.sin(d_lng / 2) ** 2 * math.cos(math.radians(lat)) * math.cos(math.radians(node_lat)))
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a)) * UNIT_FACTORS[units]


_LOCATION_RE = re.compile(r'^\s*\(?\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*\)?\s*$')


def parse_location(text) -> tuple[float, float]:
    """Parse a "lat, lng" location cell into floats."""
    match = _LOCATION_RE.match(str(text or ''))
    if not match:
        raise ValueError(f"Could not parse location: {text!r}")
    return float(match.group(1)), float(match.group(2))


def fill_geo_columns(rows: list[list], resolver: BlockGroupResolver | None = None,
                     units: str = 'kilometers') -> int:
    """Fill blank block group and distance cells from the location column.

    Only rows with a team name are touched. Rows are modified in place.
    Returns the number of cells filled.
    """
    filled = 0
    for row in rows:
        if not row[COL_TEAM]:
            continue

        need_block_group = resolver is not None and row[COL_BLOCK_GROUP] in (None, '')
        need_distance = row[COL_DISTANCE] is None
        if not need_block_group and not need_distance:
            continue

        lat, lng = parse_location(row[COL_LOCATION])
        if need_block_group:
            row[COL_BLOCK_GROUP] = resolver.resolve(lat, lng)
            filled += 1
        if need_distance:
            row[COL_DISTANCE] = supernode_distance(lat, lng, row[COL_SUPERNODE], units=units)
            filled += 1
    return filled
