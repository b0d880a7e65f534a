"""Point values for each scoring category.

Structural categories are awarded automatically by the scorer. Everything
else in the table is a subjective bonus that a team (or the judges) picks
from the spreadsheet dropdown; those keys must match the sheet options.
"""

import json


MEASUREMENT = 'MEASUREMENT'
GOOD_SIGNAL = 'GOOD_SIGNAL'
MOST_MEASUREMENTS = 'MOST_MEASUREMENTS'
MANY_AREAS = 'MANY_AREAS'
MOST_BLOCK_GROUPS = 'MOST_BLOCK_GROUPS'
MAX_SUPERNODE_DISTANCE = 'MAX_SUPERNODE_DISTANCE'
MAX_SIGNAL_STRENGTH = 'MAX_SIGNAL_STRENGTH'

STRUCTURAL_POINTS = {
    MEASUREMENT: 10,
    GOOD_SIGNAL: 10,
    MOST_MEASUREMENTS: 30,
    MANY_AREAS: 40,
    MOST_BLOCK_GROUPS: 50,
    MAX_SUPERNODE_DISTANCE: 20,
    MAX_SIGNAL_STRENGTH: 20,
}

# A measurement stronger than this (dBm) earns GOOD_SIGNAL
GOOD_SIGNAL_THRESHOLD = -70
# Block groups a team needs for MANY_AREAS
MANY_AREAS_THRESHOLD = 4

POINTS_BY_TYPE = {
    **STRUCTURAL_POINTS,

    # no injuries, no vehicle accidents
    'Safety': 50,
    # -70 or better for both Tucson House and BICAS
    'Twin Towers': 50,
    # At least 4 measurements more than .5 miles from each other
    'Four Dispersed Measurements': 40,
    # Judged by hand, not computed
    'Furthest Distance Between Two Measurements': 20,
    'Furthest Distance from Another Team Measurement': 20,
    # Awarded per team by the High Judge of the War Derive
    'Most Unhinged Method': 0,
    'Longest Dance Party/Karaoke': 20,
    'Coolest Object': 20,
    'Worst Connection': 20,
    # Address and contact info for someone interested in the mesh
    'Location & Contact Info': 30,
    # EV, ebike, hoverboard
    'No Fossil Fuels': 40,
    # Awarded per team by the High Judge of the War Derive
    'Best Pattern Made from Reading Points': 0,
    'Best Side Quest': 0,
    'Hit Others with Water Gun': 10,
    'Hit Equipment with Water Gun': -10,
    'Trespassing Ticket': 30,
}


def subjective_categories(points: dict) -> dict:
    """Return only the subjective (sheet-selectable) entries of a table."""
    return {k: v for k, v in points.items() if k not in STRUCTURAL_POINTS}


def load_points_table(path: str) -> dict:
    """Load a point table from a JSON object of {category: points}.

    Structural categories missing from the file keep their default values.
    The subjective catalogue is exactly what the file lists, so an event
    can drop or add bonuses without touching code.
    """
    with open(path, 'r', encoding='utf-8') as f:
        loaded = json.load(f)

    if not isinstance(loaded, dict):
        raise ValueError(f"Point table in {path} must be a JSON object")

    table = dict(STRUCTURAL_POINTS)
    for category, value in loaded.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(
                f"Point value for {category!r} in {path} is not a number: {value!r}")
        table[category] = value
    return table
