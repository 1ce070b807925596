"""
WCA event ids and their display names.

Single lookup table for every place that needs to validate or label an event.
"""
from typing import Dict

WCA_EVENTS: Dict[str, str] = {
    "333": "3x3x3 Cube",
    "222": "2x2x2 Cube",
    "444": "4x4x4 Cube",
    "555": "5x5x5 Cube",
    "666": "6x6x6 Cube",
    "777": "7x7x7 Cube",
    "333bf": "3x3x3 Blindfolded",
    "333fm": "3x3x3 Fewest Moves",
    "333oh": "3x3x3 One-Handed",
    "clock": "Clock",
    "minx": "Megaminx",
    "pyram": "Pyraminx",
    "skewb": "Skewb",
    "sq1": "Square-1",
    "444bf": "4x4x4 Blindfolded",
    "555bf": "5x5x5 Blindfolded",
    "333mbf": "3x3x3 Multi-Blind",
}


def is_known_event(event_id: str) -> bool:
    return event_id in WCA_EVENTS


def get_event_name(event_id: str) -> str:
    """Display name for an event id; unknown ids are returned as-is"""
    return WCA_EVENTS.get(event_id, event_id)
