"""Shared test data"""
from datetime import datetime, timezone

from models.challenge_room import RoomFormat
from schemas.challenge_room import RoomCreate

# Fixed clock for crud-level tests
NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)

AO5_SCRAMBLES = [
    "R U R' U'",
    "F2 L2 B D'",
    "U2 R2 F' L",
    "B' D2 R U2",
    "L F' U R2",
]

AO12_SCRAMBLES = [f"R U{i} F2 D'" for i in range(12)]


def room_create(fmt=RoomFormat.AO5, **kwargs) -> RoomCreate:
    scrambles = AO5_SCRAMBLES if fmt == RoomFormat.AO5 else AO12_SCRAMBLES
    data = {"name": "Sunday ao5", "event": "333", "format": fmt, "scrambles": scrambles}
    data.update(kwargs)
    return RoomCreate(**data)
