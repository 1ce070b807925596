from fastapi import APIRouter
from core.events import WCA_EVENTS

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("")
async def list_events():
    """WCA events a room can be created for"""
    return [{"id": event_id, "name": name} for event_id, name in WCA_EVENTS.items()]
