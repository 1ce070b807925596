"""
Create all database tables without going through Alembic.
Run with: python3 create_tables.py
"""
from sqlalchemy import inspect

from db import Base, engine

# Import all models so they are registered with Base.metadata
from models.user import User  # noqa: F401
from models.challenge_room import ChallengeRoom  # noqa: F401
from models.room_participant import RoomParticipant  # noqa: F401
from models.room_solve import RoomSolve  # noqa: F401
from models.timer_session import TimerSession, TimerSolve  # noqa: F401
from models.user_stats import UserEventStats  # noqa: F401
from models.contact_message import ContactMessage  # noqa: F401


def create_tables():
    Base.metadata.create_all(bind=engine)
    return sorted(inspect(engine).get_table_names())


if __name__ == "__main__":
    tables = create_tables()
    print(f"Created tables ({len(tables)}):")
    for table in tables:
        print(f"   - {table}")
