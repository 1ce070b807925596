import asyncio

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from core.exceptions import RoomException

from db import Base, engine
from core.config import settings
from core.logging import logger

from models.user import User  # noqa: F401
from models.challenge_room import ChallengeRoom  # noqa: F401
from models.room_participant import RoomParticipant  # noqa: F401
from models.room_solve import RoomSolve  # noqa: F401
from models.timer_session import TimerSession, TimerSolve  # noqa: F401
from models.user_stats import UserEventStats  # noqa: F401
from models.contact_message import ContactMessage  # noqa: F401

from services.room_sweeper import start_room_sweeper

# ROUTES
from api.routers.auth import router as auth_router
from api.routers.rooms import router as rooms_router
from api.routers.users import router as users_router
from api.routers.stats import router as stats_router
from api.routers.admin import router as admin_router
from api.routers.events import router as events_router
from api.routers.timer import router as timer_router
from api.routers.contact import router as contact_router


app = FastAPI(title="CubeDev API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RoomException)
async def room_exception_handler(request: Request, exc: RoomException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code, "type": "room_error"}
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "validation_error"}
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    content = {"detail": "Internal server error", "type": type(exc).__name__}
    if settings.debug:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.on_event("startup")
async def startup_event():
    logger.info("Starting up application...")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    if settings.room_sweeper_enabled:
        app.state.room_sweeper = start_room_sweeper()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application...")
    sweeper = getattr(app.state, "room_sweeper", None)
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(rooms_router)
app.include_router(users_router)
app.include_router(stats_router)
app.include_router(admin_router)
app.include_router(events_router)
app.include_router(timer_router)
app.include_router(contact_router)
