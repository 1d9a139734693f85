"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dayplanner.config import settings
from dayplanner.database import Base, engine
from dayplanner.errors import register_error_handlers

# Import routers
from dayplanner.routers import auth, events, calendar

# Import all models so Base.metadata knows about them
from dayplanner.models.user import User     # noqa: F401
from dayplanner.models.event import Event   # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Day Planner",
    description="Personal calendar — timed events laid out on day, week and month grids",
    version="0.1.0",
)

register_error_handlers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/")
def root():
    return {"message": "Day Planner API is running"}


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
