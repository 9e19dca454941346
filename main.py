from fastapi import FastAPI
from contextlib import asynccontextmanager
from sqlmodel import Session

from clubhub.config import SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD
from clubhub.database import create_db_and_tables, engine
from clubhub.enums import Role, UserStatus
from clubhub.errors import register_exception_handlers
from clubhub.logger import get_logger
from clubhub.services.users import register_user
from clubhub.store import ClubStore

logger = get_logger(__name__)


def seed_admin():
    """Create the configured admin account if it does not exist yet."""
    if not (SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD):
        return
    with Session(engine) as db:
        store = ClubStore(db)
        if store.get_user_by_email(SEED_ADMIN_EMAIL):
            return
        register_user(
            store,
            email=SEED_ADMIN_EMAIL,
            password=SEED_ADMIN_PASSWORD,
            role=Role.ADMIN,
            status=UserStatus.ACTIVE,
            first_name="Admin",
            last_name="User",
        )
        logger.info("Seeded admin user %s", SEED_ADMIN_EMAIL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create database tables
    create_db_and_tables()
    seed_admin()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Clubhub",
    description="Club management: athletes, teams and events with role-scoped access",
    version="1.0.0",
    lifespan=lifespan
)

register_exception_handlers(app)

# Include routers
from clubhub.routers import auth, users, athletes, teams, events, dashboard

app.include_router(auth.router, tags=["auth"])
app.include_router(users.router, tags=["users"])
app.include_router(athletes.router, tags=["athletes"])
app.include_router(teams.router, tags=["teams"])
app.include_router(events.router, tags=["events"])
app.include_router(dashboard.router, tags=["dashboard"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
