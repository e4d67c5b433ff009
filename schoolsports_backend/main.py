import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import select, Session

from schoolsports_backend.core.config import LOG_LEVEL, AUTO_SEED
from schoolsports_backend.core.database import init_db, sync_engine
from schoolsports_backend.models.championship_model import Championship
from schoolsports_backend.seed.seed_all import seed_all

# --- Routers ---
from schoolsports_backend.routes.championship_routes import router as championship_router
from schoolsports_backend.routes.team_routes import router as team_router
from schoolsports_backend.routes.player_routes import router as player_router
from schoolsports_backend.routes.class_routes import router as class_router
from schoolsports_backend.routes.match_routes import router as match_router
from schoolsports_backend.routes.report_routes import router as report_router
from schoolsports_backend.routes.public_routes import router as public_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="School Sports Championships")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    # 1️⃣ Init DB tables async
    await init_db()

    # 2️⃣ Auto-seed an empty DB in sync mode
    if not AUTO_SEED:
        return
    with Session(sync_engine) as session:
        has_championships = session.exec(select(Championship.id)).first() is not None
    if has_championships:
        logger.info("✅ Database already seeded. Skipping auto-seed.")
    else:
        logger.info("🌱 No championships found. Auto-seeding database...")
        seed_all()


@app.get("/")
async def home():
    return {"message": "School sports championships API"}


# Routers
app.include_router(championship_router, prefix="/championships", tags=["Championships"])
app.include_router(team_router, prefix="/teams", tags=["Teams"])
app.include_router(player_router, prefix="/players", tags=["Players"])
app.include_router(class_router, prefix="/classes", tags=["Classes"])
app.include_router(match_router, prefix="/matches", tags=["Matches"])
app.include_router(report_router, prefix="/reports", tags=["Reports"])
app.include_router(public_router, prefix="/public", tags=["Public"])
