"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from simple_notes.api import files
from simple_notes.api.v1 import router as v1_router
from simple_notes.core.config import settings
from simple_notes.core.database import init_db
from simple_notes.core.identity import IdentityResolver

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Simple Notes API started (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="Simple Notes API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Built once; every request resolves its caller through this instance.
app.state.identity_resolver = IdentityResolver(secret=settings.JWT_SECRET.get_secret_value())

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(files.router, prefix="/file", tags=["files"])


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Simple Notes API"}
