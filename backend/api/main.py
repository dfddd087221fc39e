import logging
from contextlib import asynccontextmanager
from pathlib import Path
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add parent directory to path to allow importing stockcheck
sys.path.append(str(Path(__file__).resolve().parents[2]))

from backend.core.config import settings
from backend.api.routers import stock_router

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    # Indices load lazily on the first request that needs them
    logger.info(
        "Stock checker starting (config=%s, source_dir=%s)",
        settings.CONFIG_PATH,
        settings.SOURCE_DIR or "-",
    )

    yield  # Application runs here

    logger.info("Stock checker stopped")


app = FastAPI(title="Stock Checker", version=VERSION, lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(stock_router)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "version": VERSION}
