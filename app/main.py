import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.db.base import init_db
from app.routers import posts
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Posts API", description="Posts kept in a durable ordered map")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Stable storage opened at {settings.DATABASE_PATH}")

    try:
        yield
    finally:
        logger.info("Posts API shutting down")


app.router.lifespan_context = lifespan

app.include_router(posts.router)


@app.get("/")
async def root():
    return {"message": "Posts API is running"}
