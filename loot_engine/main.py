"""FastAPI application entrypoint."""

import random
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from loot_engine.api.data import router as data_router
from loot_engine.api.health import router as health_router
from loot_engine.api.loot import router as loot_router
from loot_engine.config import settings
from loot_engine.core.data_manager import DataManager
from loot_engine.core.logging import get_logger, setup_logging
from loot_engine.db.database import SessionLocal, engine as db_engine
from loot_engine.db.models import Base
from loot_engine.services.loot_service import LootService

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    # 정의 데이터 로드 (affix → affix_pool → item → loot_pool)
    logger.info("Loading definition data from %s...", settings.DATA_DIR)
    data_manager = DataManager.load(settings.DATA_DIR, rng=random.Random(settings.RNG_SEED))
    if not all(data_manager.validate().values()):
        logger.warning("Definition data loaded with invalid entries")
    app.state.data_manager = data_manager
    app.state.data_dir = settings.DATA_DIR
    logger.info("Definition data loaded.")

    # LootService 초기화
    db_session = SessionLocal()
    app.state.loot_service = LootService(db_session, data_manager)
    logger.info("LootService initialized.")

    yield

    db_session.close()
    logger.info("Shutting down.")


app = FastAPI(
    title="Loot Engine",
    description="Data-driven affix, item and loot pool generation",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(data_router)
app.include_router(loot_router)
