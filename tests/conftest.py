"""Shared test fixtures."""

import random

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from loot_engine.api.data import router as data_router
from loot_engine.api.health import router as health_router
from loot_engine.api.loot import router as loot_router
from loot_engine.config import PACKAGED_DATA_DIR
from loot_engine.core.affix.database import AffixDefinitionDatabase
from loot_engine.core.affix_pool.database import AffixPoolDefinitionDatabase
from loot_engine.core.data_manager import DataManager
from loot_engine.core.item.database import ItemDefinitionDatabase
from loot_engine.core.loot_pool.database import LootPoolDefinitionDatabase
from loot_engine.db.database import get_db
from loot_engine.db.models import Base
from loot_engine.services.loot_service import LootService

# ── 소형 정의 그래프 (affix → affix_pool → item → loot_pool) ──

AFFIX_RAW = [
    {
        "id": 1,
        "placement": "Prefix",
        "tiers": {
            "1": {
                "tier": 1,
                "stats": [{"stat": "Health", "lower_bound": 1, "upper_bound": 3}],
            }
        },
        "name": "Sturdy",
    },
    {
        "id": 2,
        "placement": "Suffix",
        "tiers": {
            "1": {
                "tier": 1,
                "stats": [{"stat": "MoveSpeed", "lower_bound": 0.1, "upper_bound": 0.2}],
                "precision_places": 2,
            }
        },
        "name": "of Haste",
    },
    {
        "id": 3,
        "placement": "Prefix",
        "tiers": {
            "1": {
                "tier": 1,
                "stats": [{"stat": "Finesse", "lower_bound": 1, "upper_bound": 2}],
            },
            "2": {
                "tier": 2,
                "stats": [{"stat": "Finesse", "lower_bound": 3, "upper_bound": 4}],
                "item_level_req": 5,
            },
        },
        "name": "Keen",
    },
    {
        "id": 4,
        "placement": "Suffix",
        "tiers": {
            "1": {
                "tier": 1,
                "stats": [{"stat": "Energy", "lower_bound": 5, "upper_bound": 10}],
            }
        },
        "name": "of Energy",
    },
]

AFFIX_POOL_RAW = [
    {
        "id": 1,
        "members": [{"affix_id": 1, "weight": 10}, {"affix_id": 3, "weight": 10}],
        "name": "Prefixes",
    },
    {
        "id": 2,
        "members": [{"affix_id": 2, "weight": 10}, {"affix_id": 4, "weight": 10}],
        "name": "Suffixes",
    },
]

ITEM_RAW = [
    {
        "id": 1,
        "classification": {"Equippable": "Head"},
        "affix_pools": [1, 2],
        "fixed_affixes": [],
        "name": "Cap",
    },
    {
        "id": 2,
        "classification": "Currency",
        "affix_pools": [],
        "fixed_affixes": [],
        "name": "Coin",
    },
    {
        "id": 3,
        "classification": {"Equippable": "Body"},
        "affix_pools": [1],
        "fixed_affixes": [1, 3],
        "name": "Relic",
    },
]

LOOT_POOL_RAW = [
    {
        "id": 1,
        "name": "Common",
        "members": [{"item_id": 1, "weight": 10}, {"item_id": 2, "weight": 10}],
    },
    {
        "id": 2,
        "name": "Only cap",
        "members": [
            {"item_id": 1, "weight": 1},
            {"item_id": 2, "weight": 0},
            {"item_id": 3, "weight": 0},
        ],
    },
]


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def affix_db() -> AffixDefinitionDatabase:
    return AffixDefinitionDatabase.from_raw(AFFIX_RAW)


@pytest.fixture()
def affix_pool_db(affix_db: AffixDefinitionDatabase) -> AffixPoolDefinitionDatabase:
    return AffixPoolDefinitionDatabase.from_raw(AFFIX_POOL_RAW, affix_db)


@pytest.fixture()
def item_db(
    affix_db: AffixDefinitionDatabase, affix_pool_db: AffixPoolDefinitionDatabase
) -> ItemDefinitionDatabase:
    return ItemDefinitionDatabase.from_raw(ITEM_RAW, affix_db, affix_pool_db)


@pytest.fixture()
def loot_pool_db(item_db: ItemDefinitionDatabase) -> LootPoolDefinitionDatabase:
    return LootPoolDefinitionDatabase.from_raw(LOOT_POOL_RAW, item_db)


@pytest.fixture()
def data_manager() -> DataManager:
    """패키지 기본 데이터 + 고정 시드"""
    return DataManager.load(PACKAGED_DATA_DIR, rng=random.Random(42))


# ── DB / API ──


@pytest.fixture()
def db_session() -> Session:
    """인메모리 SQLite 세션 (테스트마다 새 DB)"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(data_manager: DataManager, db_session: Session, tmp_path) -> TestClient:
    """FastAPI TestClient wired to an in-memory SQLite database."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(data_router)
    app.include_router(loot_router)

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.state.data_manager = data_manager
    app.state.data_dir = tmp_path / "saved"
    app.state.loot_service = LootService(db_session, data_manager)

    return TestClient(app)
