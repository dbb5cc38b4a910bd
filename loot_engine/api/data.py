"""Definition data endpoints (read, validate, save)."""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from loot_engine.api.schemas import SaveResponse, ValidationResponse
from loot_engine.core.data import DataDefinitionDatabase
from loot_engine.core.data_manager import DataManager
from loot_engine.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/data", tags=["data"])


def get_data_manager(request: Request) -> DataManager:
    """DataManager 인스턴스 반환 (의존성 주입)"""
    data_manager: DataManager = request.app.state.data_manager
    return data_manager


def _database_for(data_manager: DataManager, kind: str) -> DataDefinitionDatabase:
    databases: dict[str, DataDefinitionDatabase] = {
        "affixes": data_manager.affix_db,
        "affix-pools": data_manager.affix_pool_db,
        "items": data_manager.item_db,
        "loot-pools": data_manager.loot_pool_db,
    }
    if kind not in databases:
        raise HTTPException(status_code=404, detail=f"Unknown data kind: {kind}")
    return databases[kind]


@router.get("/validate", response_model=ValidationResponse)
def validate_data(
    data_manager: DataManager = Depends(get_data_manager),
) -> ValidationResponse:
    results = data_manager.validate()
    return ValidationResponse(valid=all(results.values()), databases=results)


@router.post("/save", response_model=SaveResponse)
def save_data(
    request: Request,
    data_manager: DataManager = Depends(get_data_manager),
) -> SaveResponse:
    """전체 정의를 data_dir에 다시 기록 (참조는 id로)."""
    data_dir = Path(request.app.state.data_dir)
    data_manager.write_to(data_dir)
    logger.info("Definition data saved to %s", data_dir)
    return SaveResponse(saved=True, data_dir=str(data_dir))


@router.get("/{kind}")
def list_definitions(
    kind: str,
    data_manager: DataManager = Depends(get_data_manager),
) -> list[dict[str, Any]]:
    """저장 형식 그대로의 정의 목록."""
    return _database_for(data_manager, kind).to_raw()


@router.get("/{kind}/{definition_id}")
def get_definition(
    kind: str,
    definition_id: int,
    data_manager: DataManager = Depends(get_data_manager),
) -> dict[str, Any]:
    database = _database_for(data_manager, kind)
    definition = database.definition(definition_id)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"{kind} {definition_id} not found")
    return database.definition_to_raw(definition)
