"""Loot generation endpoints."""

from fastapi import APIRouter, HTTPException, Request

from loot_engine.api.schemas import (
    ItemInfo,
    ItemRollRequest,
    LootRollRequest,
    LootRollResponse,
)
from loot_engine.core.affix.generator import AffixGenerationCriteria
from loot_engine.core.item.generator import ItemGenerationCriteria
from loot_engine.core.logging import get_logger
from loot_engine.services.loot_service import (
    LootService,
    StaleDropError,
    UnknownDefinitionError,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/loot", tags=["loot"])


def get_loot_service(request: Request) -> LootService:
    """LootService 인스턴스 반환 (의존성 주입)"""
    service: LootService = request.app.state.loot_service
    return service


def _to_item_criteria(request: ItemRollRequest) -> ItemGenerationCriteria:
    criteria = ItemGenerationCriteria(
        affix_criteria=AffixGenerationCriteria(
            placement=request.placement,
            maximum_tier=request.maximum_tier,
            item_level=request.item_level,
        )
    )
    if request.affix_count_weighting is not None:
        criteria.affix_count_weighting = [
            (pair.count, pair.weight) for pair in request.affix_count_weighting
        ]
    return criteria


@router.post("/pools/{loot_pool_id}/roll", response_model=LootRollResponse)
def roll_loot_pool(
    loot_pool_id: int,
    http_request: Request,
    request: LootRollRequest | None = None,
) -> LootRollResponse:
    request = request or LootRollRequest()
    service = get_loot_service(http_request)
    try:
        item = service.roll_loot_pool(loot_pool_id, request.owner_type, request.owner_id)
    except UnknownDefinitionError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if item is None:
        return LootRollResponse(dropped=False)
    return LootRollResponse(dropped=True, item=ItemInfo.from_instance(item))


@router.post("/items/{item_id}/roll", response_model=ItemInfo)
def roll_item(
    item_id: int,
    http_request: Request,
    request: ItemRollRequest | None = None,
) -> ItemInfo:
    request = request or ItemRollRequest()
    service = get_loot_service(http_request)
    try:
        item = service.roll_item(
            item_id,
            _to_item_criteria(request),
            request.owner_type,
            request.owner_id,
        )
    except UnknownDefinitionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ItemInfo.from_instance(item)


@router.get("/drops/{guid}", response_model=ItemInfo)
def get_drop(guid: str, http_request: Request) -> ItemInfo:
    service = get_loot_service(http_request)
    try:
        item = service.get_drop(guid)
    except StaleDropError as e:
        raise HTTPException(status_code=410, detail=str(e))
    if item is None:
        raise HTTPException(status_code=404, detail="Drop not found")
    return ItemInfo.from_instance(item)
