"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from loot_engine.core.affix.models import AffixInstance, AffixPlacement
from loot_engine.core.item.models import ItemInstance


# === Request Schemas ===


class AffixCountWeight(BaseModel):
    """어픽스 개수 가중치 1쌍"""

    count: int = Field(..., ge=0, le=6, description="어픽스 개수")
    weight: int = Field(..., ge=0, description="가중치")


class LootRollRequest(BaseModel):
    """루트 풀 드롭 요청"""

    owner_type: str = Field("world", description="드롭 소유자 유형")
    owner_id: str = Field("", description="드롭 소유자 ID")


class ItemRollRequest(LootRollRequest):
    """아이템 직접 생성 요청"""

    item_level: Optional[int] = Field(None, ge=0, description="아이템 레벨")
    maximum_tier: Optional[int] = Field(None, ge=1, description="최대 어픽스 티어")
    placement: Optional[AffixPlacement] = Field(None, description="Prefix 또는 Suffix")
    affix_count_weighting: Optional[list[AffixCountWeight]] = Field(
        None, description="미지정 시 기본 분포"
    )


# === Response Schemas ===


class AffixInfo(BaseModel):
    """생성된 어픽스"""

    affix_def_id: int
    name: str
    placement: str
    tier: int
    stats: dict[str, float]

    @classmethod
    def from_instance(cls, affix: AffixInstance) -> "AffixInfo":
        with affix.definition.lock:
            name = affix.definition.name
            placement = affix.definition.placement.value
            affix_def_id = affix.definition.id
        return cls(
            affix_def_id=affix_def_id,
            name=name,
            placement=placement,
            tier=affix.tier,
            stats=affix.stats.to_raw(),
        )


class ItemInfo(BaseModel):
    """생성된 아이템"""

    guid: str
    item_def_id: int
    name: str
    classification: str
    rarity: str
    affixes: list[AffixInfo] = []

    @classmethod
    def from_instance(cls, item: ItemInstance) -> "ItemInfo":
        with item.definition.lock:
            name = item.definition.name
            classification = str(item.definition.classification)
            item_def_id = item.definition.id
        return cls(
            guid=item.guid,
            item_def_id=item_def_id,
            name=name,
            classification=classification,
            rarity=item.rarity().value,
            affixes=[AffixInfo.from_instance(affix) for affix in item.affixes],
        )


class LootRollResponse(BaseModel):
    """드롭 결과. 드롭 없음이면 dropped=False"""

    dropped: bool
    item: Optional[ItemInfo] = None


class ValidationResponse(BaseModel):
    valid: bool
    databases: dict[str, bool]


class SaveResponse(BaseModel):
    saved: bool
    data_dir: str
