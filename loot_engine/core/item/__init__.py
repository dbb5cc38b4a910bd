"""아이템 Core: 분류, 정의, 저장소, 생성기"""

from .classification import ItemClassification, ItemClassificationKind, ItemEquipSlot
from .models import ItemRarity, ItemDefinition, ItemInstance
from .database import ItemDefinitionDatabase
from .generator import (
    DEFAULT_AFFIX_COUNT_WEIGHTING,
    ItemGenerationCriteria,
    ItemGenerator,
)

__all__ = [
    "ItemClassification",
    "ItemClassificationKind",
    "ItemEquipSlot",
    "ItemRarity",
    "ItemDefinition",
    "ItemInstance",
    "ItemDefinitionDatabase",
    "DEFAULT_AFFIX_COUNT_WEIGHTING",
    "ItemGenerationCriteria",
    "ItemGenerator",
]
