"""어픽스 Core: 정의, 저장소, 생성기"""

from .models import (
    AffixPlacement,
    AffixDefinitionStat,
    AffixDefinitionTier,
    AffixDefinition,
    AffixInstance,
)
from .database import AffixDefinitionDatabase
from .generator import (
    AffixGenerationCriteria,
    AffixGenerator,
    TierSelectionPolicy,
    uniform_tier_selection,
)

__all__ = [
    "AffixPlacement",
    "AffixDefinitionStat",
    "AffixDefinitionTier",
    "AffixDefinition",
    "AffixInstance",
    "AffixDefinitionDatabase",
    "AffixGenerationCriteria",
    "AffixGenerator",
    "TierSelectionPolicy",
    "uniform_tier_selection",
]
