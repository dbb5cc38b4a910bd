"""어픽스 인스턴스 생성: 티어 선택 + 스탯 범위 샘플링"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from ..data import DataInstanceGenerator
from ..sampling import round_to
from ..stat import StatList, StatModifier
from .models import AffixDefinition, AffixDefinitionTier, AffixInstance, AffixPlacement

# 적격 티어 목록 + RNG → 선택된 티어 (없으면 None)
TierSelectionPolicy = Callable[
    [Sequence[AffixDefinitionTier], random.Random], Optional[AffixDefinitionTier]
]


def uniform_tier_selection(
    tiers: Sequence[AffixDefinitionTier], rng: random.Random
) -> Optional[AffixDefinitionTier]:
    """적격 티어 중 균등 확률 선택 (티어별 가중치 없음)."""
    if not tiers:
        return None
    return rng.choice(tiers)


@dataclass
class AffixGenerationCriteria:
    """어픽스 생성 조건. 모든 필드 None = 제한 없음.

    allowed_ids / disallowed_ids / placement 는 풀(pool)에서 후보를 거를 때,
    maximum_tier / item_level 은 티어를 고를 때 사용.
    """

    allowed_ids: Optional[frozenset[int]] = None
    disallowed_ids: Optional[frozenset[int]] = None
    placement: Optional[AffixPlacement] = None
    maximum_tier: Optional[int] = None
    item_level: Optional[int] = None

    def admits(self, affix_id: int, placement: AffixPlacement) -> bool:
        """id/배치 필터 통과 여부."""
        if self.allowed_ids is not None and affix_id not in self.allowed_ids:
            return False
        if self.disallowed_ids is not None and affix_id in self.disallowed_ids:
            return False
        if self.placement is not None and placement != self.placement:
            return False
        return True


class AffixGenerator(
    DataInstanceGenerator[AffixDefinition, AffixGenerationCriteria, AffixInstance]
):
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        tier_selection: TierSelectionPolicy = uniform_tier_selection,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._tier_selection = tier_selection

    def generate(
        self,
        definition: AffixDefinition,
        criteria: Optional[AffixGenerationCriteria] = None,
        dependencies: Any = None,
    ) -> Optional[AffixInstance]:
        """티어 1개를 골라 스탯을 굴린다. 적격 티어가 없으면 None."""
        if criteria is None:
            criteria = AffixGenerationCriteria()
        item_level = criteria.item_level or 0

        with definition.lock:
            if criteria.maximum_tier is not None:
                tiers = definition.tiers_to(criteria.maximum_tier)
            else:
                tiers = definition.sorted_tiers()

            eligible = [tier for tier in tiers if (tier.item_level_req or 0) <= item_level]
            tier = self._tier_selection(eligible, self._rng)
            if tier is None:
                return None

            places = tier.precision_places or 0
            modifiers = [
                StatModifier(
                    stat.stat,
                    round_to(self._rng.uniform(stat.lower_bound, stat.upper_bound), places),
                )
                for stat in tier.stats
            ]
            tier_number = tier.tier

        return AffixInstance(
            definition=definition,
            tier=tier_number,
            stats=StatList.from_modifiers(modifiers),
        )
