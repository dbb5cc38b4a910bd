"""루트 풀 추첨: 아이템 정의 1개를 뽑아 아이템 생성기에 위임"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from ..affix.database import AffixDefinitionDatabase
from ..affix_pool.database import AffixPoolDefinitionDatabase
from ..data import DataInstanceGenerator
from ..item.database import ItemDefinitionDatabase
from ..item.generator import ItemGenerationCriteria, ItemGenerator
from ..item.models import ItemInstance
from ..sampling import weighted_index
from .models import LootPoolDefinition

logger = logging.getLogger(__name__)

LootPoolDependencies = tuple[
    AffixDefinitionDatabase, AffixPoolDefinitionDatabase, ItemDefinitionDatabase
]


@dataclass
class LootPoolCriteria:
    """현재 조건 없음. 아이템은 기본 ItemGenerationCriteria로 생성된다."""


class LootPoolItemGenerator(
    DataInstanceGenerator[LootPoolDefinition, LootPoolCriteria, ItemInstance]
):
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        item_generator: Optional[ItemGenerator] = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._item_generator = (
            item_generator if item_generator is not None else ItemGenerator(self._rng)
        )

    def choose_item_id(self, definition: LootPoolDefinition) -> Optional[int]:
        """가중치 추첨. 멤버 없음/가중치 합 0 → None."""
        with definition.lock:
            members = [(member.item, member.weight) for member in definition.members]

        index = weighted_index([weight for _, weight in members], self._rng)
        if index is None:
            return None

        item = members[index][0]
        with item.lock:
            return item.id

    def generate(
        self,
        definition: LootPoolDefinition,
        criteria: Optional[LootPoolCriteria] = None,
        dependencies: Optional[LootPoolDependencies] = None,
    ) -> Optional[ItemInstance]:
        """dependencies: (affix_db, affix_pool_db, item_db). 드롭 없음 → None."""
        if dependencies is None:
            raise ValueError(
                "LootPoolItemGenerator.generate requires (affix_db, affix_pool_db, item_db)"
            )
        affix_db, affix_pool_db, item_db = dependencies

        item_id = self.choose_item_id(definition)
        if item_id is None:
            logger.debug("Loot pool %d dropped nothing", definition.id)
            return None

        item_definition = item_db.require(item_id)
        return self._item_generator.generate(
            item_definition, ItemGenerationCriteria(), (affix_db, affix_pool_db)
        )
