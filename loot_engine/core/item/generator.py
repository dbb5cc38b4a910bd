"""아이템 생성: 어픽스 개수 추첨 → 풀 합집합에서 중복 없이 어픽스 추첨"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional

from ..affix.database import AffixDefinitionDatabase
from ..affix.generator import AffixGenerationCriteria, AffixGenerator
from ..affix.models import AffixDefinition, AffixInstance
from ..affix_pool.database import AffixPoolDefinitionDatabase
from ..affix_pool.generator import AffixPoolGenerator
from ..affix_pool.models import AffixPoolDefinition, AffixPoolMember
from ..data import DataInstanceGenerator
from ..sampling import weighted_index
from .models import ItemDefinition, ItemInstance

logger = logging.getLogger(__name__)

# (어픽스 개수, 가중치)
DEFAULT_AFFIX_COUNT_WEIGHTING: tuple[tuple[int, int], ...] = (
    (1, 500),
    (2, 300),
    (3, 100),
    (4, 20),
    (5, 5),
    (6, 1),
)

ItemDependencies = tuple[AffixDefinitionDatabase, AffixPoolDefinitionDatabase]


@dataclass
class ItemGenerationCriteria:
    affix_count_weighting: list[tuple[int, int]] = field(
        default_factory=lambda: list(DEFAULT_AFFIX_COUNT_WEIGHTING)
    )
    # 매 어픽스 추첨의 기본 조건. disallowed_ids에는 이미 뽑힌 id가 누적된다.
    affix_criteria: AffixGenerationCriteria = field(
        default_factory=AffixGenerationCriteria
    )


class ItemGenerator(
    DataInstanceGenerator[ItemDefinition, ItemGenerationCriteria, ItemInstance]
):
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        affix_pool_generator: Optional[AffixPoolGenerator] = None,
        affix_generator: Optional[AffixGenerator] = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._affix_generator = (
            affix_generator if affix_generator is not None else AffixGenerator(self._rng)
        )
        self._affix_pool_generator = (
            affix_pool_generator
            if affix_pool_generator is not None
            else AffixPoolGenerator(self._rng, self._affix_generator)
        )

    def generate(
        self,
        definition: ItemDefinition,
        criteria: Optional[ItemGenerationCriteria] = None,
        dependencies: Optional[ItemDependencies] = None,
    ) -> ItemInstance:
        """항상 인스턴스를 반환한다. 어픽스 수는 목표보다 적을 수 있다.

        dependencies: (AffixDefinitionDatabase, AffixPoolDefinitionDatabase)
        """
        if dependencies is None:
            raise ValueError(
                "ItemGenerator.generate requires (affix_db, affix_pool_db)"
            )
        if criteria is None:
            criteria = ItemGenerationCriteria()
        affix_db, affix_pool_db = dependencies

        with definition.lock:
            fixed_affixes = list(definition.fixed_affixes)
            affix_pools = list(definition.affix_pools)

        if fixed_affixes:
            affixes = self._generate_fixed(fixed_affixes, criteria)
        else:
            affixes = self._generate_from_pools(
                affix_pools, criteria, affix_db, affix_pool_db
            )

        return ItemInstance(
            guid=str(uuid.UUID(int=self._rng.getrandbits(128), version=4)),
            definition=definition,
            affixes=tuple(affixes),
        )

    def roll_affix_count(self, criteria: ItemGenerationCriteria) -> int:
        weighting = criteria.affix_count_weighting
        index = weighted_index([weight for _, weight in weighting], self._rng)
        if index is None:
            return 0
        return weighting[index][0]

    def _generate_fixed(
        self, fixed_affixes: list[AffixDefinition], criteria: ItemGenerationCriteria
    ) -> list[AffixInstance]:
        affixes = []
        for affix_definition in fixed_affixes:
            affix = self._affix_generator.generate(
                affix_definition, criteria.affix_criteria
            )
            if affix is None:
                with affix_definition.lock:
                    affix_id = affix_definition.id
                logger.debug("Fixed affix %d has no eligible tier, skipped", affix_id)
                continue
            affixes.append(affix)
        return affixes

    def _generate_from_pools(
        self,
        affix_pools: list[AffixPoolDefinition],
        criteria: ItemGenerationCriteria,
        affix_db: AffixDefinitionDatabase,
        affix_pool_db: AffixPoolDefinitionDatabase,
    ) -> list[AffixInstance]:
        affix_count = self.roll_affix_count(criteria)

        members: list[AffixPoolMember] = []
        for pool in affix_pools:
            with pool.lock:
                pool_id = pool.id
            resolved = affix_pool_db.require(pool_id)
            with resolved.lock:
                members.extend(resolved.members)
        pool = AffixPoolDefinition.with_members(members)

        base = criteria.affix_criteria
        drawn_ids: set[int] = set()
        affixes: list[AffixInstance] = []
        for _ in range(affix_count):
            draw_criteria = replace(
                base,
                disallowed_ids=frozenset(base.disallowed_ids or ()) | drawn_ids,
            )
            affix = self._affix_pool_generator.generate(pool, draw_criteria, affix_db)
            if affix is None:
                # 재시도하지 않음: 목표보다 어픽스가 적은 아이템이 된다
                continue
            drawn_ids.add(affix.definition_id)
            affixes.append(affix)

        return affixes
