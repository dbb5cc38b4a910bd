"""어픽스 풀 추첨: 조건 필터 → 가중치 분포 → 어픽스 생성 위임"""

from __future__ import annotations

import logging
import random
from typing import Optional

from ..affix.database import AffixDefinitionDatabase
from ..affix.generator import AffixGenerationCriteria, AffixGenerator
from ..affix.models import AffixInstance
from ..data import DataInstanceGenerator
from ..sampling import weighted_index
from .models import AffixPoolDefinition

logger = logging.getLogger(__name__)


class AffixPoolGenerator(
    DataInstanceGenerator[AffixPoolDefinition, AffixGenerationCriteria, AffixInstance]
):
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        affix_generator: Optional[AffixGenerator] = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._affix_generator = (
            affix_generator if affix_generator is not None else AffixGenerator(self._rng)
        )

    def choose_affix_id(
        self, definition: AffixPoolDefinition, criteria: AffixGenerationCriteria
    ) -> Optional[int]:
        """필터를 통과한 멤버 중 가중치 추첨. 후보 없음/가중치 합 0 → None.

        필터는 분포를 만들기 전에 적용한다 (제외된 멤버는 가중치가 있어도 뽑히지 않음).
        """
        # 풀 락을 잡은 채로 어픽스 락을 잡지 않는다
        with definition.lock:
            members = [(member.affix, member.weight) for member in definition.members]

        candidates: list[tuple[int, int]] = []
        for affix, weight in members:
            with affix.lock:
                affix_id, placement = affix.id, affix.placement
            if criteria.admits(affix_id, placement):
                candidates.append((affix_id, weight))

        index = weighted_index([weight for _, weight in candidates], self._rng)
        if index is None:
            return None
        return candidates[index][0]

    def generate(
        self,
        definition: AffixPoolDefinition,
        criteria: Optional[AffixGenerationCriteria] = None,
        dependencies: Optional[AffixDefinitionDatabase] = None,
    ) -> Optional[AffixInstance]:
        """dependencies: AffixDefinitionDatabase (뽑힌 id 해석용)."""
        if dependencies is None:
            raise ValueError("AffixPoolGenerator.generate requires the affix database")
        if criteria is None:
            criteria = AffixGenerationCriteria()

        affix_id = self.choose_affix_id(definition, criteria)
        if affix_id is None:
            logger.debug("Affix pool %d: no eligible member", definition.id)
            return None

        affix_definition = dependencies.require(affix_id)
        return self._affix_generator.generate(affix_definition, criteria)
