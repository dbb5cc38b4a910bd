"""루트 풀 도메인 모델: 드롭 확률이 붙은 아이템 정의 묶음

몬스터 등 드롭 원천은 하나 이상의 루트 풀을 가진다.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..data import DataDefinition
from ..item.models import ItemDefinition


@dataclass(eq=False)
class LootPoolMember:
    """드롭될 수 있는 아이템 + 가중치 (드롭 확률).

    아이템의 어픽스는 아이템 생성 시 결정된다 (루트 풀의 관심사 아님).
    """

    item: ItemDefinition
    weight: int


@dataclass(eq=False)
class LootPoolDefinition(DataDefinition):
    id: int
    name: str
    members: list[LootPoolMember] = field(default_factory=list)

    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def validate(self) -> bool:
        return len(self.members) > 0
