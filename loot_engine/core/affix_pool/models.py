"""어픽스 풀 도메인 모델: 가중치가 붙은 어픽스 정의 묶음"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..affix.models import AffixDefinition
from ..data import DataDefinition


@dataclass(eq=False)
class AffixPoolMember:
    """풀에서 선택될 때 생성할 어픽스 + 가중치 (클수록 흔함)."""

    affix: AffixDefinition
    weight: int


@dataclass(eq=False)
class AffixPoolDefinition(DataDefinition):
    id: int
    name: str
    members: list[AffixPoolMember] = field(default_factory=list)

    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def validate(self) -> bool:
        return len(self.members) > 0

    @classmethod
    def with_members(cls, members: list[AffixPoolMember]) -> AffixPoolDefinition:
        """기존 멤버로 임시 풀 생성 (id 0, 저장소에 등록하지 않음)."""
        return cls(id=0, name="ephemeral", members=list(members))
