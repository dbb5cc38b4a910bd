"""어픽스 도메인 모델 (DB 무관)"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from ..data import DataDefinition
from ..stat import Stat, StatList

if TYPE_CHECKING:
    from .database import AffixDefinitionDatabase


class AffixPlacement(str, Enum):
    INVALID = "Invalid"  # 로드된 정의에는 나타나면 안 됨
    PREFIX = "Prefix"
    SUFFIX = "Suffix"


@dataclass
class AffixDefinitionStat:
    """티어 안의 스탯 범위 규칙. [lower_bound, upper_bound] 포함 구간."""

    stat: Stat
    lower_bound: float
    upper_bound: float

    def validate(self) -> bool:
        return self.lower_bound <= self.upper_bound

    def __str__(self) -> str:
        return f"{self.stat.value} [{self.lower_bound:g}-{self.upper_bound:g}]"


@dataclass
class AffixDefinitionTier:
    tier: int
    stats: list[AffixDefinitionStat]
    item_level_req: Optional[int] = None  # None = 0
    precision_places: Optional[int] = None  # None = 정수

    def validate(self) -> bool:
        return (
            self.tier > 0
            and len(self.stats) > 0
            and all(stat.validate() for stat in self.stats)
        )


@dataclass(eq=False)
class AffixDefinition(DataDefinition):
    """어픽스 원형. 공유 핸들: 참조될 때 복사하지 않는다."""

    id: int
    placement: AffixPlacement
    name: str
    tiers: dict[int, AffixDefinitionTier] = field(default_factory=dict)  # tier 번호 오름차순

    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def validate(self) -> bool:
        return (
            self.id > 0
            and self.placement != AffixPlacement.INVALID
            and len(self.tiers) > 0
            and all(
                number == tier.tier and tier.validate()
                for number, tier in self.tiers.items()
            )
        )

    def sorted_tiers(self) -> list[AffixDefinitionTier]:
        return [self.tiers[number] for number in sorted(self.tiers)]

    def tiers_to(self, upper_tier: int) -> list[AffixDefinitionTier]:
        """티어 1 ~ upper_tier (포함)."""
        return [tier for tier in self.sorted_tiers() if tier.tier <= upper_tier]

    def add_tier(self, tier: AffixDefinitionTier) -> None:
        """티어 추가 (기존 번호면 교체). 번호 순서를 유지한다."""
        self.tiers[tier.tier] = tier
        self.tiers = {number: self.tiers[number] for number in sorted(self.tiers)}


@dataclass(frozen=True, eq=False)
class AffixInstance:
    """생성된 어픽스. 생성 후 불변."""

    definition: AffixDefinition
    tier: int
    stats: StatList

    @property
    def definition_id(self) -> int:
        with self.definition.lock:
            return self.definition.id

    def to_raw(self) -> dict[str, Any]:
        return {
            "affix_def_id": self.definition_id,
            "tier": self.tier,
            "stats": self.stats.to_raw(),
        }

    @classmethod
    def from_raw(
        cls, raw: dict[str, Any], affix_db: AffixDefinitionDatabase
    ) -> AffixInstance:
        """저장/전송 형식 → 인스턴스. 정의 id는 affix_db에서 해석."""
        return cls(
            definition=affix_db.require(int(raw["affix_def_id"])),
            tier=int(raw["tier"]),
            stats=StatList.from_raw(raw.get("stats", {})),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffixInstance):
            return NotImplemented
        return (
            self.definition is other.definition
            and self.tier == other.tier
            and self.stats == other.stats
        )

    def __hash__(self) -> int:
        return hash((id(self.definition), self.tier, self.stats))

    def __str__(self) -> str:
        with self.definition.lock:
            name = self.definition.name
        return f"T{self.tier} {name}: {self.stats}"
