"""아이템 도메인 모델 (DB 무관)"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..affix.models import AffixDefinition, AffixInstance
from ..affix_pool.models import AffixPoolDefinition
from ..data import DataDefinition
from .classification import ItemClassification

if TYPE_CHECKING:
    from ..affix.database import AffixDefinitionDatabase
    from .database import ItemDefinitionDatabase


class ItemRarity(str, Enum):
    COMMON = "common"  # 어픽스 0~2개
    UNCOMMON = "uncommon"  # 3~4개
    RARE = "rare"  # 5~6개
    FABLED = "fabled"  # 고정 어픽스 보유


@dataclass(eq=False)
class ItemDefinition(DataDefinition):
    """아이템 원형.

    affix_pools: 랜덤 어픽스를 뽑을 풀 (공유 핸들)
    fixed_affixes: 비어 있지 않으면 풀 대신 이 어픽스들을 1회씩 생성
    """

    id: int
    classification: ItemClassification
    name: str
    affix_pools: list[AffixPoolDefinition] = field(default_factory=list)
    fixed_affixes: list[AffixDefinition] = field(default_factory=list)

    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def validate(self) -> bool:
        return self.classification.is_valid


@dataclass(frozen=True, eq=False)
class ItemInstance:
    """생성된 아이템. 생성 후 불변."""

    guid: str
    definition: ItemDefinition
    affixes: tuple[AffixInstance, ...] = ()

    @property
    def definition_id(self) -> int:
        with self.definition.lock:
            return self.definition.id

    def rarity(self) -> ItemRarity:
        with self.definition.lock:
            has_fixed_affixes = len(self.definition.fixed_affixes) > 0
        if has_fixed_affixes:
            return ItemRarity.FABLED

        count = len(self.affixes)
        if count <= 2:
            return ItemRarity.COMMON
        if count <= 4:
            return ItemRarity.UNCOMMON
        if count <= 6:
            return ItemRarity.RARE
        raise ValueError(f"Abnormal affix count: {count}")

    def to_raw(self) -> dict[str, Any]:
        return {
            "guid": self.guid,
            "item_def_id": self.definition_id,
            "affixes": [affix.to_raw() for affix in self.affixes],
        }

    @classmethod
    def from_raw(
        cls,
        raw: dict[str, Any],
        item_db: ItemDefinitionDatabase,
        affix_db: AffixDefinitionDatabase,
    ) -> ItemInstance:
        """저장/전송 형식 → 인스턴스. 정의 id는 각 저장소에서 해석."""
        return cls(
            guid=str(raw["guid"]),
            definition=item_db.require(int(raw["item_def_id"])),
            affixes=tuple(
                AffixInstance.from_raw(affix, affix_db) for affix in raw.get("affixes", [])
            ),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ItemInstance):
            return NotImplemented
        return (
            self.guid == other.guid
            and self.definition is other.definition
            and self.affixes == other.affixes
        )

    def __hash__(self) -> int:
        return hash(self.guid)

    def __str__(self) -> str:
        with self.definition.lock:
            name, classification = self.definition.name, self.definition.classification
        lines = [f"{name} ({classification})"]
        lines.extend(f"\t{affix}" for affix in self.affixes)
        return "\n".join(lines)
