"""아이템 분류: Invalid / Equippable(slot) / Currency"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ItemEquipSlot(str, Enum):
    HEAD = "Head"
    LEFT_ARM = "LeftArm"
    RIGHT_ARM = "RightArm"
    BODY = "Body"
    BELT = "Belt"
    LEGS = "Legs"
    BOOTS = "Boots"


class ItemClassificationKind(str, Enum):
    INVALID = "Invalid"
    EQUIPPABLE = "Equippable"
    CURRENCY = "Currency"


@dataclass(frozen=True)
class ItemClassification:
    """저장 형식: "Invalid", "Currency", {"Equippable": "Head"}"""

    kind: ItemClassificationKind
    slot: Optional[ItemEquipSlot] = None  # EQUIPPABLE일 때만

    @classmethod
    def invalid(cls) -> ItemClassification:
        return cls(ItemClassificationKind.INVALID)

    @classmethod
    def currency(cls) -> ItemClassification:
        return cls(ItemClassificationKind.CURRENCY)

    @classmethod
    def equippable(cls, slot: ItemEquipSlot) -> ItemClassification:
        return cls(ItemClassificationKind.EQUIPPABLE, slot)

    @property
    def is_valid(self) -> bool:
        if self.kind == ItemClassificationKind.EQUIPPABLE:
            return self.slot is not None
        return self.kind != ItemClassificationKind.INVALID

    def to_raw(self) -> Any:
        if self.kind == ItemClassificationKind.EQUIPPABLE:
            return {self.kind.value: self.slot.value if self.slot else None}
        return self.kind.value

    @classmethod
    def from_raw(cls, raw: Any) -> ItemClassification:
        """ValueError: 알 수 없는 분류/슬롯."""
        if isinstance(raw, str):
            kind = ItemClassificationKind(raw)
            if kind == ItemClassificationKind.EQUIPPABLE:
                raise ValueError("Equippable classification requires a slot")
            return cls(kind)
        if isinstance(raw, dict) and len(raw) == 1:
            name, slot = next(iter(raw.items()))
            if ItemClassificationKind(name) != ItemClassificationKind.EQUIPPABLE:
                raise ValueError(f"Classification {name} takes no slot")
            return cls.equippable(ItemEquipSlot(slot))
        raise ValueError(f"Unrecognized item classification: {raw!r}")

    def __str__(self) -> str:
        if self.slot is not None:
            return f"{self.kind.value}({self.slot.value})"
        return self.kind.value
