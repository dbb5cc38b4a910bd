"""스탯 집계: 순수 Python, 외부 의존 없음

StatList는 희소(sparse) 표현: 누적 값이 정확히 0이 된 스탯은 제거된다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class Stat(str, Enum):
    """플레이어가 가질 수 있는 수치 스탯. 값은 JSON 저장 이름과 동일."""

    RESOLVE = "Resolve"
    FINESSE = "Finesse"
    COMPLEXITY = "Complexity"
    MOVE_SPEED = "MoveSpeed"
    HEALTH = "Health"
    ENERGY = "Energy"


@dataclass(frozen=True)
class StatModifier:
    stat: Stat
    value: float

    def __str__(self) -> str:
        sign = "+" if self.value >= 0 else ""
        return f"{self.stat.value} {sign}{self.value:g}"


class StatList:
    """스탯 → 누적 값. 생성 후에는 변경하지 않는다 (합산은 새 StatList 반환)."""

    __slots__ = ("_modifiers",)

    def __init__(self) -> None:
        self._modifiers: dict[Stat, float] = {}

    @classmethod
    def from_modifiers(cls, modifiers: Iterable[StatModifier]) -> StatList:
        stat_list = cls()
        for modifier in modifiers:
            stat_list._add_mod(modifier.stat, modifier.value)
        return stat_list

    @classmethod
    def combine(cls, stat_lists: Iterable[StatList]) -> StatList:
        """여러 StatList를 하나의 누적 StatList로 합친다."""
        combined = cls()
        for stat_list in stat_lists:
            for stat, value in stat_list._modifiers.items():
                combined._add_mod(stat, value)
        return combined

    def _add_mod(self, stat: Stat, value: float) -> None:
        total = self._modifiers.get(stat, 0.0) + value
        if total == 0:
            self._modifiers.pop(stat, None)
        else:
            self._modifiers[stat] = total

    def get(self, stat: Stat) -> Optional[float]:
        """스탯 값. 없으면 None."""
        return self._modifiers.get(stat)

    def mods(self) -> list[StatModifier]:
        return [StatModifier(stat, value) for stat, value in self._modifiers.items()]

    def to_raw(self) -> dict[str, float]:
        return {stat.value: value for stat, value in self._modifiers.items()}

    @classmethod
    def from_raw(cls, raw: dict[str, float]) -> StatList:
        return cls.from_modifiers(
            StatModifier(Stat(name), float(value)) for name, value in raw.items()
        )

    def __add__(self, other: StatList) -> StatList:
        if not isinstance(other, StatList):
            return NotImplemented
        return StatList.combine((self, other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatList):
            return NotImplemented
        return self._modifiers == other._modifiers

    def __hash__(self) -> int:
        return hash(frozenset(self._modifiers.items()))

    def __iter__(self) -> Iterator[StatModifier]:
        return iter(self.mods())

    def __len__(self) -> int:
        return len(self._modifiers)

    def __contains__(self, stat: object) -> bool:
        return stat in self._modifiers

    def __repr__(self) -> str:
        return f"StatList({self.to_raw()!r})"

    def __str__(self) -> str:
        return ", ".join(str(mod) for mod in self.mods())
