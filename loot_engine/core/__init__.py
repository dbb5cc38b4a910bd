"""Loot Engine Core - 정의 데이터와 생성기 (순수 Python)"""

from .stat import Stat, StatModifier, StatList
from .data import (
    LootDataError,
    DefinitionLoadError,
    DependencyOrderError,
    DefinitionNotFoundError,
)
from .data_manager import DataManager

__all__ = [
    "Stat",
    "StatModifier",
    "StatList",
    "LootDataError",
    "DefinitionLoadError",
    "DependencyOrderError",
    "DefinitionNotFoundError",
    "DataManager",
]
