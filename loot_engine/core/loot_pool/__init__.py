"""루트 풀 Core: 드롭 아이템 추첨"""

from .models import LootPoolMember, LootPoolDefinition
from .database import LootPoolDefinitionDatabase
from .generator import LootPoolCriteria, LootPoolItemGenerator

__all__ = [
    "LootPoolMember",
    "LootPoolDefinition",
    "LootPoolDefinitionDatabase",
    "LootPoolCriteria",
    "LootPoolItemGenerator",
]
