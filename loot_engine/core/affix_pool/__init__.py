"""어픽스 풀 Core: 가중치 어픽스 묶음"""

from .models import AffixPoolMember, AffixPoolDefinition
from .database import AffixPoolDefinitionDatabase
from .generator import AffixPoolGenerator

__all__ = [
    "AffixPoolMember",
    "AffixPoolDefinition",
    "AffixPoolDefinitionDatabase",
    "AffixPoolGenerator",
]
