"""정의 데이터 일괄 로드/저장 + 생성기 묶음

로드 순서: affix.json → affix_pool.json → item.json → loot_pool.json
각 단계는 앞 단계 저장소를 의존성으로 받는다.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from .affix.database import AffixDefinitionDatabase
from .affix.generator import AffixGenerator
from .affix_pool.database import AffixPoolDefinitionDatabase
from .affix_pool.generator import AffixPoolGenerator
from .item.database import ItemDefinitionDatabase
from .item.generator import ItemGenerator
from .loot_pool.database import LootPoolDefinitionDatabase
from .loot_pool.generator import LootPoolItemGenerator

logger = logging.getLogger(__name__)

AFFIX_FILE = "affix.json"
AFFIX_POOL_FILE = "affix_pool.json"
ITEM_FILE = "item.json"
LOOT_POOL_FILE = "loot_pool.json"


class DataManager:
    """4개 정의 저장소 + 하나의 RNG를 공유하는 생성기들."""

    def __init__(
        self,
        affix_db: AffixDefinitionDatabase,
        affix_pool_db: AffixPoolDefinitionDatabase,
        item_db: ItemDefinitionDatabase,
        loot_pool_db: LootPoolDefinitionDatabase,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.affix_db = affix_db
        self.affix_pool_db = affix_pool_db
        self.item_db = item_db
        self.loot_pool_db = loot_pool_db

        self.rng = rng if rng is not None else random.Random()
        self.affix_generator = AffixGenerator(self.rng)
        self.affix_pool_generator = AffixPoolGenerator(self.rng, self.affix_generator)
        self.item_generator = ItemGenerator(
            self.rng, self.affix_pool_generator, self.affix_generator
        )
        self.loot_pool_generator = LootPoolItemGenerator(self.rng, self.item_generator)

    @classmethod
    def load(
        cls, data_dir: str | Path, rng: Optional[random.Random] = None
    ) -> DataManager:
        data_dir = Path(data_dir)
        affix_db = AffixDefinitionDatabase.load_from(data_dir / AFFIX_FILE)
        affix_pool_db = AffixPoolDefinitionDatabase.load_from(
            data_dir / AFFIX_POOL_FILE, affix_db
        )
        item_db = ItemDefinitionDatabase.load_from(
            data_dir / ITEM_FILE, affix_db, affix_pool_db
        )
        loot_pool_db = LootPoolDefinitionDatabase.load_from(
            data_dir / LOOT_POOL_FILE, item_db
        )
        return cls(affix_db, affix_pool_db, item_db, loot_pool_db, rng=rng)

    def write_to(self, data_dir: str | Path) -> None:
        data_dir = Path(data_dir)
        data_dir.mkdir(parents=True, exist_ok=True)
        self.affix_db.write_to(data_dir / AFFIX_FILE)
        self.affix_pool_db.write_to(data_dir / AFFIX_POOL_FILE)
        self.item_db.write_to(data_dir / ITEM_FILE)
        self.loot_pool_db.write_to(data_dir / LOOT_POOL_FILE)

    def validate(self) -> dict[str, bool]:
        results = {
            "affix": self.affix_db.validate(),
            "affix_pool": self.affix_pool_db.validate(),
            "item": self.item_db.validate(),
            "loot_pool": self.loot_pool_db.validate(),
        }
        if not all(results.values()):
            logger.warning("Definition data failed validation: %s", results)
        return results

    @property
    def item_dependencies(self) -> tuple[AffixDefinitionDatabase, AffixPoolDefinitionDatabase]:
        return (self.affix_db, self.affix_pool_db)

    @property
    def loot_pool_dependencies(
        self,
    ) -> tuple[AffixDefinitionDatabase, AffixPoolDefinitionDatabase, ItemDefinitionDatabase]:
        return (self.affix_db, self.affix_pool_db, self.item_db)
