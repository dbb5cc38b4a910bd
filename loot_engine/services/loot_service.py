"""루트 Service: Core 생성기 ↔ 드롭 기록(DB) 연결

Service → Core, Service → DB 허용.
정의 데이터는 DataManager가 소유하고, 서비스는 생성 결과만 기록한다.
"""

from sqlalchemy.orm import Session

from loot_engine.core.data import DefinitionNotFoundError
from loot_engine.core.data_manager import DataManager
from loot_engine.core.item.generator import ItemGenerationCriteria
from loot_engine.core.item.models import ItemInstance
from loot_engine.core.logging import get_logger
from loot_engine.core.loot_pool.generator import LootPoolCriteria
from loot_engine.db.models import DroppedItemModel

logger = get_logger(__name__)


class UnknownDefinitionError(LookupError):
    """요청한 정의 id가 저장소에 없음."""


class StaleDropError(LookupError):
    """기록된 드롭이 참조하는 정의가 이후 제거됨."""


class LootService:
    """루트 생성 + 드롭 기록 조회"""

    def __init__(self, db: Session, data_manager: DataManager):
        self._db = db
        self._data = data_manager

    # === 생성 ===

    def roll_loot_pool(
        self,
        loot_pool_id: int,
        owner_type: str = "world",
        owner_id: str = "",
    ) -> ItemInstance | None:
        """루트 풀에서 아이템 1개 드롭 + 기록.
        드롭 없음(빈 풀/가중치 0)이면 None, 기록하지 않는다.
        없는 풀 id → UnknownDefinitionError.
        """
        loot_pool = self._data.loot_pool_db.definition(loot_pool_id)
        if loot_pool is None:
            raise UnknownDefinitionError(f"Unknown loot pool: {loot_pool_id}")

        instance = self._data.loot_pool_generator.generate(
            loot_pool, LootPoolCriteria(), self._data.loot_pool_dependencies
        )
        if instance is None:
            logger.debug("Loot pool %d dropped nothing", loot_pool_id)
            return None

        self._record(instance, owner_type, owner_id, loot_pool_id=loot_pool_id)
        return instance

    def roll_item(
        self,
        item_id: int,
        criteria: ItemGenerationCriteria | None = None,
        owner_type: str = "world",
        owner_id: str = "",
    ) -> ItemInstance:
        """아이템 정의에서 직접 생성 + 기록."""
        item = self._data.item_db.definition(item_id)
        if item is None:
            raise UnknownDefinitionError(f"Unknown item definition: {item_id}")

        instance = self._data.item_generator.generate(
            item, criteria or ItemGenerationCriteria(), self._data.item_dependencies
        )
        self._record(instance, owner_type, owner_id)
        return instance

    # === 조회 ===

    def get_drop(self, guid: str) -> ItemInstance | None:
        """기록된 드롭 → ItemInstance (정의 id 재해석).
        정의가 제거되어 재해석할 수 없으면 StaleDropError.
        """
        orm = (
            self._db.query(DroppedItemModel)
            .filter(DroppedItemModel.guid == guid)
            .first()
        )
        if orm is None:
            return None
        return self._orm_to_instance(orm)

    def get_drops_by_owner(self, owner_type: str, owner_id: str) -> list[ItemInstance]:
        orms = (
            self._db.query(DroppedItemModel)
            .filter(
                DroppedItemModel.owner_type == owner_type,
                DroppedItemModel.owner_id == owner_id,
            )
            .order_by(DroppedItemModel.created_at)
            .all()
        )
        return [self._orm_to_instance(orm) for orm in orms]

    # === 내부 ===

    def _record(
        self,
        instance: ItemInstance,
        owner_type: str,
        owner_id: str,
        loot_pool_id: int | None = None,
    ) -> None:
        orm = DroppedItemModel(
            guid=instance.guid,
            item_def_id=instance.definition_id,
            loot_pool_id=loot_pool_id,
            owner_type=owner_type,
            owner_id=owner_id,
            rarity=instance.rarity().value,
            payload=instance.to_raw(),
        )
        self._db.add(orm)
        self._db.commit()
        logger.debug(
            "Recorded drop %s (item=%d, affixes=%d)",
            instance.guid,
            instance.definition_id,
            len(instance.affixes),
        )

    def _orm_to_instance(self, orm: DroppedItemModel) -> ItemInstance:
        try:
            return ItemInstance.from_raw(
                orm.payload, self._data.item_db, self._data.affix_db
            )
        except DefinitionNotFoundError as e:
            raise StaleDropError(
                f"Drop {orm.guid} references a removed definition: {e}"
            ) from e
