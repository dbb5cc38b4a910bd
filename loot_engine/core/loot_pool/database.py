"""루트 풀 정의 저장소: 로드 시 item_id를 ItemDefinition 핸들로 해석"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from ..data import (
    DataDefinitionDatabase,
    DefinitionLoadError,
    DefinitionNotFoundError,
    definition_ids,
    record_id,
)
from ..item.database import ItemDefinitionDatabase
from .models import LootPoolDefinition, LootPoolMember

logger = logging.getLogger(__name__)


@dataclass
class _RawLootPool:
    id: int
    name: str
    members: list[tuple[int, int]]  # (item_id, weight)


class LootPoolDefinitionDatabase(DataDefinitionDatabase[LootPoolDefinition]):
    """루트 풀 저장소. ItemDefinitionDatabase가 먼저 로드되어 있어야 한다."""

    kind = "loot_pool"

    @classmethod
    def load_from(
        cls, source: str | Path, item_db: ItemDefinitionDatabase
    ) -> LootPoolDefinitionDatabase:
        """loot_pool.json 로드."""
        cls._require_dependency(item_db, ItemDefinitionDatabase, cls.__name__)
        database = cls.from_raw(cls._read_records(source), item_db)
        logger.info("Loaded %d loot pool definitions from %s", database.count(), source)
        return database

    @classmethod
    def from_raw(
        cls, raw_list: Iterable[dict[str, Any]], item_db: ItemDefinitionDatabase
    ) -> LootPoolDefinitionDatabase:
        cls._require_dependency(item_db, ItemDefinitionDatabase, cls.__name__)
        records = [_parse(raw) for raw in raw_list]

        database = cls()
        database._populate(_link(record, item_db) for record in records)
        return database

    def definition_to_raw(self, definition: LootPoolDefinition) -> dict[str, Any]:
        with definition.lock:
            definition_id, name = definition.id, definition.name
            items = [member.item for member in definition.members]
            weights = [member.weight for member in definition.members]

        members = [
            {"item_id": item_id, "weight": weight}
            for item_id, weight in zip(definition_ids(items), weights)
        ]
        return {"id": definition_id, "name": name, "members": members}


def _parse(raw: dict[str, Any]) -> _RawLootPool:
    try:
        members = []
        for raw_member in raw["members"]:
            weight = int(raw_member["weight"])
            if weight < 0:
                raise ValueError(f"negative weight {weight}")
            members.append((int(raw_member["item_id"]), weight))
        return _RawLootPool(
            id=int(raw["id"]), name=str(raw.get("name", "")), members=members
        )
    except (KeyError, ValueError, TypeError) as e:
        raise DefinitionLoadError(
            f"Malformed loot pool definition {record_id(raw)}: {e}"
        ) from e


def _link(record: _RawLootPool, item_db: ItemDefinitionDatabase) -> LootPoolDefinition:
    members = []
    for item_id, weight in record.members:
        try:
            item = item_db.require(item_id)
        except DefinitionNotFoundError as e:
            raise DefinitionLoadError(
                f"Loot pool {record.id} references unknown item {item_id}"
            ) from e
        members.append(LootPoolMember(item=item, weight=weight))
    return LootPoolDefinition(id=record.id, name=record.name, members=members)
