"""아이템 정의 저장소: 로드 시 풀/고정 어픽스 id를 핸들로 해석"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from ..affix.database import AffixDefinitionDatabase
from ..affix_pool.database import AffixPoolDefinitionDatabase
from ..data import (
    DataDefinitionDatabase,
    DefinitionLoadError,
    DefinitionNotFoundError,
    definition_ids,
    record_id,
)
from .classification import ItemClassification
from .models import ItemDefinition

logger = logging.getLogger(__name__)


@dataclass
class _RawItem:
    id: int
    classification: ItemClassification
    name: str
    affix_pool_ids: list[int]
    fixed_affix_ids: list[int]


class ItemDefinitionDatabase(DataDefinitionDatabase[ItemDefinition]):
    """아이템 원형 저장소. Affix, AffixPool 저장소가 먼저 로드되어 있어야 한다."""

    kind = "item"

    @classmethod
    def load_from(
        cls,
        source: str | Path,
        affix_db: AffixDefinitionDatabase,
        affix_pool_db: AffixPoolDefinitionDatabase,
    ) -> ItemDefinitionDatabase:
        """item.json 로드."""
        cls._require_dependency(affix_db, AffixDefinitionDatabase, cls.__name__)
        cls._require_dependency(affix_pool_db, AffixPoolDefinitionDatabase, cls.__name__)
        database = cls.from_raw(cls._read_records(source), affix_db, affix_pool_db)
        logger.info("Loaded %d item definitions from %s", database.count(), source)
        return database

    @classmethod
    def from_raw(
        cls,
        raw_list: Iterable[dict[str, Any]],
        affix_db: AffixDefinitionDatabase,
        affix_pool_db: AffixPoolDefinitionDatabase,
    ) -> ItemDefinitionDatabase:
        cls._require_dependency(affix_db, AffixDefinitionDatabase, cls.__name__)
        cls._require_dependency(affix_pool_db, AffixPoolDefinitionDatabase, cls.__name__)
        records = [_parse(raw) for raw in raw_list]

        database = cls()
        database._populate(_link(record, affix_db, affix_pool_db) for record in records)
        return database

    def definition_to_raw(self, definition: ItemDefinition) -> dict[str, Any]:
        with definition.lock:
            definition_id, name = definition.id, definition.name
            classification = definition.classification
            affix_pools = list(definition.affix_pools)
            fixed_affixes = list(definition.fixed_affixes)

        return {
            "id": definition_id,
            "classification": classification.to_raw(),
            "affix_pools": definition_ids(affix_pools),
            "fixed_affixes": definition_ids(fixed_affixes),
            "name": name,
        }


def _parse(raw: dict[str, Any]) -> _RawItem:
    try:
        return _RawItem(
            id=int(raw["id"]),
            classification=ItemClassification.from_raw(raw["classification"]),
            name=str(raw.get("name", "")),
            affix_pool_ids=[int(pool_id) for pool_id in raw.get("affix_pools", [])],
            fixed_affix_ids=[int(affix_id) for affix_id in raw.get("fixed_affixes", [])],
        )
    except (KeyError, ValueError, TypeError) as e:
        raise DefinitionLoadError(
            f"Malformed item definition {record_id(raw)}: {e}"
        ) from e


def _link(
    record: _RawItem,
    affix_db: AffixDefinitionDatabase,
    affix_pool_db: AffixPoolDefinitionDatabase,
) -> ItemDefinition:
    try:
        affix_pools = [affix_pool_db.require(pool_id) for pool_id in record.affix_pool_ids]
        fixed_affixes = [affix_db.require(affix_id) for affix_id in record.fixed_affix_ids]
    except DefinitionNotFoundError as e:
        raise DefinitionLoadError(f"Item {record.id} references unknown {e}") from e

    return ItemDefinition(
        id=record.id,
        classification=record.classification,
        name=record.name,
        affix_pools=affix_pools,
        fixed_affixes=fixed_affixes,
    )
