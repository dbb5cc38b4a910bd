"""어픽스 풀 정의 저장소: 로드 시 affix_id를 AffixDefinition 핸들로 해석"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from ..affix.database import AffixDefinitionDatabase
from ..data import (
    DataDefinitionDatabase,
    DefinitionLoadError,
    DefinitionNotFoundError,
    definition_ids,
    record_id,
)
from .models import AffixPoolDefinition, AffixPoolMember

logger = logging.getLogger(__name__)


@dataclass
class _RawAffixPool:
    """1단계 파싱 결과: 외래 키가 아직 id."""

    id: int
    name: str
    members: list[tuple[int, int]]  # (affix_id, weight)


class AffixPoolDefinitionDatabase(DataDefinitionDatabase[AffixPoolDefinition]):
    """어픽스 풀 저장소. AffixDefinitionDatabase가 먼저 로드되어 있어야 한다."""

    kind = "affix_pool"

    @classmethod
    def load_from(
        cls, source: str | Path, affix_db: AffixDefinitionDatabase
    ) -> AffixPoolDefinitionDatabase:
        """affix_pool.json 로드."""
        cls._require_dependency(affix_db, AffixDefinitionDatabase, cls.__name__)
        database = cls.from_raw(cls._read_records(source), affix_db)
        logger.info(
            "Loaded %d affix pool definitions from %s", database.count(), source
        )
        return database

    @classmethod
    def from_raw(
        cls, raw_list: Iterable[dict[str, Any]], affix_db: AffixDefinitionDatabase
    ) -> AffixPoolDefinitionDatabase:
        cls._require_dependency(affix_db, AffixDefinitionDatabase, cls.__name__)
        records = [_parse(raw) for raw in raw_list]

        database = cls()
        database._populate(_link(record, affix_db) for record in records)
        return database

    def definition_to_raw(self, definition: AffixPoolDefinition) -> dict[str, Any]:
        # 풀 락을 잡은 채로 어픽스 락을 잡지 않는다
        with definition.lock:
            definition_id, name = definition.id, definition.name
            affixes = [member.affix for member in definition.members]
            weights = [member.weight for member in definition.members]

        members = [
            {"affix_id": affix_id, "weight": weight}
            for affix_id, weight in zip(definition_ids(affixes), weights)
        ]
        return {"id": definition_id, "members": members, "name": name}


def _parse(raw: dict[str, Any]) -> _RawAffixPool:
    try:
        members = []
        for raw_member in raw["members"]:
            weight = int(raw_member["weight"])
            if weight < 0:
                raise ValueError(f"negative weight {weight}")
            members.append((int(raw_member["affix_id"]), weight))
        return _RawAffixPool(
            id=int(raw["id"]), name=str(raw.get("name", "")), members=members
        )
    except (KeyError, ValueError, TypeError) as e:
        raise DefinitionLoadError(
            f"Malformed affix pool definition {record_id(raw)}: {e}"
        ) from e


def _link(
    record: _RawAffixPool, affix_db: AffixDefinitionDatabase
) -> AffixPoolDefinition:
    """2단계: affix_id → 공유 AffixDefinition 핸들."""
    members = []
    for affix_id, weight in record.members:
        try:
            affix = affix_db.require(affix_id)
        except DefinitionNotFoundError as e:
            raise DefinitionLoadError(
                f"Affix pool {record.id} references unknown affix {affix_id}"
            ) from e
        members.append(AffixPoolMember(affix=affix, weight=weight))
    return AffixPoolDefinition(id=record.id, name=record.name, members=members)
