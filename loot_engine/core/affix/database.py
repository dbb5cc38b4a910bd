"""어픽스 정의 저장소: JSON 로드/저장"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from ..data import DataDefinitionDatabase, DefinitionLoadError, record_id
from ..stat import Stat
from .models import (
    AffixDefinition,
    AffixDefinitionStat,
    AffixDefinitionTier,
    AffixPlacement,
)

logger = logging.getLogger(__name__)


class AffixDefinitionDatabase(DataDefinitionDatabase[AffixDefinition]):
    """어픽스 원형 저장소. 의존 데이터베이스 없음 (로드 순서의 첫 단계)."""

    kind = "affix"

    @classmethod
    def load_from(cls, source: str | Path) -> AffixDefinitionDatabase:
        """affix.json 로드."""
        database = cls.from_raw(cls._read_records(source))
        logger.info("Loaded %d affix definitions from %s", database.count(), source)
        return database

    @classmethod
    def from_raw(cls, raw_list: Iterable[dict[str, Any]]) -> AffixDefinitionDatabase:
        database = cls()
        database._populate(parse_affix_definition(raw) for raw in raw_list)
        return database

    def definition_to_raw(self, definition: AffixDefinition) -> dict[str, Any]:
        with definition.lock:
            return {
                "id": definition.id,
                "placement": definition.placement.value,
                "tiers": {
                    str(tier.tier): _tier_to_raw(tier)
                    for tier in definition.sorted_tiers()
                },
                "name": definition.name,
            }


def parse_affix_definition(raw: dict[str, Any]) -> AffixDefinition:
    """JSON 객체 1개 → AffixDefinition.

    tiers는 {"1": {...}, "2": {...}} 형식. 키와 tier 번호가 다르면 로드 실패.
    placement는 문자열 → AffixPlacement enum 변환.
    """
    try:
        tiers: dict[int, AffixDefinitionTier] = {}
        for key, raw_tier in raw["tiers"].items():
            tier = _parse_tier(raw_tier)
            if int(key) != tier.tier:
                raise ValueError(f"tier key {key} does not match tier {tier.tier}")
            tiers[tier.tier] = tier

        return AffixDefinition(
            id=int(raw["id"]),
            placement=AffixPlacement(raw["placement"]),
            name=str(raw.get("name", "")),
            tiers={number: tiers[number] for number in sorted(tiers)},
        )
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise DefinitionLoadError(
            f"Malformed affix definition {record_id(raw)}: {e}"
        ) from e


def _parse_tier(raw: dict[str, Any]) -> AffixDefinitionTier:
    item_level_req = raw.get("item_level_req")
    precision_places = raw.get("precision_places")
    return AffixDefinitionTier(
        tier=int(raw["tier"]),
        stats=[
            AffixDefinitionStat(
                stat=Stat(stat["stat"]),
                lower_bound=float(stat["lower_bound"]),
                upper_bound=float(stat["upper_bound"]),
            )
            for stat in raw["stats"]
        ],
        item_level_req=int(item_level_req) if item_level_req is not None else None,
        precision_places=(
            int(precision_places) if precision_places is not None else None
        ),
    )


def _tier_to_raw(tier: AffixDefinitionTier) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "tier": tier.tier,
        "stats": [
            {
                "stat": stat.stat.value,
                "lower_bound": stat.lower_bound,
                "upper_bound": stat.upper_bound,
            }
            for stat in tier.stats
        ],
    }
    # 미설정 옵션 필드는 생략
    if tier.item_level_req is not None:
        raw["item_level_req"] = tier.item_level_req
    if tier.precision_places is not None:
        raw["precision_places"] = tier.precision_places
    return raw
