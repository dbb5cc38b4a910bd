"""어픽스 Core 테스트: 모델, 저장소(JSON 로드/저장), 생성기"""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from loot_engine.core.affix import (
    AffixDefinition,
    AffixDefinitionDatabase,
    AffixDefinitionStat,
    AffixDefinitionTier,
    AffixGenerationCriteria,
    AffixGenerator,
    AffixInstance,
    AffixPlacement,
)
from loot_engine.core.data import DefinitionLoadError, DefinitionNotFoundError
from loot_engine.core.stat import Stat, StatList, StatModifier


def _tier(
    number: int,
    lower: float = 1.0,
    upper: float = 3.0,
    stat: Stat = Stat.HEALTH,
    item_level_req: int | None = None,
    precision_places: int | None = None,
) -> AffixDefinitionTier:
    return AffixDefinitionTier(
        tier=number,
        stats=[AffixDefinitionStat(stat, lower, upper)],
        item_level_req=item_level_req,
        precision_places=precision_places,
    )


def _affix(*tiers: AffixDefinitionTier, affix_id: int = 1) -> AffixDefinition:
    return AffixDefinition(
        id=affix_id,
        placement=AffixPlacement.PREFIX,
        name="Sturdy",
        tiers={tier.tier: tier for tier in tiers},
    )


# ── AffixDefinition ───────────────────────────────────────────


class TestAffixDefinition:
    def test_valid(self) -> None:
        assert _affix(_tier(1), _tier(2)).validate()

    def test_no_tiers_invalid(self) -> None:
        assert not _affix().validate()

    def test_invalid_placement(self) -> None:
        affix = _affix(_tier(1))
        affix.placement = AffixPlacement.INVALID
        assert not affix.validate()

    def test_tier_key_mismatch_invalid(self) -> None:
        affix = _affix()
        affix.tiers = {2: _tier(1)}
        assert not affix.validate()

    def test_inverted_bounds_invalid(self) -> None:
        assert not _affix(_tier(1, lower=5.0, upper=1.0)).validate()

    def test_tier_without_stats_invalid(self) -> None:
        assert not _affix(AffixDefinitionTier(tier=1, stats=[])).validate()

    def test_tiers_to(self) -> None:
        affix = _affix(_tier(3), _tier(1), _tier(2))
        assert [tier.tier for tier in affix.sorted_tiers()] == [1, 2, 3]
        assert [tier.tier for tier in affix.tiers_to(2)] == [1, 2]
        assert affix.tiers_to(0) == []

    def test_add_tier_keeps_order(self) -> None:
        affix = _affix(_tier(1), _tier(3))
        affix.add_tier(_tier(2))
        assert list(affix.tiers) == [1, 2, 3]

    def test_identity_equality(self) -> None:
        """정의는 공유 핸들: 같은 내용이어도 다른 객체면 다르다"""
        assert _affix(_tier(1)) != _affix(_tier(1))


# ── AffixDefinitionDatabase ───────────────────────────────────


class TestAffixDefinitionDatabase:
    def test_from_raw(self, affix_db: AffixDefinitionDatabase) -> None:
        assert affix_db.count() == 4
        keen = affix_db.definition(3)
        assert keen is not None
        assert keen.name == "Keen"
        assert keen.placement == AffixPlacement.PREFIX
        assert keen.tiers[2].item_level_req == 5
        assert keen.tiers[1].item_level_req is None

    def test_definition_missing(self, affix_db: AffixDefinitionDatabase) -> None:
        assert affix_db.definition(99) is None
        with pytest.raises(DefinitionNotFoundError):
            affix_db.require(99)

    def test_definitions_sorted(self, affix_db: AffixDefinitionDatabase) -> None:
        assert [d.id for d in affix_db.definitions()] == [1, 2, 3, 4]

    def test_validate(self, affix_db: AffixDefinitionDatabase) -> None:
        assert affix_db.validate()
        assert not AffixDefinitionDatabase().validate()

    def test_load_from_file(self, tmp_path: Path, affix_db: AffixDefinitionDatabase) -> None:
        path = tmp_path / "affix.json"
        path.write_text(json.dumps(affix_db.to_raw()), encoding="utf-8")
        loaded = AffixDefinitionDatabase.load_from(path)
        assert loaded.to_raw() == affix_db.to_raw()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DefinitionLoadError):
            AffixDefinitionDatabase.load_from(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "affix.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DefinitionLoadError):
            AffixDefinitionDatabase.load_from(path)

    def test_not_an_array(self, tmp_path: Path) -> None:
        path = tmp_path / "affix.json"
        path.write_text('{"id": 1}', encoding="utf-8")
        with pytest.raises(DefinitionLoadError):
            AffixDefinitionDatabase.load_from(path)

    def test_missing_placement(self) -> None:
        with pytest.raises(DefinitionLoadError):
            AffixDefinitionDatabase.from_raw([{"id": 1, "tiers": {}, "name": "x"}])

    def test_unknown_stat(self) -> None:
        raw = {
            "id": 1,
            "placement": "Prefix",
            "tiers": {
                "1": {"tier": 1, "stats": [{"stat": "Luck", "lower_bound": 1, "upper_bound": 2}]}
            },
        }
        with pytest.raises(DefinitionLoadError):
            AffixDefinitionDatabase.from_raw([raw])

    def test_tier_key_mismatch(self) -> None:
        raw = {
            "id": 1,
            "placement": "Prefix",
            "tiers": {
                "2": {"tier": 1, "stats": [{"stat": "Health", "lower_bound": 1, "upper_bound": 2}]}
            },
        }
        with pytest.raises(DefinitionLoadError, match="tier key"):
            AffixDefinitionDatabase.from_raw([raw])

    def test_duplicate_id(self, affix_db: AffixDefinitionDatabase) -> None:
        raw_list = affix_db.to_raw()
        with pytest.raises(DefinitionLoadError, match="Duplicate"):
            AffixDefinitionDatabase.from_raw(raw_list + raw_list[:1])

    def test_optional_fields_omitted_on_write(
        self, affix_db: AffixDefinitionDatabase
    ) -> None:
        raw = affix_db.definition_to_raw(affix_db.require(3))
        assert "item_level_req" not in raw["tiers"]["1"]
        assert "precision_places" not in raw["tiers"]["1"]
        assert raw["tiers"]["2"]["item_level_req"] == 5

    def test_add_overwrites_and_remove(self, affix_db: AffixDefinitionDatabase) -> None:
        replacement = _affix(_tier(1), affix_id=2)
        affix_db.add_definition(replacement)
        assert affix_db.definition(2) is replacement
        assert affix_db.count() == 4

        assert affix_db.remove_definition(2) is replacement
        assert affix_db.definition(2) is None
        assert affix_db.remove_definition(2) is None

    def test_next_id(self, affix_db: AffixDefinitionDatabase) -> None:
        assert affix_db.next_id() == 5
        assert AffixDefinitionDatabase().next_id() == 1


# ── AffixGenerator ────────────────────────────────────────────


class TestAffixGenerator:
    def test_fixed_range_integer(self) -> None:
        affix = _affix(_tier(1, lower=1.0, upper=1.0, precision_places=0))
        generator = AffixGenerator(random.Random(0))
        for _ in range(100):
            instance = generator.generate(affix, AffixGenerationCriteria())
            assert instance is not None
            assert instance.stats.get(Stat.HEALTH) == 1

    def test_values_within_bounds_and_integral(self) -> None:
        affix = _affix(_tier(1, lower=1.0, upper=3.0))
        generator = AffixGenerator(random.Random(1))
        for _ in range(200):
            value = generator.generate(affix).stats.get(Stat.HEALTH)
            assert 1.0 <= value <= 3.0
            assert value == int(value)

    def test_precision_places(self) -> None:
        affix = _affix(
            _tier(1, lower=0.1, upper=0.2, stat=Stat.MOVE_SPEED, precision_places=2)
        )
        generator = AffixGenerator(random.Random(2))
        for _ in range(200):
            value = generator.generate(affix).stats.get(Stat.MOVE_SPEED)
            assert 0.1 <= value <= 0.2
            assert abs(value * 100 - round(value * 100)) < 1e-6

    def test_item_level_requirement(self) -> None:
        affix = _affix(_tier(1), _tier(2, item_level_req=5))
        generator = AffixGenerator(random.Random(3))

        low = {generator.generate(affix).tier for _ in range(100)}
        assert low == {1}

        criteria = AffixGenerationCriteria(item_level=5)
        high = {generator.generate(affix, criteria).tier for _ in range(200)}
        assert high == {1, 2}

    def test_no_eligible_tier_returns_none(self) -> None:
        affix = _affix(_tier(1, item_level_req=10))
        generator = AffixGenerator(random.Random(4))
        assert generator.generate(affix) is None
        assert generator.generate(affix, AffixGenerationCriteria(item_level=9)) is None
        assert generator.generate(affix, AffixGenerationCriteria(item_level=10)) is not None

    def test_maximum_tier(self) -> None:
        affix = _affix(_tier(1), _tier(2), _tier(3))
        generator = AffixGenerator(random.Random(5))
        criteria = AffixGenerationCriteria(maximum_tier=2)
        tiers = {generator.generate(affix, criteria).tier for _ in range(300)}
        assert tiers == {1, 2}

        assert generator.generate(affix, AffixGenerationCriteria(maximum_tier=0)) is None

    def test_custom_tier_selection(self) -> None:
        affix = _affix(_tier(1), _tier(2), _tier(3, item_level_req=50))
        generator = AffixGenerator(random.Random(6), tier_selection=lambda tiers, rng: tiers[-1])
        assert {generator.generate(affix).tier for _ in range(50)} == {2}

    def test_multi_stat_tier(self) -> None:
        tier = AffixDefinitionTier(
            tier=1,
            stats=[
                AffixDefinitionStat(Stat.HEALTH, 2.0, 4.0),
                AffixDefinitionStat(Stat.RESOLVE, 1.0, 1.0),
            ],
        )
        instance = AffixGenerator(random.Random(7)).generate(_affix(tier))
        assert 2.0 <= instance.stats.get(Stat.HEALTH) <= 4.0
        assert instance.stats.get(Stat.RESOLVE) == 1.0

    def test_same_seed_same_results(self) -> None:
        affix = _affix(_tier(1, lower=1.0, upper=100.0), _tier(2, lower=1.0, upper=100.0))
        first = AffixGenerator(random.Random(99))
        second = AffixGenerator(random.Random(99))
        for _ in range(20):
            assert first.generate(affix) == second.generate(affix)

    def test_instance_references_definition(self) -> None:
        affix = _affix(_tier(1))
        instance = AffixGenerator(random.Random(8)).generate(affix)
        assert instance.definition is affix
        assert instance.definition_id == 1


# ── AffixGenerationCriteria ───────────────────────────────────


class TestAffixGenerationCriteria:
    def test_no_constraints(self) -> None:
        assert AffixGenerationCriteria().admits(1, AffixPlacement.PREFIX)

    def test_allowed_ids(self) -> None:
        criteria = AffixGenerationCriteria(allowed_ids=frozenset({1}))
        assert criteria.admits(1, AffixPlacement.PREFIX)
        assert not criteria.admits(2, AffixPlacement.PREFIX)

    def test_disallowed_ids(self) -> None:
        criteria = AffixGenerationCriteria(disallowed_ids=frozenset({1}))
        assert not criteria.admits(1, AffixPlacement.PREFIX)
        assert criteria.admits(2, AffixPlacement.PREFIX)

    def test_placement(self) -> None:
        criteria = AffixGenerationCriteria(placement=AffixPlacement.SUFFIX)
        assert criteria.admits(1, AffixPlacement.SUFFIX)
        assert not criteria.admits(1, AffixPlacement.PREFIX)


# ── AffixInstance ─────────────────────────────────────────────


class TestAffixInstance:
    def test_raw_form(self, affix_db: AffixDefinitionDatabase) -> None:
        instance = AffixInstance(
            definition=affix_db.require(1),
            tier=1,
            stats=StatList.from_modifiers([StatModifier(Stat.HEALTH, 2.0)]),
        )
        raw = instance.to_raw()
        assert raw == {"affix_def_id": 1, "tier": 1, "stats": {"Health": 2.0}}
        assert AffixInstance.from_raw(raw, affix_db) == instance

    def test_from_raw_unknown_definition(self, affix_db: AffixDefinitionDatabase) -> None:
        with pytest.raises(DefinitionNotFoundError):
            AffixInstance.from_raw({"affix_def_id": 42, "tier": 1, "stats": {}}, affix_db)

    def test_str(self, affix_db: AffixDefinitionDatabase) -> None:
        instance = AffixInstance(
            definition=affix_db.require(1),
            tier=1,
            stats=StatList.from_modifiers([StatModifier(Stat.HEALTH, 2.0)]),
        )
        assert str(instance) == "T1 Sturdy: Health +2"
