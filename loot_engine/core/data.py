"""정의(Definition) 데이터베이스 / 인스턴스 생성기 공통 계약

모든 데이터베이스는 같은 표면을 가진다:
    load_from / from_raw : JSON 로드 + 외래 키(id) → 공유 핸들 해석
    write_to / to_raw    : 핸들을 다시 id로 바꿔 저장
    validate, definition, definitions, add_definition, remove_definition

로드 순서: Affix → AffixPool → Item → LootPool.
로드 실패는 치명적이며 부분 로드 모드는 없다.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)


# === 예외 ===


class LootDataError(Exception):
    """정의 데이터 관련 치명적 오류의 기반 클래스."""


class DefinitionLoadError(LootDataError):
    """잘못된 JSON 구조, 해석되지 않는 외래 키 등 로드 실패."""


class DependencyOrderError(LootDataError):
    """의존 데이터베이스가 없거나 잘못된 순서로 로드됨."""


class DefinitionNotFoundError(LootDataError, KeyError):
    """반드시 존재해야 하는 정의 id 조회 실패."""

    def __init__(self, kind: str, definition_id: int) -> None:
        super().__init__(f"{kind} definition {definition_id} not found")
        self.kind = kind
        self.definition_id = definition_id

    def __str__(self) -> str:
        return str(self.args[0])


def record_id(raw: object) -> object:
    """오류 메시지용 레코드 id. 알 수 없으면 '?'."""
    if isinstance(raw, dict):
        return raw.get("id", "?")
    return "?"


def definition_ids(definitions: Iterable[DataDefinition]) -> list[int]:
    """각 정의의 id를 그 정의의 락 아래에서 읽는다. 한 번에 락 1개만 잡는다."""
    ids = []
    for definition in definitions:
        with definition.lock:
            ids.append(definition.id)
    return ids


# === 계약 ===


class DataDefinition(ABC):
    """저작된 템플릿. 구현체는 `id` 필드와 `lock` (RLock) 필드를 가진다."""

    id: int
    lock: threading.RLock

    @abstractmethod
    def validate(self) -> bool:
        """정의 자체의 유효성 (예: 최소 1개 티어)."""


D = TypeVar("D", bound=DataDefinition)


class DataDefinitionDatabase(ABC, Generic[D]):
    """id → 공유 정의 핸들 저장소.

    정의 객체는 복사되지 않는다. 다른 데이터베이스의 정의가 같은 객체를 참조한다.
    """

    # 로그/오류 메시지용 이름
    kind: str = "data"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._definitions: dict[int, D] = {}

    # --- 로드 헬퍼 ---

    @staticmethod
    def _read_records(source: str | Path) -> list[dict[str, Any]]:
        """JSON 배열 파일을 읽는다. 파일/구조 문제는 DefinitionLoadError."""
        path = Path(source)
        try:
            with path.open("r", encoding="utf-8") as f:
                raw_list = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DefinitionLoadError(f"Cannot read {path}: {e}") from e

        if not isinstance(raw_list, list):
            raise DefinitionLoadError(f"{path}: expected a JSON array")
        return raw_list

    @staticmethod
    def _require_dependency(dependency: object, expected: type, owner: str) -> None:
        if not isinstance(dependency, expected):
            raise DependencyOrderError(
                f"{owner} requires a loaded {expected.__name__}, "
                f"got {type(dependency).__name__}"
            )

    def _populate(self, definitions: Iterable[D]) -> None:
        """로드 결과 등록. 중복 id는 잘못된 데이터로 취급."""
        for definition in definitions:
            if definition.id in self._definitions:
                raise DefinitionLoadError(
                    f"Duplicate {self.kind} definition id: {definition.id}"
                )
            self._definitions[definition.id] = definition

    # --- 조회 / 변경 ---

    def definition(self, definition_id: int) -> Optional[D]:
        """O(1) 조회. 없으면 None."""
        with self._lock:
            return self._definitions.get(definition_id)

    def require(self, definition_id: int) -> D:
        """조회 실패 시 DefinitionNotFoundError."""
        found = self.definition(definition_id)
        if found is None:
            raise DefinitionNotFoundError(self.kind, definition_id)
        return found

    def definitions(self) -> list[D]:
        """전체 정의 (id 오름차순)."""
        with self._lock:
            return [self._definitions[key] for key in sorted(self._definitions)]

    def add_definition(self, definition: D) -> None:
        """정의 등록. 이미 존재하는 id면 경고 로그 후 덮어쓴다."""
        with definition.lock:
            definition_id = definition.id
        with self._lock:
            if definition_id in self._definitions:
                logger.warning(
                    "Overwriting existing %s definition: %d", self.kind, definition_id
                )
            self._definitions[definition_id] = definition

    def remove_definition(self, definition_id: int) -> Optional[D]:
        """명시적 제거. 제거된 정의 반환, 없으면 None."""
        with self._lock:
            removed = self._definitions.pop(definition_id, None)
        if removed is not None:
            logger.info("Removed %s definition %d", self.kind, definition_id)
        return removed

    def next_id(self) -> int:
        """새 정의에 쓸 id (현재 최대 id + 1)."""
        with self._lock:
            return max(self._definitions, default=0) + 1

    def count(self) -> int:
        with self._lock:
            return len(self._definitions)

    def validate(self) -> bool:
        """비어 있지 않고 모든 정의가 유효하면 True."""
        definitions = self.definitions()
        if not definitions:
            return False
        for definition in definitions:
            with definition.lock:
                if not definition.validate():
                    logger.warning(
                        "Invalid %s definition: %d", self.kind, definition.id
                    )
                    return False
        return True

    # --- 저장 ---

    @abstractmethod
    def definition_to_raw(self, definition: D) -> dict[str, Any]:
        """정의 1개 → 저장 형식 (참조는 id로).

        락은 구현체가 잡는다. 소유자 락 아래에서 참조 핸들을 복사하고,
        락을 놓은 뒤 참조된 정의의 id를 각자의 락 아래에서 읽는다.
        """

    def to_raw(self) -> list[dict[str, Any]]:
        return [self.definition_to_raw(definition) for definition in self.definitions()]

    def write_to(self, destination: str | Path) -> None:
        path = Path(destination)
        raw_list = self.to_raw()
        with path.open("w", encoding="utf-8") as f:
            json.dump(raw_list, f, indent=2, ensure_ascii=False)
            f.write("\n")
        logger.info("Wrote %d %s definitions to %s", len(raw_list), self.kind, path)


C = TypeVar("C")
I = TypeVar("I")  # noqa: E741


class DataInstanceGenerator(ABC, Generic[D, C, I]):
    """정의 + 조건(criteria) + 의존 데이터베이스 → 인스턴스 (또는 None)."""

    @abstractmethod
    def generate(self, definition: D, criteria: C, dependencies: Any = None) -> Optional[I]:
        """None은 '결과 없음': 오류가 아니다."""
