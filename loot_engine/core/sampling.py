"""가중치 추첨 / 반올림 헬퍼: 순수 Python"""

import math
import random
from typing import Optional, Sequence


def weighted_index(weights: Sequence[int], rng: random.Random) -> Optional[int]:
    """이산 가중치 분포에서 인덱스 1개 추첨.

    [0, total) 구간에서 정수를 뽑고 누적 가중치가 그 값을 넘는 첫 인덱스 반환.
    후보가 없거나 가중치 합이 0이면 None.
    """
    if any(weight < 0 for weight in weights):
        raise ValueError(f"Negative weight in {list(weights)}")

    total = sum(weights)
    if total <= 0:
        return None

    roll = rng.randrange(total)
    cumulative = 0
    for index, weight in enumerate(weights):
        cumulative += weight
        if cumulative > roll:
            return index
    return None  # unreachable: cumulative == total > roll


def round_to(value: float, decimal_places: int) -> float:
    """소수점 decimal_places 자리로 반올림 (0.5는 0에서 멀어지는 쪽)."""
    factor = 10**decimal_places
    scaled = abs(value) * factor
    return math.copysign(math.floor(scaled + 0.5), value) / factor
