from __future__ import annotations

import math

from .models import Blocker, PillarScores, Scores

PILLAR_WEIGHTS = {
    "clarity": 25,
    "specificity": 35,
    "proof": 25,
    "audience": 15,
}

PILE_ON_FACTOR = 0.2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _pillar_score(blockers: list[Blocker]) -> int:
    if not blockers:
        return 100
    avg_severity = sum(b.severity for b in blockers) / len(blockers)
    # Each extra blocker in a pillar amplifies the penalty by 20%.
    penalty = min(avg_severity * (1 + PILE_ON_FACTOR * (len(blockers) - 1)), 100)
    return max(0, _round_half_up(100 - penalty))


def calculate_scores(blockers: list[Blocker], llms_txt_modifier: int = 0) -> Scores:
    pillars = {
        pillar: _pillar_score([b for b in blockers if b.pillar == pillar])
        for pillar in PILLAR_WEIGHTS
    }

    total = sum(pillars[p] * w / 100 for p, w in PILLAR_WEIGHTS.items())
    total = max(0.0, min(100.0, total + llms_txt_modifier))

    return Scores(total=_round_half_up(total), pillars=PillarScores(**pillars))
