# scorecard_api/aggregate.py
"""Aggregate scorecards (football, kabaddi).

Each side holds named sub-scores; a side's total is always the sum of its
sub-scores and is never stored or edited on its own.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from scorecard_api.models import SIDES

SUBSCORE_FIELDS: Dict[str, Tuple[str, ...]] = {
    "football": ("goals",),
    "kabaddi": ("raid_points", "tackle_points"),
}


def _fields(sport: str) -> Tuple[str, ...]:
    if sport not in SUBSCORE_FIELDS:
        raise ValueError(f"Not an aggregate sport: {sport}")
    return SUBSCORE_FIELDS[sport]


def _zeroed(sport: str) -> Dict[str, int]:
    return {f: 0 for f in _fields(sport)}


@dataclass
class AggregateScore:
    sport: str
    team1: Dict[str, int] = field(default_factory=dict)
    team2: Dict[str, int] = field(default_factory=dict)

    @property
    def team1_score(self) -> int:
        return sum(self.team1.values())

    @property
    def team2_score(self) -> int:
        return sum(self.team2.values())


def set_subscore(score: AggregateScore, side: str, field_name: str, value: int) -> AggregateScore:
    """Absolute set of one sub-score; negative input clamps to 0."""
    if side not in SIDES:
        raise ValueError(f"Invalid side: {side}")
    if field_name not in _fields(score.sport):
        raise ValueError(f"Invalid {score.sport} field: {field_name}")
    if value is None:
        raise ValueError("Sub-score value is required")

    out = copy.deepcopy(score)
    getattr(out, side)[field_name] = max(0, int(value))
    return out


def init_state(sport: str) -> Dict[str, Any]:
    return to_dict(AggregateScore(sport=sport, team1=_zeroed(sport), team2=_zeroed(sport)))


def from_dict(data: Dict[str, Any]) -> AggregateScore:
    sport = str(data.get("sport", ""))
    fields = _fields(sport)

    def _side(raw: Any) -> Dict[str, int]:
        raw = raw or {}
        return {f: max(0, int(raw.get(f, 0))) for f in fields}

    # Totals in the payload are ignored; they are recomputed.
    return AggregateScore(sport=sport, team1=_side(data.get("team1")), team2=_side(data.get("team2")))


def to_dict(score: AggregateScore) -> Dict[str, Any]:
    return {
        "sport": score.sport,
        "team1": dict(score.team1),
        "team2": dict(score.team2),
        "team1_score": score.team1_score,
        "team2_score": score.team2_score,
    }


def apply_event(state: Dict[str, Any], event: Dict[str, Any]) -> Dict[str, Any]:
    """Events: set_subscore(side, field, value)."""
    score = from_dict(state)
    etype = event.get("type")

    if etype != "set_subscore":
        raise ValueError(f"Invalid {score.sport} event: {etype}")

    return to_dict(set_subscore(score, event.get("side", ""), event.get("field", ""), event.get("value")))


def leading_side(state: Dict[str, Any]) -> Optional[str]:
    score = from_dict(state)
    if score.team1_score > score.team2_score:
        return "team1"
    if score.team2_score > score.team1_score:
        return "team2"
    return None
