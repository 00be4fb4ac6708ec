# scorecard_api/sets.py
"""Set-based scorecards (badminton, volleyball).

The editor types absolute point counts for the set in progress and closes the
set explicitly. Closing a set appends it to the history and resets the
counters; sets won are always recounted from the history.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from scorecard_api.models import SIDES

# Sets needed to take the match
SETS_TO_WIN = {
    "badminton": 2,   # best of 3
    "volleyball": 3,  # best of 5
}


@dataclass(frozen=True)
class SetRecord:
    team1: int
    team2: int


@dataclass
class SetScore:
    sport: str
    current_set_team1: int = 0
    current_set_team2: int = 0
    sets: Tuple[SetRecord, ...] = field(default_factory=tuple)

    @property
    def team1_sets(self) -> int:
        return sum(1 for s in self.sets if s.team1 > s.team2)

    @property
    def team2_sets(self) -> int:
        return sum(1 for s in self.sets if s.team2 > s.team1)


def _sets_to_win(sport: str) -> int:
    if sport not in SETS_TO_WIN:
        raise ValueError(f"Not a set-based sport: {sport}")
    return SETS_TO_WIN[sport]


def is_decided(score: SetScore) -> bool:
    needed = _sets_to_win(score.sport)
    return score.team1_sets >= needed or score.team2_sets >= needed


def adjust_current_set_score(score: SetScore, side: str, value: int) -> SetScore:
    """Absolute set; negative input clamps to 0."""
    if side not in SIDES:
        raise ValueError(f"Invalid side: {side}")
    if value is None:
        raise ValueError("Set points value is required")

    out = copy.deepcopy(score)
    setattr(out, f"current_set_{side}", max(0, int(value)))
    return out


def complete_set(score: SetScore) -> SetScore:
    if is_decided(score):
        raise ValueError("Match is already decided; no further sets can be completed")

    t1, t2 = score.current_set_team1, score.current_set_team2
    if t1 == t2:
        raise ValueError(f"Cannot complete a tied set ({t1}-{t2})")

    out = copy.deepcopy(score)
    out.sets = out.sets + (SetRecord(team1=t1, team2=t2),)
    out.current_set_team1 = 0
    out.current_set_team2 = 0
    return out


def init_state(sport: str) -> Dict[str, Any]:
    return to_dict(SetScore(sport=sport))


def from_dict(data: Dict[str, Any]) -> SetScore:
    sport = str(data.get("sport", ""))
    _sets_to_win(sport)
    return SetScore(
        sport=sport,
        current_set_team1=max(0, int(data.get("current_set_team1", 0))),
        current_set_team2=max(0, int(data.get("current_set_team2", 0))),
        sets=tuple(
            SetRecord(team1=max(0, int(s.get("team1", 0))), team2=max(0, int(s.get("team2", 0))))
            for s in data.get("sets") or []
        ),
    )


def to_dict(score: SetScore) -> Dict[str, Any]:
    return {
        "sport": score.sport,
        "team1_sets": score.team1_sets,
        "team2_sets": score.team2_sets,
        "current_set_team1": score.current_set_team1,
        "current_set_team2": score.current_set_team2,
        "sets": [{"team1": s.team1, "team2": s.team2} for s in score.sets],
        "decided": is_decided(score),
    }


def apply_event(state: Dict[str, Any], event: Dict[str, Any]) -> Dict[str, Any]:
    """Events: set_points(side, value), complete_set."""
    score = from_dict(state)
    etype = event.get("type")

    if etype == "set_points":
        return to_dict(adjust_current_set_score(score, event.get("side", ""), event.get("value", 0)))
    if etype == "complete_set":
        return to_dict(complete_set(score))

    raise ValueError(f"Invalid {score.sport} event: {etype}")


def leading_side(state: Dict[str, Any]) -> Optional[str]:
    """Side with more sets won; None when level."""
    score = from_dict(state)
    if score.team1_sets > score.team2_sets:
        return "team1"
    if score.team2_sets > score.team1_sets:
        return "team2"
    return None
