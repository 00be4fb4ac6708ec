# scorecard_api/sports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from scorecard_api import aggregate, cricket, sets
from scorecard_api.models import SPORTS, Match

State = Dict[str, Any]


class UnsupportedSportError(Exception):
    """Raised for a sport tag outside the closed sport set."""
    pass


@dataclass(frozen=True)
class SportEngine:
    sport: str
    init_state: Callable[[Match], State]
    apply_event: Callable[[State, Dict[str, Any]], State]
    # Parse + re-serialize a stored/incoming state (validates and recomputes derived fields)
    normalize: Callable[[State], State]
    # "team1" / "team2" ahead on the match's scorecard, None when level
    leading_side: Callable[[Match], Optional[str]]


ENGINES: Dict[str, SportEngine] = {
    "cricket": SportEngine(
        sport="cricket",
        init_state=lambda m: cricket.init_state(m.team1),
        apply_event=cricket.apply_event,
        normalize=lambda s: cricket.to_dict(cricket.from_dict(s)),
        leading_side=lambda m: cricket.leading_side(m.scorecard, m.team1, m.team2),
    ),
    "football": SportEngine(
        sport="football",
        init_state=lambda m: aggregate.init_state("football"),
        apply_event=aggregate.apply_event,
        normalize=lambda s: aggregate.to_dict(aggregate.from_dict(s)),
        leading_side=lambda m: aggregate.leading_side(m.scorecard),
    ),
    "kabaddi": SportEngine(
        sport="kabaddi",
        init_state=lambda m: aggregate.init_state("kabaddi"),
        apply_event=aggregate.apply_event,
        normalize=lambda s: aggregate.to_dict(aggregate.from_dict(s)),
        leading_side=lambda m: aggregate.leading_side(m.scorecard),
    ),
    "badminton": SportEngine(
        sport="badminton",
        init_state=lambda m: sets.init_state("badminton"),
        apply_event=sets.apply_event,
        normalize=lambda s: sets.to_dict(sets.from_dict(s)),
        leading_side=lambda m: sets.leading_side(m.scorecard),
    ),
    "volleyball": SportEngine(
        sport="volleyball",
        init_state=lambda m: sets.init_state("volleyball"),
        apply_event=sets.apply_event,
        normalize=lambda s: sets.to_dict(sets.from_dict(s)),
        leading_side=lambda m: sets.leading_side(m.scorecard),
    ),
}

if set(ENGINES) != set(SPORTS):
    raise RuntimeError(f"Sport engines out of sync with SPORTS: {sorted(set(ENGINES) ^ set(SPORTS))}")


def engine_for(sport: str) -> SportEngine:
    engine = ENGINES.get(str(sport or "").strip().lower())
    if engine is None:
        raise UnsupportedSportError(f"Unsupported sport type: {sport}")
    return engine


def normalize_scorecard(sport: str, scorecard: State) -> State:
    """
    Validate an incoming scorecard for `sport`. The payload's sport tag, when
    present, must match the match's sport.
    """
    engine = engine_for(sport)
    tagged = scorecard.get("sport")
    if tagged is not None and tagged != engine.sport:
        raise ValueError(f"Scorecard sport '{tagged}' does not match match sport '{engine.sport}'")
    return engine.normalize({**scorecard, "sport": engine.sport})
