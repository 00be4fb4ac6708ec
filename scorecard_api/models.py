from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional


# -----------------------------
# Closed sport set + match lifecycle
# -----------------------------
Sport = Literal["cricket", "football", "badminton", "volleyball", "kabaddi"]
SPORTS = ("cricket", "football", "badminton", "volleyball", "kabaddi")

MatchStatus = Literal["scheduled", "live", "completed"]

SIDES = ("team1", "team2")

SyncStatus = Literal["synced", "pending", "failed"]


# -----------------------------
# Ownership records
# -----------------------------
@dataclass(frozen=True)
class Tournament:
    id: str
    name: str
    organizer: str


@dataclass
class Match:
    id: str
    sport: str
    tournament: Tournament
    team1: str
    team2: str

    status: MatchStatus = "scheduled"
    officials: List[str] = field(default_factory=list)
    round: Optional[str] = None
    venue: Optional[str] = None

    # Serialized scorecard (shape depends on sport); None until the match goes live.
    scorecard: Optional[Dict[str, Any]] = None
    updated_by: Optional[str] = None
    last_updated: Optional[str] = None

    # Set when the match completes: {"winner", "winning_team", "is_draw"}
    result: Optional[Dict[str, Any]] = None


def match_to_dict(match: Match) -> Dict[str, Any]:
    return {
        "id": match.id,
        "sport": match.sport,
        "tournament": {
            "id": match.tournament.id,
            "name": match.tournament.name,
            "organizer": match.tournament.organizer,
        },
        "team1": match.team1,
        "team2": match.team2,
        "status": match.status,
        "officials": list(match.officials),
        "round": match.round,
        "venue": match.venue,
        "scorecard": match.scorecard,
        "updated_by": match.updated_by,
        "last_updated": match.last_updated,
        "result": match.result,
    }
