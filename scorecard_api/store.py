# scorecard_api/store.py
from __future__ import annotations

import copy
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from scorecard_api.logger import get_logger
from scorecard_api.models import Match, Tournament, match_to_dict
from scorecard_api.sports import engine_for, normalize_scorecard

log = get_logger("scorecard.store")


class MatchNotFoundError(Exception):
    """Raised when a match id is not in the store."""
    pass


class MatchClosedError(Exception):
    """Raised when scoring a match that is not live (not started, or completed)."""
    pass


def _utc_now_iso() -> str:
    return datetime.utcnow().isoformat() + "Z"


def _result(match: Match) -> Dict[str, Any]:
    side = engine_for(match.sport).leading_side(match) if match.scorecard else None
    return {
        "winner": side,
        "winning_team": getattr(match, side) if side else None,
        "is_draw": side is None,
    }


class MatchStore:
    """
    In-memory match documents keyed by id.

    Scorecard writes to a live match overwrite the stored scorecard
    unconditionally (last write wins; no version token).
    """

    def __init__(self, matches: Optional[List[Match]] = None):
        self._matches: Dict[str, Match] = {}
        for m in matches or []:
            self._matches[m.id] = m

    def get(self, match_id: str) -> Match:
        match = self._matches.get(match_id)
        if match is None:
            raise MatchNotFoundError(f"Match not found: {match_id}")
        return match

    def list_matches(self, *, status: Optional[str] = None, sport: Optional[str] = None) -> List[Match]:
        out = list(self._matches.values())
        if status:
            out = [m for m in out if m.status == status]
        if sport:
            out = [m for m in out if m.sport == sport]
        return out

    def create(
        self,
        *,
        sport: str,
        tournament: Tournament,
        team1: str,
        team2: str,
        officials: Optional[List[str]] = None,
        round: Optional[str] = None,
        venue: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> Match:
        engine_for(sport)  # reject unknown sport tags up-front

        match_id = match_id or uuid.uuid4().hex
        if match_id in self._matches:
            raise ValueError(f"Match already exists: {match_id}")

        match = Match(
            id=match_id,
            sport=sport,
            tournament=tournament,
            team1=team1,
            team2=team2,
            officials=list(officials or []),
            round=round,
            venue=venue,
        )
        self._matches[match_id] = match
        log.info("Created %s match %s (%s vs %s)", sport, match_id, team1, team2)
        return match

    def start(self, match_id: str, *, user_id: Optional[str] = None) -> Match:
        match = self.get(match_id)
        if match.status != "scheduled":
            raise ValueError(f"Match cannot be started from status '{match.status}'")

        match.status = "live"
        match.scorecard = engine_for(match.sport).init_state(match)
        match.updated_by = user_id
        match.last_updated = _utc_now_iso()
        log.info("Match %s is live", match_id)
        return match

    def end(self, match_id: str, *, user_id: Optional[str] = None) -> Match:
        match = self.get(match_id)
        if match.status != "live":
            raise ValueError(f"Match cannot be completed from status '{match.status}'")

        match.result = _result(match)
        match.status = "completed"
        match.updated_by = user_id
        match.last_updated = _utc_now_iso()
        log.info("Match %s completed (winner: %s)", match_id, match.result["winning_team"] or "draw")
        return match

    def save_scorecard(self, match_id: str, scorecard: Dict[str, Any], *, updated_by: Optional[str] = None) -> Dict[str, Any]:
        """
        Overwrite the stored scorecard and return the canonical match dict.
        The scorecard is validated for the match's sport before it is stored.
        Only a live match takes writes.
        """
        match = self.get(match_id)
        if match.status != "live":
            raise MatchClosedError(f"Match {match_id} is not live (status={match.status})")
        match.scorecard = normalize_scorecard(match.sport, copy.deepcopy(scorecard))
        match.updated_by = updated_by
        match.last_updated = _utc_now_iso()
        log.debug("Stored scorecard for match %s (by %s)", match_id, updated_by)
        return match_to_dict(match)


def create_mock_matches() -> List[Match]:
    """
    One match per sport, all organised by "org-1" with "ref-1" as official.
    Mock only.
    """
    league = Tournament(id="t-1", name="SportSphere Open", organizer="org-1")

    def _m(match_id: str, sport: str, team1: str, team2: str, venue: str) -> Match:
        return Match(
            id=match_id,
            sport=sport,
            tournament=league,
            team1=team1,
            team2=team2,
            officials=["ref-1"],
            round="Group A",
            venue=venue,
        )

    return [
        _m("m-cricket-1", "cricket", "Mumbai Mavericks", "Chennai Chargers", "Wankhede Ground"),
        _m("m-football-1", "football", "Kolkata Strikers", "Goa Waves", "Salt Lake Arena"),
        _m("m-kabaddi-1", "kabaddi", "Patna Panthers", "Jaipur Jaguars", "Patliputra Hall"),
        _m("m-badminton-1", "badminton", "Hyderabad Hawks", "Pune Pacers", "Gachibowli Court 2"),
        _m("m-volleyball-1", "volleyball", "Kochi Blue", "Delhi Dunkers", "Rajiv Gandhi Indoor"),
    ]
