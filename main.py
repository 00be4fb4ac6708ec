# main.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import BackgroundTasks, FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from scorecard_api.cache import get as cache_get, set as cache_set, delete as cache_delete, make_key
from scorecard_api.config import (
    validate_config,
    SCORECARD_REMOTE_URL,
    SCORECARD_SEED_MOCK,
    VIEWER_POLL_SECONDS,
)
from scorecard_api.logger import get_logger
from scorecard_api.models import Sport, Tournament, match_to_dict
from scorecard_api.panel import ScorecardPanel, can_edit
from scorecard_api.remote_client import RemoteScorecardClient
from scorecard_api.sports import UnsupportedSportError
from scorecard_api.store import MatchClosedError, MatchNotFoundError, MatchStore, create_mock_matches

log = get_logger("scorecard.api")

# -----------------------
# App
# -----------------------
app = FastAPI(
    title="SportSphere Scorecard API",
    version="0.1.0",
    description="Live scorecards for cricket, football, kabaddi, badminton and volleyball matches",
)

store = MatchStore(create_mock_matches() if SCORECARD_SEED_MOCK else [])
panel = ScorecardPanel(store, RemoteScorecardClient() if SCORECARD_REMOTE_URL else None)


@app.on_event("startup")
def on_startup():
    validate_config()
    backend = SCORECARD_REMOTE_URL or "local store"
    log.info("Scorecard API started (persistence: %s, viewer poll: %ss)", backend, VIEWER_POLL_SECONDS)


@app.get("/health")
def health_check():
    return {"status": "ok", "time": datetime.utcnow().isoformat() + "Z"}


# -----------------------
# Helpers
# -----------------------
def _get_match_or_404(match_id: str):
    try:
        return store.get(match_id)
    except MatchNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _require_editor(match, user_id: Optional[str]) -> None:
    if not can_edit(user_id, match):
        raise HTTPException(status_code=401, detail="Not authorized to update this match")


def _invalidate_view(match_id: str) -> None:
    cache_delete(make_key("scorecard-view", match_id))


def _cached_view(match_id: str) -> Dict[str, Any]:
    """
    Viewer reads are served from cache for one polling interval.
    Writes through this API invalidate the entry.
    """
    key = make_key("scorecard-view", match_id)
    cached = cache_get(key)
    if cached is not None:
        return cached

    view = panel.view(match_id)
    cache_set(key, view, ttl_seconds=VIEWER_POLL_SECONDS)
    return view


# -----------------------
# Matches
# -----------------------
class TournamentIn(BaseModel):
    id: str
    name: str = ""
    organizer: str = Field(..., description="User id of the tournament organizer")


class MatchCreateRequest(BaseModel):
    sport: Sport
    tournament: TournamentIn
    team1: str = Field(..., min_length=1)
    team2: str = Field(..., min_length=1)
    officials: List[str] = Field(default_factory=list, description="User ids allowed to score")
    round: Optional[str] = None
    venue: Optional[str] = None
    match_id: Optional[str] = None


@app.get("/api/matches")
def list_matches(status: Optional[str] = None, sport: Optional[str] = None):
    matches = store.list_matches(status=status, sport=sport)
    return {"count": len(matches), "matches": [match_to_dict(m) for m in matches]}


@app.post("/api/matches", status_code=201)
def create_match(req: MatchCreateRequest):
    if req.team1.strip() == req.team2.strip():
        raise HTTPException(status_code=400, detail="team1 and team2 must be different")

    try:
        match = store.create(
            sport=req.sport,
            tournament=Tournament(id=req.tournament.id, name=req.tournament.name, organizer=req.tournament.organizer),
            team1=req.team1.strip(),
            team2=req.team2.strip(),
            officials=req.officials,
            round=req.round,
            venue=req.venue,
            match_id=req.match_id,
        )
    except UnsupportedSportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return match_to_dict(match)


@app.get("/api/matches/{match_id}")
def get_match(match_id: str):
    return match_to_dict(_get_match_or_404(match_id))


@app.post("/api/matches/{match_id}/start")
def start_match(match_id: str, x_user_id: Optional[str] = Header(None)):
    match = _get_match_or_404(match_id)
    _require_editor(match, x_user_id)

    try:
        match = store.start(match_id, user_id=x_user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UnsupportedSportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _invalidate_view(match_id)
    return match_to_dict(match)


@app.post("/api/matches/{match_id}/end")
def end_match(match_id: str, x_user_id: Optional[str] = Header(None)):
    match = _get_match_or_404(match_id)
    _require_editor(match, x_user_id)

    try:
        match = store.end(match_id, user_id=x_user_id)
    except (ValueError, UnsupportedSportError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    _invalidate_view(match_id)
    return match_to_dict(match)


# -----------------------
# Scorecard (viewer + editor)
# -----------------------
@app.get("/api/matches/{match_id}/scorecard")
def get_scorecard(match_id: str, x_user_id: Optional[str] = Header(None)):
    match = _get_match_or_404(match_id)
    view = dict(_cached_view(match_id))
    # sync state changes in background tasks; never serve it from cache
    view["sync_status"] = panel.sync_status(match_id)
    view["sync_error"] = panel.sync_error(match_id)
    view["can_edit"] = can_edit(x_user_id, match)
    view["refresh_after_seconds"] = VIEWER_POLL_SECONDS
    return view


class ScoreEventIn(BaseModel):
    type: str = Field(..., description="e.g. run, wide, no_ball, wicket, set_points, complete_set, set_subscore")
    value: Optional[int] = Field(None, description="Runs / points value (absolute for set_points and set_subscore)")
    side: Optional[Literal["team1", "team2"]] = None
    field: Optional[str] = Field(None, description="Sub-score name, e.g. goals, raid_points, tackle_points")
    player: Optional[str] = None
    on_strike: bool = False
    index: Optional[int] = None
    dismissal: Optional[str] = None
    team: Optional[str] = None
    batsmen: Optional[List[str]] = None
    bowler: Optional[str] = None


@app.post("/api/matches/{match_id}/scorecard/events")
def post_score_event(
    match_id: str,
    event: ScoreEventIn,
    background_tasks: BackgroundTasks,
    x_user_id: Optional[str] = Header(None),
):
    _get_match_or_404(match_id)

    try:
        result = panel.apply_event(match_id, x_user_id, event.model_dump(exclude_none=True))
    except UnsupportedSportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MatchClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result.applied:
        _invalidate_view(match_id)
        background_tasks.add_task(
            panel.sync,
            match_id,
            result.scorecard,
            revision=result.revision,
            updated_by=x_user_id,
        )

    return {
        "match_id": match_id,
        "applied": result.applied,
        "sync_status": result.sync_status,
        "revision": result.revision,
        "scorecard": result.scorecard,
    }


@app.post("/api/matches/{match_id}/scorecard/sync")
def retry_sync(match_id: str, x_user_id: Optional[str] = Header(None)):
    match = _get_match_or_404(match_id)
    _require_editor(match, x_user_id)

    echoed = panel.retry(match_id, x_user_id)
    _invalidate_view(match_id)
    return {
        "match_id": match_id,
        "sync_status": panel.sync_status(match_id),
        "match": echoed,
    }


# -----------------------
# Persistence contract: unconditional overwrite of a live match
# -----------------------
class ScoreWriteRequest(BaseModel):
    scorecard: Dict[str, Any] = Field(..., description="Complete scorecard state for the match's sport")


@app.patch("/api/matches/{match_id}/score")
def put_score(match_id: str, req: ScoreWriteRequest, x_user_id: Optional[str] = Header(None)):
    match = _get_match_or_404(match_id)
    _require_editor(match, x_user_id)

    try:
        out = store.save_scorecard(match_id, req.scorecard, updated_by=x_user_id)
    except MatchClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UnsupportedSportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid scorecard: {e}")

    _invalidate_view(match_id)
    return out
