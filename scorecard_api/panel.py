# scorecard_api/panel.py
from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from scorecard_api.logger import get_logger
from scorecard_api.models import Match, SyncStatus
from scorecard_api.remote_client import PersistenceError
from scorecard_api.sports import UnsupportedSportError, engine_for
from scorecard_api.store import MatchClosedError, MatchStore

log = get_logger("scorecard.panel")

UNSUPPORTED_PLACEHOLDER = "Unsupported sport type"


class ScorecardBackend(Protocol):
    def save_scorecard(self, match_id: str, scorecard: Dict[str, Any], *, updated_by: Optional[str] = None) -> Dict[str, Any]:
        ...


@dataclass
class EventResult:
    applied: bool
    scorecard: Optional[Dict[str, Any]]
    sync_status: SyncStatus
    revision: int


def can_edit(user_id: Optional[str], match: Match) -> bool:
    """Tournament organizer or one of the match officials."""
    if not user_id:
        return False
    return user_id == match.tournament.organizer or user_id in match.officials


class ScorecardPanel:
    """
    Routes scoring events to the sport engine of a match, gated on can_edit.

    Accepted events update the local scorecard right away and mark it
    "pending"; `sync` then pushes the complete scorecard to the backend and
    marks it "synced" or "failed". A failed sync keeps the local scorecard
    (no rollback) until a retry succeeds.
    """

    def __init__(self, store: MatchStore, backend: Optional[ScorecardBackend] = None):
        self.store = store
        self.backend: ScorecardBackend = backend if backend is not None else store
        self._revision: Dict[str, int] = {}
        self._sync_status: Dict[str, SyncStatus] = {}
        self._sync_error: Dict[str, str] = {}
        # serialises local scorecard updates and backend writes
        self._lock = threading.Lock()

    # -----------------------
    # Read side
    # -----------------------
    def sync_status(self, match_id: str) -> SyncStatus:
        return self._sync_status.get(match_id, "synced")

    def sync_error(self, match_id: str) -> Optional[str]:
        return self._sync_error.get(match_id)

    def view(self, match_id: str) -> Dict[str, Any]:
        match = self.store.get(match_id)
        out: Dict[str, Any] = {
            "match_id": match.id,
            "sport": match.sport,
            "status": match.status,
            "team1": match.team1,
            "team2": match.team2,
            "sync_status": self.sync_status(match_id),
            "sync_error": self.sync_error(match_id),
        }
        try:
            engine_for(match.sport)
        except UnsupportedSportError:
            out.update({"supported": False, "placeholder": UNSUPPORTED_PLACEHOLDER, "scorecard": None})
            return out

        out.update({"supported": True, "scorecard": match.scorecard})
        return out


    # -----------------------
    # Write side
    # -----------------------
    def apply_event(self, match_id: str, user_id: Optional[str], event: Dict[str, Any]) -> EventResult:
        match = self.store.get(match_id)
        engine = engine_for(match.sport)

        if not can_edit(user_id, match):
            log.debug("Ignoring %s event on %s from non-editor %s", event.get("type"), match_id, user_id)
            return EventResult(
                applied=False,
                scorecard=match.scorecard,
                sync_status=self.sync_status(match_id),
                revision=self._revision.get(match_id, 0),
            )

        with self._lock:
            if match.status != "live" or match.scorecard is None:
                raise MatchClosedError(f"Match {match_id} is not live (status={match.status})")

            new_state = engine.apply_event(copy.deepcopy(match.scorecard), event)

            match.scorecard = new_state
            match.updated_by = user_id
            revision = self._revision.get(match_id, 0) + 1
            self._revision[match_id] = revision
            self._sync_status[match_id] = "pending"

        log.info("Applied %s event on %s (rev %d) by %s", event.get("type"), match_id, revision, user_id)
        return EventResult(applied=True, scorecard=new_state, sync_status="pending", revision=revision)

    def sync(self, match_id: str, scorecard: Dict[str, Any], *, revision: int, updated_by: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Push one complete scorecard to the backend.

        A revision older than the latest local one is skipped (the newer
        revision carries the complete state). The check, the write and the
        status update run under the panel lock, so no event is applied while
        a write is in flight and an older revision never lands after a newer one.
        Returns the canonical match on success, None otherwise.
        """
        with self._lock:
            if revision < self._revision.get(match_id, 0):
                log.debug("Skipping superseded sync for %s (rev %d)", match_id, revision)
                return None

            try:
                echoed = self.backend.save_scorecard(match_id, scorecard, updated_by=updated_by)
            except (PersistenceError, MatchClosedError, ValueError) as e:
                log.error("Scorecard sync failed for %s (rev %d): %s", match_id, revision, e)
                self._sync_status[match_id] = "failed"
                self._sync_error[match_id] = str(e)
                return None

            self._sync_status[match_id] = "synced"
            self._sync_error.pop(match_id, None)

        log.debug("Scorecard synced for %s (rev %d)", match_id, revision)
        return echoed

    def retry(self, match_id: str, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Re-send the current local scorecard. Editors only; no-op otherwise."""
        match = self.store.get(match_id)
        if not can_edit(user_id, match) or match.scorecard is None:
            return None
        return self.sync(
            match_id,
            match.scorecard,
            revision=self._revision.get(match_id, 0),
            updated_by=user_id,
        )
