# scorecard_api/remote_client.py
from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from scorecard_api.config import SCORECARD_REMOTE_TIMEOUT_SECONDS, SCORECARD_REMOTE_URL


class PersistenceError(Exception):
    """Raised when a scorecard write fails. Carries an HTTP-style status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class RemoteScorecardClient:
    """
    Writes complete scorecards to a remote SportSphere API.

    PATCH {base_url}/api/matches/{match_id}/score  body: {"scorecard": {...}}
    The remote overwrites unconditionally and echoes the canonical match.
    """

    def __init__(
        self,
        base_url: str = SCORECARD_REMOTE_URL,
        *,
        timeout: int = SCORECARD_REMOTE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not base_url.startswith("http"):
            raise PersistenceError(500, "SCORECARD_REMOTE_URL must start with http/https")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def save_scorecard(self, match_id: str, scorecard: Dict[str, Any], *, updated_by: Optional[str] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/api/matches/{match_id}/score"
        headers = {"X-User-Id": updated_by} if updated_by else {}

        try:
            resp = self.session.patch(url, json={"scorecard": scorecard}, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise PersistenceError(503, f"Network error: {e}") from e

        if resp.status_code != 200:
            raise PersistenceError(resp.status_code, _error_message(resp))

        try:
            return resp.json()
        except ValueError as e:
            raise PersistenceError(502, f"Invalid JSON response: {e}") from e


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict) and data.get("detail"):
        return str(data["detail"])
    return resp.text
