# scorecard_api/cricket.py
from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

BALLS_PER_OVER = 6
MAX_WICKETS = 10


# -----------------------------
# Innings state
# -----------------------------
@dataclass
class Extras:
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0


@dataclass
class Batsman:
    player: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal: Optional[str] = None


@dataclass
class Bowler:
    player: str
    overs: int = 0
    balls: int = 0
    runs: int = 0
    wickets: int = 0
    maidens: int = 0
    # runs conceded in the over currently being bowled (maiden detection)
    over_runs: int = 0


@dataclass
class Innings:
    """
    One team's batting turn.
    Ball count is always 0-5; the 6th legal delivery rolls into overs.
    `striker` / `bowler` index into batsmen / bowlers.
    """
    team: str
    runs: int = 0
    wickets: int = 0
    overs: int = 0
    balls: int = 0
    extras: Extras = field(default_factory=Extras)
    batsmen: List[Batsman] = field(default_factory=list)
    bowlers: List[Bowler] = field(default_factory=list)
    striker: int = 0
    bowler: int = 0


@dataclass
class CricketScore:
    innings: List[Innings] = field(default_factory=list)


# -----------------------------
# Overs notation + derived values
# -----------------------------
def balls_to_overs_str(balls: int) -> str:
    # balls=119 => "19.5"
    if balls <= 0:
        return "0.0"
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def run_rate(runs: int, balls: int) -> float:
    if balls <= 0:
        return 0.0
    return runs / balls * BALLS_PER_OVER


def current_run_rate(innings: Innings) -> float:
    return run_rate(innings.runs, innings.overs * BALLS_PER_OVER + innings.balls)


def strike_rate(batsman: Batsman) -> float:
    if batsman.balls <= 0:
        return 0.0
    return batsman.runs / batsman.balls * 100


def economy(bowler: Bowler) -> float:
    # runs per completed over; a part-over alone gives 0.0
    if bowler.overs <= 0:
        return 0.0
    return bowler.runs / bowler.overs


# -----------------------------
# Delivery outcomes
# -----------------------------
def _check_in_play(innings: Innings) -> None:
    if innings.wickets >= MAX_WICKETS:
        raise ValueError("Innings is all out")


def _striker(innings: Innings) -> Batsman:
    if not innings.batsmen:
        raise ValueError("No batsman at the crease; add a batsman first")
    return innings.batsmen[innings.striker]


def _current_bowler(innings: Innings) -> Bowler:
    if not innings.bowlers:
        raise ValueError("No bowler set; add a bowler first")
    return innings.bowlers[innings.bowler]


def _legal_delivery(innings: Innings, bowler: Bowler) -> None:
    innings.balls += 1
    if innings.balls == BALLS_PER_OVER:
        innings.overs += 1
        innings.balls = 0

    bowler.balls += 1
    if bowler.balls == BALLS_PER_OVER:
        bowler.overs += 1
        bowler.balls = 0
        if bowler.over_runs == 0:
            bowler.maidens += 1
        bowler.over_runs = 0


def run(innings: Innings, n: int) -> Innings:
    """
    Off-the-bat runs: credited to innings + striker, charged to the bowler,
    and one legal delivery consumed.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"Runs must be a non-negative integer, got {n!r}")
    _check_in_play(innings)

    out = copy.deepcopy(innings)
    striker = _striker(out)
    bowler = _current_bowler(out)

    out.runs += n
    striker.runs += n
    striker.balls += 1
    if n == 4:
        striker.fours += 1
    elif n == 6:
        striker.sixes += 1

    bowler.runs += n
    bowler.over_runs += n

    _legal_delivery(out, bowler)
    return out


def _extra(innings: Innings, kind: str) -> Innings:
    _check_in_play(innings)
    out = copy.deepcopy(innings)
    bowler = _current_bowler(out)

    setattr(out.extras, kind, getattr(out.extras, kind) + 1)
    out.runs += 1
    bowler.runs += 1
    bowler.over_runs += 1
    return out


def wide(innings: Innings) -> Innings:
    """One run to the innings; not a legal delivery."""
    return _extra(innings, "wides")


def no_ball(innings: Innings) -> Innings:
    """One run to the innings; not a legal delivery."""
    return _extra(innings, "no_balls")


def wicket(innings: Innings, dismissal: Optional[str] = None) -> Innings:
    """
    Dismisses the striker. The striker index is left on the dismissed batsman
    until the editor moves strike; dismissing them a second time is rejected.
    """
    _check_in_play(innings)

    out = copy.deepcopy(innings)
    striker = _striker(out)
    if striker.is_out:
        raise ValueError(f"{striker.player} is already out; set a new striker first")
    bowler = _current_bowler(out)

    out.wickets += 1
    striker.is_out = True
    striker.balls += 1
    if dismissal:
        striker.dismissal = dismissal
    bowler.wickets += 1

    _legal_delivery(out, bowler)
    return out


# -----------------------------
# Line-up management
# -----------------------------
def add_batsman(innings: Innings, player: str, *, on_strike: bool = False) -> Innings:
    player = (player or "").strip()
    if not player:
        raise ValueError("Batsman name is required")

    out = copy.deepcopy(innings)
    out.batsmen.append(Batsman(player=player))
    if on_strike:
        out.striker = len(out.batsmen) - 1
    return out


def add_bowler(innings: Innings, player: str, *, bowling: bool = True) -> Innings:
    player = (player or "").strip()
    if not player:
        raise ValueError("Bowler name is required")

    out = copy.deepcopy(innings)
    for idx, b in enumerate(out.bowlers):
        if b.player == player:
            if bowling:
                out.bowler = idx
            return out

    out.bowlers.append(Bowler(player=player))
    if bowling:
        out.bowler = len(out.bowlers) - 1
    return out


def set_striker(innings: Innings, index: int) -> Innings:
    if index < 0 or index >= len(innings.batsmen):
        raise ValueError(f"No batsman at index {index}")
    out = copy.deepcopy(innings)
    out.striker = index
    return out


def set_bowler(innings: Innings, index: int) -> Innings:
    if index < 0 or index >= len(innings.bowlers):
        raise ValueError(f"No bowler at index {index}")
    out = copy.deepcopy(innings)
    out.bowler = index
    return out


def new_innings(team: str, batsmen: Optional[List[str]] = None, bowler: Optional[str] = None) -> Innings:
    inn = Innings(team=team)
    for name in batsmen or []:
        inn.batsmen.append(Batsman(player=name))
    if bowler:
        inn.bowlers.append(Bowler(player=bowler))
    return inn


def start_innings(score: CricketScore, team: str, batsmen: Optional[List[str]] = None, bowler: Optional[str] = None) -> CricketScore:
    out = copy.deepcopy(score)
    out.innings.append(new_innings(team, batsmen, bowler))
    return out


# -----------------------------
# Scorecard engine (serialized state <-> events)
# -----------------------------
def init_state(batting_first: str) -> Dict[str, Any]:
    """Fresh scorecard for a match going live."""
    score = CricketScore(innings=[new_innings(batting_first, ["Batter 1", "Batter 2"], "Bowler 1")])
    return to_dict(score)


def _innings_from_dict(d: Dict[str, Any]) -> Innings:
    extras = d.get("extras") or {}
    return Innings(
        team=str(d.get("team", "")),
        runs=int(d.get("runs", 0)),
        wickets=int(d.get("wickets", 0)),
        overs=int(d.get("overs", 0)),
        balls=int(d.get("balls", 0)),
        extras=Extras(
            wides=int(extras.get("wides", 0)),
            no_balls=int(extras.get("no_balls", 0)),
            byes=int(extras.get("byes", 0)),
            leg_byes=int(extras.get("leg_byes", 0)),
        ),
        batsmen=[
            Batsman(
                player=str(b.get("player", "")),
                runs=int(b.get("runs", 0)),
                balls=int(b.get("balls", 0)),
                fours=int(b.get("fours", 0)),
                sixes=int(b.get("sixes", 0)),
                is_out=bool(b.get("is_out", False)),
                dismissal=b.get("dismissal"),
            )
            for b in d.get("batsmen") or []
        ],
        bowlers=[
            Bowler(
                player=str(b.get("player", "")),
                overs=int(b.get("overs", 0)),
                balls=int(b.get("balls", 0)),
                runs=int(b.get("runs", 0)),
                wickets=int(b.get("wickets", 0)),
                maidens=int(b.get("maidens", 0)),
                over_runs=int(b.get("over_runs", 0)),
            )
            for b in d.get("bowlers") or []
        ],
        striker=int(d.get("striker", 0)),
        bowler=int(d.get("bowler", 0)),
    )


def from_dict(data: Dict[str, Any]) -> CricketScore:
    innings = [_innings_from_dict(i) for i in data.get("innings") or []]
    for inn in innings:
        if inn.runs < 0 or inn.wickets < 0 or inn.overs < 0:
            raise ValueError("Innings totals cannot be negative")
        if inn.wickets > MAX_WICKETS:
            raise ValueError(f"Innings wickets must be 0-{MAX_WICKETS}")
        if inn.balls < 0 or inn.balls >= BALLS_PER_OVER:
            raise ValueError("Innings balls must be 0-5")
        if inn.batsmen and not 0 <= inn.striker < len(inn.batsmen):
            raise ValueError(f"Striker index out of range: {inn.striker}")
        if inn.bowlers and not 0 <= inn.bowler < len(inn.bowlers):
            raise ValueError(f"Bowler index out of range: {inn.bowler}")
    return CricketScore(innings=innings)


def to_dict(score: CricketScore) -> Dict[str, Any]:
    """
    Stored fields plus display-only derived values
    (run_rate, strike_rate, economy, overs notation). Derived keys are ignored by from_dict.
    """
    innings_out = []
    for inn in score.innings:
        d = asdict(inn)
        d["overs_display"] = balls_to_overs_str(inn.overs * BALLS_PER_OVER + inn.balls)
        d["run_rate"] = round(current_run_rate(inn), 2)
        for bd, b in zip(d["batsmen"], inn.batsmen):
            bd["strike_rate"] = round(strike_rate(b), 2)
        for bd, b in zip(d["bowlers"], inn.bowlers):
            bd["economy"] = round(economy(b), 2)
        innings_out.append(d)
    return {"sport": "cricket", "innings": innings_out}


def leading_side(state: Dict[str, Any], team1: str, team2: str) -> Optional[str]:
    """"team1" / "team2" for the side with more runs over all its innings; None when level."""
    totals = {team1: 0, team2: 0}
    for inn in from_dict(state).innings:
        if inn.team in totals:
            totals[inn.team] += inn.runs

    if totals[team1] > totals[team2]:
        return "team1"
    if totals[team2] > totals[team1]:
        return "team2"
    return None


def apply_event(state: Dict[str, Any], event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply one scoring event to the current (last) innings.

    Event types: run(value), wide, no_ball, wicket(dismissal?),
    add_batsman(player, on_strike?), add_bowler(player), set_striker(index),
    set_bowler(index), start_innings(team, batsmen?, bowler?).
    """
    score = from_dict(state)
    etype = event.get("type")

    if etype == "start_innings":
        team = (event.get("team") or "").strip()
        if not team:
            raise ValueError("start_innings requires a team")
        return to_dict(start_innings(score, team, event.get("batsmen"), event.get("bowler")))

    if not score.innings:
        raise ValueError("No innings in progress; start an innings first")

    current = score.innings[-1]

    if etype == "run":
        updated = run(current, event.get("value", 1))
    elif etype == "wide":
        updated = wide(current)
    elif etype == "no_ball":
        updated = no_ball(current)
    elif etype == "wicket":
        updated = wicket(current, event.get("dismissal"))
    elif etype == "add_batsman":
        updated = add_batsman(current, event.get("player", ""), on_strike=bool(event.get("on_strike", False)))
    elif etype == "add_bowler":
        updated = add_bowler(current, event.get("player", ""))
    elif etype == "set_striker":
        updated = set_striker(current, int(event.get("index", 0)))
    elif etype == "set_bowler":
        updated = set_bowler(current, int(event.get("index", 0)))
    else:
        raise ValueError(f"Invalid cricket event: {etype}")

    score.innings[-1] = updated
    return to_dict(score)
