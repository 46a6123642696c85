"""
Compact, versioned encoding of a completed scorecard so it can travel in a
URL fragment. The payload is minified JSON wrapped in unpadded base64url.

Layout (version 1)::

    {"v": 1, "ts": "2024-05-01", "ov": 20, "tA": "...", "tB": "...",
     "r": {"w": "A" | "B" | "T", "m": "12 runs"},
     "mom": {"n": "...", "s": "45(30) & 1/20"} | null,
     "i1": {"bt": "A", "s": [runs, wkts, overs],
            "ex": [total, wides, no_balls, byes, leg_byes],
            "b": [[name, runs, balls, 4s, 6s, sr, out, dismissal], ...],
            "w": [[name, overs, maidens, runs, wkts, econ], ...],
            "f": [[runs, wkts, overs, batter], ...]},
     "i2": {...} | null}
"""
import base64
import binascii
import json
from datetime import datetime, timezone
from typing import Optional

from stumps.definitions.match import MatchStatus, TeamSlot
from stumps.error import EngineError, RejectReason
from stumps.innings import Innings
from stumps.match import Match
from stumps.stats import dismissal_text
from stumps.util import LOGGER, balls_to_overs

SHARE_VERSION = 1
_SLOT_CODES = {TeamSlot.TEAM_A: "A", TeamSlot.TEAM_B: "B"}
TIE_CODE = "T"


def _innings_data(match: Match, innings: Optional[Innings]) -> Optional[dict]:
    if not innings:
        return None
    bat_slot = match.slot_of(innings.batting_team_id)
    bat_team = match.teams[bat_slot]
    bowl_team = match.teams[bat_slot.opponent]
    batters = [
        [
            p.name,
            p.batting.runs,
            p.batting.balls,
            p.batting.fours,
            p.batting.sixes,
            p.batting.strike_rate,
            1 if p.batting.is_out else 0,
            dismissal_text(p, bowl_team),
        ]
        for p in bat_team
        if p.batting.balls > 0 or p.batting.is_out
    ]
    bowlers = [
        [
            p.name,
            balls_to_overs(p.bowling.balls),
            p.bowling.maidens,
            p.bowling.runs,
            p.bowling.wickets,
            p.bowling.economy_rate,
        ]
        for p in bowl_team
        if p.bowling.balls > 0
    ]
    fall_of_wickets = []
    for fow in innings.fall_of_wickets:
        batter = bat_team.get_player(fow.batter_id)
        fall_of_wickets.append(
            [fow.runs, fow.wickets, fow.overs, batter.name if batter else "?"]
        )
    extras = innings.extras
    return {
        "bt": _SLOT_CODES[bat_slot],
        "s": [innings.score.runs, innings.score.wickets, innings.score.overs],
        "ex": [
            extras.total,
            extras.wides,
            extras.no_balls,
            extras.byes,
            extras.leg_byes,
        ],
        "b": batters,
        "w": bowlers,
        "f": fall_of_wickets,
    }


def scorecard_data(match: Match) -> dict:
    if match.status != MatchStatus.COMPLETED or not match.result:
        msg = f"match {match.id} must be completed with a result before sharing"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    result = match.result
    player_of_match = match.player_of_match()
    return {
        "v": SHARE_VERSION,
        "ts": datetime.fromtimestamp(match.timestamp, tz=timezone.utc)
        .date()
        .isoformat(),
        "ov": match.config.total_overs,
        "tA": match.teams[TeamSlot.TEAM_A].name,
        "tB": match.teams[TeamSlot.TEAM_B].name,
        "r": {
            "w": TIE_CODE if result.is_tie else _SLOT_CODES[result.winner],
            "m": result.margin,
        },
        "mom": (
            {"n": player_of_match.player.name, "s": player_of_match.summary}
            if player_of_match
            else None
        ),
        "i1": _innings_data(match, match.first_innings),
        "i2": _innings_data(match, match.second_innings),
    }


def encode_match(match: Match) -> str:
    data = json.dumps(scorecard_data(match), separators=(",", ":"))
    encoded = base64.urlsafe_b64encode(data.encode("utf-8"))
    return encoded.rstrip(b"=").decode("ascii")


def decode_match(token: str) -> Optional[dict]:
    if not token:
        return None
    padded = token + "=" * (-len(token) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        LOGGER.warning(f"could not decode shared scorecard: {e}")
        return None
    if not isinstance(data, dict) or data.get("v") != SHARE_VERSION:
        LOGGER.warning("shared scorecard has an unsupported version")
        return None
    return data
