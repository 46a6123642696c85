"""
Statistics derived from a match snapshot. Nothing here mutates the match,
every function reads the accumulated counters and returns plain structures
suitable for a scoreboard or a JSON response.
"""
from typing import List, Optional

from stumps.definitions.dismissal import describe
from stumps.innings import Innings
from stumps.match import Match
from stumps.over import BALLS_PER_OVER
from stumps.player import Player
from stumps.team import Team
from stumps.util import per_over_rate, strike_rate

UNKNOWN_PLAYER = "Unknown"
# required run rate boundaries, exclusive
EASY_RATE = 6
MODERATE_RATE = 9
DIFFICULT_RATE = 12
MIN_WICKETS_IN_HAND = 2


def calculate_strike_rate(runs: int, balls: int) -> float:
    return strike_rate(runs, balls)


def calculate_economy(runs: int, balls: int) -> float:
    return per_over_rate(runs, balls)


def calculate_run_rate(runs: int, balls: int) -> float:
    return per_over_rate(runs, balls)


def required_run_rate(runs_needed: int, balls_left: int) -> float:
    if balls_left <= 0 or runs_needed <= 0:
        return 0
    return per_over_rate(runs_needed, balls_left)


def balls_remaining(match: Match) -> Optional[int]:
    innings = match.current_innings
    if not match.config.is_limited or not innings:
        return None
    total_balls = match.config.total_overs * BALLS_PER_OVER
    return max(0, total_balls - innings.score.balls)


def projected_score(match: Match) -> Optional[int]:
    innings = match.current_innings
    if not match.config.is_limited or not innings:
        return None
    if innings.score.balls == 0:
        return 0
    return round(innings.run_rate * match.config.total_overs)


def analyze_target(match: Match) -> Optional[dict]:
    target = match.get_target()
    innings = match.current_innings
    if target is None or not innings:
        return None
    runs_needed = max(0, target - innings.score.runs)
    balls_left = balls_remaining(match)
    if balls_left is None:
        balls_left = 0
    wickets_left = (
        match.squad_size(match.state.batting_team) - 1 - innings.score.wickets
    )
    rate = required_run_rate(runs_needed, balls_left)
    if rate < EASY_RATE:
        difficulty = "easy"
    elif rate < MODERATE_RATE:
        difficulty = "moderate"
    elif rate < DIFFICULT_RATE:
        difficulty = "difficult"
    else:
        difficulty = "very difficult"
    return {
        "target": target,
        "runs_needed": runs_needed,
        "balls_remaining": balls_left,
        "wickets_remaining": wickets_left,
        "required_run_rate": rate,
        "is_achievable": rate <= DIFFICULT_RATE
        and wickets_left >= MIN_WICKETS_IN_HAND,
        "difficulty": difficulty,
    }


def _teams_for(match: Match, innings: Innings):
    batting = match.get_team(match.slot_of(innings.batting_team_id))
    bowling = match.get_team(match.slot_of(innings.bowling_team_id))
    return batting, bowling


def _name_of(team: Team, player_id: Optional[str]) -> str:
    player = team.get_player(player_id)
    return player.name if player else UNKNOWN_PLAYER


def partnership_summary(match: Match, innings: Innings) -> List[dict]:
    batting, _ = _teams_for(match, innings)
    return [
        {
            "wicket_number": p.wicket_number,
            "batter_one": _name_of(batting, p.batter_one_id),
            "batter_two": _name_of(batting, p.batter_two_id),
            "runs": p.runs,
            "balls": p.balls,
            "run_rate": p.run_rate,
            "is_active": p.is_active,
        }
        for p in innings.all_partnerships()
    ]


def fall_of_wicket_summary(match: Match, innings: Innings) -> List[dict]:
    batting, bowling = _teams_for(match, innings)
    output = []
    for fow in innings.fall_of_wickets:
        batter = batting.get_player(fow.batter_id)
        fielder = bowling.get_player(fow.fielder_id) if fow.fielder_id else None
        output.append(
            {
                "runs": fow.runs,
                "wickets": fow.wickets,
                "overs": fow.overs,
                "batter": batter.name if batter else UNKNOWN_PLAYER,
                "batter_runs": batter.batting.runs if batter else 0,
                "bowler": _name_of(bowling, fow.bowler_id),
                "fielder": fielder.name if fielder else None,
                "dismissal_type": fow.dismissal_type,
            }
        )
    return output


def dismissal_text(player: Player, bowling_team: Team) -> str:
    batting = player.batting
    if not batting.is_out or not batting.dismissal_type:
        return ""
    bowler = bowling_team.get_player(batting.dismissed_by)
    return describe(batting.dismissal_type, bowler.name if bowler else "")


def batting_card(match: Match, innings: Innings) -> List[dict]:
    batting, bowling = _teams_for(match, innings)
    batters = [p for p in batting if p.batting.balls > 0 or p.batting.is_out]
    batters.sort(key=lambda p: p.batting.runs, reverse=True)
    return [
        {
            "name": p.name,
            "runs": p.batting.runs,
            "balls": p.batting.balls,
            "fours": p.batting.fours,
            "sixes": p.batting.sixes,
            "strike_rate": p.batting.strike_rate,
            "is_out": p.batting.is_out,
            "dismissal": dismissal_text(p, bowling),
        }
        for p in batters
    ]


def bowling_card(match: Match, innings: Innings) -> List[dict]:
    _, bowling = _teams_for(match, innings)
    bowlers = [p for p in bowling if p.bowling.balls > 0]
    bowlers.sort(key=lambda p: p.bowling.wickets, reverse=True)
    return [
        {
            "name": p.name,
            "overs": p.bowling.overs,
            "maidens": p.bowling.maidens,
            "runs": p.bowling.runs,
            "wickets": p.bowling.wickets,
            "economy_rate": p.bowling.economy_rate,
            "balls": p.bowling.balls,
        }
        for p in bowlers
    ]


def innings_summary(match: Match, innings: Optional[Innings]) -> Optional[dict]:
    if not innings:
        return None
    batting, _ = _teams_for(match, innings)
    return {
        "team": batting.name,
        "runs": innings.score.runs,
        "wickets": innings.score.wickets,
        "overs": innings.score.overs,
        "run_rate": innings.run_rate,
        "extras": innings.extras.total,
    }


def match_summary(match: Match) -> dict:
    result = None
    if match.result:
        winner = match.result.winner
        result = {
            "winner": "tie" if match.result.is_tie else match.teams[winner].name,
            "margin": match.result.margin,
        }
    return {
        "first_innings": innings_summary(match, match.first_innings),
        "second_innings": innings_summary(match, match.second_innings),
        "result": result,
    }


def _all_players(match: Match) -> List[Player]:
    return [p for team in match.teams.values() for p in team]


def top_scorers(match: Match, limit: int = 3) -> List[dict]:
    batters = [p for p in _all_players(match) if p.batting.balls > 0]
    batters.sort(key=lambda p: p.batting.runs, reverse=True)
    return [
        {
            "name": p.name,
            "runs": p.batting.runs,
            "balls": p.batting.balls,
            "strike_rate": p.batting.strike_rate,
        }
        for p in batters[:limit]
    ]


def top_wicket_takers(match: Match, limit: int = 3) -> List[dict]:
    bowlers = [p for p in _all_players(match) if p.bowling.balls > 0]
    bowlers.sort(key=lambda p: p.bowling.wickets, reverse=True)
    return [
        {
            "name": p.name,
            "wickets": p.bowling.wickets,
            "runs": p.bowling.runs,
            "economy_rate": p.bowling.economy_rate,
        }
        for p in bowlers[:limit]
    ]


def scorecard(match: Match) -> dict:
    innings_cards = []
    for innings in (match.first_innings, match.second_innings):
        if not innings:
            continue
        innings_cards.append(
            {
                "summary": innings_summary(match, innings),
                "extras": {
                    "wides": innings.extras.wides,
                    "no_balls": innings.extras.no_balls,
                    "byes": innings.extras.byes,
                    "leg_byes": innings.extras.leg_byes,
                    "total": innings.extras.total,
                },
                "batting": batting_card(match, innings),
                "bowling": bowling_card(match, innings),
                "partnerships": partnership_summary(match, innings),
                "fall_of_wickets": fall_of_wicket_summary(match, innings),
            }
        )
    player_of_match = match.player_of_match()
    return {
        "match_id": match.id,
        "status": match.status.value,
        "summary": match_summary(match),
        "innings": innings_cards,
        "target": analyze_target(match),
        "player_of_match": (
            {
                "name": player_of_match.player.name,
                "points": player_of_match.points,
                "summary": player_of_match.summary,
            }
            if player_of_match
            else None
        ),
    }
