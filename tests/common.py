from typing import Optional

from stumps.command import CommandType
from stumps.definitions.match import MatchStatus
from stumps.match import Match
from stumps.reducer import apply_command


TEAM_A_NAME = "Greystones"
TEAM_B_NAME = "Bray"
TEAM_A_PLAYERS = [
    "Padraic Flanagan",
    "Jack Tector",
    "Ross Adair",
    "Harry Tector",
    "Callum Donnelly",
    "Gareth Delany",
    "Lorcan Tucker",
    "Mark Adair",
    "Andy McBrine",
    "Barry McCarthy",
    "Josh Little",
]
TEAM_B_PLAYERS = [
    "Kevin O'Brien",
    "Niall O'Brien",
    "Ed Joyce",
    "Paul Stirling",
    "Andrew Balbirnie",
    "George Dockrell",
    "Simi Singh",
    "Curtis Campher",
    "Craig Young",
    "Ben White",
    "Fionn Hand",
]


def team_a_id(idx: int) -> str:
    return f"a{idx + 1}"


def team_b_id(idx: int) -> str:
    return f"b{idx + 1}"


def create_match(total_overs: int = 10, players_per_team: int = 11) -> Match:
    config = {"total_overs": total_overs, "players_per_team": players_per_team}
    match = apply_command(None, CommandType.CREATE_MATCH, {"config": config})
    match = apply_command(
        match,
        CommandType.SET_TEAMS,
        {"team_a_name": TEAM_A_NAME, "team_b_name": TEAM_B_NAME},
    )
    for idx, name in enumerate(TEAM_A_PLAYERS[:players_per_team]):
        payload = {"team": "team_a", "name": name, "player_id": team_a_id(idx)}
        match = apply_command(match, CommandType.ADD_PLAYER, payload)
    for idx, name in enumerate(TEAM_B_PLAYERS[:players_per_team]):
        payload = {"team": "team_b", "name": name, "player_id": team_b_id(idx)}
        match = apply_command(match, CommandType.ADD_PLAYER, payload)
    return match


def start_match(total_overs: int = 10, players_per_team: int = 11) -> Match:
    """team_a wins the toss and bats, a1/a2 open against b1"""
    match = create_match(total_overs, players_per_team)
    match = apply_command(
        match, CommandType.SET_TOSS, {"winner": "team_a", "decision": "bat"}
    )
    return apply_command(
        match,
        CommandType.START_MATCH,
        {"striker_id": "a1", "non_striker_id": "a2", "bowler_id": "b1"},
    )


def start_second_innings(match: Match) -> Match:
    return apply_command(
        match,
        CommandType.START_SECOND_INNINGS,
        {"striker_id": "b1", "non_striker_id": "b2", "bowler_id": "a1"},
    )


def next_batter_id(match: Match) -> Optional[str]:
    at_crease = (match.state.striker_id, match.state.non_striker_id)
    for player in match.batting_team:
        if player.batting.is_out or player.id in at_crease:
            continue
        if player.batting.balls == 0:
            return player.id
    return None


def other_bowler_id(match: Match) -> str:
    first, second = match.bowling_team[0].id, match.bowling_team[1].id
    return second if match.state.bowler_id == first else first


def score_ball(match: Match, **ball) -> Match:
    """
    apply a ball and then the follow-up commands a scorer would issue: a new
    batter after a wicket and a change of bowler at the end of an over
    """
    match = apply_command(match, CommandType.ADD_BALL, ball)
    if match.status != MatchStatus.LIVE:
        return match
    if ball.get("dismissal_type"):
        match = apply_command(
            match, CommandType.SET_NEW_BATTER, {"player_id": next_batter_id(match)}
        )
    if match.current_innings.current_over is None:
        match = apply_command(
            match, CommandType.COMPLETE_OVER, {"new_bowler_id": other_bowler_id(match)}
        )
    return match


def score_balls(match: Match, balls: list[dict]) -> Match:
    for ball in balls:
        match = score_ball(match, **ball)
    return match


def all_out_for_120(match: Match) -> Match:
    """120 all out in 9.4 overs: eight overs of 4,1 alternating then ten wickets"""
    balls = [{"runs": 4}, {"runs": 1}] * 24
    balls += [{"dismissal_type": "bowled"}] * 10
    return score_balls(match, balls)


def chase_121_for_3(match: Match) -> Match:
    balls = [{"dismissal_type": "caught", "fielder_id": "a3"}] * 3
    balls += [{"runs": 6}] * 20
    balls += [{"runs": 1}]
    return score_balls(match, balls)


def innings_runs_from_deliveries(match: Match) -> int:
    return sum(d.total_runs for d in match.current_innings.all_deliveries())
