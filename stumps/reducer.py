"""
Pure command processor. Every command takes the current match snapshot and a
payload and returns a new snapshot. The incoming snapshot is deep copied
before any mutation so earlier snapshots stay valid for inspection and undo.
"""
from copy import deepcopy
from typing import Callable, Dict, Optional

from stumps.command import CommandType, MATCHLESS_COMMANDS
from stumps.definitions.dismissal import get_dismissal_type
from stumps.definitions.match import MatchConfig, MatchStatus, TeamSlot, TossDecision
from stumps.delivery import Delivery, ExtraType
from stumps.error import EngineError, RejectReason
from stumps.match import Match
from stumps.util import LOGGER


def apply_command(
    match: Optional[Match], command_type, payload: Optional[dict] = None
) -> Optional[Match]:
    try:
        command_type = CommandType(command_type)
    except ValueError:
        msg = f"invalid command type {command_type}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    handler = _HANDLERS.get(command_type)
    if not handler:
        msg = f"no handler for command {command_type.name}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    payload = payload or {}
    if command_type in MATCHLESS_COMMANDS:
        return handler(match, payload)
    if match is None:
        msg = f"cannot process {command_type.name} without an active match"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    new_match = deepcopy(match)
    handler(new_match, payload)
    return new_match


def _require(payload: dict, *keys):
    missing = [k for k in keys if payload.get(k) is None]
    if missing:
        msg = f"command payload is missing required fields {missing}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    return [payload[k] for k in keys]


def _parse(parser: Callable, value, field: str):
    try:
        return parser(value)
    except ValueError:
        msg = f"invalid {field}: {value}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)


def _check_player(team, player_id: str, role: str):
    if player_id not in team:
        msg = f"{role} {player_id} does not play for {team}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)


# match setup


def handle_create_match(match: Optional[Match], payload: dict) -> Match:
    try:
        config = MatchConfig().merge(payload.get("config"))
    except (TypeError, ValueError) as e:
        msg = f"invalid match config {payload.get('config')}: {e}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    new_match = Match(config, payload.get("match_id"))
    LOGGER.info(f"created match {new_match.id}")
    return new_match


def handle_load_match(match: Optional[Match], payload: dict) -> Match:
    (data,) = _require(payload, "match")
    try:
        loaded = Match.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        msg = f"could not load match: {e}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    for innings in (loaded.first_innings, loaded.second_innings):
        if innings and innings.score.wickets != len(innings.fall_of_wickets):
            msg = (
                f"match {loaded.id} has {innings.score.wickets} wickets but "
                f"{len(innings.fall_of_wickets)} fall of wicket entries"
            )
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.INCONSISTENT_STATE)
    LOGGER.info(f"loaded match {loaded.id}")
    return loaded


def handle_clear_match(match: Optional[Match], payload: dict) -> None:
    if match:
        LOGGER.info(f"cleared match {match.id}")
    return None


def handle_set_teams(match: Match, payload: dict):
    team_a_name, team_b_name = _require(payload, "team_a_name", "team_b_name")
    match.set_team_names(team_a_name, team_b_name)
    for slot, key in (
        (TeamSlot.TEAM_A, "team_a_players"),
        (TeamSlot.TEAM_B, "team_b_players"),
    ):
        for player_name in payload.get(key) or []:
            match.teams[slot].add_player(player_name)


def handle_add_player(match: Match, payload: dict):
    slot, name = _require(payload, "team", "name")
    team = match.teams[_parse(TeamSlot, slot, "team")]
    if match.status == MatchStatus.COMPLETED:
        msg = "cannot add players to a completed match"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    if team.has_player_named(name):
        msg = f'"{name}" already exists in {team}'
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    try:
        team.add_player(name, payload.get("player_id"))
    except ValueError as e:
        LOGGER.warning(str(e))
        raise EngineError(str(e), RejectReason.BAD_COMMAND)


def handle_set_toss(match: Match, payload: dict):
    winner, decision = _require(payload, "winner", "decision")
    winner = _parse(TeamSlot, winner, "toss winner")
    match.record_toss(winner, _parse(TossDecision, decision, "toss decision"))


def handle_start_match(match: Match, payload: dict):
    striker, non_striker, bowler = _require(
        payload, "striker_id", "non_striker_id", "bowler_id"
    )
    match.begin_match(striker, non_striker, bowler)


def handle_start_second_innings(match: Match, payload: dict):
    striker, non_striker, bowler = _require(
        payload, "striker_id", "non_striker_id", "bowler_id"
    )
    match.begin_second_innings(striker, non_striker, bowler)


def handle_complete_match(match: Match, payload: dict):
    match.complete_match()


# scoring


def parse_delivery(match: Match, payload: dict) -> Delivery:
    """
    Build a delivery from a ball payload. Batter and bowler default to the
    current striker and bowler.
    """
    runs = payload.get("runs", 0)
    if not isinstance(runs, int) or runs < 0:
        msg = f"runs must be a non-negative integer, got {runs}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    delivery = Delivery(
        payload.get("batter_id") or match.state.striker_id,
        payload.get("bowler_id") or match.state.bowler_id,
    )
    extra = payload.get("extra")
    if extra is None:
        delivery.set_runs(runs)
    else:
        extra = _parse(ExtraType, extra, "extra type")
        setter = {
            ExtraType.WIDE: delivery.set_wide,
            ExtraType.NO_BALL: delivery.set_no_ball,
            ExtraType.BYE: delivery.set_bye,
            ExtraType.LEG_BYE: delivery.set_leg_bye,
        }[extra]
        if extra == ExtraType.WIDE and "runs" not in payload:
            setter()
        else:
            setter(runs)
    dismissal_type = payload.get("dismissal_type")
    if dismissal_type:
        delivery.set_wicket(
            _parse(get_dismissal_type, dismissal_type, "dismissal type"),
            payload.get("fielder_id"),
        )
    return delivery


def handle_add_ball(match: Match, payload: dict):
    on_ball_completed(match, parse_delivery(match, payload))


def on_ball_completed(match: Match, delivery: Delivery):
    match.check_status("add a ball", MatchStatus.LIVE)
    innings = match.current_innings
    batter = match.batting_team.get_player(delivery.batter_id)
    if innings.current_partnership is None or (batter and batter.batting.is_out):
        msg = "a new batter must come in after a wicket before the next ball"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    innings.add_ball(delivery)
    bowler = match.bowling_team.get_player(delivery.bowler_id)
    if batter:
        if delivery.is_no_ball and delivery.runs > 0:
            batter.record_runs_off_no_ball(delivery.runs)
        elif delivery.extra is None:
            batter.record_runs(delivery.runs)
    if bowler:
        bowler.record_delivery(
            delivery.bowler_runs, delivery.is_wicket, delivery.is_legal
        )
    if delivery.total_runs % 2 == 1 and not delivery.is_wicket:
        match.swap_batters()
    if delivery.is_wicket and batter:
        batter.mark_dismissed(
            delivery.dismissal_type, delivery.bowler_id, delivery.fielder_id
        )
    if match.is_innings_complete():
        match.complete_innings()


def handle_undo_last_ball(match: Match, payload: dict):
    match.check_status(
        "undo a ball",
        MatchStatus.LIVE,
        MatchStatus.INNINGS_BREAK,
        MatchStatus.COMPLETED,
    )
    innings = match.current_innings
    if not innings or not innings.has_deliveries:
        msg = "there are no deliveries in the current innings to undo"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    if match.status != MatchStatus.LIVE and not _ended_by_last_ball(match):
        msg = (
            f"match {match.id} was closed by command, not by its last ball, "
            f"so the ball cannot be undone"
        )
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    if innings.has_lineup_change_since_last_ball:
        msg = "the batters have changed since the last ball, it cannot be undone"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    # an empty over means the previous over was closed by COMPLETE_OVER, which
    # has to be unwound along with the ball
    over_change = (
        innings.current_over is not None
        and not innings.current_over.deliveries
        and len(innings.overs) > 0
    )
    was_maiden = over_change and innings.overs[-1].is_maiden
    delivery = innings.remove_last_ball()
    match.reopen_innings()
    if over_change:
        reopened = innings.current_over
        if was_maiden:
            previous_bowler = match.bowling_team.get_player(reopened.bowler_id)
            if previous_bowler:
                previous_bowler.revert_maiden()
        match.set_new_bowler(reopened.bowler_id)
        match.swap_batters()
    on_ball_undone(match, delivery)


def _ended_by_last_ball(match: Match) -> bool:
    if match.status == MatchStatus.INNINGS_BREAK:
        return match.current_innings_num == 1 and match.is_innings_complete()
    if match.status == MatchStatus.COMPLETED:
        return match.current_innings_num == 2 and match.is_innings_complete()
    return False


def on_ball_undone(match: Match, delivery: Delivery):
    batter = match.batting_team.get_player(delivery.batter_id)
    bowler = match.bowling_team.get_player(delivery.bowler_id)
    if batter:
        if delivery.is_no_ball and delivery.runs > 0:
            batter.revert_runs(delivery.runs, ball_faced=False)
        elif delivery.extra is None:
            batter.revert_runs(delivery.runs)
    if bowler:
        bowler.revert_delivery(
            delivery.bowler_runs, delivery.is_wicket, delivery.is_legal
        )
    if delivery.total_runs % 2 == 1 and not delivery.is_wicket:
        match.swap_batters()
    if delivery.is_wicket and batter:
        batter.clear_dismissal()
        if delivery.batter_id not in (match.state.striker_id, match.state.non_striker_id):
            match.set_new_batter(delivery.batter_id)


def handle_add_wicket(match: Match, payload: dict):
    dismissal_type, new_batter_id = _require(payload, "dismissal_type", "new_batter_id")
    match.check_status("add a wicket", MatchStatus.LIVE)
    dismissal_type = _parse(get_dismissal_type, dismissal_type, "dismissal type")
    _check_new_batter(match, new_batter_id)
    out_batter = match.batting_team.get_player(match.state.striker_id)
    if out_batter.batting.is_out:
        msg = f"{out_batter} is already out"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    out_batter.mark_dismissed(
        dismissal_type, payload.get("bowler_id"), payload.get("fielder_id")
    )
    match.current_innings.record_off_ball_wicket()
    match.set_new_batter(new_batter_id)
    match.current_innings.start_partnership(new_batter_id, match.state.non_striker_id)


def handle_set_new_batter(match: Match, payload: dict):
    (player_id,) = _require(payload, "player_id")
    match.check_status("set a new batter", MatchStatus.LIVE)
    _check_new_batter(match, player_id)
    match.set_new_batter(player_id)
    match.current_innings.start_partnership(player_id, match.state.non_striker_id)


def _check_new_batter(match: Match, player_id: str):
    _check_player(match.batting_team, player_id, "batter")
    player = match.batting_team.get_player(player_id)
    available = {p.id for p in match.batting_team.available_batters()}
    if player_id not in available or player_id == match.state.non_striker_id:
        msg = f"{player} is not available to bat"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)


def handle_complete_over(match: Match, payload: dict):
    (new_bowler_id,) = _require(payload, "new_bowler_id")
    match.check_status("complete an over", MatchStatus.LIVE)
    _check_player(match.bowling_team, new_bowler_id, "bowler")
    innings = match.current_innings
    if innings.current_over is not None:
        if not innings.current_over.deliveries:
            msg = f"over {innings.current_over.number} has not had a ball bowled"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        finished = innings.current_over
        innings.complete_over()
    elif innings.overs:
        finished = innings.overs[-1]
    else:
        msg = "no over has been bowled in the current innings"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
    if finished.is_complete:
        bowler = match.bowling_team.get_player(finished.bowler_id)
        if bowler:
            bowler.record_maiden_if_applicable(finished.runs)
    match.set_new_bowler(new_bowler_id)
    innings.start_new_over(new_bowler_id)
    match.swap_batters()


def handle_swap_batters(match: Match, payload: dict):
    match.check_status("swap batters", MatchStatus.LIVE)
    match.swap_batters()


def handle_edit_player_name(match: Match, payload: dict):
    slot, player_id, new_name = _require(payload, "team", "player_id", "new_name")
    team = match.teams[_parse(TeamSlot, slot, "team")]
    player = team.get_player(player_id)
    if not player:
        msg = f"no player {player_id} in {team}"
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)
    player.name = new_name


_HANDLERS: Dict[CommandType, Callable] = {
    CommandType.CREATE_MATCH: handle_create_match,
    CommandType.LOAD_MATCH: handle_load_match,
    CommandType.CLEAR_MATCH: handle_clear_match,
    CommandType.SET_TEAMS: handle_set_teams,
    CommandType.ADD_PLAYER: handle_add_player,
    CommandType.SET_TOSS: handle_set_toss,
    CommandType.START_MATCH: handle_start_match,
    CommandType.ADD_BALL: handle_add_ball,
    CommandType.UNDO_LAST_BALL: handle_undo_last_ball,
    CommandType.ADD_WICKET: handle_add_wicket,
    CommandType.COMPLETE_OVER: handle_complete_over,
    CommandType.START_SECOND_INNINGS: handle_start_second_innings,
    CommandType.COMPLETE_MATCH: handle_complete_match,
    CommandType.SET_NEW_BATTER: handle_set_new_batter,
    CommandType.SWAP_BATTERS: handle_swap_batters,
    CommandType.EDIT_PLAYER_NAME: handle_edit_player_name,
}
