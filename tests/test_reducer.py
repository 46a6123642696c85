import pytest

from stumps.command import CommandType
from stumps.definitions.match import MatchStatus, TeamSlot, TIE
from stumps.error import EngineError, RejectReason
from stumps.match import Match
from stumps.reducer import apply_command
from tests.common import (
    chase_121_for_3,
    innings_runs_from_deliveries,
    score_ball,
    score_balls,
    start_match,
    start_second_innings,
)


def add_ball(match: Match, **ball) -> Match:
    return apply_command(match, CommandType.ADD_BALL, ball)


def undo(match: Match) -> Match:
    return apply_command(match, CommandType.UNDO_LAST_BALL)


def batter(match: Match, player_id: str):
    return match.teams[TeamSlot.TEAM_A].get_player(player_id)


def bowler(match: Match, player_id: str):
    return match.teams[TeamSlot.TEAM_B].get_player(player_id)


def test_input_snapshot_is_not_mutated(live_match: Match):
    before = live_match.to_dict()
    after = add_ball(live_match, runs=4)
    assert live_match.to_dict() == before
    assert after is not live_match
    assert after.current_innings.score.runs == 4


def test_unknown_command_rejected(live_match: Match):
    with pytest.raises(EngineError) as e:
        apply_command(live_match, "xx")
    assert e.value.reason == RejectReason.BAD_COMMAND


def test_command_needs_match():
    with pytest.raises(EngineError) as e:
        apply_command(None, CommandType.ADD_BALL, {"runs": 1})
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION


def test_missing_payload_fields(live_match: Match):
    with pytest.raises(EngineError) as e:
        apply_command(live_match, CommandType.COMPLETE_OVER, {})
    assert e.value.reason == RejectReason.BAD_COMMAND


def test_clear_match(live_match: Match):
    assert apply_command(live_match, CommandType.CLEAR_MATCH) is None


def test_create_match_with_config():
    match = apply_command(
        None, CommandType.CREATE_MATCH, {"config": {"total_overs": 20}}
    )
    assert match.config.total_overs == 20
    assert match.status == MatchStatus.SETUP


def test_duplicate_player_name_rejected(setup_match: Match):
    with pytest.raises(EngineError):
        apply_command(
            setup_match,
            CommandType.ADD_PLAYER,
            {"team": "team_a", "name": "padraic flanagan"},
        )


def test_players_can_join_mid_innings(live_match: Match):
    match = apply_command(
        live_match, CommandType.ADD_PLAYER, {"team": "team_b", "name": "Late Arrival"}
    )
    assert match.teams[TeamSlot.TEAM_B].has_player_named("Late Arrival")


def test_scoring_requires_live_match(setup_match: Match):
    with pytest.raises(EngineError) as e:
        add_ball(setup_match, runs=1)
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION


def test_invalid_ball_payload(live_match: Match):
    with pytest.raises(EngineError):
        add_ball(live_match, runs=-1)
    with pytest.raises(EngineError):
        add_ball(live_match, runs=1, extra="overthrow")
    with pytest.raises(EngineError):
        add_ball(live_match, dismissal_type="obstructing")


def test_normal_delivery(live_match: Match):
    match = add_ball(live_match, runs=2)
    assert batter(match, "a1").batting.runs == 2
    assert batter(match, "a1").batting.balls == 1
    assert bowler(match, "b1").bowling.runs == 2
    assert bowler(match, "b1").bowling.balls == 1
    assert match.state.striker_id == "a1"


def test_no_ball_with_boundary(live_match: Match):
    match = add_ball(live_match, runs=4, extra="no-ball")
    striker = batter(match, "a1")
    assert striker.batting.runs == 4
    assert striker.batting.fours == 1
    assert striker.batting.balls == 0
    assert bowler(match, "b1").bowling.runs == 5
    assert bowler(match, "b1").bowling.balls == 0
    assert match.current_innings.extras.no_balls == 1
    # four plus the penalty is odd
    assert match.state.striker_id == "a2"


def test_wide(live_match: Match):
    before = batter(live_match, "a1").to_dict()
    match = add_ball(live_match, extra="wide")
    assert batter(match, "a1").to_dict() == before
    assert bowler(match, "b1").bowling.runs == 1
    assert bowler(match, "b1").bowling.balls == 0
    assert match.current_innings.extras.wides == 1
    assert match.current_innings.extras.total == 1


def test_byes_not_charged(live_match: Match):
    match = add_ball(live_match, runs=1, extra="leg-bye")
    assert batter(match, "a1").batting.balls == 0
    assert bowler(match, "b1").bowling.runs == 0
    assert bowler(match, "b1").bowling.balls == 1
    assert match.current_innings.extras.leg_byes == 1
    assert match.state.striker_id == "a2"


def test_maiden_credited_on_over_completion(live_match: Match):
    match = live_match
    for _ in range(6):
        match = add_ball(match, runs=0)
    completed_over = match.current_innings.overs[0]
    assert completed_over.is_maiden
    assert bowler(match, "b1").bowling.maidens == 0
    with pytest.raises(EngineError):
        add_ball(match, runs=0)
    match = apply_command(match, CommandType.COMPLETE_OVER, {"new_bowler_id": "b2"})
    assert bowler(match, "b1").bowling.maidens == 1
    assert match.state.bowler_id == "b2"
    assert match.state.striker_id == "a2"
    assert match.current_innings.current_over.number == 2


def test_complete_over_checks_bowler(live_match: Match):
    match = add_ball(live_match, runs=1)
    with pytest.raises(EngineError):
        apply_command(match, CommandType.COMPLETE_OVER, {"new_bowler_id": "a3"})


def test_complete_over_early(live_match: Match):
    match = add_ball(live_match, runs=0)
    match = apply_command(match, CommandType.COMPLETE_OVER, {"new_bowler_id": "b2"})
    assert len(match.current_innings.overs) == 1
    assert not match.current_innings.overs[0].is_complete
    assert bowler(match, "b1").bowling.maidens == 0


def test_wicket_then_new_batter(live_match: Match):
    match = add_ball(live_match, dismissal_type="caught", fielder_id="b5")
    out = batter(match, "a1")
    assert out.batting.is_out
    assert out.batting.fielder == "b5"
    assert out.batting.dismissed_by == "b1"
    assert bowler(match, "b1").bowling.wickets == 1
    assert match.state.striker_id == "a1"
    with pytest.raises(EngineError):
        apply_command(match, CommandType.SET_NEW_BATTER, {"player_id": "a1"})
    match = apply_command(match, CommandType.SET_NEW_BATTER, {"player_id": "a3"})
    assert match.state.striker_id == "a3"
    partnership = match.current_innings.current_partnership
    assert partnership.wicket_number == 2
    assert {partnership.batter_one_id, partnership.batter_two_id} == {"a3", "a2"}


def test_add_wicket(live_match: Match):
    match = apply_command(
        live_match,
        CommandType.ADD_WICKET,
        {"dismissal_type": "retired-hurt", "new_batter_id": "a4"},
    )
    assert batter(match, "a1").batting.is_out
    assert match.state.striker_id == "a4"
    assert match.current_innings.current_partnership.batter_one_id == "a4"


def test_swap_and_rename(live_match: Match):
    match = apply_command(live_match, CommandType.SWAP_BATTERS)
    assert (match.state.striker_id, match.state.non_striker_id) == ("a2", "a1")
    match = apply_command(
        match,
        CommandType.EDIT_PLAYER_NAME,
        {"team": "team_a", "player_id": "a1", "new_name": "P. Flanagan"},
    )
    assert batter(match, "a1").name == "P. Flanagan"
    assert batter(match, "a1").batting.runs == 0


def test_undo_with_no_deliveries(live_match: Match):
    with pytest.raises(EngineError) as e:
        undo(live_match)
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION


@pytest.mark.parametrize(
    "ball",
    [
        {"runs": 0},
        {"runs": 1},
        {"runs": 4},
        {"runs": 6},
        {"extra": "wide"},
        {"runs": 3, "extra": "wide"},
        {"extra": "no-ball"},
        {"runs": 1, "extra": "no-ball"},
        {"runs": 2, "extra": "bye"},
        {"runs": 1, "extra": "leg-bye"},
        {"dismissal_type": "bowled"},
        {"runs": 1, "dismissal_type": "run-out", "fielder_id": "b3"},
    ],
)
def test_undo_restores_snapshot(live_match: Match, ball):
    match = score_balls(live_match, [{"runs": 1}, {"runs": 4}])
    before = match.to_dict()
    assert undo(add_ball(match, **ball)).to_dict() == before


def test_undo_wicket_after_new_batter(live_match: Match):
    match = add_ball(live_match, runs=2)
    before = match.to_dict()
    match = score_ball(match, dismissal_type="lbw")
    assert match.state.striker_id == "a3"
    assert undo(match).to_dict() == before


def test_undo_across_over_boundary(live_match: Match):
    match = score_balls(live_match, [{"runs": 0}] * 5)
    before = match.to_dict()
    match = score_ball(match, runs=0)
    assert bowler(match, "b1").bowling.maidens == 1
    assert match.state.bowler_id == "b2"
    restored = undo(match)
    assert restored.to_dict() == before
    assert bowler(restored, "b1").bowling.maidens == 0


def test_undo_reopens_innings(innings_break_match: Match):
    restored = undo(innings_break_match)
    assert restored.status == MatchStatus.LIVE
    assert restored.current_innings.score.wickets == 9
    assert not batter(restored, restored.state.striker_id).batting.is_out


def test_undo_reopens_completed_match(completed_match: Match):
    restored = undo(completed_match)
    assert restored.status == MatchStatus.LIVE
    assert restored.result is None
    assert restored.current_innings.score.runs == 120


def test_undo_refused_after_complete_match_in_first_innings(live_match: Match):
    match = score_balls(live_match, [{"runs": 4}] * 3)
    match = apply_command(match, CommandType.COMPLETE_MATCH)
    assert match.status == MatchStatus.COMPLETED
    with pytest.raises(EngineError) as e:
        undo(match)
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION
    assert match.current_innings.score.runs == 12


def test_undo_refused_after_early_complete_match(second_innings_match: Match):
    match = score_balls(second_innings_match, [{"runs": 4}] * 3)
    match = apply_command(match, CommandType.COMPLETE_MATCH)
    with pytest.raises(EngineError) as e:
        undo(match)
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION
    assert match.result.margin == "108 runs"


def test_add_wicket_archives_partnership(live_match: Match):
    match = add_ball(live_match, runs=2)
    match = apply_command(
        match,
        CommandType.ADD_WICKET,
        {"dismissal_type": "retired-hurt", "new_batter_id": "a4"},
    )
    innings = match.current_innings
    archived = innings.partnerships[-1]
    assert (archived.batter_one_id, archived.batter_two_id) == ("a1", "a2")
    assert (archived.runs, archived.balls, archived.end_score) == (2, 1, 2)
    assert not archived.is_active
    current = innings.current_partnership
    assert (current.batter_one_id, current.runs, current.balls) == ("a4", 0, 0)
    assert current.start_score == 2
    assert innings.score.wickets == 0


def test_undo_refused_after_add_wicket(live_match: Match):
    match = add_ball(live_match, runs=2)
    match = apply_command(
        match,
        CommandType.ADD_WICKET,
        {"dismissal_type": "retired-hurt", "new_batter_id": "a4"},
    )
    with pytest.raises(EngineError) as e:
        undo(match)
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION
    before = match.to_dict()
    restored = undo(add_ball(match, runs=1))
    assert restored.to_dict() == before
    assert restored.current_innings.current_partnership.runs == 0
    # the refusal holds once later balls have been undone again
    with pytest.raises(EngineError):
        undo(restored)


def test_undo_refused_after_batter_replaced(live_match: Match):
    match = add_ball(live_match, runs=2)
    match = apply_command(match, CommandType.SET_NEW_BATTER, {"player_id": "a3"})
    assert match.current_innings.partnerships[-1].batter_one_id == "a1"
    with pytest.raises(EngineError) as e:
        undo(match)
    assert e.value.reason == RejectReason.ILLEGAL_OPERATION


def test_undo_wicket_after_replacement_batter_changed(live_match: Match):
    match = add_ball(live_match, runs=2)
    before = match.to_dict()
    match = score_ball(match, dismissal_type="bowled")
    match = apply_command(match, CommandType.SET_NEW_BATTER, {"player_id": "a4"})
    innings = match.current_innings
    assert len(innings.partnerships) == 1
    assert innings.current_partnership.batter_one_id == "a4"
    assert undo(match).to_dict() == before


def test_ball_refused_until_new_batter(live_match: Match):
    match = add_ball(live_match, runs=2)
    after_first_wicket = add_ball(match, dismissal_type="bowled")
    for ball in (
        {"dismissal_type": "bowled"},
        {"runs": 1},
        {"batter_id": "a2", "dismissal_type": "run-out", "fielder_id": "b3"},
    ):
        with pytest.raises(EngineError) as e:
            add_ball(after_first_wicket, **ball)
        assert e.value.reason == RejectReason.ILLEGAL_OPERATION
    with pytest.raises(EngineError):
        apply_command(
            after_first_wicket,
            CommandType.ADD_WICKET,
            {"dismissal_type": "retired-out", "new_batter_id": "a3"},
        )
    innings = after_first_wicket.current_innings
    assert innings.score.wickets == len(innings.fall_of_wickets) == 1
    assert undo(after_first_wicket).to_dict() == match.to_dict()


def test_invariants_hold_after_every_command(live_match: Match):
    balls = [
        {"runs": 1},
        {"extra": "wide"},
        {"runs": 4, "extra": "no-ball"},
        {"dismissal_type": "stumped", "fielder_id": "b2"},
        {"runs": 2, "extra": "bye"},
        {"runs": 6},
        {"runs": 3},
        {"runs": 1, "extra": "leg-bye"},
        {"dismissal_type": "hit-wicket"},
    ]
    match = live_match
    for ball in balls:
        match = score_ball(match, **ball)
        innings = match.current_innings
        assert innings.score.wickets == len(innings.fall_of_wickets)
        assert innings.score.runs == innings_runs_from_deliveries(match)
        match = undo(match)
        innings = match.current_innings
        assert innings.score.wickets == len(innings.fall_of_wickets)
        assert innings.score.runs == innings_runs_from_deliveries(match)
        match = score_ball(match, **ball)


def test_all_out_for_120(innings_break_match: Match):
    innings = innings_break_match.first_innings
    assert innings.score.runs == 120
    assert innings.score.wickets == 10
    assert innings.score.overs == 9.4
    assert innings_break_match.is_innings_complete()
    assert innings_break_match.status == MatchStatus.INNINGS_BREAK
    with pytest.raises(EngineError):
        add_ball(innings_break_match, runs=1)
    match = start_second_innings(innings_break_match)
    assert match.get_target() == 121
    assert match.batting_team.name == "Bray"


def test_chase_wins_by_wickets(second_innings_match: Match):
    match = chase_121_for_3(second_innings_match)
    assert match.status == MatchStatus.COMPLETED
    assert match.second_innings.score.runs == 121
    assert match.second_innings.score.wickets == 3
    assert match.result.winner == TeamSlot.TEAM_B
    assert match.result.margin == "7 wickets"


def test_scores_level_is_a_tie():
    match = start_match(total_overs=1)
    match = score_balls(match, [{"runs": 1}] * 6)
    assert match.status == MatchStatus.INNINGS_BREAK
    match = start_second_innings(match)
    match = score_balls(match, [{"runs": 1}] * 6)
    assert match.status == MatchStatus.COMPLETED
    assert match.result.winner == TIE
    assert match.result.margin == "Match tied"


def test_complete_match_command(second_innings_match: Match):
    match = score_balls(second_innings_match, [{"runs": 4}] * 3)
    match = apply_command(match, CommandType.COMPLETE_MATCH)
    assert match.status == MatchStatus.COMPLETED
    assert match.result.winner == TeamSlot.TEAM_A
    assert match.result.margin == "108 runs"


def test_load_match(completed_match: Match):
    data = completed_match.to_dict()
    loaded = apply_command(None, CommandType.LOAD_MATCH, {"match": data})
    assert loaded.to_dict() == data
    with pytest.raises(EngineError):
        apply_command(None, CommandType.LOAD_MATCH, {"match": {"bogus": True}})


def test_load_inconsistent_match(completed_match: Match):
    data = completed_match.to_dict()
    data["innings"]["first"]["fall_of_wickets"].pop()
    with pytest.raises(EngineError) as e:
        apply_command(None, CommandType.LOAD_MATCH, {"match": data})
    assert e.value.reason == RejectReason.INCONSISTENT_STATE
