from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Union

from stumps.definitions.match import (
    MatchConfig,
    MatchStatus,
    TeamSlot,
    TossDecision,
    TIE,
)
from stumps.error import EngineError, RejectReason
from stumps.innings import Innings
from stumps.over import BALLS_PER_OVER
from stumps.player import Player
from stumps.team import Team
from stumps.util import LOGGER, generate_id, get_current_time, switch_strike

SCHEMA_VERSION = 1


@dataclass
class Toss:
    winner: TeamSlot
    decision: TossDecision


@dataclass
class CurrentState:
    batting_team: Optional[TeamSlot] = None
    bowling_team: Optional[TeamSlot] = None
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None


@dataclass
class MatchResult:
    # a team slot, or TIE
    winner: Union[TeamSlot, str]
    margin: str

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE


@dataclass
class PlayerOfMatch:
    player: Player
    points: int
    summary: str


class Match:
    def __init__(self, config: Optional[MatchConfig] = None, match_id: Optional[str] = None):
        self.id = match_id or generate_id()
        self.timestamp = get_current_time()
        self.config = config or MatchConfig()
        self.teams: Dict[TeamSlot, Team] = {
            TeamSlot.TEAM_A: Team("Team A"),
            TeamSlot.TEAM_B: Team("Team B"),
        }
        self.toss: Optional[Toss] = None
        self.current_innings_num = 1
        self.first_innings: Optional[Innings] = None
        self.second_innings: Optional[Innings] = None
        self.state = CurrentState()
        self.result: Optional[MatchResult] = None
        self.status = MatchStatus.SETUP

    @property
    def current_innings(self) -> Optional[Innings]:
        if self.current_innings_num == 1:
            return self.first_innings
        return self.second_innings

    @property
    def batting_team(self) -> Optional[Team]:
        if not self.state.batting_team:
            return None
        return self.teams[self.state.batting_team]

    @property
    def bowling_team(self) -> Optional[Team]:
        if not self.state.bowling_team:
            return None
        return self.teams[self.state.bowling_team]

    def get_team(self, slot: Union[TeamSlot, str]) -> Team:
        return self.teams[TeamSlot(slot)]

    def slot_of(self, team_id: str) -> Optional[TeamSlot]:
        for slot, team in self.teams.items():
            if team.id == team_id:
                return slot
        return None

    def squad_size(self, slot: TeamSlot) -> int:
        # players are onboarded lazily, so the roster can be shorter than the
        # configured side until the last batter walks out
        return max(len(self.teams[slot]), self.config.players_per_team)

    def check_status(self, action: str, *allowed: MatchStatus):
        if self.status not in allowed:
            msg = (
                f"cannot {action} while match is {self.status.value}, expected "
                f"one of {[s.value for s in allowed]}"
            )
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)

    # setup

    def configure(self, config: dict):
        self.check_status("configure match", MatchStatus.SETUP)
        self.config = self.config.merge(config)

    def set_team_names(self, team_a_name: str, team_b_name: str):
        self.check_status("set teams", MatchStatus.SETUP)
        self.teams[TeamSlot.TEAM_A].name = team_a_name
        self.teams[TeamSlot.TEAM_B].name = team_b_name

    def record_toss(self, winner: Union[TeamSlot, str], decision: Union[TossDecision, str]):
        self.check_status("record toss", MatchStatus.SETUP)
        winner = TeamSlot(winner)
        decision = TossDecision(decision)
        self.toss = Toss(winner, decision)
        if decision == TossDecision.BAT:
            self.state.batting_team = winner
            self.state.bowling_team = winner.opponent
        else:
            self.state.bowling_team = winner
            self.state.batting_team = winner.opponent

    # lifecycle

    def begin_match(self, striker_id: str, non_striker_id: str, bowler_id: str):
        self.check_status("start match", MatchStatus.SETUP)
        if not self.toss:
            msg = "toss must be recorded before the match can start"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        self.first_innings = self._open_innings(striker_id, non_striker_id, bowler_id)
        self.current_innings_num = 1
        self.status = MatchStatus.LIVE
        LOGGER.info(f"match {self.id} started, {self.batting_team} batting first")

    def begin_second_innings(self, striker_id: str, non_striker_id: str, bowler_id: str):
        self.check_status("start second innings", MatchStatus.INNINGS_BREAK)
        self.state.batting_team, self.state.bowling_team = (
            self.state.bowling_team,
            self.state.batting_team,
        )
        self.second_innings = self._open_innings(striker_id, non_striker_id, bowler_id)
        self.current_innings_num = 2
        self.status = MatchStatus.LIVE
        LOGGER.info(
            f"match {self.id} second innings started, target {self.get_target()}"
        )

    def _open_innings(self, striker_id: str, non_striker_id: str, bowler_id: str):
        self._check_openers(striker_id, non_striker_id, bowler_id)
        self.state.striker_id = striker_id
        self.state.non_striker_id = non_striker_id
        self.state.bowler_id = bowler_id
        innings = Innings(self.batting_team.id, self.bowling_team.id)
        innings.start_new_over(bowler_id)
        innings.start_partnership(striker_id, non_striker_id)
        return innings

    def _check_openers(self, striker_id: str, non_striker_id: str, bowler_id: str):
        if striker_id == non_striker_id:
            msg = "striker and non-striker must be different players"
        elif striker_id not in self.batting_team or non_striker_id not in self.batting_team:
            msg = f"opening batters must play for {self.batting_team}"
        elif bowler_id not in self.bowling_team:
            msg = f"opening bowler {bowler_id} does not play for {self.bowling_team}"
        else:
            return
        LOGGER.warning(msg)
        raise EngineError(msg, RejectReason.BAD_COMMAND)

    def get_target(self) -> Optional[int]:
        if self.current_innings_num == 1 or not self.first_innings:
            return None
        return self.first_innings.score.runs + 1

    def is_innings_complete(self) -> bool:
        innings = self.current_innings
        if not innings:
            return False
        if innings.score.wickets >= self.squad_size(self.state.batting_team) - 1:
            return True
        if self.config.is_limited:
            if innings.score.balls >= self.config.total_overs * BALLS_PER_OVER:
                return True
        if self.current_innings_num == 2:
            if innings.score.runs >= self.get_target():
                return True
        return False

    def complete_innings(self):
        self.check_status("complete innings", MatchStatus.LIVE)
        if self.current_innings_num == 1:
            self.status = MatchStatus.INNINGS_BREAK
            LOGGER.info(
                f"match {self.id} innings break, "
                f"{self.first_innings.score.runs}/{self.first_innings.score.wickets}"
            )
        else:
            self.complete_match()

    def complete_match(self):
        self.check_status(
            "complete match", MatchStatus.LIVE, MatchStatus.INNINGS_BREAK
        )
        self.status = MatchStatus.COMPLETED
        first, second = self.first_innings, self.second_innings
        if not first or not second:
            LOGGER.warning(f"match {self.id} completed without a second innings")
            return
        first_score = first.score.runs
        second_score = second.score.runs
        if second_score > first_score:
            winner = self.slot_of(second.batting_team_id)
            wickets_remaining = self.squad_size(winner) - 1 - second.score.wickets
            self.result = MatchResult(winner, f"{wickets_remaining} wickets")
        elif first_score > second_score:
            winner = self.slot_of(first.batting_team_id)
            self.result = MatchResult(winner, f"{first_score - second_score} runs")
        else:
            self.result = MatchResult(TIE, "Match tied")
        LOGGER.info(f"match {self.id} completed: {self.result}")

    def reopen_innings(self):
        """undo of the ball that ended an innings puts the innings back in play"""
        if self.status == MatchStatus.INNINGS_BREAK and self.current_innings_num == 1:
            self.status = MatchStatus.LIVE
        elif self.status == MatchStatus.COMPLETED and self.current_innings_num == 2:
            self.status = MatchStatus.LIVE
            self.result = None

    # cursor

    def swap_batters(self):
        self.state.striker_id, self.state.non_striker_id = switch_strike(
            self.state.striker_id, self.state.non_striker_id
        )

    def set_new_batter(self, batter_id: str):
        self.state.striker_id = batter_id

    def set_new_bowler(self, bowler_id: str):
        self.state.bowler_id = bowler_id

    def player_of_match(self) -> Optional[PlayerOfMatch]:
        if not self.result or self.result.is_tie:
            return None
        winning_team = self.teams.get(self.result.winner)
        if not winning_team:
            return None
        best_player = None
        best_points = -1
        for player in winning_team:
            points = _player_points(player)
            if points > best_points:
                best_points = points
                best_player = player
        if not best_player:
            return None
        parts = []
        if best_player.batting.runs > 0:
            parts.append(f"{best_player.batting.runs}({best_player.batting.balls})")
        if best_player.bowling.wickets > 0:
            parts.append(f"{best_player.bowling.wickets}/{best_player.bowling.runs}")
        summary = " & ".join(parts) or "Team contribution"
        return PlayerOfMatch(best_player, best_points, summary)

    def to_dict(self) -> dict:
        return {
            "schema_version": SCHEMA_VERSION,
            "id": self.id,
            "timestamp": self.timestamp,
            "config": self.config.to_dict(),
            "teams": {slot.value: team.to_dict() for slot, team in self.teams.items()},
            "toss": (
                {"winner": self.toss.winner.value, "decision": self.toss.decision.value}
                if self.toss
                else None
            ),
            "current_innings": self.current_innings_num,
            "innings": {
                "first": self.first_innings.to_dict() if self.first_innings else None,
                "second": self.second_innings.to_dict() if self.second_innings else None,
            },
            "current_state": _encode_state(self.state),
            "result": (
                {"winner": _slot_value(self.result.winner), "margin": self.result.margin}
                if self.result
                else None
            ),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Match:
        version = data.get("schema_version", SCHEMA_VERSION)
        if version > SCHEMA_VERSION:
            raise ValueError(f"unsupported match schema version {version}")
        match = cls(MatchConfig.from_dict(data.get("config", {})), data["id"])
        match.timestamp = data.get("timestamp", match.timestamp)
        for slot in TeamSlot:
            team_data = data.get("teams", {}).get(slot.value)
            if team_data:
                match.teams[slot] = Team.from_dict(team_data)
        toss = data.get("toss")
        if toss:
            match.toss = Toss(TeamSlot(toss["winner"]), TossDecision(toss["decision"]))
        match.current_innings_num = data.get("current_innings", 1)
        innings = data.get("innings", {})
        if innings.get("first"):
            match.first_innings = Innings.from_dict(innings["first"])
        if innings.get("second"):
            match.second_innings = Innings.from_dict(innings["second"])
        match.state = _decode_state(data.get("current_state", {}))
        result = data.get("result")
        if result:
            winner = result["winner"]
            winner = TIE if winner == TIE else TeamSlot(winner)
            match.result = MatchResult(winner, result["margin"])
        match.status = MatchStatus(data.get("status", MatchStatus.SETUP.value))
        return match


def _player_points(player: Player) -> int:
    bat = player.batting
    bowl = player.bowling
    points = bat.runs + bat.fours + bat.sixes * 2
    if bat.balls >= 6 and bat.strike_rate > 120:
        points += 10
    if bat.runs >= 50:
        points += 20
    if bat.runs >= 30:
        points += 10
    points += bowl.wickets * 25
    if bowl.balls >= 6:
        economy = bowl.runs / (bowl.balls / BALLS_PER_OVER)
        if economy < 6:
            points += 15
        elif economy < 8:
            points += 5
    points += bowl.maidens * 10
    return points


def _slot_value(slot):
    return slot.value if isinstance(slot, TeamSlot) else slot


def _encode_state(state: CurrentState) -> dict:
    output = asdict(state)
    output["batting_team"] = _slot_value(state.batting_team)
    output["bowling_team"] = _slot_value(state.bowling_team)
    return output


def _decode_state(data: dict) -> CurrentState:
    state = CurrentState(
        striker_id=data.get("striker_id"),
        non_striker_id=data.get("non_striker_id"),
        bowler_id=data.get("bowler_id"),
    )
    if data.get("batting_team"):
        state.batting_team = TeamSlot(data["batting_team"])
    if data.get("bowling_team"):
        state.bowling_team = TeamSlot(data["bowling_team"])
    return state
