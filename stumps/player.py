from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from typing import Optional

from stumps.definitions.dismissal import DismissalType, get_dismissal_type
from stumps.over import BALLS_PER_OVER
from stumps.util import generate_id, per_over_rate, strike_rate


@dataclass
class BattingStats:
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    strike_rate: float = 0
    is_out: bool = False
    dismissal_type: Optional[DismissalType] = None
    dismissed_by: Optional[str] = None
    fielder: Optional[str] = None


@dataclass
class BowlingStats:
    balls: int = 0
    overs: float = 0
    maidens: int = 0
    runs: int = 0
    wickets: int = 0
    economy_rate: float = 0


class Player:
    def __init__(self, name: str, player_id: Optional[str] = None):
        self.id = player_id or generate_id()
        self.name = name
        self.batting = BattingStats()
        self.bowling = BowlingStats()

    def get_scorecard_name(self) -> str:
        name_parts = self.name.split(" ")
        if len(name_parts) == 1:
            return self.name
        initials = [p[0].upper() for p in name_parts[:-1] if p]
        return f"{''.join(initials)} {name_parts[-1]}"

    # batting

    def record_runs(self, runs: int):
        self.batting.balls += 1
        self._add_bat_runs(runs)

    def record_runs_off_no_ball(self, runs: int):
        """runs off the bat from a no-ball do not count as a ball faced"""
        self._add_bat_runs(runs)

    def revert_runs(self, runs: int, ball_faced: bool = True):
        self.batting.runs -= runs
        if ball_faced:
            self.batting.balls -= 1
        if runs == 4:
            self.batting.fours -= 1
        elif runs == 6:
            self.batting.sixes -= 1
        self.update_strike_rate()

    def _add_bat_runs(self, runs: int):
        self.batting.runs += runs
        if runs == 4:
            self.batting.fours += 1
        elif runs == 6:
            self.batting.sixes += 1
        self.update_strike_rate()

    def update_strike_rate(self):
        self.batting.strike_rate = strike_rate(self.batting.runs, self.batting.balls)

    def mark_dismissed(
        self,
        dismissal_type: DismissalType,
        bowler_id: Optional[str] = None,
        fielder_id: Optional[str] = None,
    ):
        self.batting.is_out = True
        self.batting.dismissal_type = dismissal_type
        self.batting.dismissed_by = bowler_id
        self.batting.fielder = fielder_id

    def clear_dismissal(self):
        self.batting.is_out = False
        self.batting.dismissal_type = None
        self.batting.dismissed_by = None
        self.batting.fielder = None

    # bowling

    def record_delivery(self, runs_conceded: int, is_wicket: bool, is_legal: bool):
        self.bowling.runs += runs_conceded
        if is_legal:
            self.bowling.balls += 1
        if is_wicket:
            self.bowling.wickets += 1
        self.update_bowling_figures()

    def revert_delivery(self, runs_conceded: int, is_wicket: bool, is_legal: bool):
        self.bowling.runs -= runs_conceded
        if is_legal:
            self.bowling.balls -= 1
        if is_wicket:
            self.bowling.wickets -= 1
        self.update_bowling_figures()

    def record_maiden_if_applicable(self, over_runs: int) -> bool:
        if over_runs == 0:
            self.bowling.maidens += 1
            return True
        return False

    def revert_maiden(self):
        self.bowling.maidens = max(0, self.bowling.maidens - 1)

    def update_bowling_figures(self):
        self.bowling.overs = self.bowling.balls / BALLS_PER_OVER
        self.bowling.economy_rate = per_over_rate(self.bowling.runs, self.bowling.balls)

    def to_dict(self) -> dict:
        batting = asdict(self.batting)
        if self.batting.dismissal_type:
            batting["dismissal_type"] = self.batting.dismissal_type.shortcode
        return {
            "id": self.id,
            "name": self.name,
            "batting": batting,
            "bowling": asdict(self.bowling),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Player:
        player = cls(data["name"], data["id"])
        batting = dict(data.get("batting", {}))
        if batting.get("dismissal_type"):
            batting["dismissal_type"] = get_dismissal_type(batting["dismissal_type"])
        player.batting = BattingStats(**_known_fields(BattingStats, batting))
        player.bowling = BowlingStats(
            **_known_fields(BowlingStats, data.get("bowling", {}))
        )
        # stored rates are not trusted, older encodings may hold stale values
        player.update_strike_rate()
        player.update_bowling_figures()
        return player

    def __eq__(self, other):
        if isinstance(other, Player):
            return self.id == other.id
        return self.id == other

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.name


def _known_fields(klass, data: dict) -> dict:
    names = {f.name for f in fields(klass)}
    return {k: v for k, v in data.items() if k in names}
