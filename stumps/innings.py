from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import List, Optional

from stumps.delivery import Delivery, NO_BALL_PENALTY
from stumps.error import EngineError, RejectReason
from stumps.over import Over
from stumps.partnership import Partnership
from stumps.util import LOGGER, balls_to_overs, per_over_rate


@dataclass
class InningsScore:
    runs: int = 0
    wickets: int = 0
    overs: float = 0
    balls: int = 0


@dataclass
class Extras:
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    total: int = 0


@dataclass
class FallOfWicket:
    runs: int
    wickets: int
    overs: float
    batter_id: str
    bowler_id: str
    dismissal_type: Optional[str]
    fielder_id: Optional[str]


class Innings:
    def __init__(self, batting_team_id: str, bowling_team_id: str):
        self.batting_team_id = batting_team_id
        self.bowling_team_id = bowling_team_id
        self.overs: List[Over] = []
        self.current_over: Optional[Over] = None
        self.score = InningsScore()
        self.extras = Extras()
        self.partnerships: List[Partnership] = []
        self.current_partnership: Optional[Partnership] = None
        self.fall_of_wickets: List[FallOfWicket] = []
        # delivery counts at which a batter was dismissed outside a delivery
        self.off_ball_wickets: List[int] = []

    @property
    def run_rate(self) -> float:
        return per_over_rate(self.score.runs, self.score.balls)

    @property
    def last_delivery(self) -> Optional[Delivery]:
        if self.current_over and self.current_over.deliveries:
            return self.current_over.last_delivery
        if self.overs:
            return self.overs[-1].last_delivery
        return None

    @property
    def delivery_count(self) -> int:
        count = sum(len(over.deliveries) for over in self.overs)
        if self.current_over:
            count += len(self.current_over.deliveries)
        return count

    @property
    def has_deliveries(self) -> bool:
        return self.last_delivery is not None

    def all_deliveries(self) -> List[Delivery]:
        overs = list(self.overs)
        if self.current_over:
            overs.append(self.current_over)
        return [d for over in overs for d in over.deliveries]

    def all_partnerships(self) -> List[Partnership]:
        partnerships = list(self.partnerships)
        if self.current_partnership:
            partnerships.append(self.current_partnership)
        return partnerships

    def start_new_over(self, bowler_id: str):
        if self.current_over is not None:
            msg = (
                f"over {self.current_over.number} is still in progress, it must be "
                f"completed before starting a new one"
            )
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        self.current_over = Over(bowler_id, len(self.overs) + 1)

    def complete_over(self):
        if self.current_over:
            self.overs.append(self.current_over)
            self.current_over = None

    def start_partnership(self, batter_one_id: str, batter_two_id: str):
        previous = self.current_partnership
        # a pair that never faced a ball is replaced rather than archived
        if previous and previous.start_delivery < self.delivery_count:
            previous.end(self.score.runs)
            self.partnerships.append(previous)
        self.current_partnership = Partnership(
            batter_one_id,
            batter_two_id,
            self.score.wickets + 1,
            self.score.runs,
            self.delivery_count,
        )

    def record_off_ball_wicket(self):
        self.off_ball_wickets.append(self.delivery_count)

    @property
    def has_lineup_change_since_last_ball(self) -> bool:
        """
        true when the batters were changed by command after the last delivery,
        other than bringing in a replacement for a batter out on that delivery
        """
        count = self.delivery_count
        if self.off_ball_wickets and self.off_ball_wickets[-1] >= count:
            return True
        partnership = self.current_partnership
        if not partnership or partnership.start_delivery < count:
            return False
        last = self.last_delivery
        return not (last and last.is_wicket)

    def add_ball(self, delivery: Delivery):
        if not self.current_over:
            msg = "no over in progress, start a new over before adding a ball"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.ILLEGAL_OPERATION)
        self.current_over.add_delivery(delivery)
        self.score.runs += delivery.total_runs
        if delivery.is_legal:
            self.score.balls += 1
            self.score.overs = balls_to_overs(self.score.balls)
        self._apply_extras(delivery, 1)
        if self.current_partnership:
            self.current_partnership.add_runs(delivery.runs, delivery.is_legal)
        if delivery.is_wicket:
            self.score.wickets += 1
            self._add_fall_of_wicket(delivery)
        if self.current_over.is_complete:
            self.complete_over()

    def remove_last_ball(self) -> Optional[Delivery]:
        if not self.current_over or not self.current_over.deliveries:
            if not self.overs:
                return None
            # the empty over opened after the last completed one is discarded
            self.current_over = self.overs.pop()
        delivery = self.current_over.remove_last_delivery()
        if not delivery:
            return None
        if delivery.is_wicket:
            self.score.wickets -= 1
            self.fall_of_wickets.pop()
            if self.partnerships:
                self.current_partnership = self.partnerships.pop()
                self.current_partnership.reopen()
        if self.current_partnership:
            self.current_partnership.remove_runs(delivery.runs, delivery.is_legal)
        self._apply_extras(delivery, -1)
        if delivery.is_legal:
            self.score.balls -= 1
            self.score.overs = balls_to_overs(self.score.balls)
        self.score.runs -= delivery.total_runs
        return delivery

    def _apply_extras(self, delivery: Delivery, sign: int):
        if delivery.is_wide:
            extra_runs = delivery.runs
            self.extras.wides += sign * extra_runs
        elif delivery.is_no_ball:
            extra_runs = NO_BALL_PENALTY
            self.extras.no_balls += sign * extra_runs
        elif delivery.is_bye:
            extra_runs = delivery.runs
            self.extras.byes += sign * extra_runs
        elif delivery.is_leg_bye:
            extra_runs = delivery.runs
            self.extras.leg_byes += sign * extra_runs
        else:
            return
        self.extras.total += sign * extra_runs

    def _add_fall_of_wicket(self, delivery: Delivery):
        self.fall_of_wickets.append(
            FallOfWicket(
                runs=self.score.runs,
                wickets=self.score.wickets,
                overs=self.score.overs,
                batter_id=delivery.batter_id,
                bowler_id=delivery.bowler_id,
                dismissal_type=(
                    delivery.dismissal_type.shortcode
                    if delivery.dismissal_type
                    else None
                ),
                fielder_id=delivery.fielder_id,
            )
        )
        if self.current_partnership:
            self.current_partnership.end(self.score.runs)
            self.partnerships.append(self.current_partnership)
            self.current_partnership = None

    def to_dict(self) -> dict:
        return {
            "batting_team_id": self.batting_team_id,
            "bowling_team_id": self.bowling_team_id,
            "overs": [o.to_dict() for o in self.overs],
            "current_over": self.current_over.to_dict() if self.current_over else None,
            "score": asdict(self.score),
            "extras": asdict(self.extras),
            "partnerships": [p.to_dict() for p in self.partnerships],
            "current_partnership": (
                self.current_partnership.to_dict()
                if self.current_partnership
                else None
            ),
            "fall_of_wickets": [asdict(f) for f in self.fall_of_wickets],
            "off_ball_wickets": list(self.off_ball_wickets),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Innings:
        innings = cls(data["batting_team_id"], data["bowling_team_id"])
        innings.overs = [Over.from_dict(o) for o in data.get("overs", [])]
        current_over = data.get("current_over")
        innings.current_over = Over.from_dict(current_over) if current_over else None
        score = data.get("score", {})
        innings.score = InningsScore(
            runs=score.get("runs", 0),
            wickets=score.get("wickets", 0),
            balls=score.get("balls", 0),
        )
        innings.score.overs = balls_to_overs(innings.score.balls)
        extras = data.get("extras", {})
        innings.extras = Extras(
            **{k: v for k, v in extras.items() if k in Extras.__dataclass_fields__}
        )
        innings.partnerships = [
            Partnership.from_dict(p) for p in data.get("partnerships", [])
        ]
        current_partnership = data.get("current_partnership")
        innings.current_partnership = (
            Partnership.from_dict(current_partnership) if current_partnership else None
        )
        innings.fall_of_wickets = [
            FallOfWicket(**fow) for fow in data.get("fall_of_wickets", [])
        ]
        innings.off_ball_wickets = list(data.get("off_ball_wickets", []))
        return innings
