from __future__ import annotations

from typing import Optional

from stumps.util import per_over_rate


class Partnership:
    def __init__(
        self,
        batter_one_id: str,
        batter_two_id: str,
        wicket_number: int,
        start_score: int,
        start_delivery: int = 0,
    ):
        self.batter_one_id = batter_one_id
        self.batter_two_id = batter_two_id
        # the partnership for the 1st wicket, 2nd wicket etc.
        self.wicket_number = wicket_number
        self.runs = 0
        self.balls = 0
        self.start_score = start_score
        # deliveries already in the innings when the pair came together
        self.start_delivery = start_delivery
        self.end_score: Optional[int] = None
        self.is_active = True

    @property
    def run_rate(self) -> float:
        return per_over_rate(self.runs, self.balls)

    def add_runs(self, runs: int, is_legal: bool = True):
        self.runs += runs
        if is_legal:
            self.balls += 1

    def remove_runs(self, runs: int, is_legal: bool = True):
        self.runs -= runs
        if is_legal:
            self.balls -= 1

    def end(self, end_score: int):
        self.is_active = False
        self.end_score = end_score

    def reopen(self):
        self.is_active = True
        self.end_score = None

    def to_dict(self) -> dict:
        return {
            "batter_one_id": self.batter_one_id,
            "batter_two_id": self.batter_two_id,
            "wicket_number": self.wicket_number,
            "runs": self.runs,
            "balls": self.balls,
            "start_score": self.start_score,
            "start_delivery": self.start_delivery,
            "end_score": self.end_score,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Partnership:
        partnership = cls(
            data["batter_one_id"],
            data["batter_two_id"],
            data["wicket_number"],
            data["start_score"],
            data.get("start_delivery", 0),
        )
        partnership.runs = data.get("runs", 0)
        partnership.balls = data.get("balls", 0)
        partnership.end_score = data.get("end_score")
        partnership.is_active = data.get("is_active", partnership.end_score is None)
        return partnership
