from __future__ import annotations

from typing import List, Optional

from stumps.delivery import Delivery

BALLS_PER_OVER = 6


class Over:
    def __init__(self, bowler_id: str, number: int):
        self.bowler_id = bowler_id
        # 1-based
        self.number = number
        self.deliveries: List[Delivery] = []
        self.runs = 0
        self.wickets = 0
        self.is_complete = False
        self.is_maiden = False

    @property
    def legal_deliveries(self) -> int:
        return len([d for d in self.deliveries if d.is_legal])

    @property
    def total_deliveries(self) -> int:
        return len(self.deliveries)

    @property
    def last_delivery(self) -> Optional[Delivery]:
        if not self.deliveries:
            return None
        return self.deliveries[-1]

    def add_delivery(self, delivery: Delivery):
        self.deliveries.append(delivery)
        self.runs += delivery.total_runs
        if delivery.is_wicket:
            self.wickets += 1
        if self.legal_deliveries == BALLS_PER_OVER:
            self.is_complete = True
            self.is_maiden = self.runs == 0

    def remove_last_delivery(self) -> Optional[Delivery]:
        if not self.deliveries:
            return None
        delivery = self.deliveries.pop()
        self.runs -= delivery.total_runs
        if delivery.is_wicket:
            self.wickets -= 1
        self.is_complete = False
        self.is_maiden = False
        return delivery

    def summary(self) -> List[str]:
        return [d.display_token() for d in self.deliveries]

    def to_dict(self) -> dict:
        return {
            "bowler_id": self.bowler_id,
            "number": self.number,
            "deliveries": [d.to_dict() for d in self.deliveries],
            "runs": self.runs,
            "wickets": self.wickets,
            "is_complete": self.is_complete,
            "is_maiden": self.is_maiden,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Over:
        over = cls(data["bowler_id"], data["number"])
        # replaying rebuilds runs, wickets and the completion/maiden flags
        for delivery_data in data.get("deliveries", []):
            over.add_delivery(Delivery.from_dict(delivery_data))
        return over

    def __repr__(self):
        return f"Over({self.number}, {self.bowler_id}, {' '.join(self.summary())})"
