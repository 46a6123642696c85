from __future__ import annotations

import enum
from typing import Optional

from stumps.definitions.dismissal import DismissalType, get_dismissal_type
from stumps.util import get_current_time


class ExtraType(enum.Enum):
    WIDE = "wide"
    NO_BALL = "no-ball"
    BYE = "bye"
    LEG_BYE = "leg-bye"


NO_BALL_PENALTY = 1


class Delivery:
    """
    A single ball. Only one extra category can be attached, so a no-ball
    carrying byes cannot be represented.
    """

    def __init__(self, batter_id: str, bowler_id: str):
        self.timestamp = get_current_time()
        self.batter_id = batter_id
        self.bowler_id = bowler_id
        self.runs = 0
        self.is_wicket = False
        self.dismissal_type: Optional[DismissalType] = None
        self.fielder_id: Optional[str] = None
        self.extra: Optional[ExtraType] = None

    @property
    def is_wide(self) -> bool:
        return self.extra == ExtraType.WIDE

    @property
    def is_no_ball(self) -> bool:
        return self.extra == ExtraType.NO_BALL

    @property
    def is_bye(self) -> bool:
        return self.extra == ExtraType.BYE

    @property
    def is_leg_bye(self) -> bool:
        return self.extra == ExtraType.LEG_BYE

    @property
    def is_legal(self) -> bool:
        return not self.is_wide and not self.is_no_ball

    @property
    def is_boundary(self) -> bool:
        return self.runs in (4, 6)

    @property
    def off_the_bat(self) -> bool:
        return self.extra in (None, ExtraType.NO_BALL)

    @property
    def total_runs(self) -> int:
        if self.is_no_ball:
            return self.runs + NO_BALL_PENALTY
        return self.runs

    @property
    def bowler_runs(self) -> int:
        if self.is_bye or self.is_leg_bye:
            return 0
        return self.total_runs

    def set_runs(self, runs: int):
        self.runs = runs

    def set_wicket(self, dismissal_type: DismissalType, fielder_id: Optional[str] = None):
        self.is_wicket = True
        self.dismissal_type = dismissal_type
        self.fielder_id = fielder_id

    def set_wide(self, runs: int = 1):
        self.extra = ExtraType.WIDE
        self.runs = runs

    def set_no_ball(self, runs: int = 0):
        self.extra = ExtraType.NO_BALL
        self.runs = runs

    def set_bye(self, runs: int):
        self.extra = ExtraType.BYE
        self.runs = runs

    def set_leg_bye(self, runs: int):
        self.extra = ExtraType.LEG_BYE
        self.runs = runs

    def display_token(self) -> str:
        if self.is_wicket:
            return "W"
        if self.is_wide:
            return f"{self.runs}wd"
        if self.is_no_ball:
            return f"{self.runs}+nb" if self.runs > 0 else "nb"
        if self.is_bye:
            return f"{self.runs}b"
        if self.is_leg_bye:
            return f"{self.runs}lb"
        return str(self.runs)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "batter_id": self.batter_id,
            "bowler_id": self.bowler_id,
            "runs": self.runs,
            "is_wicket": self.is_wicket,
            "dismissal_type": (
                self.dismissal_type.shortcode if self.dismissal_type else None
            ),
            "fielder_id": self.fielder_id,
            "is_wide": self.is_wide,
            "is_no_ball": self.is_no_ball,
            "is_bye": self.is_bye,
            "is_leg_bye": self.is_leg_bye,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Delivery:
        delivery = cls(data["batter_id"], data["bowler_id"])
        delivery.timestamp = data.get("timestamp", delivery.timestamp)
        delivery.runs = data.get("runs", 0)
        for flag, extra in (
            ("is_wide", ExtraType.WIDE),
            ("is_no_ball", ExtraType.NO_BALL),
            ("is_bye", ExtraType.BYE),
            ("is_leg_bye", ExtraType.LEG_BYE),
        ):
            if data.get(flag):
                if delivery.extra is not None:
                    raise ValueError(
                        f"delivery cannot be both {delivery.extra.value} and "
                        f"{extra.value}"
                    )
                delivery.extra = extra
        if data.get("is_wicket"):
            dismissal_type = data.get("dismissal_type")
            delivery.set_wicket(
                get_dismissal_type(dismissal_type) if dismissal_type else None,
                data.get("fielder_id"),
            )
        return delivery

    def __repr__(self):
        return f"Delivery({self.display_token()}, {self.batter_id} b {self.bowler_id})"
