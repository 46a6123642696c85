from dataclasses import dataclass


@dataclass(frozen=True)
class DismissalType:
    name: str
    shortcode: str
    scorecard: str
    bowler_accredited: bool
    needs_fielder: bool


BOWLED = DismissalType("bowled", "bowled", "b", True, False)
CAUGHT = DismissalType("caught", "caught", "c", True, True)
LBW = DismissalType("leg before wicket", "lbw", "lbw b", True, False)
RUN_OUT = DismissalType("run out", "run-out", "run out", False, True)
STUMPED = DismissalType("stumped", "stumped", "st", True, True)
HIT_WICKET = DismissalType("hit wicket", "hit-wicket", "hit wkt b", True, False)
RETIRED_HURT = DismissalType("retired hurt", "retired-hurt", "retired hurt", False, False)
RETIRED_OUT = DismissalType("retired out", "retired-out", "retired out", False, False)

_dismissal_types = {
    "bowled": BOWLED,
    "caught": CAUGHT,
    "lbw": LBW,
    "run-out": RUN_OUT,
    "stumped": STUMPED,
    "hit-wicket": HIT_WICKET,
    "retired-hurt": RETIRED_HURT,
    "retired-out": RETIRED_OUT,
}


def get_dismissal_type(shortcode: str) -> DismissalType:
    if shortcode not in _dismissal_types:
        raise ValueError(f"invalid dismissal type {shortcode}")
    return _dismissal_types[shortcode]


def get_all_types() -> list[DismissalType]:
    return list(_dismissal_types.values())


def get_all_shortcodes() -> list[str]:
    return list(_dismissal_types.keys())


def describe(dismissal_type: DismissalType, bowler_name: str = "") -> str:
    """scorecard text for a dismissal, e.g. "lbw b Smith" or "run out" """
    if dismissal_type in (BOWLED, CAUGHT, STUMPED):
        prefix = "" if dismissal_type == BOWLED else f"{dismissal_type.scorecard} ... "
        return f"{prefix}b {bowler_name}".strip()
    if dismissal_type.bowler_accredited:
        return f"{dismissal_type.scorecard} {bowler_name}".strip()
    return dismissal_type.scorecard
