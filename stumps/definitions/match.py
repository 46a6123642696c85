import enum
from dataclasses import dataclass, asdict, fields, replace
from typing import Optional


MIN_OVERS = 1
MAX_OVERS = 50
MIN_PLAYERS = 2
MAX_PLAYERS = 15


class MatchType(enum.Enum):
    LIMITED = "limited"
    UNLIMITED = "unlimited"


class MatchStatus(enum.Enum):
    SETUP = "setup"
    LIVE = "live"
    INNINGS_BREAK = "innings-break"
    COMPLETED = "completed"


class TossDecision(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class TeamSlot(enum.Enum):
    TEAM_A = "team_a"
    TEAM_B = "team_b"

    @property
    def opponent(self) -> "TeamSlot":
        return TeamSlot.TEAM_B if self == TeamSlot.TEAM_A else TeamSlot.TEAM_A


TIE = "tie"


@dataclass
class MatchConfig:
    total_overs: int = 10
    players_per_team: int = 11
    match_type: MatchType = MatchType.LIMITED

    @property
    def is_limited(self) -> bool:
        return self.match_type == MatchType.LIMITED

    def merge(self, overrides: Optional[dict]) -> "MatchConfig":
        if not overrides:
            return replace(self)
        known = {f.name for f in fields(self)}
        changes = {
            k: v for k, v in overrides.items() if k in known and v is not None
        }
        if "match_type" in changes:
            changes["match_type"] = MatchType(changes["match_type"])
        return replace(self, **changes)

    def to_dict(self) -> dict:
        output = asdict(self)
        output["match_type"] = self.match_type.value
        return output

    @classmethod
    def from_dict(cls, data: dict) -> "MatchConfig":
        return cls().merge(data)

    @classmethod
    def from_config(cls, config) -> "MatchConfig":
        """defaults for new matches from the [MATCH] section of an ini config"""
        defaults = cls()
        if not config.has_section("MATCH"):
            return defaults
        return cls(
            total_overs=config.getint(
                "MATCH", "total_overs", fallback=defaults.total_overs
            ),
            players_per_team=config.getint(
                "MATCH", "players_per_team", fallback=defaults.players_per_team
            ),
            match_type=MatchType(
                config.get("MATCH", "match_type", fallback=defaults.match_type.value)
            ),
        )
