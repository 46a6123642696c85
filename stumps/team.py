from __future__ import annotations

from collections.abc import Sequence
from typing import List, Optional

from stumps.player import Player
from stumps.util import generate_id


class Team(Sequence):
    """
    Ordered roster of players. Order is the display convention only, any
    player can be picked to bat or bowl.
    """

    def __init__(self, name: str, team_id: Optional[str] = None):
        self.id = team_id or generate_id()
        self.name = name
        self._players: List[Player] = []

    @property
    def players(self) -> List[Player]:
        return self._players

    def add_player(self, name: str, player_id: Optional[str] = None) -> Player:
        player = Player(name, player_id)
        if self.get_player(player.id):
            raise ValueError(f"player id {player.id} already in team {self.name}")
        self._players.append(player)
        return player

    def remove_player(self, player_id: str):
        self._players = [p for p in self._players if p.id != player_id]

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        for player in self._players:
            if player.id == player_id:
                return player
        return None

    def get_player_by_name(self, name: str) -> Optional[Player]:
        for player in self._players:
            if player.name.lower() == name.lower():
                return player
        return None

    def has_player_named(self, name: str) -> bool:
        return self.get_player_by_name(name) is not None

    def available_batters(self) -> List[Player]:
        return [p for p in self._players if not p.batting.is_out]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "players": [p.to_dict() for p in self._players],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Team:
        team = cls(data["name"], data["id"])
        team._players = [Player.from_dict(p) for p in data.get("players", [])]
        return team

    def __call__(self):
        return [p.name for p in self._players]

    def __contains__(self, player) -> bool:
        return player in self._players

    def __getitem__(self, item):
        return self._players[item]

    def __iter__(self):
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def __repr__(self):
        return self.name
