from configparser import ConfigParser

import pytest

from stumps.engine import MatchEngine
from stumps.innings import Innings
from stumps.player import Player
from .common import (
    all_out_for_120,
    chase_121_for_3,
    create_match,
    start_match,
    start_second_innings,
)


@pytest.fixture()
def test_config():
    config = ConfigParser()
    config.read_dict({"MATCH": {"total_overs": "5", "players_per_team": "6"}})
    return config


@pytest.fixture()
def mock_engine(test_config):
    return MatchEngine(test_config)


@pytest.fixture()
def setup_match():
    return create_match()


@pytest.fixture()
def live_match():
    return start_match()


@pytest.fixture()
def innings_break_match(live_match):
    return all_out_for_120(live_match)


@pytest.fixture()
def second_innings_match(innings_break_match):
    return start_second_innings(innings_break_match)


@pytest.fixture()
def completed_match(second_innings_match):
    return chase_121_for_3(second_innings_match)


@pytest.fixture()
def mock_innings():
    innings = Innings("home", "away")
    innings.start_new_over("bowler")
    innings.start_partnership("striker", "non_striker")
    return innings


@pytest.fixture()
def batter():
    return Player("Padraic Flanagan", "a1")


@pytest.fixture()
def bowler():
    return Player("Kevin O'Brien", "b1")
