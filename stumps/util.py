import logging
import os
import time
import uuid

from configparser import ConfigParser
from typing import Optional, Union

LOGGER = logging.getLogger("stumps")
CONFIG_ENV_VAR = "STUMPS_CONFIG"
DEFAULT_CONFIG_PATH = os.path.join("~", ".config", "stumps", "stumps.ini")


logging.basicConfig(level=logging.INFO)


def load_config(config_source: Optional[Union[str, ConfigParser]] = None):
    if not config_source:
        config_source = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    if isinstance(config_source, str):
        config = ConfigParser()
        config.read(os.path.expanduser(config_source))
        return config
    elif isinstance(config_source, ConfigParser):
        return config_source
    else:
        raise ValueError("unknown config type passed to engine: ", config_source)


def switch_strike(striker, non_striker):
    temp = non_striker
    new_non_striker = striker
    new_striker = temp
    return new_striker, new_non_striker


def get_current_time() -> float:
    return time.time()


def generate_id() -> str:
    return uuid.uuid4().hex


def balls_to_overs(balls: int) -> float:
    # 5.4 means five overs and four balls, not a decimal fraction
    balls_in_over = balls % 6
    overs_completed = balls // 6
    return float(f"{overs_completed}.{balls_in_over}")


def per_over_rate(runs: int, balls: int) -> float:
    if balls == 0:
        return 0
    return round(runs / (balls / 6), 2)


def strike_rate(runs: int, balls: int) -> float:
    if balls == 0:
        return 0
    return round(runs / balls * 100, 2)
