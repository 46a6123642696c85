from enum import Enum


class CommandType(Enum):
    CREATE_MATCH = "cm"
    LOAD_MATCH = "lm"
    SET_TEAMS = "st"
    ADD_PLAYER = "ap"
    SET_TOSS = "ts"
    START_MATCH = "sm"
    ADD_BALL = "ab"
    UNDO_LAST_BALL = "ub"
    ADD_WICKET = "aw"
    COMPLETE_OVER = "co"
    START_SECOND_INNINGS = "ssi"
    COMPLETE_MATCH = "cpm"
    SET_NEW_BATTER = "snb"
    SWAP_BATTERS = "sb"
    EDIT_PLAYER_NAME = "epn"
    CLEAR_MATCH = "clm"
    REJECT = "rj"


# commands that operate without an existing match
MATCHLESS_COMMANDS = {
    CommandType.CREATE_MATCH,
    CommandType.LOAD_MATCH,
    CommandType.CLEAR_MATCH,
}
