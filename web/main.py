from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, ValidationError

from stumps import stats
from stumps.command import CommandType
from stumps.definitions.match import (
    MatchType,
    MAX_OVERS,
    MAX_PLAYERS,
    MIN_OVERS,
    MIN_PLAYERS,
)
from stumps.engine import MatchEngine
from stumps.error import EngineError
from stumps.share import decode_match, encode_match


app = FastAPI()


engine = None


class Command(BaseModel):
    event: str
    command_id: int
    body: dict = {}


class MatchConfigModel(BaseModel):
    total_overs: Optional[int] = Field(default=None, ge=MIN_OVERS, le=MAX_OVERS)
    players_per_team: Optional[int] = Field(
        default=None, ge=MIN_PLAYERS, le=MAX_PLAYERS
    )
    match_type: Optional[MatchType] = None


def get_engine() -> MatchEngine:
    global engine
    if engine is not None:
        return engine
    engine = MatchEngine()
    return engine


def _validated_body(command: Command) -> dict:
    if command.event != CommandType.CREATE_MATCH.value:
        return command.body
    try:
        config = MatchConfigModel(**(command.body.get("config") or {}))
    except ValidationError as e:
        detail = [{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()]
        raise HTTPException(status_code=400, detail=detail)
    body = dict(command.body)
    body["config"] = config.model_dump(exclude_none=True, mode="json")
    return body


def _current_match(match_engine: MatchEngine):
    if not match_engine.current_match:
        raise HTTPException(status_code=404, detail="no match in progress")
    return match_engine.current_match


@app.post("/command/")
def post_command(command: Command, match_engine: MatchEngine = Depends(get_engine)):
    message = match_engine.on_command(
        {
            "event": command.event,
            "command_id": command.command_id,
            "body": _validated_body(command),
        }
    )
    if message["event"] == CommandType.REJECT.value:
        raise HTTPException(status_code=400, detail=message)
    return message


@app.get("/match")
def get_match(match_engine: MatchEngine = Depends(get_engine)):
    return _current_match(match_engine).to_dict()


@app.get("/scorecard")
def get_scorecard(match_engine: MatchEngine = Depends(get_engine)):
    return stats.scorecard(_current_match(match_engine))


@app.get("/share")
def get_share(match_engine: MatchEngine = Depends(get_engine)):
    match = _current_match(match_engine)
    try:
        token = encode_match(match)
    except EngineError as e:
        raise HTTPException(status_code=400, detail=e.compile())
    return {"token": token}


@app.get("/share/{token}")
def get_shared_scorecard(token: str):
    data = decode_match(token)
    if data is None:
        raise HTTPException(status_code=404, detail="invalid share token")
    return data
