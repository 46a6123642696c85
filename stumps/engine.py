from configparser import ConfigParser
from typing import Optional, Union

from stumps import util
from stumps.command import CommandType
from stumps.definitions.match import MatchConfig
from stumps.error import AbstractStumpsError, EngineError, RejectReason
from stumps.match import Match
from stumps.reducer import apply_command
from stumps.util import LOGGER


class MatchEngine:
    """
    Receives a stream of commands, runs each through the reducer against the
    current match snapshot and sends out a corresponding message that other
    applications (scoreboard, web client) can listen for. A rejected command
    leaves the current snapshot untouched.
    """

    def __init__(self, config: Optional[Union[str, ConfigParser]] = None):
        self.config = util.load_config(config)
        self.default_match_config = MatchConfig.from_config(self.config)
        self.current_match: Optional[Match] = None
        self.message_id = 0
        self._commands = []
        self._messages = []
        self._listeners = []

    def on_command(self, command: dict) -> dict:
        try:
            message = self.process_command(command)
        except AbstractStumpsError as e:
            message = self.create_reject(command, e)
        message["message_id"] = self.message_id
        self.message_id += 1
        self._messages.append(message)
        self.send_message(message)
        return message

    def process_command(self, command: dict) -> dict:
        try:
            event_code = command["event"]
            command_id = command["command_id"]
        except (KeyError, TypeError):
            msg = f"no event or command_id specified on incoming command {command}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        next_sequence = self.message_id
        if command_id != next_sequence:
            msg = (
                f"command_id from client out of sequence with engine client="
                f"{command_id}, engine={next_sequence}"
            )
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        try:
            command_type = CommandType(event_code)
        except ValueError:
            msg = f"invalid event type {event_code}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        body = command.get("body") or {}
        if not isinstance(body, dict):
            msg = f"command body must be a mapping, got {body}"
            LOGGER.warning(msg)
            raise EngineError(msg, RejectReason.BAD_COMMAND)
        self._commands.append(command)
        if command_type == CommandType.CREATE_MATCH:
            body = self._with_default_config(body)
        self.current_match = apply_command(self.current_match, command_type, body)
        return self.create_message(command_type, command_id)

    def _with_default_config(self, body: dict) -> dict:
        config = self.default_match_config.to_dict()
        config.update(body.get("config") or {})
        return {**body, "config": config}

    def snapshot(self) -> Optional[dict]:
        if not self.current_match:
            return None
        return self.current_match.to_dict()

    def register_listener(self, listener):
        self._listeners.append(listener)

    def send_message(self, message: dict):
        for listener in self._listeners:
            listener.on_message(message)

    def create_message(self, command_type: CommandType, command_id: int) -> dict:
        return {
            "event": command_type.value,
            "command_id": command_id,
            "body": self.snapshot(),
        }

    @staticmethod
    def create_reject(command, error: AbstractStumpsError) -> dict:
        message = {
            "event": CommandType.REJECT.value,
            "command_id": command.get("command_id") if isinstance(command, dict) else None,
        }
        message.update(error.compile())
        return message
